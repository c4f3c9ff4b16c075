import json
import sys
import tempfile
import threading
import unittest
from functools import partial
from pathlib import Path
from unittest.mock import Mock, patch

import httpx

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from portfolio_api.schemas.portfolio import RepoOverride  # noqa: E402
from portfolio_api.services.github import GitHubFetchError, fetch_user_repos  # noqa: E402
from portfolio_api.services.overrides_store import OverrideStoreError, RepoOverrideStore  # noqa: E402
from portfolio_api.services.repo_catalog import RepoCatalog  # noqa: E402

RAW_REPOS = [
    {"id": 1, "name": "alpha", "pushed_at": "2024-01-01T00:00:00Z", "description": "Alpha"},
    {"id": 2, "name": "beta", "pushed_at": "2024-02-01T00:00:00Z", "description": "Beta"},
]


class RepoOverrideStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "nested" / "repo_overrides.json"

    def test_missing_file_is_empty(self):
        self.assertEqual(RepoOverrideStore(self.path).all(), {})

    def test_set_persists_camel_case_and_reloads(self):
        store = RepoOverrideStore(self.path)
        store.set("alpha", RepoOverride(description="Custom", pinned=True, pin_order=3))

        on_disk = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(
            on_disk,
            {"alpha": {"description": "Custom", "readme": "", "pinned": True, "pinOrder": 3}},
        )
        reloaded = RepoOverrideStore(self.path)
        self.assertEqual(reloaded.get("alpha"), RepoOverride(description="Custom", pinned=True, pin_order=3))

    def test_invalid_json_is_ignored(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("portfolio_api.services.overrides_store", level="WARNING"):
            store = RepoOverrideStore(self.path)
        self.assertEqual(store.all(), {})

    def test_invalid_entries_are_skipped(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(
            json.dumps({"good": {"pinned": True}, "bad": {"pinOrder": "first"}}),
            encoding="utf-8",
        )
        with self.assertLogs("portfolio_api.services.overrides_store", level="WARNING"):
            store = RepoOverrideStore(self.path)
        self.assertEqual(list(store.all()), ["good"])

    def test_write_failure_raises_and_keeps_state(self):
        blocker = Path(self._tmp.name) / "blocker"
        blocker.write_text("file, not a directory", encoding="utf-8")
        store = RepoOverrideStore(blocker / "repo_overrides.json")

        with self.assertRaises(OverrideStoreError):
            store.set("alpha", RepoOverride(pinned=True))
        self.assertIsNone(store.get("alpha"))


class RepoCatalogTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.store = RepoOverrideStore(Path(self._tmp.name) / "repo_overrides.json")

    def test_refresh_merges_overrides(self):
        self.store.set("alpha", RepoOverride(pinned=True, pin_order=1))
        catalog = RepoCatalog(Mock(return_value=list(RAW_REPOS)), self.store)

        catalog.refresh()

        self.assertEqual([repo.name for repo in catalog.repos()], ["alpha", "beta"])

    def test_failed_refresh_keeps_previous_listing(self):
        fetcher = Mock(return_value=list(RAW_REPOS))
        catalog = RepoCatalog(fetcher, self.store)
        catalog.refresh()

        fetcher.side_effect = GitHubFetchError("github api failed: boom")
        with self.assertLogs("portfolio_api.services.repo_catalog", level="WARNING"):
            self.assertFalse(catalog.try_refresh())
        self.assertEqual([repo.name for repo in catalog.repos()], ["beta", "alpha"])

    def test_bad_api_url_is_a_logged_refresh_failure(self):
        catalog = RepoCatalog(partial(fetch_user_repos, "octocat", api_url="https://gh example.com"), self.store)

        with patch("httpx.Client.get", side_effect=httpx.InvalidURL("Invalid URL")):
            with self.assertLogs("portfolio_api.services.repo_catalog", level="WARNING"):
                self.assertFalse(catalog.try_refresh())
        self.assertEqual(catalog.repos(), [])

    def test_update_override_rebuilds_when_github_is_down(self):
        fetcher = Mock(return_value=list(RAW_REPOS))
        catalog = RepoCatalog(fetcher, self.store)
        catalog.refresh()
        fetcher.side_effect = GitHubFetchError("github api failed: boom")

        catalog.update_override("alpha", RepoOverride(description="Pinned alpha", pinned=True))

        first = catalog.repos()[0]
        self.assertEqual(first.name, "alpha")
        self.assertEqual(first.description, "Pinned alpha")
        self.assertEqual(self.store.get("alpha").description, "Pinned alpha")

    def test_slow_refresh_does_not_hide_a_concurrent_override(self):
        catalog = RepoCatalog(Mock(return_value=list(RAW_REPOS)), self.store)
        read_overrides = self.store.all
        writers = []

        def stale_read_then_update():
            if writers:
                return read_overrides()
            snapshot = read_overrides()
            writer = threading.Thread(
                target=catalog.update_override,
                args=("alpha", RepoOverride(pinned=True, pin_order=1)),
            )
            writers.append(writer)
            writer.start()
            writer.join(timeout=0.2)
            return snapshot

        with patch.object(self.store, "all", side_effect=stale_read_then_update):
            catalog.refresh()
            writers[0].join(timeout=5)

        self.assertFalse(writers[0].is_alive())
        first = catalog.repos()[0]
        self.assertEqual(first.name, "alpha")
        self.assertTrue(first.pinned)


if __name__ == "__main__":
    unittest.main()
