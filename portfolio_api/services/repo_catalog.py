from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from portfolio_api.schemas.portfolio import Repo, RepoOverride
from portfolio_api.services.github import GitHubFetchError, merge_repos
from portfolio_api.services.overrides_store import RepoOverrideStore

logger = logging.getLogger(__name__)

RepoFetcher = Callable[[], list[dict[str, Any]]]


class RepoCatalog:
    """In-memory repo listing merged with stored overrides.

    The last raw GitHub listing is kept so overrides can be re-applied when
    GitHub is unreachable.
    """

    def __init__(self, fetcher: RepoFetcher, store: RepoOverrideStore) -> None:
        self._fetcher = fetcher
        self._store = store
        self._lock = threading.Lock()
        self._raw: list[dict[str, Any]] = []
        self._repos: list[Repo] = []

    def repos(self) -> list[Repo]:
        with self._lock:
            return list(self._repos)

    def refresh(self) -> list[Repo]:
        """Re-fetch from GitHub; raises GitHubFetchError and leaves the cache untouched on failure."""
        raw = self._fetcher()
        # Overrides are read under the lock so a concurrent update_override is never lost.
        with self._lock:
            merged = merge_repos(raw, self._store.all())
            self._raw = raw
            self._repos = merged
        logger.info("github_refresh_completed repos=%d", len(merged))
        return list(merged)

    def rebuild(self) -> list[Repo]:
        with self._lock:
            merged = merge_repos(self._raw, self._store.all())
            self._repos = merged
            return list(merged)

    def try_refresh(self) -> bool:
        try:
            self.refresh()
        except GitHubFetchError as exc:
            logger.warning("github_refresh_failed: %s", exc)
            return False
        return True

    def update_override(self, name: str, override: RepoOverride) -> None:
        self._store.set(name, override)
        if not self.try_refresh():
            self.rebuild()
