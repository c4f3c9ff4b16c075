import asyncio
import sys
import threading
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import Mock, patch

from fastapi import FastAPI

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from portfolio_api.core.config import settings  # noqa: E402
from portfolio_api.core.lifespan import lifespan  # noqa: E402


class LifespanTests(unittest.TestCase):
    def _run_startup(self, catalog):
        async def run():
            async with lifespan(FastAPI()):
                pass

        with patch("portfolio_api.core.lifespan.get_repo_catalog", return_value=catalog), patch(
            "portfolio_api.core.lifespan.get_site_data"
        ), patch("portfolio_api.core.lifespan.settings", replace(settings, repo_refresh_interval_s=0)):
            asyncio.run(run())

    def test_startup_refresh_runs_in_a_worker_thread(self):
        threads = []
        catalog = Mock()
        catalog.try_refresh.side_effect = lambda: threads.append(threading.current_thread()) or True

        self._run_startup(catalog)

        self.assertEqual(len(threads), 1)
        self.assertIsNot(threads[0], threading.current_thread())

    def test_failed_startup_refresh_does_not_abort_startup(self):
        catalog = Mock()
        catalog.try_refresh.return_value = False

        self._run_startup(catalog)

        catalog.try_refresh.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
