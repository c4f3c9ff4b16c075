import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging

from portfolio_api.core.config import settings
from portfolio_api.core.state import get_repo_catalog, get_site_data
from portfolio_api.skills import default_skill_heuristics

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    default_skill_heuristics()
    get_site_data()
    catalog = get_repo_catalog()
    await asyncio.to_thread(catalog.try_refresh)

    stop_event = asyncio.Event()

    async def periodic_refresh(interval_s: int) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval_s)
            except asyncio.TimeoutError:
                await asyncio.to_thread(catalog.try_refresh)

    refresh_task = None
    if settings.repo_refresh_interval_s > 0:
        logger.info("github_periodic_refresh interval_s=%d", settings.repo_refresh_interval_s)
        refresh_task = asyncio.create_task(periodic_refresh(settings.repo_refresh_interval_s))
    yield
    stop_event.set()
    if refresh_task is not None and not refresh_task.done():
        refresh_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await refresh_task
