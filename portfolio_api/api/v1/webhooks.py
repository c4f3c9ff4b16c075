import logging

from fastapi import APIRouter, Depends, Header, Response, status

from portfolio_api.core.config import settings
from portfolio_api.core.state import get_repo_catalog
from portfolio_api.services.repo_catalog import RepoCatalog

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/github", status_code=status.HTTP_204_NO_CONTENT)
def github_webhook(
    x_github_event: str | None = Header(default=None, alias="X-GitHub-Event"),
    catalog: RepoCatalog = Depends(get_repo_catalog),
):
    event = (x_github_event or "").strip().lower()
    if event in settings.github_refresh_events:
        logger.info("github_webhook_refresh event=%s", event)
        catalog.try_refresh()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
