import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from portfolio_api.core.config import settings
from portfolio_api.core.rate_limit import rate_limit
from portfolio_api.core.state import get_repo_catalog
from portfolio_api.schemas.portfolio import RepoOverride, StatusResponse
from portfolio_api.services.github import GitHubFetchError
from portfolio_api.services.overrides_store import OverrideStoreError
from portfolio_api.services.repo_catalog import RepoCatalog

router = APIRouter()
logger = logging.getLogger(__name__)


@router.api_route("/admin/refresh", methods=["GET", "POST"], response_model=StatusResponse)
@rate_limit(settings.upstream_rate_limit)
def refresh_repos(request: Request, catalog: RepoCatalog = Depends(get_repo_catalog)):
    _ = request
    try:
        catalog.refresh()
    except GitHubFetchError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return StatusResponse(status="ok")


@router.put("/admin/repo/{name}", response_model=StatusResponse)
def update_repo(name: str, payload: RepoOverride, catalog: RepoCatalog = Depends(get_repo_catalog)):
    name = name.strip()
    if not name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="repo name required")
    try:
        catalog.update_override(name, payload)
    except OverrideStoreError as exc:
        logger.exception("repo_override_save_failed name=%s", name)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return StatusResponse(status="updated")
