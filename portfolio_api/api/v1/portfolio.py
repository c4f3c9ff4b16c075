from fastapi import APIRouter, Depends

from portfolio_api.core.state import get_repo_catalog, get_site_data
from portfolio_api.schemas.portfolio import Repo, SiteData
from portfolio_api.services.repo_catalog import RepoCatalog

router = APIRouter()


@router.get("/profile", response_model=SiteData)
def profile(site_data: SiteData = Depends(get_site_data)):
    return site_data


@router.get("/repos", response_model=list[Repo])
def repos(catalog: RepoCatalog = Depends(get_repo_catalog)):
    return catalog.repos()
