from __future__ import annotations

from functools import lru_cache, partial

from portfolio_api.core.config import settings
from portfolio_api.schemas.portfolio import SiteData
from portfolio_api.services.github import fetch_user_repos
from portfolio_api.services.overrides_store import RepoOverrideStore
from portfolio_api.services.repo_catalog import RepoCatalog
from portfolio_api.services.site_data import load_site_data


@lru_cache(maxsize=1)
def get_override_store() -> RepoOverrideStore:
    return RepoOverrideStore(settings.repo_overrides_path)


@lru_cache(maxsize=1)
def get_repo_catalog() -> RepoCatalog:
    fetcher = partial(
        fetch_user_repos,
        settings.github_username,
        token=settings.github_token,
        api_url=settings.github_api_url,
        timeout_s=settings.upstream_timeout_s,
        per_page=settings.github_per_page,
        max_pages=settings.github_max_pages,
    )
    return RepoCatalog(fetcher, get_override_store())


@lru_cache(maxsize=1)
def get_site_data() -> SiteData:
    return load_site_data(settings.site_data_path)
