from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

import httpx

from portfolio_api.schemas.portfolio import Repo, RepoOverride

logger = logging.getLogger(__name__)


class GitHubFetchError(Exception):
    pass


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def fetch_user_repos(
    username: str,
    *,
    token: str | None = None,
    api_url: str = "https://api.github.com",
    timeout_s: float = 20.0,
    per_page: int = 100,
    max_pages: int = 10,
) -> list[dict[str, Any]]:
    """Fetch raw repo listings for ``username``, following pages until a short page."""
    url = f"{api_url.rstrip('/')}/users/{username}/repos"
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    repos: list[dict[str, Any]] = []
    with httpx.Client(timeout=timeout_s, follow_redirects=True) as client:
        for page in range(1, max_pages + 1):
            try:
                response = client.get(
                    url,
                    params={"sort": "updated", "per_page": per_page, "page": page},
                    headers=headers,
                )
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise GitHubFetchError(f"github api request failed: {exc}") from exc

            if response.status_code >= 300:
                raise GitHubFetchError(f"github api failed: {response.text}")

            try:
                batch = response.json()
            except ValueError as exc:
                raise GitHubFetchError(f"github api returned invalid JSON: {exc}") from exc
            if not isinstance(batch, list):
                raise GitHubFetchError("github api returned an unexpected payload (expected a list)")

            repos.extend(item for item in batch if isinstance(item, dict))
            if len(batch) < per_page:
                break
        else:
            logger.warning("github_repos_truncated user=%s max_pages=%d", username, max_pages)

    return repos


def build_repo(raw: Mapping[str, Any], override: RepoOverride | None = None) -> Repo:
    repo = Repo(
        id=_as_int(raw.get("id")),
        name=_as_str(raw.get("name")),
        full_name=_as_str(raw.get("full_name")),
        url=_as_str(raw.get("html_url")),
        description=_as_str(raw.get("description")),
        language=_as_str(raw.get("language")),
        topics=_as_str_list(raw.get("topics")),
        pushed_at=_as_str(raw.get("pushed_at")),
        stars=_as_int(raw.get("stargazers_count")),
        forks=_as_int(raw.get("forks_count")),
    )
    if override is None:
        return repo

    repo.pinned = override.pinned
    repo.pin_order = override.pin_order
    if override.description:
        repo.description = override.description
    if override.readme:
        repo.readme = override.readme
    return repo


def sort_repos(repos: Iterable[Repo]) -> list[Repo]:
    """Pinned repos first by pin order, then everything by most recent push."""
    by_recent = sorted(repos, key=lambda repo: repo.pushed_at, reverse=True)
    return sorted(by_recent, key=lambda repo: (not repo.pinned, repo.pin_order if repo.pinned else 0))


def merge_repos(raw_repos: Iterable[Mapping[str, Any]], overrides: Mapping[str, RepoOverride]) -> list[Repo]:
    merged = [build_repo(raw, overrides.get(_as_str(raw.get("name")))) for raw in raw_repos]
    return sort_repos(merged)
