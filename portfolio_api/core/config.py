from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    github_username: str
    github_token: str | None
    github_api_url: str
    github_per_page: int
    github_max_pages: int
    github_refresh_events: tuple[str, ...]
    repo_refresh_interval_s: int
    thm_username: str | None
    thm_session: str | None
    thm_cookie: str | None
    thm_skills_role: str
    thm_skills_segment: str
    thm_api_url: str
    upstream_timeout_s: float
    site_data_path: str
    repo_overrides_path: str
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    rate_limit: str
    rate_limit_enabled: bool
    upstream_rate_limit: str


def load_settings() -> Settings:
    return Settings(
        github_username=(_get_env("GITHUB_USERNAME", "octocat") or "octocat").strip(),
        github_token=_get_env("GITHUB_TOKEN"),
        github_api_url=(_get_env("GITHUB_API_URL", "https://api.github.com") or "https://api.github.com").rstrip("/"),
        github_per_page=_get_env_int("GITHUB_PER_PAGE", 100),
        github_max_pages=_get_env_int("GITHUB_MAX_PAGES", 10),
        github_refresh_events=tuple(
            event.lower() for event in _get_env_list("GITHUB_REFRESH_EVENTS", ["push", "repository", "create"])
        ),
        repo_refresh_interval_s=_get_env_int("REPO_REFRESH_INTERVAL_S", 0),
        thm_username=_get_env("THM_USERNAME"),
        thm_session=_get_env("THM_SESSION"),
        thm_cookie=_get_env("THM_COOKIE"),
        thm_skills_role=_get_env("THM_SKILLS_ROLE", "Foundational") or "Foundational",
        thm_skills_segment=_get_env("THM_SKILLS_SEGMENT", "entry") or "entry",
        thm_api_url=(_get_env("THM_API_URL", "https://tryhackme.com/api/v2") or "https://tryhackme.com/api/v2").rstrip("/"),
        upstream_timeout_s=_get_env_float("UPSTREAM_TIMEOUT_S", 20.0),
        site_data_path=_get_env("SITE_DATA_PATH", "data/site_data.json") or "data/site_data.json",
        repo_overrides_path=_get_env("REPO_OVERRIDES_PATH", "data/repo_overrides.json") or "data/repo_overrides.json",
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list("CORS_ALLOWED_ORIGINS", ["*"]),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
        rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        upstream_rate_limit=_get_env("UPSTREAM_RATE_LIMIT", "10/minute") or "10/minute",
    )


def validate_settings(config: Settings) -> None:
    if config.cors_allow_credentials and "*" in config.cors_allowed_origins:
        raise RuntimeError("CORS_ALLOW_CREDENTIALS=true requires explicit CORS_ALLOWED_ORIGINS, not '*'.")

    if config.github_per_page <= 0 or config.github_per_page > 100:
        raise RuntimeError("GITHUB_PER_PAGE must be between 1 and 100.")

    if config.github_max_pages <= 0:
        raise RuntimeError("GITHUB_MAX_PAGES must be greater than 0.")


settings = load_settings()
validate_settings(settings)
