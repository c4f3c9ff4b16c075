from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

import httpx

from portfolio_api.core.config import Settings
from portfolio_api.skills import normalize_skill_matrix

logger = logging.getLogger(__name__)

DISABLED_MESSAGE = "Set THM_USERNAME to enable TryHackMe stats."
BOTH_FAILED_MESSAGE = "Unable to fetch TryHackMe profile and skills data"
EMPTY_MATRIX_MESSAGE = (
    "Skills endpoint returned no parsable matrix values. "
    "Ensure THM_COOKIE/THM_SESSION includes a valid connect.sid session."
)
_ERROR_BODY_LIMIT = 4096


class TryHackMeFetchError(Exception):
    pass


def thm_cookie_header(cookie: str | None, session: str | None) -> str:
    """Build the Cookie header from THM_COOKIE, or from THM_SESSION as a raw ``connect.sid`` value."""
    explicit = (cookie or "").strip()
    if explicit:
        return explicit
    raw_session = (session or "").strip()
    if not raw_session:
        return ""
    # THM_SESSION may be the bare connect.sid value or a full "name=value; ..." cookie string.
    if "=" in raw_session:
        return raw_session
    return f"connect.sid={raw_session}"


def _status_message(status_code: int, body: str) -> str:
    message = (body or "")[:_ERROR_BODY_LIMIT].strip()
    if not message:
        try:
            message = HTTPStatus(status_code).phrase
        except ValueError:
            message = "Unknown Status"
    return f"status {status_code}: {message}"


def fetch_tryhackme_json(
    client: httpx.Client,
    url: str,
    *,
    params: dict[str, str] | None = None,
    cookie: str = "",
) -> Any:
    headers = {"Accept": "application/json"}
    if cookie:
        headers["Cookie"] = cookie
    try:
        response = client.get(url, params=params, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise TryHackMeFetchError(str(exc) or exc.__class__.__name__) from exc

    if response.status_code >= 300:
        raise TryHackMeFetchError(_status_message(response.status_code, response.text))

    try:
        return response.json()
    except ValueError as exc:
        raise TryHackMeFetchError(str(exc)) from exc


def build_tryhackme_payload(config: Settings) -> dict[str, Any]:
    if not config.thm_username:
        return {"enabled": False, "message": DISABLED_MESSAGE}

    cookie = thm_cookie_header(config.thm_cookie, config.thm_session)
    profile_data: Any = None
    skills_data: Any = None
    profile_error: str | None = None
    skills_error: str | None = None

    with httpx.Client(timeout=config.upstream_timeout_s, follow_redirects=True) as client:
        try:
            profile_data = fetch_tryhackme_json(
                client,
                f"{config.thm_api_url}/public-profile",
                params={"username": config.thm_username},
                cookie=cookie,
            )
        except TryHackMeFetchError as exc:
            profile_error = str(exc)
            logger.warning("tryhackme_profile_fetch_failed user=%s: %s", config.thm_username, exc)

        try:
            skills_data = fetch_tryhackme_json(
                client,
                f"{config.thm_api_url}/users/skills",
                params={"role": config.thm_skills_role, "segment": config.thm_skills_segment},
                cookie=cookie,
            )
        except TryHackMeFetchError as exc:
            skills_error = str(exc)
            logger.warning("tryhackme_skills_fetch_failed role=%s: %s", config.thm_skills_role, exc)

    skills_matrix = normalize_skill_matrix(skills_data)

    if profile_error is not None and skills_error is not None:
        return {
            "enabled": True,
            "error": BOTH_FAILED_MESSAGE,
            "profileError": profile_error,
            "skillsError": skills_error,
        }

    payload: dict[str, Any] = {
        "publicProfile": profile_data,
        "skillsResponse": {
            "role": config.thm_skills_role,
            "segment": config.thm_skills_segment,
            "data": skills_data,
        },
        "skillsMatrix": [skill.model_dump() for skill in skills_matrix],
    }
    if profile_error is not None:
        payload["profileError"] = profile_error
    if skills_error is not None:
        payload["skillsError"] = skills_error
    elif not skills_matrix:
        payload["skillsError"] = EMPTY_MATRIX_MESSAGE

    return {"enabled": True, "data": payload}
