from __future__ import annotations

from typing import Any

from portfolio_api.core.config import Settings, settings

# The admin update is a PUT with a JSON body, so preflight must allow both.
ALLOWED_METHODS = ["GET", "POST", "PUT", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type"]


def cors_middleware_options(config: Settings = settings) -> dict[str, Any]:
    """Keyword arguments for ``CORSMiddleware`` built from the settings."""
    regex = (config.cors_allow_origin_regex or "").strip()
    return {
        "allow_origins": list(config.cors_allowed_origins),
        "allow_origin_regex": regex or None,
        "allow_credentials": config.cors_allow_credentials,
        "allow_methods": ALLOWED_METHODS,
        "allow_headers": ALLOWED_HEADERS,
    }
