from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from portfolio_api.core.config import settings

limiter = Limiter(key_func=get_remote_address)


def rate_limit(limit: str | None = None):
    """Per-client limit for a route; ``limit`` defaults to ``RATE_LIMIT``.

    Routes that call GitHub or TryHackMe pass their own, tighter limit.
    """
    if not settings.rate_limit_enabled:
        return lambda func: func
    return limiter.limit(limit or settings.rate_limit)
