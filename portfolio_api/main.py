import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from portfolio_api.api.v1.health import router as health_router
from portfolio_api.api.v1.portfolio import router as portfolio_router
from portfolio_api.api.v1.admin import router as admin_router
from portfolio_api.api.v1.tryhackme import router as tryhackme_router
from portfolio_api.api.v1.webhooks import router as webhooks_router
from portfolio_api.core.cors import cors_middleware_options
from portfolio_api.core.rate_limit import limiter
from portfolio_api.core.config import settings
from portfolio_api.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Portfolio API", version="0.1.0", lifespan=lifespan)

app.add_middleware(CORSMiddleware, **cors_middleware_options())
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(portfolio_router, prefix="/api", tags=["Portfolio"])
app.include_router(admin_router, prefix="/api", tags=["Admin"])
app.include_router(tryhackme_router, prefix="/api", tags=["TryHackMe"])
app.include_router(webhooks_router, tags=["Webhooks"])
