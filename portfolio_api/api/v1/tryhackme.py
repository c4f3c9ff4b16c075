from fastapi import APIRouter, Request

from portfolio_api.core.config import settings
from portfolio_api.core.rate_limit import rate_limit
from portfolio_api.services.tryhackme import build_tryhackme_payload

router = APIRouter()


@router.get("/tryhackme")
@rate_limit(settings.upstream_rate_limit)
def tryhackme(request: Request):
    _ = request
    return build_tryhackme_payload(settings)
