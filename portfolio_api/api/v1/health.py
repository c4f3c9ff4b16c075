from fastapi import APIRouter

from portfolio_api.schemas.portfolio import StatusResponse

router = APIRouter()


@router.get("/health", response_model=StatusResponse, summary="Liveness probe")
def health_check() -> StatusResponse:
    return StatusResponse(status="healthy")
