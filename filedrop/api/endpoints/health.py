"""Health check endpoint. No dependencies and no auth; used for liveness probes."""

from fastapi import APIRouter

from filedrop.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()
