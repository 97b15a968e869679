"""Router – health check."""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from src.fridge_fusion.schemas.health import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Fridge Fusion API is running"


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Liveness probe; reports whether MongoDB is reachable."""
    database = getattr(request.app.state, "database", None)
    connected = database is not None and database.is_connected
    return HealthResponse(database="connected" if connected else "degraded")
