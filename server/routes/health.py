"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from config.config import Config
from server.dependencies import get_config
from server.schemas.responses import HealthResponseDTO

router = APIRouter(tags=["Health"])

VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponseDTO)
async def health_check(config: Config = Depends(get_config)):
    """Health check endpoint."""
    return HealthResponseDTO(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        version=VERSION,
        oracle_configured=bool(config.OPENAI_API_KEY),
        persistence_enabled=config.persistence_enabled,
    )
