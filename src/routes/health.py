"""Health check endpoints.

Provides liveness and data-readiness status for load balancers and
monitoring systems.
"""

from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Current health status of the application.
        version: Application version string.
        timestamp: ISO 8601 timestamp of the health check.
    """

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    timestamp: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "version": "0.1.0",
                "timestamp": "2026-01-14T12:00:00Z",
            }
        }
    )


class DataHealthResponse(BaseModel):
    """Board data readiness response model.

    Attributes:
        status: ``"healthy"`` once both datasets are loaded.
        version: Application version string.
        timestamp: ISO 8601 timestamp of the health check.
        images: Number of board images in the hold layout.
        holds: Number of holds in the hold layout.
        angles: Number of angles in the usage map.
    """

    status: Literal["healthy", "degraded"]
    version: str
    timestamp: datetime
    images: int = 0
    holds: int = 0
    angles: int = 0

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "version": "0.1.0",
                "timestamp": "2026-01-14T12:00:00Z",
                "images": 2,
                "holds": 476,
                "angles": 14,
            }
        }
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the current health status of the application.",
)
async def health_check(request: Request) -> HealthResponse:
    """Check application health status.

    Returns:
        HealthResponse with status, version, and UTC timestamp.
    """
    return HealthResponse(
        status="healthy",
        version=request.app.state.settings.app_version,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/health/data",
    response_model=DataHealthResponse,
    summary="Board Data Health Check",
    description=(
        "Reports whether the hold layout and usage datasets are loaded. "
        "Returns 'degraded' before they are available."
    ),
)
async def data_health_check(request: Request) -> DataHealthResponse:
    """Check that the board datasets are loaded.

    Returns:
        DataHealthResponse with ``"healthy"`` and dataset sizes once the
        datasets are loaded, or ``"degraded"`` otherwise.
    """
    version = request.app.state.settings.app_version
    now = datetime.now(timezone.utc)
    board_data = getattr(request.app.state, "board_data", None)

    if board_data is None:
        return DataHealthResponse(status="degraded", version=version, timestamp=now)

    return DataHealthResponse(
        status="healthy",
        version=version,
        timestamp=now,
        images=len(board_data.layout),
        holds=board_data.hold_count,
        angles=len(board_data.usage_map),
    )
