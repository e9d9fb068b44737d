"""Health check routes for the HTTP API.

Every upstream collection is one check. /ready only admits traffic while no
collection is unhealthy; /live never touches the upstreams.
"""

from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response, status

from mead.core.health import HealthChecker, ServiceStatus
from mead.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


def _checker(request: Request) -> HealthChecker:
    return request.app.state.health_checker


@router.get("/health")
async def health_check(request: Request, response: Response) -> dict[str, Any]:
    """Status of every upstream collection.

    Returns 200 if all collections are healthy, 503 otherwise.
    """
    report = await _checker(request).check_all()
    if report.status != ServiceStatus.HEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    logger.info(
        "health_check",
        status=report.status.value,
        checks={c.name: c.status.value for c in report.checks},
    )
    return report.to_dict()


@router.get("/health/{name}")
async def collection_health(
    name: str, request: Request, response: Response
) -> dict[str, Any]:
    """Status of a single upstream collection."""
    try:
        check = await _checker(request).check_one(name)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Unknown health check", "name": name},
        ) from None

    if check.status != ServiceStatus.HEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "name": check.name,
        "status": check.status.value,
        "latency_ms": check.latency_ms,
        "message": check.message,
        "details": check.details,
    }


@router.get("/ready")
async def readiness_check(request: Request, response: Response) -> dict[str, Any]:
    """Readiness probe. Degraded collections still count as ready."""
    report = await _checker(request).check_all()
    is_ready = report.status in (ServiceStatus.HEALTHY, ServiceStatus.DEGRADED)
    if not is_ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"ready": is_ready, "status": report.status.value}


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    return {"alive": True}
