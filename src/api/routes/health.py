"""Status and health check endpoints."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_event_publisher
from api.models import StatusResponse
from adapter.mongodb.connection import get_mongodb_client
from services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/status", response_model=StatusResponse)
def get_status():
    """Liveness probe, independent of MongoDB and Redis."""
    service_status = UserService.get_status()
    return StatusResponse(status=service_status.status, message=service_status.message)


def _check(name: str, probe) -> dict:
    try:
        if probe():
            return {"status": "healthy", "message": "Connection successful"}
        return {"status": "unhealthy", "message": "Connection failed or not configured"}
    except Exception as e:
        logger.warning("Health probe failed", extra={"dependency": name, "error": str(e)})
        return {"status": "unhealthy", "message": f"Connection error: {str(e)[:200]}"}


@router.get("/health")
def health(publisher=Depends(get_event_publisher)):
    """Health check endpoint with dependency status."""
    services = {
        "mongodb": _check("mongodb", lambda: get_mongodb_client() is not None),
        "redis": _check("redis", publisher.ping),
    }
    overall_healthy = all(s["status"] == "healthy" for s in services.values())

    health_status = {
        "status": "healthy" if overall_healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": services,
    }
    status_code = status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(content=health_status, status_code=status_code)
