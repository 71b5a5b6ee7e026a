"""Health check and index endpoints."""

from fastapi import APIRouter, Depends

from .. import __version__
from ..container import Container
from .deps import get_container

router = APIRouter()


@router.get("/health")
def health(container: Container = Depends(get_container)) -> dict:
    """Return service health."""
    settings = container.settings
    return {
        "status": "success",
        "message": f"{settings.APP_NAME} is running",
        "timestamp": container.clock().isoformat(),
        "environment": settings.ENVIRONMENT,
    }


@router.get("/api")
def index(container: Container = Depends(get_container)) -> dict:
    """List the API's resource roots."""
    return {
        "message": container.settings.APP_NAME,
        "version": __version__,
        "endpoints": {
            "auth": "/api/auth",
            "users": "/api/users",
            "interviews": "/api/interviews",
            "interviewers": "/api/interviewers",
        },
    }
