"""Health check and utility routes"""

from fastapi import APIRouter, Request
import logging

from api.responses import HealthResponse
from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("hostelmeals.api.health")


@router.get("/")
def root():
    return {"message": f"{settings.app_name} server is running"}


@router.get("/health-check", response_model=HealthResponse)
def health_check(request: Request):
    """Basic health check endpoint; reports database reachability without failing"""
    store = getattr(request.app.state, "store", None)
    reachable = store is not None and store.ping()
    if not reachable:
        logger.warning("Health check: database unreachable")
    return HealthResponse(
        status="ok",
        service=settings.app_name,
        version=settings.app_version,
        database="ok" if reachable else "unavailable",
    )
