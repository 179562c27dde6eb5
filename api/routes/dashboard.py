"""Admin dashboard statistics"""

from fastapi import APIRouter, Depends
import logging

from adapters.identity_adapter import Identity
from adapters.mongo_adapter import MongoStore
from api.dependencies import get_store, require_identity
from domain.mappers import document_out
from services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
logger = logging.getLogger("hostelmeals.api.dashboard")


@router.get("/overview-stats")
def overview_stats(
    identity: Identity = Depends(require_identity),
    store: MongoStore = Depends(get_store),
):
    """Totals per collection and the five most liked meals; needs a verified token"""
    logger.info(f"overview_stats_requested email={identity.email}")
    return document_out(DashboardService.overview_stats(store))
