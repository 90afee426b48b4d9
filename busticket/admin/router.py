import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from busticket.database import get_db
from busticket.admin.schemas import StatsResponse, DashboardResponse
from busticket.admin.service import StatsService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/stats", response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)):
    """Overall ticket, revenue and fleet counters"""
    try:
        return StatsResponse(stats=StatsService(db).get_system_stats())
    except SQLAlchemyError as e:
        logger.exception("Failed to compute stats")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute stats: {str(e)}"
        )

@router.get("/admin/dashboard", response_model=DashboardResponse)
def get_dashboard(db: Session = Depends(get_db)):
    """Today's bookings and revenue plus the latest tickets"""
    try:
        return DashboardResponse(dashboard=StatsService(db).get_dashboard())
    except SQLAlchemyError as e:
        logger.exception("Failed to build dashboard")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build dashboard: {str(e)}"
        )
