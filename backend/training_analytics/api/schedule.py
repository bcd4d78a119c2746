"""
Schedule API endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from training_analytics.api.deps import (
    get_analytics_service,
    require_club,
    validate_date_range,
)
from training_analytics.core.database import get_db
from training_analytics.core.logging import get_logger
from training_analytics.services.analytics import AnalyticsService
from training_analytics.services.external import ZoeziAPIError

logger = get_logger(__name__)
router = APIRouter()


@router.get("/{club_id}")
async def get_schedule(
    club_id: str,
    fromDate: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    toDate: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """
    Get the raw Zoezi workout schedule for a club, bookings included.
    """
    from_date, to_date = validate_date_range(fromDate, toDate)
    club = await require_club(db, club_id)

    try:
        return await service.fetch_schedule(club, from_date, to_date)
    except ZoeziAPIError as e:
        logger.error("Error fetching schedule", club_id=club_id, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))
