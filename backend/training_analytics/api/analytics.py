"""
Analytics API endpoints.
"""
from typing import Any, Optional

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
async def get_analytics(
    club_id: str,
    fromDate: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    toDate: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
    service: AnalyticsService = Depends(get_analytics_service),
) -> dict[str, Any]:
    """
    Get attendance analytics for a club's classes in a date range.

    The response carries summary, byType, byDay, byHour, byInstructor and
    dailyTrend, plus club, dateRange, sites, cardTypes and a per-session
    listing for client-side filtering.
    """
    from_date, to_date = validate_date_range(fromDate, toDate)
    club = await require_club(db, club_id)

    try:
        return await service.build(club, from_date, to_date)
    except ZoeziAPIError as e:
        logger.error("Error fetching analytics", club_id=club_id, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))
