"""
Shared API dependencies and request validation.
"""
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from training_analytics.core.logging import get_logger
from training_analytics.models.club import Club
from training_analytics.services.analytics import AnalyticsService
from training_analytics.services.clubs import ClubStore
from training_analytics.utils.dates import is_date_string

logger = get_logger(__name__)


def get_analytics_service() -> AnalyticsService:
    """Dependency returning the analytics service (overridden in tests)."""
    return AnalyticsService()


def validate_date_range(from_date: Optional[str], to_date: Optional[str]) -> tuple[str, str]:
    """
    Check the fromDate/toDate query parameters.

    Raises:
        HTTPException: 400 when missing, malformed or reversed
    """
    if not from_date or not to_date:
        raise HTTPException(status_code=400, detail="fromDate and toDate are required")
    if not is_date_string(from_date) or not is_date_string(to_date):
        raise HTTPException(status_code=400, detail="fromDate and toDate must be YYYY-MM-DD")
    # Fixed-width dates compare chronologically as strings
    if from_date > to_date:
        raise HTTPException(status_code=400, detail="fromDate must not be after toDate")
    return from_date, to_date


async def require_club(db: AsyncSession, club_id: str) -> Club:
    """Look up a club or fail with 404 (500 when the database fails)."""
    try:
        club = await ClubStore(db).get_by_zoezi_id(club_id)
    except SQLAlchemyError as e:
        logger.error("Error fetching club", club_id=club_id, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    if club is None:
        raise HTTPException(status_code=404, detail="Club not found")
    return club
