"""
Gyms API endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from training_analytics.core.database import get_db
from training_analytics.core.logging import get_logger
from training_analytics.services.clubs import ClubStore

logger = get_logger(__name__)
router = APIRouter()


@router.get("")
async def list_gyms(
    db: AsyncSession = Depends(get_db),
):
    """
    Get the clubs available for analytics, ordered by name.
    """
    try:
        clubs = await ClubStore(db).list_clubs()
    except SQLAlchemyError as e:
        logger.error("Error fetching gyms", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    return [club.to_dict() for club in clubs]
