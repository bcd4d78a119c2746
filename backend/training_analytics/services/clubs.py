"""
Club Store - Database lookups for the Clubs table.
"""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from training_analytics.core.logging import get_logger
from training_analytics.models.club import Club

logger = get_logger(__name__)


class ClubStore:
    """
    Read-only access to club configuration.

    The Zoezi API key is only ever read here and handed to ZoeziService.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_clubs(self) -> List[Club]:
        """All clubs ordered by name."""
        result = await self.db.execute(select(Club).order_by(Club.name))
        return list(result.scalars().all())

    async def get_by_zoezi_id(self, club_id: str) -> Optional[Club]:
        """
        Get a club by its Zoezi id.

        Args:
            club_id: Club_Zoezi_ID value

        Returns:
            Club or None if not found
        """
        result = await self.db.execute(
            select(Club).where(Club.zoezi_id == str(club_id))
        )
        club = result.scalar_one_or_none()

        if club is None:
            logger.info("Club not found", club_id=str(club_id))

        return club
