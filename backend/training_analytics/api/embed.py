"""
Embed API endpoints.

Embeds authenticate with a signed token instead of a club id, so the
page hosting the dashboard never sees which other clubs exist.
"""
from datetime import timedelta
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from training_analytics.api.deps import (
    get_analytics_service,
    require_club,
    validate_date_range,
)
from training_analytics.core.database import get_db
from training_analytics.core.logging import get_logger
from training_analytics.core.security import (
    EmbedTokenError,
    create_embed_token,
    decode_embed_token,
    verify_admin_key,
)
from training_analytics.services.analytics import AnalyticsService
from training_analytics.services.external import ZoeziAPIError

logger = get_logger(__name__)
router = APIRouter()

# One year
MAX_EXPIRES_MINUTES = 60 * 24 * 365


# ========================================
# Request/Response Schemas
# ========================================

class EmbedTokenRequest(BaseModel):
    """Request to issue an embed token."""
    clubId: str = Field(..., description="Club_Zoezi_ID the token grants access to")
    expiresMinutes: Optional[int] = Field(
        None,
        gt=0,
        le=MAX_EXPIRES_MINUTES,
        description="Token lifetime, defaults to EMBED_TOKEN_EXPIRE_MINUTES"
    )


class EmbedTokenResponse(BaseModel):
    """Issued embed token."""
    token: str
    clubId: str
    expiresAt: int


# ========================================
# API Endpoints
# ========================================

@router.post("/token", response_model=EmbedTokenResponse)
async def issue_embed_token(
    request: EmbedTokenRequest,
    x_admin_key: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Issue a signed embed token for a club. Requires the X-Admin-Key header.
    """
    if not verify_admin_key(x_admin_key):
        raise HTTPException(status_code=403, detail="Invalid admin key")

    club = await require_club(db, request.clubId)

    expires = timedelta(minutes=request.expiresMinutes) if request.expiresMinutes else None
    token, expires_at = create_embed_token(club.zoezi_id, expires)

    return EmbedTokenResponse(
        token=token,
        clubId=club.zoezi_id,
        expiresAt=int(expires_at.timestamp() * 1000),
    )


@router.get("/analytics")
async def get_embedded_analytics(
    token: Optional[str] = Query(None, description="Embed token"),
    fromDate: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    toDate: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
    service: AnalyticsService = Depends(get_analytics_service),
) -> dict[str, Any]:
    """
    Get analytics for the club an embed token was issued for.
    """
    if not token:
        raise HTTPException(status_code=401, detail="Embed token required")

    try:
        club_id = decode_embed_token(token)
    except EmbedTokenError as e:
        logger.warning("Rejected embed token", error=str(e))
        raise HTTPException(status_code=401, detail="Invalid or expired embed token")

    from_date, to_date = validate_date_range(fromDate, toDate)
    club = await require_club(db, club_id)

    try:
        return await service.build(club, from_date, to_date)
    except ZoeziAPIError as e:
        logger.error("Error fetching embedded analytics", club_id=club_id, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))
