"""
Embed tokens.

A signed token lets a third-party page embed one club's analytics without
exposing the club's Zoezi credentials. Tokens are HS256 JWTs.
"""
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from training_analytics.core.config import settings
from training_analytics.core.logging import get_logger

logger = get_logger(__name__)

EMBED_SCOPE = "analytics:embed"


class EmbedTokenError(Exception):
    """Raised when an embed token is invalid, expired or malformed."""


def create_embed_token(
    club_id: str,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, datetime]:
    """
    Create a signed embed token for a club.

    Returns:
        (token, expiry) tuple
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.EMBED_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": str(club_id),
        "scope": EMBED_SCOPE,
        "iat": now,
        "exp": expire,
    }
    token = jwt.encode(
        claims, settings.require_embed_secret(), algorithm=settings.EMBED_ALGORITHM
    )
    logger.info("Embed token issued", club_id=str(club_id), expires_at=expire.isoformat())
    return token, expire


def decode_embed_token(token: str) -> str:
    """
    Verify an embed token and return the club id it grants.

    Raises:
        EmbedTokenError: bad signature, expired, or wrong scope
    """
    try:
        claims = jwt.decode(
            token, settings.require_embed_secret(), algorithms=[settings.EMBED_ALGORITHM]
        )
    except JWTError as e:
        raise EmbedTokenError(str(e)) from e

    if claims.get("scope") != EMBED_SCOPE or not claims.get("sub"):
        raise EmbedTokenError("Token does not grant analytics access")

    return str(claims["sub"])


def verify_admin_key(provided: Optional[str]) -> bool:
    """Constant-time check of the admin key used to issue embed tokens."""
    expected = settings.EMBED_ADMIN_KEY
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())
