"""
Zoezi Service - Client for a club's Zoezi API.

Each club has its own Zoezi domain and API key, so a service instance is
bound to one club.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from training_analytics.core.config import ConfigurationError, settings
from training_analytics.core.logging import UpstreamCallLogger, get_logger

logger = get_logger(__name__)


class ZoeziAPIError(Exception):
    """Raised when a Zoezi request fails after all retries."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ZoeziServiceInterface(ABC):
    """Abstract interface for Zoezi data access."""

    @abstractmethod
    async def get_workouts(
        self,
        from_date: str,
        to_date: str,
        bookings: bool = True
    ) -> List[Dict[str, Any]]:
        """Get scheduled workouts for an inclusive date range."""
        pass

    @abstractmethod
    async def get_sites(self) -> List[Dict[str, Any]]:
        """Get the club's sites."""
        pass

    @abstractmethod
    async def get_card_types(self) -> List[Dict[str, Any]]:
        """Get training card (membership) types."""
        pass

    @abstractmethod
    async def get_cards(self) -> List[Dict[str, Any]]:
        """Get training card instances."""
        pass


class ZoeziService(ZoeziServiceInterface):
    """
    httpx implementation of the Zoezi API.

    Every request is retried up to `max_retries` times. After failed
    attempt n the client sleeps n * backoff seconds.
    """

    WORKOUTS_PATH = "/api/schedule/workout/get/all"
    SITES_PATH = "/api/site/get/all"
    CARD_TYPES_PATH = "/api/trainingcard/type/get/all"
    CARDS_PATH = "/api/trainingcard/get/all"

    def __init__(
        self,
        domain: str,
        api_key: Optional[str],
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Zoezi service.

        Args:
            domain: Club's Zoezi host, e.g. "mygym.zoezi.se"
            api_key: Club's Zoezi API key
            timeout: Per-request timeout in seconds
            max_retries: Attempts per request
            backoff_seconds: Linear backoff step
            transport: Optional httpx transport (tests)
        """
        if not domain:
            raise ConfigurationError("Club has no Zoezi domain configured")
        if not api_key:
            raise ConfigurationError("Club has no Zoezi API key configured")

        self.domain = domain
        self.api_key = api_key
        self.base_url = f"https://{domain}"
        self.timeout = timeout if timeout is not None else settings.ZOEZI_TIMEOUT_SECONDS
        self.max_retries = max(1, max_retries if max_retries is not None else settings.ZOEZI_MAX_RETRIES)
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.ZOEZI_BACKOFF_SECONDS
        )
        self._transport = transport
        self._call_logger = UpstreamCallLogger(logger)

    async def get_workouts(
        self,
        from_date: str,
        to_date: str,
        bookings: bool = True
    ) -> List[Dict[str, Any]]:
        """
        Get scheduled workouts for an inclusive date range.

        Args:
            from_date: Start date (YYYY-MM-DD)
            to_date: End date (YYYY-MM-DD)
            bookings: Include per-booking details

        Returns:
            Raw Zoezi workout objects
        """
        params = {"fromDate": from_date, "toDate": to_date}
        if bookings:
            params["bookings"] = "true"
        return _as_list(await self._get(self.WORKOUTS_PATH, params))

    async def get_sites(self) -> List[Dict[str, Any]]:
        return _as_list(await self._get(self.SITES_PATH))

    async def get_card_types(self) -> List[Dict[str, Any]]:
        return _as_list(await self._get(self.CARD_TYPES_PATH))

    async def get_cards(self) -> List[Dict[str, Any]]:
        return _as_list(await self._get(self.CARDS_PATH))

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """GET with retry and linear backoff."""
        with self._call_logger.track_call(self.domain, path) as call:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                for attempt in range(1, self.max_retries + 1):
                    try:
                        response = await client.get(
                            path,
                            params=params,
                            headers={
                                "Authorization": self.api_key,
                                "Content-Type": "application/json",
                            },
                        )
                        if response.status_code >= 400:
                            raise ZoeziAPIError(
                                f"Zoezi API error: {response.status_code}",
                                status_code=response.status_code,
                            )
                        data = response.json()
                    except (httpx.HTTPError, ValueError, ZoeziAPIError) as e:
                        status_code = e.status_code if isinstance(e, ZoeziAPIError) else None
                        call.record_attempt(attempt, status_code=status_code, error=str(e) or type(e).__name__)
                        if attempt == self.max_retries:
                            if isinstance(e, ZoeziAPIError):
                                raise
                            raise ZoeziAPIError(f"Zoezi request failed: {type(e).__name__}: {e}") from e
                        await asyncio.sleep(attempt * self.backoff_seconds)
                        continue

                    call.record_attempt(attempt, status_code=response.status_code)
                    call.set_result(data)
                    return data


def _as_list(payload: Any) -> List[Dict[str, Any]]:
    """Zoezi list endpoints return arrays; anything else is treated as empty."""
    if isinstance(payload, list):
        return payload
    logger.warning("Unexpected Zoezi payload shape", payload_type=type(payload).__name__)
    return []
