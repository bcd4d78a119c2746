"""
Analytics Service - Fetch a club's Zoezi data and build the analytics response.

The workout list is required; sites, card types and card instances only
annotate the response, so their failures are logged and replaced by
empty lists.
"""
import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional

from training_analytics.core.logging import get_logger
from training_analytics.models.club import Club
from training_analytics.services.analytics.adapter import ZoeziAdapter
from training_analytics.services.analytics.calculator import AttendanceCalculator
from training_analytics.services.external.zoezi import ZoeziService, ZoeziServiceInterface
from training_analytics.utils.dates import date_range_days

logger = get_logger(__name__)

ZoeziFactory = Callable[[Club], ZoeziServiceInterface]


def zoezi_for_club(club: Club) -> ZoeziServiceInterface:
    """Default factory: a ZoeziService bound to the club's credentials."""
    return ZoeziService(domain=club.zoezi_domain, api_key=club.zoezi_api_key)


class AnalyticsService:
    """
    Builds analytics responses for one club and date window.

    Usage:
        service = AnalyticsService()
        payload = await service.build(club, "2024-01-01", "2024-01-31")
    """

    def __init__(
        self,
        zoezi_factory: ZoeziFactory = zoezi_for_club,
        adapter: Optional[ZoeziAdapter] = None,
        calculator: Optional[AttendanceCalculator] = None,
    ):
        self.zoezi_factory = zoezi_factory
        self.adapter = adapter or ZoeziAdapter()
        self.calculator = calculator or AttendanceCalculator(self.adapter.defaults)

    async def fetch_schedule(self, club: Club, from_date: str, to_date: str) -> List[Dict[str, Any]]:
        """Raw workout list, as returned by Zoezi."""
        zoezi = self.zoezi_factory(club)
        return await zoezi.get_workouts(from_date, to_date, bookings=True)

    async def build(self, club: Club, from_date: str, to_date: str) -> Dict[str, Any]:
        """
        Fetch, normalize and aggregate.

        Args:
            club: Club whose Zoezi account is queried
            from_date: Inclusive start date (YYYY-MM-DD)
            to_date: Inclusive end date (YYYY-MM-DD)

        Returns:
            Report dict with club, dateRange, sites, cardTypes and sessions

        Raises:
            ZoeziAPIError: the workout list could not be fetched
        """
        logger.info(
            "Building analytics",
            club_id=club.zoezi_id,
            from_date=from_date,
            to_date=to_date,
            range_days=date_range_days(from_date, to_date),
        )

        zoezi = self.zoezi_factory(club)
        enrichment = [
            asyncio.ensure_future(_fail_soft("sites", zoezi.get_sites)),
            asyncio.ensure_future(_fail_soft("card_types", zoezi.get_card_types)),
            asyncio.ensure_future(_fail_soft("cards", zoezi.get_cards)),
        ]
        try:
            workouts = await zoezi.get_workouts(from_date, to_date, bookings=True)
        except BaseException:
            # The report has failed; stop enrichment retries
            for task in enrichment:
                task.cancel()
            await asyncio.gather(*enrichment, return_exceptions=True)
            raise
        sites, card_types, cards = await asyncio.gather(*enrichment)

        sessions = self.adapter.normalize_many(workouts)
        report = self.calculator.aggregate(sessions)

        payload = report.to_dict()
        payload["club"] = club.to_summary()
        payload["dateRange"] = {"fromDate": from_date, "toDate": to_date}
        payload["sites"] = self.adapter.normalize_sites(sites)
        payload["cardTypes"] = self.adapter.normalize_card_types(card_types, cards)
        payload["sessions"] = [self.adapter.to_listing(s) for s in sessions]

        logger.info(
            "Analytics built",
            club_id=club.zoezi_id,
            sessions=report.summary.total_classes,
            attendance_rate=report.summary.overall_attendance_rate,
            types=len(report.by_type),
            instructors=len(report.by_instructor),
        )

        return payload


async def _fail_soft(
    resource: str,
    fetch: Callable[[], Awaitable[List[Dict[str, Any]]]],
) -> List[Dict[str, Any]]:
    """Run an enrichment fetch, substituting [] on any failure."""
    try:
        return await fetch()
    except Exception as e:
        logger.warning(
            "Enrichment fetch failed, continuing without it",
            resource=resource,
            error_type=type(e).__name__,
            error=str(e),
        )
        return []
