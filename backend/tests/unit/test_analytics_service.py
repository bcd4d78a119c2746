"""
Unit tests for AnalyticsService.

Zoezi is replaced by the in-memory FakeZoezi from conftest.
"""
import asyncio

import pytest

from training_analytics.models.club import Club
from training_analytics.services.analytics.service import AnalyticsService, zoezi_for_club
from training_analytics.services.external.zoezi import ZoeziAPIError, ZoeziService


@pytest.fixture
def club():
    return Club(
        zoezi_id="42",
        name="Downtown Gym",
        zoezi_domain="downtown.zoezi.se",
        zoezi_api_key="secret-key",
    )


def make_service(fake):
    return AnalyticsService(zoezi_factory=lambda club: fake)


class TestBuild:
    """Tests for AnalyticsService.build."""

    def test_payload_sections(self, club, raw_workouts, fake_zoezi_class):
        fake = fake_zoezi_class(workouts=raw_workouts)

        payload = asyncio.run(make_service(fake).build(club, "2024-01-15", "2024-01-21"))

        assert set(payload) == {
            "summary", "byType", "byDay", "byHour", "byInstructor", "dailyTrend",
            "club", "dateRange", "sites", "cardTypes", "sessions",
        }
        assert payload["club"] == {"id": "42", "name": "Downtown Gym", "domain": "downtown.zoezi.se"}
        assert payload["dateRange"] == {"fromDate": "2024-01-15", "toDate": "2024-01-21"}
        assert len(payload["sessions"]) == 2

    def test_requests_bookings_for_range(self, club, fake_zoezi_class):
        fake = fake_zoezi_class()

        asyncio.run(make_service(fake).build(club, "2024-01-01", "2024-01-31"))

        assert ("workouts_range", "2024-01-01", "2024-01-31", True) in fake.calls

    def test_summary_figures(self, club, raw_workouts, fake_zoezi_class):
        fake = fake_zoezi_class(workouts=raw_workouts)

        summary = asyncio.run(make_service(fake).build(club, "2024-01-15", "2024-01-21"))["summary"]

        assert summary["totalClasses"] == 2
        assert summary["totalBooked"] == 28
        assert summary["totalCapacity"] == 32
        assert summary["overallAttendanceRate"] == "87.5"
        assert summary["avgPerClass"] == "14.0"
        assert summary["fullyBookedClasses"] == 1
        assert summary["fullyBookedRate"] == "50.0"
        assert summary["uniqueParticipants"] == 3

    def test_rankings(self, club, raw_workouts, fake_zoezi_class):
        fake = fake_zoezi_class(workouts=raw_workouts)

        payload = asyncio.run(make_service(fake).build(club, "2024-01-15", "2024-01-21"))

        assert [t["name"] for t in payload["byType"]] == ["Spin", "Yoga"]
        assert [t["attendanceRate"] for t in payload["byType"]] == ["100.0", "66.7"]
        assert [i["name"] for i in payload["byInstructor"]] == ["Erik Lund", "Anna Berg"]
        assert payload["byInstructor"][1]["classes"] == 2
        assert payload["byInstructor"][1]["imageKey"] == "img-anna"

    def test_enrichment(self, club, raw_workouts, fake_zoezi_class):
        fake = fake_zoezi_class(
            workouts=raw_workouts,
            sites=[{"id": 1, "name": "City"}],
            card_types=[{"id": 7, "name": "Monthly"}],
            cards=[{"cardtype_id": 7}],
        )

        payload = asyncio.run(make_service(fake).build(club, "2024-01-15", "2024-01-21"))

        assert payload["sites"] == [{"id": "1", "name": "City"}]
        assert payload["cardTypes"] == [{"id": "7", "name": "Monthly", "activeCards": 1}]

    def test_empty_window(self, club, fake_zoezi_class):
        payload = asyncio.run(make_service(fake_zoezi_class()).build(club, "2024-01-01", "2024-01-01"))

        assert payload["summary"]["totalClasses"] == 0
        assert payload["summary"]["overallAttendanceRate"] == "0.0"
        assert len(payload["byDay"]) == 7
        assert len(payload["byHour"]) == 18
        assert payload["byType"] == []
        assert payload["sessions"] == []


class TestFailureHandling:
    """Workouts are required, enrichment is optional."""

    @pytest.mark.parametrize("resource", ["sites", "card_types", "cards"])
    def test_enrichment_failure_is_tolerated(
        self, club, raw_workouts, fake_zoezi_class, upstream_error, resource
    ):
        fake = fake_zoezi_class(workouts=raw_workouts, **{resource: upstream_error})

        payload = asyncio.run(make_service(fake).build(club, "2024-01-15", "2024-01-21"))

        assert payload["summary"]["totalClasses"] == 2
        key = {"sites": "sites", "card_types": "cardTypes", "cards": "cardTypes"}[resource]
        assert payload[key] == []

    def test_workout_failure_propagates(self, club, fake_zoezi_class, upstream_error):
        fake = fake_zoezi_class(workouts=upstream_error)

        with pytest.raises(ZoeziAPIError) as exc_info:
            asyncio.run(make_service(fake).build(club, "2024-01-15", "2024-01-21"))

        assert exc_info.value.status_code == 503

    def test_workout_failure_cancels_enrichment(self, club, fake_zoezi_class, upstream_error):
        class SlowEnrichmentZoezi(fake_zoezi_class):
            def __init__(self):
                super().__init__()
                self.cancelled = []

            async def get_workouts(self, from_date, to_date, bookings=True):
                await asyncio.sleep(0)
                raise upstream_error

            async def _hang(self, name):
                try:
                    await asyncio.Event().wait()
                except asyncio.CancelledError:
                    self.cancelled.append(name)
                    raise

            async def get_sites(self):
                return await self._hang("sites")

            async def get_card_types(self):
                return await self._hang("card_types")

            async def get_cards(self):
                return await self._hang("cards")

        fake = SlowEnrichmentZoezi()

        async def build_and_snapshot():
            with pytest.raises(ZoeziAPIError):
                await make_service(fake).build(club, "2024-01-15", "2024-01-21")
            # Taken before the event loop shuts down and cancels leftovers
            return sorted(fake.cancelled)

        assert asyncio.run(build_and_snapshot()) == ["card_types", "cards", "sites"]


class TestFetchSchedule:
    """Tests for the raw schedule passthrough."""

    def test_returns_raw_workouts(self, club, raw_workouts, fake_zoezi_class):
        fake = fake_zoezi_class(workouts=raw_workouts)

        result = asyncio.run(make_service(fake).fetch_schedule(club, "2024-01-15", "2024-01-21"))

        assert result == raw_workouts
        assert fake.calls[0] == ("workouts_range", "2024-01-15", "2024-01-21", True)


class TestDefaultFactory:
    def test_binds_club_credentials(self, club):
        zoezi = zoezi_for_club(club)

        assert isinstance(zoezi, ZoeziService)
        assert zoezi.base_url == "https://downtown.zoezi.se"
        assert zoezi.api_key == "secret-key"
