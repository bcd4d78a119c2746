"""
Pytest configuration and shared fixtures for unit tests.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest

from training_analytics.services.analytics.adapter import (
    BookingDetail,
    InstructorRef,
    SessionRecord,
)
from training_analytics.services.external.zoezi import ZoeziAPIError, ZoeziServiceInterface


def make_session(
    type_name: str = "Yoga",
    capacity: int = 10,
    booked: int = 5,
    start: Optional[datetime] = datetime(2024, 1, 15, 18, 0),
    instructors: tuple = (),
    participants: tuple = (),
    color: str = "#ff0000",
) -> SessionRecord:
    """Build a normalized session without going through the adapter."""
    return SessionRecord(
        type_name=type_name,
        type_color=color,
        capacity=capacity,
        booked_count=booked,
        start_time=start,
        instructors=tuple(
            InstructorRef(first_name=first, last_name=last) for first, last in instructors
        ),
        booking_details=tuple(BookingDetail(user_id=uid) for uid in participants),
    )


@pytest.fixture
def session_factory():
    return make_session


@pytest.fixture
def raw_workouts() -> List[Dict[str, Any]]:
    """Zoezi-shaped workouts covering a Monday evening and a Tuesday morning."""
    return [
        {
            "id": 101,
            "site_id": 1,
            "startTime": "2024-01-15 18:00:00",
            "space": 12,
            "numBooked": 8,
            "workoutType": {"name": "Yoga", "color": "#00aa00"},
            "staffs": [{"firstname": "Anna", "lastname": "Berg", "imagekey": "img-anna"}],
            "bookings": [
                {"userId": 1, "trainingCardTypeId": 7},
                {"userId": 2},
            ],
        },
        {
            "id": 102,
            "site_id": 2,
            "startTime": "2024-01-16 07:00:00",
            "space": 20,
            "numBooked": 20,
            "workoutType": {"name": "Spin"},
            "staffs": [
                {"firstname": "Anna", "lastname": "Berg", "imagekey": "img-anna"},
                {"firstname": "Erik", "lastname": "Lund"},
            ],
            "bookings": [
                {"user": {"id": 2}},
                {"customerId": 3, "cardtype_id": 8},
            ],
        },
    ]


class FakeZoezi(ZoeziServiceInterface):
    """In-memory Zoezi stand-in. Pass an exception to make a resource fail."""

    def __init__(
        self,
        workouts: Any = (),
        sites: Any = (),
        card_types: Any = (),
        cards: Any = (),
    ):
        self.workouts = workouts
        self.sites = sites
        self.card_types = card_types
        self.cards = cards
        self.calls: List[tuple] = []

    async def _resolve(self, name: str, value: Any) -> List[Dict[str, Any]]:
        self.calls.append((name,))
        if isinstance(value, Exception):
            raise value
        return list(value)

    async def get_workouts(self, from_date, to_date, bookings=True):
        self.calls.append(("workouts_range", from_date, to_date, bookings))
        return await self._resolve("workouts", self.workouts)

    async def get_sites(self):
        return await self._resolve("sites", self.sites)

    async def get_card_types(self):
        return await self._resolve("card_types", self.card_types)

    async def get_cards(self):
        return await self._resolve("cards", self.cards)


@pytest.fixture
def fake_zoezi_class():
    return FakeZoezi


@pytest.fixture
def upstream_error():
    return ZoeziAPIError("Zoezi API error: 503", status_code=503)
