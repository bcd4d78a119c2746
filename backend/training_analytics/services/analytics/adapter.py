"""
Zoezi Adapter - Normalize raw workout data from the Zoezi schedule API.

Zoezi returns loosely-typed JSON where several fields are optional and
some identifiers appear under different names. All of that is resolved
here, once, so the aggregation code only ever sees SessionRecord.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from training_analytics.core.logging import get_logger
from training_analytics.utils.dates import (
    format_date,
    format_datetime,
    format_time,
    parse_datetime,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class AnalyticsDefaults:
    """Fallback labels and fixed display ranges used by the analytics."""
    unknown_label: str = "Unknown"
    default_type_color: str = "#667eea"
    first_display_hour: int = 5
    last_display_hour: int = 22
    day_names: Tuple[str, ...] = (
        "Sunday",
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
    )


DEFAULTS = AnalyticsDefaults()


@dataclass(frozen=True)
class InstructorRef:
    """Staff member leading a class."""
    first_name: str = ""
    last_name: str = ""
    image_key: Optional[str] = None

    def display_name(self, unknown_label: str = DEFAULTS.unknown_label) -> str:
        return f"{self.first_name} {self.last_name}".strip() or unknown_label


@dataclass(frozen=True)
class BookingDetail:
    """One booking on a class. Only used for participant counts."""
    user_id: Optional[str] = None
    training_card_type_id: Optional[str] = None


@dataclass(frozen=True)
class SessionRecord:
    """
    One scheduled class occurrence.

    This is the intermediate representation after adapting raw Zoezi data.
    The aggregator works with this format only.
    """
    type_name: str
    type_color: str
    capacity: int
    booked_count: int
    start_time: Optional[datetime]
    instructors: Tuple[InstructorRef, ...] = ()
    booking_details: Tuple[BookingDetail, ...] = ()

    # Metadata, only used in the per-session listing
    source_id: Optional[str] = None
    site_id: Optional[str] = None

    @property
    def date_key(self) -> Optional[str]:
        """Calendar date as YYYY-MM-DD."""
        return format_date(self.start_time) if self.start_time else None

    @property
    def weekday_index(self) -> Optional[int]:
        """0 = Sunday .. 6 = Saturday."""
        if self.start_time is None:
            return None
        return (self.start_time.weekday() + 1) % 7

    @property
    def hour(self) -> Optional[int]:
        return self.start_time.hour if self.start_time else None

    @property
    def booking_ratio(self) -> float:
        """Booked share of capacity as a percentage, 0 without capacity."""
        if self.capacity <= 0:
            return 0.0
        return self.booked_count / self.capacity * 100

    def participant_ids(self) -> List[str]:
        return [b.user_id for b in self.booking_details if b.user_id is not None]


# Alternate keys seen in Zoezi booking payloads, in lookup order
_USER_ID_KEYS = ("userId", "user_id", "customerId", "customer_id")
_USER_OBJECT_KEYS = ("user", "customer")
_CARD_TYPE_KEYS = (
    "trainingCardTypeId",
    "trainingcardtype_id",
    "cardTypeId",
    "cardtype_id",
    "card_type_id",
)


class ZoeziAdapter:
    """
    Adapter for Zoezi `/api/schedule/workout/get/all` items.

    Source fields:
    - workoutType.name / workoutType.color
    - space, numBooked
    - startTime ("YYYY-MM-DD HH:MM:SS")
    - staffs[] with firstname, lastname, imagekey
    - bookings[] (only when requested with bookings=true)
    """

    source_name = "zoezi"

    def __init__(self, defaults: AnalyticsDefaults = DEFAULTS):
        self.defaults = defaults

    def normalize(self, raw_data: Dict[str, Any]) -> SessionRecord:
        """Normalize one Zoezi workout into a SessionRecord."""
        workout_type = raw_data.get("workoutType") or {}
        if not isinstance(workout_type, dict):
            workout_type = {}

        start_time = parse_datetime(raw_data.get("startTime"))
        if start_time is None:
            logger.warning(
                "Unparseable workout start time",
                workout_id=raw_data.get("id"),
                start_time=str(raw_data.get("startTime")),
            )

        return SessionRecord(
            type_name=_text(workout_type.get("name")) or self.defaults.unknown_label,
            type_color=_text(workout_type.get("color")) or self.defaults.default_type_color,
            capacity=_count(raw_data.get("space")),
            booked_count=_count(raw_data.get("numBooked")),
            start_time=start_time,
            instructors=self._extract_instructors(raw_data),
            booking_details=self._extract_bookings(raw_data),
            source_id=_identifier(raw_data.get("id")),
            site_id=_identifier(raw_data.get("site_id", raw_data.get("siteId"))),
        )

    def normalize_many(self, raw_items: Iterable[Any]) -> List[SessionRecord]:
        """Normalize a workout list, skipping entries that are not objects."""
        records = []
        skipped = 0

        for item in raw_items or []:
            if not isinstance(item, dict):
                skipped += 1
                continue
            records.append(self.normalize(item))

        if skipped:
            logger.warning("Skipped non-object workout entries", skipped=skipped)

        logger.debug(
            "Normalized Zoezi workouts",
            sessions=len(records),
            unscheduled=sum(1 for r in records if r.start_time is None),
        )
        return records

    def to_listing(self, record: SessionRecord) -> Dict[str, Any]:
        """Simplified per-session row for client-side re-filtering."""
        start = record.start_time
        return {
            "id": record.source_id,
            "siteId": record.site_id,
            "type": record.type_name,
            "color": record.type_color,
            "startTime": format_datetime(start) if start else None,
            "date": record.date_key,
            "time": format_time(start) if start else None,
            "dayIndex": record.weekday_index,
            "hour": record.hour,
            "capacity": record.capacity,
            "booked": record.booked_count,
            "instructors": [
                i.display_name(self.defaults.unknown_label) for i in record.instructors
            ],
            "participants": record.participant_ids(),
            "cardTypeIds": sorted({
                b.training_card_type_id
                for b in record.booking_details
                if b.training_card_type_id is not None
            }),
        }

    def normalize_sites(self, raw_sites: Iterable[Any]) -> List[Dict[str, Any]]:
        """Site id/name pairs used to label the session listing."""
        return [
            {"id": _identifier(site.get("id")), "name": _text(site.get("name")) or self.defaults.unknown_label}
            for site in raw_sites or []
            if isinstance(site, dict)
        ]

    def normalize_card_types(
        self,
        raw_card_types: Iterable[Any],
        raw_cards: Iterable[Any] = (),
    ) -> List[Dict[str, Any]]:
        """Card types with the number of card instances issued for each."""
        active: Dict[str, int] = {}
        for card in raw_cards or []:
            if not isinstance(card, dict):
                continue
            type_id = _card_type_of(card)
            if type_id is not None:
                active[type_id] = active.get(type_id, 0) + 1

        card_types = []
        for card_type in raw_card_types or []:
            if not isinstance(card_type, dict):
                continue
            type_id = _identifier(card_type.get("id"))
            card_types.append({
                "id": type_id,
                "name": _text(card_type.get("name")) or self.defaults.unknown_label,
                "activeCards": active.get(type_id, 0) if type_id is not None else 0,
            })
        return card_types

    def _extract_instructors(self, raw_data: Dict[str, Any]) -> Tuple[InstructorRef, ...]:
        staffs = _as_sequence(raw_data.get("staffs"))
        instructors = []

        for staff in staffs:
            if not isinstance(staff, dict):
                continue
            instructors.append(InstructorRef(
                first_name=_text(staff.get("firstname", staff.get("firstName"))),
                last_name=_text(staff.get("lastname", staff.get("lastName"))),
                image_key=staff.get("imagekey", staff.get("imageKey")),
            ))

        return tuple(instructors)

    def _extract_bookings(self, raw_data: Dict[str, Any]) -> Tuple[BookingDetail, ...]:
        bookings = _as_sequence(raw_data.get("bookings"))
        details = []

        for booking in bookings:
            if not isinstance(booking, dict):
                continue
            details.append(BookingDetail(
                user_id=_first_identifier(booking),
                training_card_type_id=_card_type_of(booking),
            ))

        return tuple(details)


def _as_sequence(value: Any) -> Tuple[Any, ...]:
    """Lists pass through; anything else, including null, is empty."""
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return ()


def _card_type_of(item: Dict[str, Any]) -> Optional[str]:
    for key in _CARD_TYPE_KEYS:
        value = _identifier(item.get(key))
        if value is not None:
            return value
    return None


def _first_identifier(booking: Dict[str, Any]) -> Optional[str]:
    """Resolve the participant id from whichever key the payload uses."""
    for key in _USER_ID_KEYS:
        value = _identifier(booking.get(key))
        if value is not None:
            return value
    for key in _USER_OBJECT_KEYS:
        nested = booking.get(key)
        if isinstance(nested, dict):
            value = _identifier(nested.get("id"))
            if value is not None:
                return value
    return None


def _identifier(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _count(value: Any) -> int:
    """Non-negative integer, 0 for anything missing or invalid."""
    if isinstance(value, bool):
        return 0
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)
