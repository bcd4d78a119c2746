"""
Analytics report structures.

Rates and averages are carried as one-decimal text ("66.7") so the JSON
keeps its trailing zeros; counts stay integers.
"""
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

ZERO_RATE = "0.0"


def format_ratio(numerator: float, denominator: float, scale: float = 1.0) -> str:
    """
    numerator / denominator * scale with one decimal, "0.0" without a denominator.

    Rounds half away from zero on the exact binary value of the quotient.
    """
    if not denominator:
        return ZERO_RATE
    value = numerator / denominator * scale
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_rate(part: float, whole: float) -> str:
    """Percentage of part in whole."""
    return format_ratio(part, whole, 100)


def format_mean(values: List[float]) -> str:
    if not values:
        return ZERO_RATE
    return format_ratio(sum(values), len(values))


@dataclass
class Summary:
    total_classes: int = 0
    total_booked: int = 0
    total_capacity: int = 0
    overall_attendance_rate: str = ZERO_RATE
    avg_per_class: str = ZERO_RATE
    fully_booked_classes: int = 0
    fully_booked_rate: str = ZERO_RATE
    empty_classes: int = 0
    empty_rate: str = ZERO_RATE
    unique_participants: int = 0
    unscheduled_classes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalClasses": self.total_classes,
            "totalBooked": self.total_booked,
            "totalCapacity": self.total_capacity,
            "overallAttendanceRate": self.overall_attendance_rate,
            "avgPerClass": self.avg_per_class,
            "fullyBookedClasses": self.fully_booked_classes,
            "fullyBookedRate": self.fully_booked_rate,
            "emptyClasses": self.empty_classes,
            "emptyRate": self.empty_rate,
            "uniqueParticipants": self.unique_participants,
            "unscheduledClasses": self.unscheduled_classes,
        }


@dataclass
class TypeStats:
    name: str
    color: str
    classes: int
    total_booked: int
    total_capacity: int
    avg_attendance: str
    attendance_rate: str
    avg_booking_rate: str
    unique_participants: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "color": self.color,
            "classes": self.classes,
            "totalBooked": self.total_booked,
            "totalCapacity": self.total_capacity,
            "avgAttendance": self.avg_attendance,
            "attendanceRate": self.attendance_rate,
            "avgBookingRate": self.avg_booking_rate,
            "uniqueParticipants": self.unique_participants,
        }


@dataclass
class DayStats:
    day: str
    day_index: int
    classes: int
    total_booked: int
    total_capacity: int
    avg_attendance: str
    attendance_rate: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "dayIndex": self.day_index,
            "classes": self.classes,
            "totalBooked": self.total_booked,
            "totalCapacity": self.total_capacity,
            "avgAttendance": self.avg_attendance,
            "attendanceRate": self.attendance_rate,
        }


@dataclass
class HourStats:
    hour: int
    label: str
    classes: int
    total_booked: int
    total_capacity: int
    avg_attendance: str
    attendance_rate: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hour": self.hour,
            "label": self.label,
            "classes": self.classes,
            "totalBooked": self.total_booked,
            "totalCapacity": self.total_capacity,
            "avgAttendance": self.avg_attendance,
            "attendanceRate": self.attendance_rate,
        }


@dataclass
class InstructorStats:
    name: str
    image_key: Optional[str]
    classes: int
    total_booked: int
    total_capacity: int
    avg_attendance: str
    attendance_rate: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "imageKey": self.image_key,
            "classes": self.classes,
            "totalBooked": self.total_booked,
            "totalCapacity": self.total_capacity,
            "avgAttendance": self.avg_attendance,
            "attendanceRate": self.attendance_rate,
        }


@dataclass
class DailyTrendPoint:
    date: str
    classes: int
    total_booked: int
    total_capacity: int
    attendance_rate: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "classes": self.classes,
            "totalBooked": self.total_booked,
            "totalCapacity": self.total_capacity,
            "attendanceRate": self.attendance_rate,
        }


@dataclass
class AnalyticsReport:
    """Attendance analytics for one club and date window."""
    summary: Summary = field(default_factory=Summary)
    by_type: List[TypeStats] = field(default_factory=list)
    by_day: List[DayStats] = field(default_factory=list)
    by_hour: List[HourStats] = field(default_factory=list)
    by_instructor: List[InstructorStats] = field(default_factory=list)
    daily_trend: List[DailyTrendPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "summary": self.summary.to_dict(),
            "byType": [t.to_dict() for t in self.by_type],
            "byDay": [d.to_dict() for d in self.by_day],
            "byHour": [h.to_dict() for h in self.by_hour],
            "byInstructor": [i.to_dict() for i in self.by_instructor],
            "dailyTrend": [p.to_dict() for p in self.daily_trend],
        }
