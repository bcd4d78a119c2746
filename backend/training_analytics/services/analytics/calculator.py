"""
Attendance Calculator - Reduce class sessions into an analytics report.

One pass over the sessions fills one set of accumulators per dimension:
- summary totals and the participant set
- workout type
- weekday and hour of day
- instructor (a class with two instructors counts fully for both)
- calendar date

Rates are ratio-of-sums (booked / capacity). The per-type average booking
rate is the exception: it is the mean of each session's own ratio.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from training_analytics.services.analytics.adapter import (
    DEFAULTS,
    AnalyticsDefaults,
    SessionRecord,
)
from training_analytics.services.analytics.report import (
    AnalyticsReport,
    DailyTrendPoint,
    DayStats,
    HourStats,
    InstructorStats,
    Summary,
    TypeStats,
    format_mean,
    format_ratio,
    format_rate,
)


@dataclass
class _Bucket:
    """Running totals for one group."""
    classes: int = 0
    total_booked: int = 0
    total_capacity: int = 0

    def add(self, session: SessionRecord) -> None:
        self.classes += 1
        self.total_booked += session.booked_count
        self.total_capacity += session.capacity

    @property
    def avg_attendance(self) -> str:
        return format_ratio(self.total_booked, self.classes)

    @property
    def attendance_rate(self) -> str:
        return format_rate(self.total_booked, self.total_capacity)


@dataclass
class _TypeBucket(_Bucket):
    color: str = DEFAULTS.default_type_color
    booking_ratios: List[float] = field(default_factory=list)
    participants: Set[str] = field(default_factory=set)

    def add(self, session: SessionRecord) -> None:
        super().add(session)
        self.booking_ratios.append(session.booking_ratio)
        self.participants.update(session.participant_ids())


@dataclass
class _InstructorBucket(_Bucket):
    image_key: Optional[str] = None


class AttendanceCalculator:
    """
    Attendance analytics engine.

    Usage:
        calculator = AttendanceCalculator()
        report = calculator.aggregate(sessions)
    """

    def __init__(self, defaults: AnalyticsDefaults = DEFAULTS):
        self.defaults = defaults

    def aggregate(self, sessions: Iterable[SessionRecord]) -> AnalyticsReport:
        """
        Build the analytics report for a list of sessions.

        Never raises for normalized input. Sessions without a start time
        count towards summary, type and instructor figures but not towards
        weekday, hour or daily buckets.
        """
        total = _Bucket()
        fully_booked = 0
        empty = 0
        unscheduled = 0
        participants: Set[str] = set()

        by_type: Dict[str, _TypeBucket] = {}
        by_day: Dict[int, _Bucket] = {i: _Bucket() for i in range(len(self.defaults.day_names))}
        by_hour: Dict[int, _Bucket] = {}
        by_instructor: Dict[str, _InstructorBucket] = {}
        by_date: Dict[str, _Bucket] = {}

        for session in sessions:
            total.add(session)
            participants.update(session.participant_ids())

            if session.capacity > 0 and session.booked_count >= session.capacity:
                fully_booked += 1
            if session.booked_count == 0:
                empty += 1

            type_bucket = by_type.get(session.type_name)
            if type_bucket is None:
                type_bucket = by_type[session.type_name] = _TypeBucket(color=session.type_color)
            type_bucket.add(session)

            for instructor in session.instructors:
                name = instructor.display_name(self.defaults.unknown_label)
                instructor_bucket = by_instructor.get(name)
                if instructor_bucket is None:
                    instructor_bucket = by_instructor[name] = _InstructorBucket(
                        image_key=instructor.image_key
                    )
                instructor_bucket.add(session)

            if session.start_time is None:
                unscheduled += 1
                continue

            by_day[session.weekday_index].add(session)
            by_hour.setdefault(session.hour, _Bucket()).add(session)
            by_date.setdefault(session.date_key, _Bucket()).add(session)

        summary = Summary(
            total_classes=total.classes,
            total_booked=total.total_booked,
            total_capacity=total.total_capacity,
            overall_attendance_rate=total.attendance_rate,
            avg_per_class=total.avg_attendance,
            fully_booked_classes=fully_booked,
            fully_booked_rate=format_rate(fully_booked, total.classes),
            empty_classes=empty,
            empty_rate=format_rate(empty, total.classes),
            unique_participants=len(participants),
            unscheduled_classes=unscheduled,
        )

        return AnalyticsReport(
            summary=summary,
            by_type=self._type_stats(by_type),
            by_day=self._day_stats(by_day),
            by_hour=self._hour_stats(by_hour),
            by_instructor=self._instructor_stats(by_instructor),
            daily_trend=self._daily_trend(by_date),
        )

    def _type_stats(self, buckets: Dict[str, _TypeBucket]) -> List[TypeStats]:
        stats = [
            TypeStats(
                name=name,
                color=bucket.color,
                classes=bucket.classes,
                total_booked=bucket.total_booked,
                total_capacity=bucket.total_capacity,
                avg_attendance=bucket.avg_attendance,
                attendance_rate=bucket.attendance_rate,
                avg_booking_rate=format_mean(bucket.booking_ratios),
                unique_participants=len(bucket.participants),
            )
            for name, bucket in buckets.items()
        ]
        return _rank_by_rate(stats)

    def _day_stats(self, buckets: Dict[int, _Bucket]) -> List[DayStats]:
        return [
            DayStats(
                day=day_name,
                day_index=index,
                classes=buckets[index].classes,
                total_booked=buckets[index].total_booked,
                total_capacity=buckets[index].total_capacity,
                avg_attendance=buckets[index].avg_attendance,
                attendance_rate=buckets[index].attendance_rate,
            )
            for index, day_name in enumerate(self.defaults.day_names)
        ]

    def _hour_stats(self, buckets: Dict[int, _Bucket]) -> List[HourStats]:
        stats = []
        for hour in range(self.defaults.first_display_hour, self.defaults.last_display_hour + 1):
            bucket = buckets.get(hour) or _Bucket()
            stats.append(HourStats(
                hour=hour,
                label=f"{hour}:00",
                classes=bucket.classes,
                total_booked=bucket.total_booked,
                total_capacity=bucket.total_capacity,
                avg_attendance=bucket.avg_attendance,
                attendance_rate=bucket.attendance_rate,
            ))
        return stats

    def _instructor_stats(self, buckets: Dict[str, _InstructorBucket]) -> List[InstructorStats]:
        stats = [
            InstructorStats(
                name=name,
                image_key=bucket.image_key,
                classes=bucket.classes,
                total_booked=bucket.total_booked,
                total_capacity=bucket.total_capacity,
                avg_attendance=bucket.avg_attendance,
                attendance_rate=bucket.attendance_rate,
            )
            for name, bucket in buckets.items()
        ]
        return _rank_by_rate(stats)

    def _daily_trend(self, buckets: Dict[str, _Bucket]) -> List[DailyTrendPoint]:
        # YYYY-MM-DD keys sort chronologically as strings
        return [
            DailyTrendPoint(
                date=date_key,
                classes=buckets[date_key].classes,
                total_booked=buckets[date_key].total_booked,
                total_capacity=buckets[date_key].total_capacity,
                attendance_rate=buckets[date_key].attendance_rate,
            )
            for date_key in sorted(buckets)
        ]


def _rank_by_rate(stats):
    """Highest attendance rate first; equal rates keep first-seen order."""
    return sorted(stats, key=lambda s: float(s.attendance_rate), reverse=True)


def aggregate(
    sessions: Iterable[SessionRecord],
    defaults: AnalyticsDefaults = DEFAULTS,
) -> AnalyticsReport:
    """Module-level shortcut for AttendanceCalculator(defaults).aggregate()."""
    return AttendanceCalculator(defaults).aggregate(sessions)
