"""
Analytics module - Group training attendance analytics.

This module provides:
- The Zoezi adapter normalizing raw workouts into SessionRecord
- The attendance calculator reducing sessions into a report
- The service that fetches a club's data and builds the response
"""
from training_analytics.services.analytics.adapter import (
    DEFAULTS,
    AnalyticsDefaults,
    BookingDetail,
    InstructorRef,
    SessionRecord,
    ZoeziAdapter,
)
from training_analytics.services.analytics.calculator import (
    AttendanceCalculator,
    aggregate,
)
from training_analytics.services.analytics.report import AnalyticsReport
from training_analytics.services.analytics.service import AnalyticsService

__all__ = [
    # Data structures
    "AnalyticsDefaults",
    "DEFAULTS",
    "SessionRecord",
    "InstructorRef",
    "BookingDetail",
    "AnalyticsReport",
    # Adapter
    "ZoeziAdapter",
    # Calculator
    "AttendanceCalculator",
    "aggregate",
    # Service
    "AnalyticsService",
]
