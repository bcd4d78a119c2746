"""
Services module - Application business logic layer.

Modules:
- analytics: Zoezi normalization, attendance aggregation, report building
- external: Zoezi API client
- clubs: Club configuration lookups
"""
# Main exports for convenience
from training_analytics.services.analytics import AnalyticsService, aggregate
from training_analytics.services.clubs import ClubStore

__all__ = [
    "AnalyticsService",
    "ClubStore",
    "aggregate",
]
