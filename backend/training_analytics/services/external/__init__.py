"""
External Services - Integration with the Zoezi gym-management API.

Services:
- ZoeziService: schedule, sites and training cards for one club
"""
from training_analytics.services.external.zoezi import (
    ZoeziAPIError,
    ZoeziService,
    ZoeziServiceInterface,
)

__all__ = [
    "ZoeziAPIError",
    "ZoeziService",
    "ZoeziServiceInterface",
]
