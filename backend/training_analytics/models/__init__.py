from training_analytics.models.club import Club

__all__ = [
    "Club",
]
