"""Derived rating-table ORM models."""

from models.ratings.leaderboard import LeaderboardEntry
from models.ratings.performance_rating import PerformanceRating
from models.ratings.rating_eligibility import RatingEligibility

__all__ = [
    "LeaderboardEntry",
    "PerformanceRating",
    "RatingEligibility",
]
