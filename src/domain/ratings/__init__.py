"""Performance-rating, eligibility and leaderboard computations."""

from domain.ratings.calculator import PerformanceCalculator
from domain.ratings.eligibility import (
    EligibilityParameters,
    EligibilityReport,
    FirstRatingEligibilityCalculator,
)
from domain.ratings.leaderboard import rank_circuit, win_percentage
from domain.ratings.performance import (
    PerformanceParameters,
    linear_performance_rating,
    table_performance_rating,
)
from domain.ratings.protocol import PerformanceFormula

__all__ = [
    "EligibilityParameters",
    "EligibilityReport",
    "FirstRatingEligibilityCalculator",
    "PerformanceCalculator",
    "PerformanceFormula",
    "PerformanceParameters",
    "linear_performance_rating",
    "rank_circuit",
    "table_performance_rating",
    "win_percentage",
]
