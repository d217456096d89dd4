"""Circuit domain modules."""

from domain.common import (
    CircuitAggregate,
    EligibilityResult,
    LeaderboardStanding,
    PerformanceGame,
    PerformanceSummary,
    PlayerRow,
    TournamentAppearance,
    TournamentInfo,
)
from domain.ratings.protocol import PerformanceFormula

__all__ = [
    "CircuitAggregate",
    "EligibilityResult",
    "LeaderboardStanding",
    "PerformanceFormula",
    "PerformanceGame",
    "PerformanceSummary",
    "PlayerRow",
    "TournamentAppearance",
    "TournamentInfo",
]
