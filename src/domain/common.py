"""Shared types passed between ingestion, the store and the rating engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class TournamentInfo:
    """Tournament-level metadata extracted from a crosstable."""

    name: str
    date: date
    rounds: int
    file_name: str
    location: str | None = None
    time_control: str | None = None


@dataclass(frozen=True)
class PlayerRow:
    """One decoded player row of a crosstable."""

    rank: int
    name: str
    points: float
    title: str | None = None
    rating: int | None = None
    federation: str | None = None
    tiebreaks: tuple[float | None, ...] = ()
    round_cells: tuple[object, ...] = ()


@dataclass(frozen=True)
class PerformanceGame:
    """One participant's view of one game (a row of the performance view)."""

    player_id: int
    tournament_id: int
    round: int
    color: str
    player_rating: int | None
    opponent_rating: int | None
    score: float


@dataclass(frozen=True)
class CircuitAggregate:
    """One row of the circuit aggregate view."""

    player_id: int
    name: str
    federation: str | None
    title: str | None
    tournaments_played: int
    total_points: float
    avg_points_per_tournament: float
    avg_rating: float | None
    avg_opponent_rating: float | None
    total_game_points: float
    total_games_played: int


@dataclass(frozen=True)
class TournamentAppearance:
    """A player's result row in one tournament, used by the eligibility checks."""

    player_id: int
    tournament_id: int
    tournament_date: date
    rating: int | None
    points: float

    @property
    def is_unrated(self) -> bool:
        return self.rating is None or self.rating <= 0


@dataclass(frozen=True)
class PerformanceSummary:
    """Statistics and both performance-rating formulas for one scope."""

    player_id: int
    tournament_id: int | None
    games_played: int
    total_score: float
    score_percentage: float
    expected_score_percentage: float
    avg_opponent_rating: float
    is_unrated: bool
    linear_performance_rating: int
    table_performance_rating: int
    formula: str
    performance_rating: int


@dataclass(frozen=True)
class EligibilityResult:
    """First-rating eligibility from one tournament or from combined tournaments."""

    player_id: int
    tournament_id: int | None
    games_vs_rated: int
    score_vs_rated: float
    avg_opponent_rating: float
    estimated_rating: int | None
    meets_criteria: bool
    combined: bool = False
    total_tournament_points: float | None = None
    tournament_ids: tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LeaderboardStanding:
    """A ranked row of the circuit leaderboard."""

    player_id: int
    rank: int
    tournaments_played: int
    total_points: float
    avg_points_per_tournament: float
    avg_rating: float
    avg_opponent_rating: float
    total_game_points: float
    total_games_played: int
    win_percentage: float


__all__ = [
    "CircuitAggregate",
    "EligibilityResult",
    "LeaderboardStanding",
    "PerformanceGame",
    "PerformanceSummary",
    "PlayerRow",
    "TournamentAppearance",
    "TournamentInfo",
]
