"""Expected score and tournament performance rating (TPR) calculations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from math import floor

from domain.common import PerformanceGame


@dataclass(frozen=True)
class PerformanceParameters:
    placeholder_rating: float = 1500.0
    max_rating_difference: float = 400.0
    scale_factor: float = 400.0
    linear_k: float = 10.0
    unrated_linear_k: float = 8.0


# (minimum score percentage, rating difference), highest band first.
RATING_DIFFERENCE_TABLE: tuple[tuple[float, int], ...] = (
    (100.0, 800),
    (99.0, 677),
    (90.0, 366),
    (80.0, 240),
    (75.0, 188),
    (70.0, 141),
    (65.0, 98),
    (60.0, 57),
    (55.0, 17),
    (50.0, 0),
    (45.0, -17),
    (40.0, -57),
    (35.0, -98),
    (30.0, -141),
    (25.0, -188),
    (20.0, -240),
    (10.0, -366),
    (1.0, -677),
)
LOWEST_RATING_DIFFERENCE = -800


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(floor(value + 0.5))


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def clamped_expected_score(
    player_rating: float | None,
    opponent_rating: float,
    params: PerformanceParameters,
) -> float:
    """Expected score with the rating gap capped at +/- max_rating_difference."""
    rating = params.placeholder_rating if not player_rating else float(player_rating)
    difference = max(
        -params.max_rating_difference,
        min(rating - opponent_rating, params.max_rating_difference),
    )
    return calculate_expected_score(difference, 0.0, params.scale_factor)


def rating_difference_for_score(score_percentage: float) -> int:
    """Look up the rating difference for a score percentage."""
    for minimum, difference in RATING_DIFFERENCE_TABLE:
        if score_percentage >= minimum:
            return difference
    return LOWEST_RATING_DIFFERENCE


def linear_performance_rating(
    avg_opponent_rating: float,
    score_percentage: float,
    *,
    is_unrated: bool,
    params: PerformanceParameters,
) -> int:
    """TPR = average opponent rating + (score % - 50) * k."""
    k = params.unrated_linear_k if is_unrated else params.linear_k
    return round_half_up(avg_opponent_rating + (score_percentage - 50.0) * k)


def table_performance_rating(
    avg_opponent_rating: float,
    score_percentage: float,
    *,
    is_unrated: bool = False,
    params: PerformanceParameters | None = None,
) -> int:
    """TPR = average opponent rating + banded rating difference."""
    return round_half_up(avg_opponent_rating + rating_difference_for_score(score_percentage))


def rated_opponent_games(games: Sequence[PerformanceGame]) -> list[PerformanceGame]:
    """Keep games whose opponent has a known, positive rating."""
    return [game for game in games if game.opponent_rating is not None and game.opponent_rating > 0]


__all__ = [
    "LOWEST_RATING_DIFFERENCE",
    "PerformanceParameters",
    "RATING_DIFFERENCE_TABLE",
    "calculate_expected_score",
    "clamped_expected_score",
    "linear_performance_rating",
    "rated_opponent_games",
    "rating_difference_for_score",
    "round_half_up",
    "table_performance_rating",
]
