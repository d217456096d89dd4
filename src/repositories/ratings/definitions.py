"""Central repository definitions for the three derived rating tables."""

from __future__ import annotations

from typing import Any

from domain.common import EligibilityResult, LeaderboardStanding, PerformanceSummary
from models.ratings import LeaderboardEntry, PerformanceRating, RatingEligibility
from repositories.ratings.base import DerivedRowRepository


def _performance_to_row(summary: PerformanceSummary) -> dict[str, Any]:
    return {
        "player_id": summary.player_id,
        "tournament_id": summary.tournament_id,
        "games_played": summary.games_played,
        "total_score": summary.total_score,
        "score_percentage": summary.score_percentage,
        "expected_score_percentage": summary.expected_score_percentage,
        "avg_opponent_rating": summary.avg_opponent_rating,
        "formula": summary.formula,
        "performance_rating": summary.performance_rating,
        "linear_performance_rating": summary.linear_performance_rating,
        "table_performance_rating": summary.table_performance_rating,
    }


def _eligibility_to_row(result: EligibilityResult) -> dict[str, Any]:
    if result.estimated_rating is None:
        raise ValueError(f"player_id={result.player_id} is not eligible; only eligible rows are stored")
    return {
        "player_id": result.player_id,
        "tournament_id": None if result.combined else result.tournament_id,
        "games_vs_rated": result.games_vs_rated,
        "score_vs_rated": result.score_vs_rated,
        "avg_opponent_rating": result.avg_opponent_rating,
        "estimated_rating": result.estimated_rating,
        "total_tournament_points": result.total_tournament_points,
        "combined_tournaments": result.combined,
        "combined_tournament_ids": list(result.tournament_ids) if result.combined else None,
    }


def _standing_to_row(standing: LeaderboardStanding) -> dict[str, Any]:
    return {
        "player_id": standing.player_id,
        "rank": standing.rank,
        "tournaments_played": standing.tournaments_played,
        "total_points": standing.total_points,
        "avg_points_per_tournament": standing.avg_points_per_tournament,
        "avg_rating": standing.avg_rating,
        "avg_opponent_rating": standing.avg_opponent_rating,
        "total_game_points": standing.total_game_points,
        "total_games_played": standing.total_games_played,
        "win_percentage": standing.win_percentage,
    }


PERFORMANCE_RATING_REPOSITORY = DerivedRowRepository.from_model(
    model=PerformanceRating,
    key_columns=("player_id", "tournament_id"),
    row_to_values=_performance_to_row,
)

RATING_ELIGIBILITY_REPOSITORY = DerivedRowRepository.from_model(
    model=RatingEligibility,
    key_columns=("player_id", "tournament_id", "combined_tournaments"),
    row_to_values=_eligibility_to_row,
)

LEADERBOARD_REPOSITORY = DerivedRowRepository.from_model(
    model=LeaderboardEntry,
    key_columns=("player_id",),
    row_to_values=_standing_to_row,
)

__all__ = [
    "LEADERBOARD_REPOSITORY",
    "PERFORMANCE_RATING_REPOSITORY",
    "RATING_ELIGIBILITY_REPOSITORY",
]
