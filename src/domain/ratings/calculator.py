"""Per-player performance summaries over the performance view."""

from __future__ import annotations

from collections.abc import Sequence

from domain.common import PerformanceGame, PerformanceSummary
from domain.ratings.performance import (
    PerformanceParameters,
    clamped_expected_score,
    rated_opponent_games,
)
from domain.ratings.protocol import PerformanceFormula
from domain.ratings.registry import get_formula


class PerformanceCalculator:
    """Summarizes a player's games against rated opponents."""

    def __init__(
        self,
        params: PerformanceParameters,
        *,
        default_formula: PerformanceFormula = PerformanceFormula.LINEAR,
    ) -> None:
        self.params = params
        self.default_formula = default_formula

    def summarize(
        self,
        games: Sequence[PerformanceGame],
        *,
        player_id: int,
        tournament_id: int | None = None,
    ) -> PerformanceSummary | None:
        """Return None when no game was played against a rated opponent."""
        counted = rated_opponent_games(games)
        if not counted:
            return None

        games_played = len(counted)
        total_score = sum(game.score for game in counted)
        score_percentage = (total_score / games_played) * 100.0
        expected_total = sum(
            clamped_expected_score(game.player_rating, float(game.opponent_rating), self.params)
            for game in counted
        )
        expected_score_percentage = (expected_total / games_played) * 100.0
        avg_opponent_rating = sum(float(game.opponent_rating) for game in counted) / games_played
        is_unrated = not any(game.player_rating for game in counted)

        ratings = {
            formula: get_formula(formula)(
                avg_opponent_rating,
                score_percentage,
                is_unrated=is_unrated,
                params=self.params,
            )
            for formula in PerformanceFormula
        }

        return PerformanceSummary(
            player_id=player_id,
            tournament_id=tournament_id,
            games_played=games_played,
            total_score=total_score,
            score_percentage=score_percentage,
            expected_score_percentage=expected_score_percentage,
            avg_opponent_rating=avg_opponent_rating,
            is_unrated=is_unrated,
            linear_performance_rating=ratings[PerformanceFormula.LINEAR],
            table_performance_rating=ratings[PerformanceFormula.STEP_TABLE],
            formula=self.default_formula.value,
            performance_rating=ratings[self.default_formula],
        )


__all__ = ["PerformanceCalculator"]
