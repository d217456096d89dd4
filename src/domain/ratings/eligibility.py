"""FIDE-style first-rating eligibility for unrated players.

A player qualifies with at least ``min_games`` games against rated opponents,
either inside a single tournament or, failing that, pooled across every
tournament they played unrated in. The estimate is the step-table performance
rating of the counted games, floored at ``rating_floor``.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from domain.common import EligibilityResult, PerformanceGame, TournamentAppearance
from domain.ratings.performance import rated_opponent_games, table_performance_rating


@dataclass(frozen=True)
class EligibilityParameters:
    min_games: int = 5
    rating_floor: int = 1000
    min_combined_tournaments: int = 2


@dataclass(frozen=True)
class EligibilityReport:
    """Single-tournament evaluations plus combined evaluations."""

    single: tuple[EligibilityResult, ...]
    combined: tuple[EligibilityResult, ...]

    @property
    def eligible_single(self) -> list[EligibilityResult]:
        return [result for result in self.single if result.meets_criteria]

    @property
    def eligible_combined(self) -> list[EligibilityResult]:
        return [result for result in self.combined if result.meets_criteria]


class FirstRatingEligibilityCalculator:
    """Stateless evaluator for single and combined eligibility."""

    def __init__(self, params: EligibilityParameters) -> None:
        self.params = params

    def estimate_rating(self, games: Sequence[PerformanceGame]) -> tuple[float, int | None]:
        """Return (average opponent rating, floored step-table estimate)."""
        if not games:
            return 0.0, None
        total_score = sum(game.score for game in games)
        score_percentage = (total_score / len(games)) * 100.0
        avg_opponent_rating = sum(float(game.opponent_rating) for game in games) / len(games)
        estimate = table_performance_rating(avg_opponent_rating, score_percentage)
        return avg_opponent_rating, max(estimate, self.params.rating_floor)

    def evaluate_single(
        self,
        appearance: TournamentAppearance,
        games: Iterable[PerformanceGame],
    ) -> EligibilityResult:
        counted = [
            game
            for game in rated_opponent_games(list(games))
            if game.tournament_id == appearance.tournament_id
        ]
        meets_criteria = len(counted) >= self.params.min_games
        avg_opponent_rating, estimate = self.estimate_rating(counted)
        return EligibilityResult(
            player_id=appearance.player_id,
            tournament_id=appearance.tournament_id,
            games_vs_rated=len(counted),
            score_vs_rated=sum(game.score for game in counted),
            avg_opponent_rating=avg_opponent_rating,
            estimated_rating=estimate if meets_criteria else None,
            meets_criteria=meets_criteria,
            combined=False,
            total_tournament_points=appearance.points,
            tournament_ids=(appearance.tournament_id,),
        )

    def evaluate_combined(
        self,
        player_id: int,
        games: Iterable[PerformanceGame],
        *,
        tournament_order: dict[int, tuple] | None = None,
    ) -> EligibilityResult:
        counted = rated_opponent_games(list(games))
        meets_criteria = len(counted) >= self.params.min_games
        avg_opponent_rating, estimate = self.estimate_rating(counted)
        order = tournament_order or {}
        tournament_ids = tuple(
            sorted(
                {game.tournament_id for game in counted},
                key=lambda tournament_id: (order.get(tournament_id, ()), tournament_id),
            )
        )
        return EligibilityResult(
            player_id=player_id,
            tournament_id=None,
            games_vs_rated=len(counted),
            score_vs_rated=sum(game.score for game in counted),
            avg_opponent_rating=avg_opponent_rating,
            estimated_rating=estimate if meets_criteria else None,
            meets_criteria=meets_criteria,
            combined=True,
            tournament_ids=tournament_ids,
        )

    def evaluate(
        self,
        appearances: Sequence[TournamentAppearance],
        games_by_player: dict[int, list[PerformanceGame]],
    ) -> EligibilityReport:
        """Run the single-tournament pass, then the combined pass for the rest."""
        unrated = [appearance for appearance in appearances if appearance.is_unrated]

        single = [
            self.evaluate_single(appearance, games_by_player.get(appearance.player_id, ()))
            for appearance in sorted(
                unrated,
                key=lambda item: (item.tournament_date, item.tournament_id, item.player_id),
            )
        ]
        already_eligible = {result.player_id for result in single if result.meets_criteria}

        unrated_by_player: dict[int, list[TournamentAppearance]] = defaultdict(list)
        for appearance in unrated:
            unrated_by_player[appearance.player_id].append(appearance)

        tournament_order = {
            appearance.tournament_id: (appearance.tournament_date,) for appearance in appearances
        }

        combined: list[EligibilityResult] = []
        for player_id in sorted(unrated_by_player):
            if player_id in already_eligible:
                continue
            unrated_tournaments = {item.tournament_id for item in unrated_by_player[player_id]}
            if len(unrated_tournaments) < self.params.min_combined_tournaments:
                continue
            # Pools every tournament the player appears in, rated or not.
            combined.append(
                self.evaluate_combined(
                    player_id,
                    games_by_player.get(player_id, ()),
                    tournament_order=tournament_order,
                )
            )

        return EligibilityReport(single=tuple(single), combined=tuple(combined))


__all__ = [
    "EligibilityParameters",
    "EligibilityReport",
    "FirstRatingEligibilityCalculator",
]
