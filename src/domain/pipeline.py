"""Rating run: leaderboard, performance ratings and first-rating eligibility."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from domain.common import PerformanceGame, PerformanceSummary
from domain.config import CircuitConfig
from domain.errors import StoreUnavailableError
from domain.ratings.calculator import PerformanceCalculator
from domain.ratings.eligibility import EligibilityReport, FirstRatingEligibilityCalculator
from domain.ratings.leaderboard import rank_circuit
from repositories.ratings.common import (
    fetch_circuit_aggregates,
    fetch_performance_games,
    fetch_tournament_appearances,
)
from repositories.ratings.definitions import (
    LEADERBOARD_REPOSITORY,
    PERFORMANCE_RATING_REPOSITORY,
    RATING_ELIGIBILITY_REPOSITORY,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingRunSummary:
    """Row counts written by one rating run."""

    leaderboard_rows: int
    tournament_performance_rows: int
    circuit_performance_rows: int
    stale_performance_rows: int
    single_eligible: int
    combined_eligible: int
    stale_eligibility_rows: int
    default_formula: str


def _run_step(session_factory, name: str, step: Callable[[Session], dict[str, int]]) -> dict[str, int]:
    with session_factory() as session:
        try:
            counts = step(session)
            session.commit()
        except OperationalError as exc:
            session.rollback()
            raise StoreUnavailableError(f"Rating step {name} failed: {exc}") from exc
        except Exception:
            session.rollback()
            raise
    logger.info("Rating step %s committed: %s", name, counts)
    return counts


def group_games_by_player(games: Sequence[PerformanceGame]) -> dict[int, list[PerformanceGame]]:
    grouped: dict[int, list[PerformanceGame]] = defaultdict(list)
    for game in games:
        grouped[game.player_id].append(game)
    return dict(grouped)


def summarize_performance(
    calculator: PerformanceCalculator,
    games: Sequence[PerformanceGame],
) -> tuple[list[PerformanceSummary], list[PerformanceSummary]]:
    """Tournament-scoped and circuit-wide summaries for every player with a rated opponent."""
    tournament_summaries: list[PerformanceSummary] = []
    circuit_summaries: list[PerformanceSummary] = []
    for player_id, player_games in sorted(group_games_by_player(games).items()):
        by_tournament: dict[int, list[PerformanceGame]] = defaultdict(list)
        for game in player_games:
            by_tournament[game.tournament_id].append(game)
        for tournament_id in sorted(by_tournament):
            summary = calculator.summarize(
                by_tournament[tournament_id],
                player_id=player_id,
                tournament_id=tournament_id,
            )
            if summary is not None:
                tournament_summaries.append(summary)
        circuit_summary = calculator.summarize(player_games, player_id=player_id)
        if circuit_summary is not None:
            circuit_summaries.append(circuit_summary)
    return tournament_summaries, circuit_summaries


def evaluate_eligibility(
    calculator: FirstRatingEligibilityCalculator,
    session: Session,
) -> EligibilityReport:
    appearances = fetch_tournament_appearances(session)
    games_by_player = group_games_by_player(fetch_performance_games(session))
    return calculator.evaluate(appearances, games_by_player)


def compute_circuit_ratings(
    *,
    session_factory,
    config: CircuitConfig | None = None,
    echo: Callable[[str], None] | None = None,
) -> RatingRunSummary:
    """Recompute every derived table in three committed steps.

    A failure leaves the steps already committed intact.
    """
    config = config or CircuitConfig()
    performance_calculator = PerformanceCalculator(
        config.performance,
        default_formula=config.default_formula,
    )
    eligibility_calculator = FirstRatingEligibilityCalculator(config.eligibility)

    def leaderboard_step(session: Session) -> dict[str, int]:
        standings = rank_circuit(fetch_circuit_aggregates(session))
        return {"leaderboard_rows": LEADERBOARD_REPOSITORY.replace_all(session, standings)}

    def performance_step(session: Session) -> dict[str, int]:
        tournament_summaries, circuit_summaries = summarize_performance(
            performance_calculator,
            fetch_performance_games(session),
        )
        kept_ids = PERFORMANCE_RATING_REPOSITORY.upsert_many(session, tournament_summaries)
        kept_ids += PERFORMANCE_RATING_REPOSITORY.upsert_many(session, circuit_summaries)
        stale = PERFORMANCE_RATING_REPOSITORY.delete_except(session, kept_ids)
        return {
            "tournament_performance_rows": len(tournament_summaries),
            "circuit_performance_rows": len(circuit_summaries),
            "stale_performance_rows": stale,
        }

    def eligibility_step(session: Session) -> dict[str, int]:
        report = evaluate_eligibility(eligibility_calculator, session)
        kept_ids = RATING_ELIGIBILITY_REPOSITORY.upsert_many(session, report.eligible_single)
        kept_ids += RATING_ELIGIBILITY_REPOSITORY.upsert_many(session, report.eligible_combined)
        stale = RATING_ELIGIBILITY_REPOSITORY.delete_except(session, kept_ids)
        return {
            "single_eligible": len(report.eligible_single),
            "combined_eligible": len(report.eligible_combined),
            "stale_eligibility_rows": stale,
        }

    counts: dict[str, int] = {}
    for name, step in (
        ("leaderboard", leaderboard_step),
        ("performance", performance_step),
        ("eligibility", eligibility_step),
    ):
        step_counts = _run_step(session_factory, name, step)
        counts.update(step_counts)
        if echo is not None:
            echo(f"step={name} " + " ".join(f"{key}={value}" for key, value in step_counts.items()))

    summary = RatingRunSummary(default_formula=config.default_formula.value, **counts)
    if echo is not None:
        echo(
            "completed "
            f"default_formula={summary.default_formula} "
            f"leaderboard_rows={summary.leaderboard_rows} "
            f"performance_rows={summary.tournament_performance_rows + summary.circuit_performance_rows} "
            f"eligible={summary.single_eligible + summary.combined_eligible}"
        )
    return summary


__all__ = [
    "RatingRunSummary",
    "compute_circuit_ratings",
    "evaluate_eligibility",
    "group_games_by_player",
    "summarize_performance",
]
