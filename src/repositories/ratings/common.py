"""Shared read helpers feeding the rating engine from the derived views."""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.common import CircuitAggregate, PerformanceGame, TournamentAppearance
from models import Tournament, TournamentResult
from repositories.views import circuit_aggregate_select, player_performance_select


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)


def fetch_performance_games(
    session: Session,
    *,
    tournament_id: int | None = None,
    player_id: int | None = None,
) -> list[PerformanceGame]:
    """Fetch per-participant game rows in deterministic (player, tournament, round) order."""
    performance = player_performance_select().subquery("player_performance")
    statement = select(performance)
    if tournament_id is not None:
        statement = statement.where(performance.c.tournament_id == tournament_id)
    if player_id is not None:
        statement = statement.where(performance.c.player_id == player_id)
    statement = statement.order_by(
        performance.c.player_id,
        performance.c.tournament_id,
        performance.c.round,
        performance.c.game_id,
    )

    rows = session.execute(statement).mappings().all()
    return [
        PerformanceGame(
            player_id=int(row["player_id"]),
            tournament_id=int(row["tournament_id"]),
            round=int(row["round"]),
            color=str(row["color"]),
            player_rating=_optional_int(row["player_rating"]),
            opponent_rating=_optional_int(row["opponent_rating"]),
            score=float(row["score"]),
        )
        for row in rows
    ]


def fetch_circuit_aggregates(session: Session) -> list[CircuitAggregate]:
    """Fetch one aggregate row per player that has at least one tournament result."""
    aggregates = circuit_aggregate_select().subquery("circuit_aggregates")
    statement = select(aggregates).order_by(aggregates.c.player_id)

    rows = session.execute(statement).mappings().all()
    return [
        CircuitAggregate(
            player_id=int(row["player_id"]),
            name=row["name"],
            federation=row["federation"],
            title=row["title"],
            tournaments_played=int(row["tournaments_played"]),
            total_points=float(row["total_points"] or 0.0),
            avg_points_per_tournament=float(row["avg_points_per_tournament"] or 0.0),
            avg_rating=_optional_float(row["avg_rating"]),
            avg_opponent_rating=_optional_float(row["avg_opponent_rating"]),
            total_game_points=float(row["total_game_points"] or 0.0),
            total_games_played=int(row["total_games_played"] or 0),
        )
        for row in rows
    ]


def fetch_tournament_appearances(session: Session) -> list[TournamentAppearance]:
    """Fetch every tournament result with its tournament date, oldest first."""
    statement = (
        select(
            TournamentResult.player_id,
            TournamentResult.tournament_id,
            Tournament.date.label("tournament_date"),
            TournamentResult.rating,
            TournamentResult.points,
        )
        .join(Tournament, Tournament.id == TournamentResult.tournament_id)
        .order_by(TournamentResult.player_id, Tournament.date, Tournament.id)
    )

    appearances: list[TournamentAppearance] = []
    for row in session.execute(statement).mappings():
        tournament_date = row["tournament_date"]
        if not isinstance(tournament_date, date):
            raise ValueError(f"tournament_id={row['tournament_id']} has invalid date={tournament_date!r}")
        appearances.append(
            TournamentAppearance(
                player_id=int(row["player_id"]),
                tournament_id=int(row["tournament_id"]),
                tournament_date=tournament_date,
                rating=_optional_int(row["rating"]),
                points=float(row["points"]),
            )
        )
    return appearances


__all__ = [
    "fetch_circuit_aggregates",
    "fetch_performance_games",
    "fetch_tournament_appearances",
]
