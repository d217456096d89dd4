"""Derived read views over games and tournament results.

Both views are defined once as SQLAlchemy selects. ``ensure_circuit_schema``
materializes them as SQL views; the fetchers in ``repositories.ratings.common``
select from the same expressions, so readers and the stored view never drift.
"""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import Float, case, cast, func, literal, select, union_all
from sqlalchemy.orm import aliased
from sqlalchemy.sql import CompoundSelect, Select

from models import Game, Player, Tournament, TournamentResult

PLAYER_PERFORMANCE_VIEW = "player_performance"
CIRCUIT_AGGREGATE_VIEW = "circuit_player_aggregates"

WHITE_WIN_RESULTS = ("1-0", "1-0+")
BLACK_WIN_RESULTS = ("0-1", "0-1+")
DRAW_RESULT = "1/2-1/2"


def _score_for(win_results: tuple[str, ...]):
    return case(
        (Game.result.in_(win_results), 1.0),
        (Game.result == DRAW_RESULT, 0.5),
        else_=0.0,
    )


def player_performance_select() -> CompoundSelect:
    """One row per (game, side): player, opponent ratings and the side's score."""
    white_side = select(
        Game.id.label("game_id"),
        Game.tournament_id.label("tournament_id"),
        Game.round.label("round"),
        Game.white_player_id.label("player_id"),
        Game.black_player_id.label("opponent_id"),
        literal("white").label("color"),
        Game.white_rating.label("player_rating"),
        Game.black_rating.label("opponent_rating"),
        _score_for(WHITE_WIN_RESULTS).label("score"),
    )
    black_side = select(
        Game.id.label("game_id"),
        Game.tournament_id.label("tournament_id"),
        Game.round.label("round"),
        Game.black_player_id.label("player_id"),
        Game.white_player_id.label("opponent_id"),
        literal("black").label("color"),
        Game.black_rating.label("player_rating"),
        Game.white_rating.label("opponent_rating"),
        _score_for(BLACK_WIN_RESULTS).label("score"),
    )
    return union_all(white_side, black_side)


def _latest_title_subquery():
    latest_result = aliased(TournamentResult)
    latest_tournament = aliased(Tournament)
    return (
        select(latest_result.title)
        .join(latest_tournament, latest_tournament.id == latest_result.tournament_id)
        .where(
            latest_result.player_id == Player.id,
            latest_result.title.is_not(None),
        )
        .order_by(latest_tournament.date.desc(), latest_tournament.id.desc())
        .limit(1)
        .correlate(Player)
        .scalar_subquery()
    )


def circuit_aggregate_select() -> Select:
    """Per-player totals across every processed tournament."""
    performance = player_performance_select().subquery("performance_rows")
    game_stats = (
        select(
            performance.c.player_id.label("player_id"),
            func.sum(performance.c.score).label("total_game_points"),
            func.count(performance.c.game_id).label("total_games_played"),
            func.avg(
                case(
                    (performance.c.opponent_rating > 0, performance.c.opponent_rating),
                )
            ).label("avg_opponent_rating"),
        )
        .group_by(performance.c.player_id)
        .subquery("game_stats")
    )

    return (
        select(
            Player.id.label("player_id"),
            Player.name.label("name"),
            Player.federation.label("federation"),
            _latest_title_subquery().label("title"),
            func.count(func.distinct(TournamentResult.tournament_id)).label("tournaments_played"),
            func.sum(TournamentResult.points).label("total_points"),
            func.avg(TournamentResult.points).label("avg_points_per_tournament"),
            func.avg(cast(TournamentResult.rating, Float)).label("avg_rating"),
            func.max(game_stats.c.avg_opponent_rating).label("avg_opponent_rating"),
            func.coalesce(func.max(game_stats.c.total_game_points), 0.0).label("total_game_points"),
            func.coalesce(func.max(game_stats.c.total_games_played), 0).label("total_games_played"),
        )
        .select_from(Player)
        .join(TournamentResult, TournamentResult.player_id == Player.id)
        .outerjoin(game_stats, game_stats.c.player_id == Player.id)
        .group_by(Player.id, Player.name, Player.federation)
    )


VIEW_DEFINITIONS: tuple[tuple[str, Callable[[], Select | CompoundSelect]], ...] = (
    (PLAYER_PERFORMANCE_VIEW, player_performance_select),
    (CIRCUIT_AGGREGATE_VIEW, circuit_aggregate_select),
)

__all__ = [
    "BLACK_WIN_RESULTS",
    "CIRCUIT_AGGREGATE_VIEW",
    "DRAW_RESULT",
    "PLAYER_PERFORMANCE_VIEW",
    "VIEW_DEFINITIONS",
    "WHITE_WIN_RESULTS",
    "circuit_aggregate_select",
    "player_performance_select",
]
