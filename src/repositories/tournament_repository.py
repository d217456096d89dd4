"""Persistence helpers for tournaments, players, results and games."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import TypeVar

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.common import PlayerRow, TournamentInfo
from domain.errors import DuplicateConstraintViolation
from models import Game, Player, Tournament, TournamentResult

RowT = TypeVar("RowT")


def insert_row(session: Session, instance: RowT) -> RowT:
    """Insert one ORM row inside a savepoint.

    Raises ``DuplicateConstraintViolation`` when a uniqueness invariant rejects
    the row; the surrounding transaction stays usable.
    """
    try:
        with session.begin_nested():
            session.add(instance)
            session.flush()
    except IntegrityError as exc:
        raise DuplicateConstraintViolation(str(exc.orig)) from exc
    return instance


def get_tournament_by_file_name(session: Session, file_name: str) -> Tournament | None:
    return session.execute(
        select(Tournament).where(Tournament.file_name == file_name)
    ).scalar_one_or_none()


def upsert_tournament(session: Session, info: TournamentInfo) -> tuple[Tournament, bool]:
    """Create the tournament for a file, or refresh the existing row's metadata.

    Returns the row and whether it already existed.
    """
    tournament = get_tournament_by_file_name(session, info.file_name)
    existed = tournament is not None
    if tournament is None:
        tournament = Tournament(
            name=info.name,
            date=info.date,
            location=info.location,
            time_control=info.time_control,
            rounds=info.rounds,
            file_name=info.file_name,
        )
        session.add(tournament)
    else:
        tournament.name = info.name
        tournament.date = info.date
        tournament.location = info.location
        tournament.time_control = info.time_control
        tournament.rounds = info.rounds
        tournament.processed_at = datetime.now(UTC).replace(tzinfo=None)
    session.flush()
    return tournament, existed


def _find_player(session: Session, name: str, federation: str | None) -> Player | None:
    return session.execute(
        select(Player).where(
            Player.name == name,
            func.coalesce(Player.federation, "") == (federation or ""),
        )
    ).scalar_one_or_none()


def upsert_player(session: Session, *, name: str, federation: str | None) -> Player:
    """Return the player keyed by (name, federation), creating it on first sight."""
    player = _find_player(session, name, federation)
    if player is not None:
        return player
    try:
        return insert_row(session, Player(name=name, federation=federation))
    except DuplicateConstraintViolation:
        player = _find_player(session, name, federation)
        if player is None:
            raise
        return player


def upsert_tournament_result(
    session: Session,
    *,
    tournament_id: int,
    player_id: int,
    row: PlayerRow,
) -> TournamentResult:
    """Insert the player's standing; on a duplicate (tournament, player) update it in place."""
    tiebreaks = tuple(row.tiebreaks) + (None, None, None)
    values = {
        "rank": row.rank,
        "points": row.points,
        "title": row.title,
        "rating": row.rating,
        "tb1": tiebreaks[0],
        "tb2": tiebreaks[1],
        "tb3": tiebreaks[2],
    }
    try:
        return insert_row(
            session,
            TournamentResult(tournament_id=tournament_id, player_id=player_id, **values),
        )
    except DuplicateConstraintViolation:
        result = session.execute(
            select(TournamentResult).where(
                TournamentResult.tournament_id == tournament_id,
                TournamentResult.player_id == player_id,
            )
        ).scalar_one()
        for column_name, value in values.items():
            setattr(result, column_name, value)
        session.flush()
        return result


def find_game(
    session: Session,
    *,
    tournament_id: int,
    round_number: int,
    player_a_id: int,
    player_b_id: int,
) -> Game | None:
    """Find the game for an unordered pair in one round."""
    return session.execute(
        select(Game).where(
            Game.tournament_id == tournament_id,
            Game.round == round_number,
            or_(
                and_(Game.white_player_id == player_a_id, Game.black_player_id == player_b_id),
                and_(Game.white_player_id == player_b_id, Game.black_player_id == player_a_id),
            ),
        )
    ).scalar_one_or_none()


def update_game(
    game: Game,
    *,
    white_player_id: int,
    black_player_id: int,
    white_rating: int | None,
    black_rating: int | None,
    result: str,
) -> Game:
    game.white_player_id = white_player_id
    game.black_player_id = black_player_id
    game.white_rating = white_rating
    game.black_rating = black_rating
    game.result = result
    return game


def prune_tournament(
    session: Session,
    tournament_id: int,
    *,
    keep_result_ids: Iterable[int],
    keep_game_ids: Iterable[int],
) -> tuple[int, int]:
    """Delete results and games of a tournament that the latest pass did not produce."""
    result_ids = list(keep_result_ids)
    game_ids = list(keep_game_ids)

    game_statement = delete(Game).where(Game.tournament_id == tournament_id)
    if game_ids:
        game_statement = game_statement.where(Game.id.not_in(game_ids))
    deleted_games = session.execute(game_statement).rowcount or 0

    result_statement = delete(TournamentResult).where(TournamentResult.tournament_id == tournament_id)
    if result_ids:
        result_statement = result_statement.where(TournamentResult.id.not_in(result_ids))
    deleted_results = session.execute(result_statement).rowcount or 0

    return int(deleted_results), int(deleted_games)


def count_store_rows(session: Session) -> dict[str, int]:
    """Row counts of the base tables."""
    counts: dict[str, int] = {}
    for label, model in (
        ("tournaments", Tournament),
        ("players", Player),
        ("tournament_results", TournamentResult),
        ("games", Game),
    ):
        counts[label] = int(session.scalar(select(func.count()).select_from(model)) or 0)
    return counts


__all__ = [
    "count_store_rows",
    "find_game",
    "get_tournament_by_file_name",
    "insert_row",
    "prune_tournament",
    "update_game",
    "upsert_player",
    "upsert_tournament",
    "upsert_tournament_result",
]
