"""Turn decoded crosstable rows into players, results and games for one file."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from domain.errors import DuplicateConstraintViolation, RowDefectError
from ingestion.crosstable import ColumnLayout, decode_round_token, parse_player_row, parse_rank
from ingestion.spreadsheet import Cell
from models import Game
from repositories.tournament_repository import (
    find_game,
    insert_row,
    update_game,
    upsert_player,
    upsert_tournament_result,
)

logger = logging.getLogger(__name__)


@dataclass
class MaterializeStats:
    """Counters for one file's pass."""

    results: int = 0
    games_created: int = 0
    games_updated: int = 0
    duplicate_games: int = 0
    pending_games: int = 0
    row_defects: int = 0
    defect_ranks: list[int] = field(default_factory=list)


class TournamentMaterializer:
    """One file's processing pass.

    Opponents are referenced by rank, so the pass keeps two rank-keyed maps
    (player id and rating) that live only as long as the pass. A round cell
    whose opponent rank is not mapped yet is dropped; the same game is
    recorded again from the opponent's row further down the sheet.
    """

    def __init__(self, session: Session, tournament_id: int, *, file_name: str) -> None:
        self.session = session
        self.tournament_id = tournament_id
        self.file_name = file_name
        self.player_by_rank: dict[int, int] = {}
        self.rating_by_rank: dict[int, int | None] = {}
        self.result_ids: set[int] = set()
        self.game_ids: set[int] = set()
        self.stats = MaterializeStats()

    def materialize(
        self,
        grid: Sequence[Sequence[Cell]],
        header_index: int,
        layout: ColumnLayout,
    ) -> MaterializeStats:
        for row in grid[header_index + 1 :]:
            if not row:
                continue
            rank = parse_rank(row[0])
            if rank is None:
                continue
            try:
                player_row = parse_player_row(row, layout, rank=rank)
            except RowDefectError as exc:
                self.stats.row_defects += 1
                self.stats.defect_ranks.append(rank)
                logger.warning("Skipping row in %s: %s", self.file_name, exc)
                continue

            player = upsert_player(self.session, name=player_row.name, federation=player_row.federation)
            self.player_by_rank[rank] = player.id
            self.rating_by_rank[rank] = player_row.rating

            result = upsert_tournament_result(
                self.session,
                tournament_id=self.tournament_id,
                player_id=player.id,
                row=player_row,
            )
            self.result_ids.add(result.id)
            self.stats.results += 1

            for round_number, cell in enumerate(player_row.round_cells, start=1):
                self._record_round(rank, round_number, cell)

        return self.stats

    def _record_round(self, rank: int, round_number: int, cell: Cell) -> None:
        token = decode_round_token(cell)
        if token is None:
            return
        if token.opponent_rank == rank:
            logger.debug("%s round=%s rank=%s references itself", self.file_name, round_number, rank)
            return

        player_id = self.player_by_rank[rank]
        opponent_id = self.player_by_rank.get(token.opponent_rank)
        if opponent_id is None:
            self.stats.pending_games += 1
            logger.debug(
                "%s round=%s rank=%s opponent rank=%s not seen yet",
                self.file_name,
                round_number,
                rank,
                token.opponent_rank,
            )
            return
        if opponent_id == player_id:
            logger.debug("%s round=%s rank=%s resolves to the same player", self.file_name, round_number, rank)
            return

        player_rating = self.rating_by_rank.get(rank)
        opponent_rating = self.rating_by_rank.get(token.opponent_rank)
        if token.color == "w":
            white_id, black_id = player_id, opponent_id
            white_rating, black_rating = player_rating, opponent_rating
        else:
            white_id, black_id = opponent_id, player_id
            white_rating, black_rating = opponent_rating, player_rating

        self._record_game(
            round_number,
            white_player_id=white_id,
            black_player_id=black_id,
            white_rating=white_rating,
            black_rating=black_rating,
            result=token.result,
        )

    def _record_game(
        self,
        round_number: int,
        *,
        white_player_id: int,
        black_player_id: int,
        white_rating: int | None,
        black_rating: int | None,
        result: str,
    ) -> None:
        existing = find_game(
            self.session,
            tournament_id=self.tournament_id,
            round_number=round_number,
            player_a_id=white_player_id,
            player_b_id=black_player_id,
        )
        if existing is not None and existing.id in self.game_ids:
            # Second report of a game already recorded in this pass.
            self.stats.duplicate_games += 1
            logger.debug(
                "%s round=%s game %s-%s already recorded",
                self.file_name,
                round_number,
                white_player_id,
                black_player_id,
            )
            return
        if existing is not None:
            # Left over from an earlier ingestion of the same file.
            update_game(
                existing,
                white_player_id=white_player_id,
                black_player_id=black_player_id,
                white_rating=white_rating,
                black_rating=black_rating,
                result=result,
            )
            self.session.flush()
            self.game_ids.add(existing.id)
            self.stats.games_updated += 1
            return

        try:
            game = insert_row(
                self.session,
                Game(
                    tournament_id=self.tournament_id,
                    round=round_number,
                    white_player_id=white_player_id,
                    black_player_id=black_player_id,
                    white_rating=white_rating,
                    black_rating=black_rating,
                    result=result,
                ),
            )
        except DuplicateConstraintViolation:
            self.stats.duplicate_games += 1
            return
        self.game_ids.add(game.id)
        self.stats.games_created += 1


__all__ = ["MaterializeStats", "TournamentMaterializer"]
