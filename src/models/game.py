"""games table model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, case
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base

GAME_RESULTS = ("1-0", "0-1", "1/2-1/2", "1-0+", "0-1+")


class Game(Base):
    """One game of one round, stored once regardless of which row reported it."""

    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint(
            "result IN (" + ", ".join(f"'{result}'" for result in GAME_RESULTS) + ")",
            name="ck_games_result",
        ),
        CheckConstraint("white_player_id <> black_player_id", name="ck_games_distinct_players"),
        Index("idx_games_tournament_round", "tournament_id", "round"),
        Index("idx_games_white", "white_player_id"),
        Index("idx_games_black", "black_player_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    round: Mapped[int] = mapped_column(Integer, nullable=False)
    white_player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    black_player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    white_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    black_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    result: Mapped[str] = mapped_column(String(8), nullable=False)


# One row per (tournament, round, unordered pair): the pair is normalized low/high.
Index(
    "uq_games_tournament_round_pair",
    Game.tournament_id,
    Game.round,
    case(
        (Game.white_player_id < Game.black_player_id, Game.white_player_id),
        else_=Game.black_player_id,
    ),
    case(
        (Game.white_player_id < Game.black_player_id, Game.black_player_id),
        else_=Game.white_player_id,
    ),
    unique=True,
)
