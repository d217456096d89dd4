"""leaderboard table model."""

from __future__ import annotations

from sqlalchemy import Float, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.ratings.mixins import ComputedRowMixin


class LeaderboardEntry(ComputedRowMixin, Base):
    """Snapshot of the circuit standings, rewritten on every rating run."""

    __tablename__ = "leaderboard"
    __table_args__ = (
        UniqueConstraint("player_id", name="uq_leaderboard_player"),
        UniqueConstraint("rank", name="uq_leaderboard_rank"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    tournaments_played: Mapped[int] = mapped_column(Integer, nullable=False)
    total_points: Mapped[float] = mapped_column(Float, nullable=False)
    avg_points_per_tournament: Mapped[float] = mapped_column(Float, nullable=False)
    avg_rating: Mapped[float] = mapped_column(Float, nullable=False)
    avg_opponent_rating: Mapped[float] = mapped_column(Float, nullable=False)
    total_game_points: Mapped[float] = mapped_column(Float, nullable=False)
    total_games_played: Mapped[int] = mapped_column(Integer, nullable=False)
    win_percentage: Mapped[float] = mapped_column(Float, nullable=False)
