"""performance_ratings table model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.ratings.mixins import ComputedRowMixin, GameStatsMixin


class PerformanceRating(ComputedRowMixin, GameStatsMixin, Base):
    """Performance rating per player, per tournament or circuit-wide (NULL tournament)."""

    __tablename__ = "performance_ratings"
    __table_args__ = (
        CheckConstraint("games_played > 0", name="ck_performance_ratings_games_played"),
        CheckConstraint(
            "score_percentage >= 0.0 AND score_percentage <= 100.0",
            name="ck_performance_ratings_score_percentage",
        ),
        Index("idx_performance_ratings_tournament", "tournament_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int | None] = mapped_column(ForeignKey("tournaments.id"), nullable=True)
    score_percentage: Mapped[float] = mapped_column(Float, nullable=False)
    expected_score_percentage: Mapped[float] = mapped_column(Float, nullable=False)
    avg_opponent_rating: Mapped[float] = mapped_column(Float, nullable=False)
    formula: Mapped[str] = mapped_column(String(32), nullable=False)
    performance_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    linear_performance_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    table_performance_rating: Mapped[int] = mapped_column(Integer, nullable=False)


Index(
    "uq_performance_ratings_player_scope",
    PerformanceRating.player_id,
    func.coalesce(PerformanceRating.tournament_id, 0),
    unique=True,
)
