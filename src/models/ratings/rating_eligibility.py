"""rating_eligibility table model."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Float, ForeignKey, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.ratings.mixins import ComputedRowMixin


class RatingEligibility(ComputedRowMixin, Base):
    """First-rating eligibility, from one tournament or from combined tournaments."""

    __tablename__ = "rating_eligibility"
    __table_args__ = (
        CheckConstraint(
            "(combined_tournaments AND tournament_id IS NULL) "
            "OR (NOT combined_tournaments AND tournament_id IS NOT NULL)",
            name="ck_rating_eligibility_scope",
        ),
        Index("idx_rating_eligibility_tournament", "tournament_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int | None] = mapped_column(ForeignKey("tournaments.id"), nullable=True)
    games_vs_rated: Mapped[int] = mapped_column(Integer, nullable=False)
    score_vs_rated: Mapped[float] = mapped_column(Float, nullable=False)
    avg_opponent_rating: Mapped[float] = mapped_column(Float, nullable=False)
    estimated_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    total_tournament_points: Mapped[float | None] = mapped_column(Float, nullable=True)
    combined_tournaments: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    combined_tournament_ids: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)


Index(
    "uq_rating_eligibility_player_scope",
    RatingEligibility.player_id,
    func.coalesce(RatingEligibility.tournament_id, 0),
    RatingEligibility.combined_tournaments,
    unique=True,
)
