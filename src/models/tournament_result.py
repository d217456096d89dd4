"""tournament_results table model."""

from __future__ import annotations

from sqlalchemy import Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class TournamentResult(Base):
    """Final standing of one player in one tournament."""

    __tablename__ = "tournament_results"
    __table_args__ = (
        UniqueConstraint("tournament_id", "player_id", name="uq_tournament_results_tournament_player"),
        Index("idx_tournament_results_player", "player_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    points: Mapped[float] = mapped_column(Float, nullable=False)
    title: Mapped[str | None] = mapped_column(String(16), nullable=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tb1: Mapped[float | None] = mapped_column(Float, nullable=True)
    tb2: Mapped[float | None] = mapped_column(Float, nullable=True)
    tb3: Mapped[float | None] = mapped_column(Float, nullable=True)
