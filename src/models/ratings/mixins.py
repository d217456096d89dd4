"""SQLAlchemy mixins for common derived-table columns."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class ComputedRowMixin:
    """Columns shared by every table the rating engine rewrites."""

    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    computed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class GameStatsMixin:
    """Game-count and score columns computed against rated opponents."""

    games_played: Mapped[int] = mapped_column(Integer, nullable=False)
    total_score: Mapped[float] = mapped_column(Float, nullable=False)
