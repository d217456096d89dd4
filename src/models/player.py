"""players table model."""

from __future__ import annotations

from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Player(Base):
    """A player identified by (name, federation)."""

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    fide_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    federation: Mapped[str | None] = mapped_column(String(8), nullable=True)


# NULL federations collide with each other, so the key coalesces them.
Index(
    "uq_players_name_federation",
    Player.name,
    func.coalesce(Player.federation, ""),
    unique=True,
)
