"""Shared fixtures: a temporary SQLite store and an xlsx crosstable builder."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from openpyxl import Workbook

from db import create_db_engine, create_session_factory
from repositories.schema import ensure_circuit_schema

ROUND_HEADERS = ("1.Rd", "2.Rd", "3.Rd", "4.Rd", "5.Rd", "6.Rd", "7.Rd", "8.Rd", "9.Rd")


@dataclass(frozen=True)
class SheetPlayer:
    rank: object
    name: str | None
    points: object
    rating: object = None
    federation: str | None = None
    title: str | None = None
    rounds: Sequence[object] = field(default_factory=tuple)
    tiebreaks: Sequence[object] = field(default_factory=tuple)


def write_crosstable(
    path: Path,
    players: Sequence[SheetPlayer],
    *,
    rounds: int = 3,
    preamble: Sequence[str | None] = (
        "Chess-Results Server",
        "Circuit Open March 2025",
        "Location : Community Hall",
        "Time control (Standard): 60 min + 30 sec",
    ),
    trailer: Sequence[Sequence[object]] = (),
) -> Path:
    """Write a chess-results style crosstable to ``path`` with openpyxl."""
    workbook = Workbook()
    sheet = workbook.active
    for line in preamble:
        sheet.append([line])
    sheet.append([])
    header = ["Rk.", None, "Name", "FED", "Rtg", *ROUND_HEADERS[:rounds], "Pts. ", "TB1", "TB2", "TB3"]
    sheet.append(header)
    for player in players:
        round_cells = list(player.rounds) + [None] * (rounds - len(player.rounds))
        tiebreaks = list(player.tiebreaks) + [None] * (3 - len(player.tiebreaks))
        sheet.append(
            [
                player.rank,
                player.title,
                player.name,
                player.federation,
                player.rating,
                *round_cells[:rounds],
                player.points,
                *tiebreaks[:3],
            ]
        )
    for row in trailer:
        sheet.append(list(row))
    workbook.save(path)
    return path


@pytest.fixture
def engine(tmp_path: Path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'circuit.db'}")
    ensure_circuit_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def crosstable_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "crosstables"
    directory.mkdir()
    return directory


@pytest.fixture
def make_crosstable(crosstable_dir: Path) -> Callable[..., Path]:
    def _make(file_name: str, players: Sequence[SheetPlayer], **kwargs) -> Path:
        return write_crosstable(crosstable_dir / file_name, players, **kwargs)

    return _make
