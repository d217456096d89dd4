"""Tests for reading workbooks into plain cell grids."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pandas as pd
import pytest
from sqlalchemy import select

from conftest import SheetPlayer, write_crosstable
from domain.errors import SpreadsheetReadError
from ingestion.pipeline import FileStatus, ingest_directory
from ingestion.spreadsheet import frame_to_grid, read_grid
from models import Game, Tournament

NAN = float("nan")

LEGACY_ROWS = [
    ["Chess-Results Server"],
    ["Legacy Open"],
    ["Date : June 2024"],
    [],
    ["Rk.", None, "Name", "FED", "Rtg", "1.Rd", "Pts. "],
    [1.0, "FM", "Alpha", "IND", 1800.0, "2w1", 1.0],
    [2.0, None, "Bravo", "IND", 1700.0, "1b0", 0.0],
]


def test_frame_to_grid_turns_nan_into_none() -> None:
    frame = pd.DataFrame(
        [
            ["Rk.", NAN, "Name"],
            [1.0, "FM", "Alpha"],
            [NAN, None, 2.5],
        ]
    )

    assert frame_to_grid(frame) == [
        ["Rk.", None, "Name"],
        [1.0, "FM", "Alpha"],
        [None, None, 2.5],
    ]


def test_read_grid_xlsx_keeps_cell_types(tmp_path: Path) -> None:
    path = write_crosstable(
        tmp_path / "open.xlsx",
        [SheetPlayer(rank=1, name="Alpha", rating=1800, points=1.5, rounds=["2w1"])],
        rounds=1,
    )

    grid = read_grid(path)

    header_index = next(index for index, row in enumerate(grid) if row and row[0] == "Rk.")
    assert grid[header_index + 1][:6] == [1, None, "Alpha", None, 1800, "2w1"]
    assert grid[header_index + 1][6] == pytest.approx(1.5)


def test_read_grid_xls_goes_through_the_xlrd_engine(tmp_path: Path, monkeypatch) -> None:
    calls: list[dict] = []

    def fake_read_excel(path, **kwargs):
        calls.append(kwargs)
        return pd.DataFrame(LEGACY_ROWS)

    monkeypatch.setattr(pd, "read_excel", fake_read_excel)
    path = tmp_path / "legacy.xls"
    path.write_bytes(b"")

    grid = read_grid(path)

    assert calls == [{"sheet_name": 0, "header": None, "engine": "xlrd"}]
    assert grid[4][:3] == ["Rk.", None, "Name"]
    assert grid[3] == [None] * 7
    assert grid[6][1] is None


def test_legacy_xls_is_ingested(session_factory, crosstable_dir: Path, monkeypatch) -> None:
    monkeypatch.setattr(pd, "read_excel", lambda path, **kwargs: pd.DataFrame(LEGACY_ROWS))
    (crosstable_dir / "legacy.xls").write_bytes(b"")

    outcomes = ingest_directory(crosstable_dir, session_factory=session_factory)

    assert [outcome.status for outcome in outcomes] == [FileStatus.PROCESSED]
    with session_factory() as session:
        tournament = session.execute(select(Tournament)).scalar_one()
        assert tournament.name == "Legacy Open"
        assert tournament.date == date(2024, 6, 1)
        game = session.execute(select(Game)).scalar_one()
        assert (game.white_rating, game.black_rating, game.result) == (1800, 1700, "1-0")


@pytest.mark.parametrize(
    ("file_name", "payload"),
    [
        ("broken.xlsx", b"not a workbook"),
        ("broken.xls", b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1 truncated"),
        ("empty.xls", b""),
    ],
)
def test_read_grid_wraps_decode_failures(tmp_path: Path, file_name: str, payload: bytes) -> None:
    path = tmp_path / file_name
    path.write_bytes(payload)

    with pytest.raises(SpreadsheetReadError, match=file_name):
        read_grid(path)


def test_read_grid_rejects_unknown_suffix(tmp_path: Path) -> None:
    path = tmp_path / "standings.csv"
    path.write_text("Rk.,Name\n")

    with pytest.raises(SpreadsheetReadError, match="unsupported file type"):
        read_grid(path)
