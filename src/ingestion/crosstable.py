"""Locate the crosstable in a sheet grid and decode its metadata and rows.

Header and column resolution are structural and fail loudly. Metadata
extraction (name, date, location, time control) is best effort and only ever
returns optional values.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from domain.common import PlayerRow, TournamentInfo
from domain.config import IngestionParameters
from domain.errors import MalformedInputError, RowDefectError
from ingestion.spreadsheet import Cell

HEADER_TOKEN = "Rk."
NAME_HEADER = "Name"
RATING_HEADER = "Rtg"
FEDERATION_HEADER = "FED"
POINTS_MARKER = "Pts"
TIEBREAK_MARKER = "TB"
ROUND_MARKER = ".Rd"
LOCATION_MARKER = "Location"
TIME_CONTROL_MARKER = "Time control"
TITLE_COLUMN = 1
NAME_ROW_INDEX = 1

MONTHS = {
    "January": 1,
    "February": 2,
    "March": 3,
    "April": 4,
    "May": 5,
    "June": 6,
    "July": 7,
    "August": 8,
    "September": 9,
    "October": 10,
    "November": 11,
    "December": 12,
}
DATE_PATTERN = re.compile(r"\b(" + "|".join(MONTHS) + r")\s+(\d{4})\b")
RANK_PATTERN = re.compile(r"^\s*(\d+)")
NUMERIC_HEADER_PATTERN = re.compile(r"^\s*[-+]?\d+")
ROUND_TOKEN_PATTERN = re.compile(r"\s*(\d+)([bw])([01½+])")

# (color, outcome) -> result string from white's point of view.
OUTCOME_TABLE: dict[tuple[str, str], str] = {
    ("w", "1"): "1-0",
    ("w", "0"): "0-1",
    ("w", "½"): "1/2-1/2",
    ("w", "+"): "1-0+",
    ("b", "1"): "0-1",
    ("b", "0"): "1-0",
    ("b", "½"): "1/2-1/2",
    ("b", "+"): "0-1+",
}


@dataclass(frozen=True)
class ColumnLayout:
    """Column indexes resolved from the header row by header text."""

    name: int | None
    rating: int | None
    federation: int | None
    points: int | None
    tiebreaks: tuple[int, ...]
    rounds: tuple[int, ...]


@dataclass(frozen=True)
class RoundToken:
    opponent_rank: int
    color: str
    outcome: str

    @property
    def result(self) -> str:
        return OUTCOME_TABLE[(self.color, self.outcome)]


def _text(cell: Cell) -> str | None:
    if cell is None:
        return None
    value = str(cell).strip()
    return value or None


def _cell(row: Sequence[Cell], index: int | None) -> Cell:
    if index is None or index < 0 or index >= len(row):
        return None
    return row[index]


def locate_header(grid: Sequence[Sequence[Cell]]) -> int:
    """Index of the first row whose first cell is the rank header."""
    for index, row in enumerate(grid):
        if row and isinstance(row[0], str) and row[0].strip() == HEADER_TOKEN:
            return index
    raise MalformedInputError(f"Could not find the crosstable header row ({HEADER_TOKEN!r})")


def resolve_columns(header: Sequence[Cell], *, max_tiebreaks: int = 3) -> ColumnLayout:
    name = rating = federation = points = None
    tiebreaks: list[int] = []
    rounds: list[int] = []
    for index, cell in enumerate(header):
        label = _text(cell)
        if label is None:
            continue
        if label == NAME_HEADER and name is None:
            name = index
        elif label == RATING_HEADER and rating is None:
            rating = index
        elif label == FEDERATION_HEADER and federation is None:
            federation = index
        if POINTS_MARKER in label and points is None:
            points = index
        if TIEBREAK_MARKER in label:
            tiebreaks.append(index)
        if ROUND_MARKER in label:
            rounds.append(index)
    return ColumnLayout(
        name=name,
        rating=rating,
        federation=federation,
        points=points,
        tiebreaks=tuple(tiebreaks[:max_tiebreaks]),
        rounds=tuple(rounds),
    )


def count_rounds(
    header: Sequence[Cell],
    layout: ColumnLayout,
    params: IngestionParameters | None = None,
) -> int:
    """Round columns by header text, else numeric headers inside the fallback window."""
    if layout.rounds:
        return len(layout.rounds)
    params = params or IngestionParameters()
    rounds = 0
    for index in range(params.fallback_round_start, params.fallback_round_stop):
        label = _text(_cell(header, index))
        if label is not None and NUMERIC_HEADER_PATTERN.match(label):
            rounds += 1
    return rounds


def parse_month_date(text: str) -> date | None:
    match = DATE_PATTERN.search(text)
    if match is None:
        return None
    return date(int(match.group(2)), MONTHS[match.group(1)], 1)


def _after_colon(text: str) -> str | None:
    if ":" not in text:
        return None
    return text.split(":", 1)[1].strip() or None


def name_from_file(file_name: str) -> str:
    return Path(file_name).stem.replace("_", " ")


def extract_metadata(
    grid: Sequence[Sequence[Cell]],
    file_name: str,
    *,
    header: Sequence[Cell],
    layout: ColumnLayout,
    params: IngestionParameters | None = None,
    today: date | None = None,
) -> TournamentInfo:
    """Tournament name, month date, location, time control and round count."""
    params = params or IngestionParameters()
    name: str | None = None
    tournament_date: date | None = None
    location: str | None = None
    time_control: str | None = None

    for index, row in enumerate(grid[: params.metadata_scan_rows]):
        text = _text(row[0]) if row else None
        if text is None:
            continue
        if index == NAME_ROW_INDEX:
            name = text
        # A later month/year line (e.g. the end date) wins.
        tournament_date = parse_month_date(text) or tournament_date
        if location is None and LOCATION_MARKER in text:
            location = _after_colon(text)
        if time_control is None and TIME_CONTROL_MARKER in text:
            time_control = _after_colon(text)

    return TournamentInfo(
        name=name or name_from_file(file_name),
        date=tournament_date or today or date.today(),
        rounds=count_rounds(header, layout, params),
        file_name=file_name,
        location=location,
        time_control=time_control,
    )


def parse_rank(cell: Cell) -> int | None:
    """Rank of a player row, or None for section breaks and blank rows."""
    if cell is None or isinstance(cell, bool):
        return None
    if isinstance(cell, int):
        return cell
    if isinstance(cell, float):
        return int(cell)
    match = RANK_PATTERN.match(str(cell))
    return int(match.group(1)) if match else None


def _number(cell: Cell) -> float | None:
    if cell is None:
        return None
    if isinstance(cell, (int, float)):
        return float(cell)
    text = str(cell).strip().replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return None


def _rating(cell: Cell) -> int | None:
    value = _number(cell)
    if value is None or value <= 0:
        return None
    return int(value)


def parse_player_row(row: Sequence[Cell], layout: ColumnLayout, *, rank: int) -> PlayerRow:
    """Decode one qualifying player row; raises RowDefectError for a missing name or points."""
    name = _text(_cell(row, layout.name))
    if name is None:
        raise RowDefectError(f"rank={rank} has no player name", rank=rank)
    points = _number(_cell(row, layout.points))
    if points is None:
        raise RowDefectError(f"rank={rank} name={name!r} has no points", rank=rank)

    title = None if layout.name == TITLE_COLUMN else _text(_cell(row, TITLE_COLUMN))
    return PlayerRow(
        rank=rank,
        name=name,
        points=points,
        title=title,
        rating=_rating(_cell(row, layout.rating)),
        federation=_text(_cell(row, layout.federation)),
        tiebreaks=tuple(_number(_cell(row, index)) for index in layout.tiebreaks),
        round_cells=tuple(_cell(row, index) for index in layout.rounds),
    )


def decode_round_token(cell: Cell) -> RoundToken | None:
    """Decode ``<opponent-rank><w|b><1|0|½|+>``; anything else (byes, blanks) is None."""
    if not isinstance(cell, str):
        return None
    match = ROUND_TOKEN_PATTERN.search(cell)
    if match is None:
        return None
    return RoundToken(opponent_rank=int(match.group(1)), color=match.group(2), outcome=match.group(3))


def game_result(color: str, outcome: str) -> str:
    return OUTCOME_TABLE[(color, outcome)]


__all__ = [
    "HEADER_TOKEN",
    "OUTCOME_TABLE",
    "ColumnLayout",
    "RoundToken",
    "count_rounds",
    "decode_round_token",
    "extract_metadata",
    "game_result",
    "locate_header",
    "name_from_file",
    "parse_month_date",
    "parse_player_row",
    "parse_rank",
    "resolve_columns",
]
