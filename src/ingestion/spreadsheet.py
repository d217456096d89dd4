"""Read the first worksheet of a tournament file into a grid of plain cells."""

from __future__ import annotations

import logging
import math
from pathlib import Path

import pandas as pd
from openpyxl import load_workbook

from domain.errors import SpreadsheetReadError

logger = logging.getLogger(__name__)

Cell = str | int | float | None
Grid = list[list[Cell]]


def _normalize_cell(value: object) -> Cell:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, (int, str)):
        return value
    # Dates and other typed cells are only ever matched as text.
    return str(value)


def _read_xlsx(path: Path) -> Grid:
    workbook = load_workbook(path, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        return [
            [_normalize_cell(value) for value in row]
            for row in sheet.iter_rows(values_only=True)
        ]
    finally:
        workbook.close()


def frame_to_grid(frame: pd.DataFrame) -> Grid:
    """Convert a header-less sheet frame to rows of plain cells; NaN becomes None."""
    values = frame.astype(object).where(pd.notna(frame), None).values.tolist()
    return [[_normalize_cell(value) for value in row] for row in values]


def _read_xls(path: Path) -> Grid:
    frame = pd.read_excel(path, sheet_name=0, header=None, engine="xlrd")
    return frame_to_grid(frame)


def read_grid(path: Path) -> Grid:
    """Return the first sheet as rows of str/int/float/None cells.

    Any failure to open or decode the workbook is raised as ``SpreadsheetReadError``
    so the caller can fail just this file.
    """
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        reader = _read_xlsx
    elif suffix == ".xls":
        reader = _read_xls
    else:
        raise SpreadsheetReadError(f"{path.name}: unsupported file type {suffix!r}")

    try:
        grid = reader(path)
    except Exception as exc:
        # openpyxl, xlrd and pandas raise a wide range of types for corrupt files.
        raise SpreadsheetReadError(f"{path.name}: cannot read workbook ({exc})") from exc
    logger.debug("Read %s rows from %s", len(grid), path.name)
    return grid


__all__ = ["Cell", "Grid", "frame_to_grid", "read_grid"]
