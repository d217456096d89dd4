"""Exception taxonomy for ingestion and the relational store."""

from __future__ import annotations


class CircuitError(Exception):
    """Base class for all circuit errors."""


class IngestionError(CircuitError):
    """A single tournament file could not be ingested; the batch continues."""


class MalformedInputError(IngestionError):
    """The crosstable header row could not be located."""


class SpreadsheetReadError(IngestionError):
    """The workbook could not be opened or decoded."""


class RowDefectError(CircuitError):
    """A player row is missing a required field; only that row is skipped."""

    def __init__(self, message: str, *, rank: int | None = None) -> None:
        super().__init__(message)
        self.rank = rank


class DuplicateConstraintViolation(CircuitError):
    """An insert hit a uniqueness invariant; callers convert it to an update."""


class StoreUnavailableError(CircuitError):
    """The relational store cannot be opened or queried."""


__all__ = [
    "CircuitError",
    "DuplicateConstraintViolation",
    "IngestionError",
    "MalformedInputError",
    "RowDefectError",
    "SpreadsheetReadError",
    "StoreUnavailableError",
]
