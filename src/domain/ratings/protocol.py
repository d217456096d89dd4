"""Shared protocols and enums for the rating engine."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class PerformanceFormula(str, Enum):
    """Which tournament-performance-rating formula a value was produced by."""

    LINEAR = "linear"
    STEP_TABLE = "step_table"


@runtime_checkable
class FormulaFunction(Protocol):
    """Turns average opponent strength and a score percentage into a rating."""

    def __call__(
        self,
        avg_opponent_rating: float,
        score_percentage: float,
        *,
        is_unrated: bool,
        params: object,
    ) -> int: ...


__all__ = [
    "FormulaFunction",
    "PerformanceFormula",
]
