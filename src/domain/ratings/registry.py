"""Registry of available performance-rating formulas."""

from __future__ import annotations

from dataclasses import dataclass

from domain.ratings.performance import linear_performance_rating, table_performance_rating
from domain.ratings.protocol import FormulaFunction, PerformanceFormula


@dataclass(frozen=True)
class FormulaDescriptor:
    """One selectable performance-rating formula."""

    formula: PerformanceFormula
    description: str
    compute: FormulaFunction


_REGISTRY: dict[PerformanceFormula, FormulaDescriptor] = {}


def register(descriptor: FormulaDescriptor) -> None:
    """Register one formula descriptor."""
    if descriptor.formula in _REGISTRY:
        raise ValueError(f"Duplicate formula registration for key={descriptor.formula.value}")
    _REGISTRY[descriptor.formula] = descriptor


def get_all() -> list[FormulaDescriptor]:
    """Return all registered descriptors in deterministic order."""
    return [_REGISTRY[key] for key in sorted(_REGISTRY.keys(), key=lambda item: item.value)]


def get(formula: PerformanceFormula | str) -> FormulaDescriptor:
    """Get one registered descriptor by formula key."""
    try:
        key = PerformanceFormula(formula)
        return _REGISTRY[key]
    except (KeyError, ValueError) as exc:
        available = ", ".join(item.value for item in sorted(_REGISTRY.keys(), key=lambda item: item.value))
        raise KeyError(f"No performance formula registered for {formula!r}. Available: {available}") from exc


def get_formula(formula: PerformanceFormula | str) -> FormulaFunction:
    return get(formula).compute


def _register_defaults() -> None:
    if _REGISTRY:
        return
    register(
        FormulaDescriptor(
            formula=PerformanceFormula.LINEAR,
            description="Average opponent rating + (score % - 50) * k; k drops for unrated players.",
            compute=linear_performance_rating,
        )
    )
    register(
        FormulaDescriptor(
            formula=PerformanceFormula.STEP_TABLE,
            description="Average opponent rating + rating difference looked up by score band.",
            compute=table_performance_rating,
        )
    )


_register_defaults()

__all__ = [
    "FormulaDescriptor",
    "get",
    "get_all",
    "get_formula",
    "register",
]
