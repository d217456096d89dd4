"""Load circuit configuration from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import tomllib

from domain.ratings.eligibility import EligibilityParameters
from domain.ratings.performance import PerformanceParameters
from domain.ratings.protocol import PerformanceFormula

DEFAULT_DB_URL = "sqlite:///keshmat_chess_circuit.db"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "circuit.toml"


@dataclass(frozen=True)
class IngestionParameters:
    extensions: tuple[str, ...] = (".xlsx", ".xls")
    metadata_scan_rows: int = 20
    max_tiebreaks: int = 3
    fallback_round_start: int = 5
    fallback_round_stop: int = 15


@dataclass(frozen=True)
class CircuitConfig:
    """Everything the ingestion and rating entry points need."""

    db_url: str = DEFAULT_DB_URL
    default_formula: PerformanceFormula = PerformanceFormula.LINEAR
    ingestion: IngestionParameters = field(default_factory=IngestionParameters)
    performance: PerformanceParameters = field(default_factory=PerformanceParameters)
    eligibility: EligibilityParameters = field(default_factory=EligibilityParameters)
    file_path: Path | None = None


def load_circuit_config(file_path: Path | None = None) -> CircuitConfig:
    """Load and validate a circuit TOML file; a missing default file yields defaults."""
    if file_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return CircuitConfig()
        file_path = DEFAULT_CONFIG_PATH
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    if not file_path.is_file():
        raise ValueError(f"Config path is not a file: {file_path}")

    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return _parse_circuit_config(raw, file_path)


def _parse_circuit_config(raw: dict[str, Any], file_path: Path) -> CircuitConfig:
    store_raw = raw.get("store", {})
    ingestion_raw = raw.get("ingestion", {})
    performance_raw = raw.get("performance", {})
    eligibility_raw = raw.get("eligibility", {})

    db_url = str(store_raw.get("db_url", DEFAULT_DB_URL)).strip()
    if not db_url:
        raise ValueError(f"{file_path}: [store].db_url must not be empty")

    formula_value = str(performance_raw.get("default_formula", PerformanceFormula.LINEAR.value))
    try:
        default_formula = PerformanceFormula(formula_value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(formula.value for formula in PerformanceFormula)
        raise ValueError(
            f"{file_path}: [performance].default_formula must be one of: {choices}"
        ) from exc

    extensions = tuple(
        str(extension).lower() if str(extension).startswith(".") else f".{str(extension).lower()}"
        for extension in ingestion_raw.get("extensions", (".xlsx", ".xls"))
    )
    ingestion = IngestionParameters(
        extensions=extensions,
        metadata_scan_rows=int(ingestion_raw.get("metadata_scan_rows", 20)),
        max_tiebreaks=int(ingestion_raw.get("max_tiebreaks", 3)),
        fallback_round_start=int(ingestion_raw.get("fallback_round_start", 5)),
        fallback_round_stop=int(ingestion_raw.get("fallback_round_stop", 15)),
    )
    performance = PerformanceParameters(
        placeholder_rating=float(performance_raw.get("placeholder_rating", 1500.0)),
        max_rating_difference=float(performance_raw.get("max_rating_difference", 400.0)),
        scale_factor=float(performance_raw.get("scale_factor", 400.0)),
        linear_k=float(performance_raw.get("linear_k", 10.0)),
        unrated_linear_k=float(performance_raw.get("unrated_linear_k", 8.0)),
    )
    eligibility = EligibilityParameters(
        min_games=int(eligibility_raw.get("min_games", 5)),
        rating_floor=int(eligibility_raw.get("rating_floor", 1000)),
        min_combined_tournaments=int(eligibility_raw.get("min_combined_tournaments", 2)),
    )
    _validate(
        file_path=file_path,
        ingestion=ingestion,
        performance=performance,
        eligibility=eligibility,
    )

    return CircuitConfig(
        db_url=db_url,
        default_formula=default_formula,
        ingestion=ingestion,
        performance=performance,
        eligibility=eligibility,
        file_path=file_path,
    )


def _validate(
    *,
    file_path: Path,
    ingestion: IngestionParameters,
    performance: PerformanceParameters,
    eligibility: EligibilityParameters,
) -> None:
    if not ingestion.extensions:
        raise ValueError(f"{file_path}: [ingestion].extensions must not be empty")
    if ingestion.metadata_scan_rows <= 0:
        raise ValueError(f"{file_path}: [ingestion].metadata_scan_rows must be > 0")
    if ingestion.max_tiebreaks < 0:
        raise ValueError(f"{file_path}: [ingestion].max_tiebreaks must be >= 0")
    if ingestion.fallback_round_start < 0:
        raise ValueError(f"{file_path}: [ingestion].fallback_round_start must be >= 0")
    if ingestion.fallback_round_stop < ingestion.fallback_round_start:
        raise ValueError(
            f"{file_path}: [ingestion].fallback_round_stop must be >= fallback_round_start"
        )
    if performance.placeholder_rating <= 0.0:
        raise ValueError(f"{file_path}: [performance].placeholder_rating must be > 0")
    if performance.max_rating_difference <= 0.0:
        raise ValueError(f"{file_path}: [performance].max_rating_difference must be > 0")
    if performance.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [performance].scale_factor must be > 0")
    if performance.linear_k <= 0.0:
        raise ValueError(f"{file_path}: [performance].linear_k must be > 0")
    if performance.unrated_linear_k <= 0.0:
        raise ValueError(f"{file_path}: [performance].unrated_linear_k must be > 0")
    if eligibility.min_games <= 0:
        raise ValueError(f"{file_path}: [eligibility].min_games must be > 0")
    if eligibility.rating_floor < 0:
        raise ValueError(f"{file_path}: [eligibility].rating_floor must be >= 0")
    if eligibility.min_combined_tournaments < 2:
        raise ValueError(f"{file_path}: [eligibility].min_combined_tournaments must be >= 2")


__all__ = [
    "CircuitConfig",
    "DEFAULT_DB_URL",
    "IngestionParameters",
    "load_circuit_config",
]
