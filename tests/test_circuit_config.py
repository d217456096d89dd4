"""Tests for TOML-based circuit config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.config import DEFAULT_DB_URL, load_circuit_config
from domain.ratings.protocol import PerformanceFormula


def test_load_circuit_config_from_file(tmp_path: Path) -> None:
    config_path = tmp_path / "circuit.toml"
    config_path.write_text(
        """
[store]
db_url = "sqlite:///other.db"

[ingestion]
extensions = ["xlsx"]
metadata_scan_rows = 12
max_tiebreaks = 2

[performance]
default_formula = "step_table"
placeholder_rating = 1400.0
linear_k = 12.0

[eligibility]
min_games = 7
rating_floor = 1100
min_combined_tournaments = 3
""".strip()
    )

    config = load_circuit_config(config_path)

    assert config.db_url == "sqlite:///other.db"
    assert config.file_path == config_path
    assert config.ingestion.extensions == (".xlsx",)
    assert config.ingestion.metadata_scan_rows == 12
    assert config.ingestion.max_tiebreaks == 2
    assert config.ingestion.fallback_round_start == 5
    assert config.ingestion.fallback_round_stop == 15
    assert config.default_formula is PerformanceFormula.STEP_TABLE
    assert config.performance.placeholder_rating == pytest.approx(1400.0)
    assert config.performance.linear_k == pytest.approx(12.0)
    assert config.performance.unrated_linear_k == pytest.approx(8.0)
    assert config.eligibility.min_games == 7
    assert config.eligibility.rating_floor == 1100
    assert config.eligibility.min_combined_tournaments == 3


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "circuit.toml"
    config_path.write_text("")

    config = load_circuit_config(config_path)

    assert config.db_url == DEFAULT_DB_URL
    assert config.default_formula is PerformanceFormula.LINEAR
    assert config.ingestion.extensions == (".xlsx", ".xls")
    assert config.ingestion.metadata_scan_rows == 20
    assert config.performance.max_rating_difference == pytest.approx(400.0)
    assert config.eligibility.min_games == 5
    assert config.eligibility.rating_floor == 1000


def test_repository_default_config_matches_defaults() -> None:
    config = load_circuit_config()
    assert config.default_formula is PerformanceFormula.LINEAR
    assert config.eligibility.min_combined_tournaments == 2


def test_missing_explicit_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_circuit_config(tmp_path / "missing.toml")


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ('[performance]\ndefault_formula = "elo"', r"\[performance\]\.default_formula must be one of: linear, step_table"),
        ("[performance]\nscale_factor = 0", r"\[performance\]\.scale_factor must be > 0"),
        ("[eligibility]\nmin_games = 0", r"\[eligibility\]\.min_games must be > 0"),
        ("[eligibility]\nmin_combined_tournaments = 1", r"\[eligibility\]\.min_combined_tournaments must be >= 2"),
        ("[ingestion]\nextensions = []", r"\[ingestion\]\.extensions must not be empty"),
        ('[store]\ndb_url = " "', r"\[store\]\.db_url must not be empty"),
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, body: str, message: str) -> None:
    config_path = tmp_path / "circuit.toml"
    config_path.write_text(body)

    with pytest.raises(ValueError, match=message):
        load_circuit_config(config_path)
