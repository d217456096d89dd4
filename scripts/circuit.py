#!/usr/bin/env python3
"""Command surface for crosstable ingestion and circuit rating runs."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import create_session_factory, open_store
from domain.config import CircuitConfig, load_circuit_config
from domain.errors import StoreUnavailableError
from domain.pipeline import compute_circuit_ratings
from domain.ratings.registry import get_all
from domain.utils import setup_logging
from ingestion.pipeline import FileStatus, ingest_directory
from repositories.inspection import (
    category_statistics,
    eligibility_summary,
    fetch_tournament_summaries,
    inspect_tournament,
)
from repositories.ratings.common import fetch_circuit_aggregates
from repositories.schema import ensure_circuit_schema
from repositories.tournament_repository import count_store_rows

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Chess circuit ingestion and rating commands.",
)

DbUrlOption = Annotated[
    str | None,
    typer.Option("--db-url", help="Database URL. Defaults to [store].db_url from the config file."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Optional circuit TOML file (defaults to configs/circuit.toml)."),
]
ForceOption = Annotated[
    bool,
    typer.Option("--force", help="Reprocess files that were already ingested."),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug messages.")] = False,
) -> None:
    setup_logging(None, logging.DEBUG if verbose else logging.INFO)


def _load_config(config_path: Path | None) -> CircuitConfig:
    try:
        return load_circuit_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


@contextmanager
def _store(db_url: str) -> Iterator:
    """Open the store, create the schema and always dispose of the engine."""
    try:
        engine = open_store(db_url)
    except StoreUnavailableError as exc:
        typer.echo(f"error={exc}", err=True)
        raise typer.Exit(code=1) from exc
    try:
        ensure_circuit_schema(engine)
        yield create_session_factory(engine)
    except StoreUnavailableError as exc:
        typer.echo(f"error={exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        engine.dispose()


def _process(directory: Path, *, force: bool, config: CircuitConfig, session_factory) -> None:
    try:
        outcomes = ingest_directory(
            directory,
            session_factory=session_factory,
            config=config,
            force=force,
            echo=typer.echo,
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise typer.BadParameter(str(exc), param_hint="DIRECTORY") from exc

    counts = {status: 0 for status in FileStatus}
    for outcome in outcomes:
        counts[outcome.status] += 1
    typer.echo(
        "ingestion completed "
        + " ".join(f"{status.value}={count}" for status, count in counts.items())
    )


def _ratings(config: CircuitConfig, session_factory) -> None:
    compute_circuit_ratings(session_factory=session_factory, config=config, echo=typer.echo)


@app.command()
def process(
    directory: Annotated[Path, typer.Argument(help="Directory containing .xlsx/.xls crosstables.")],
    force: ForceOption = False,
    db_url: DbUrlOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Ingest every tournament file in DIRECTORY."""
    config = _load_config(config_path)
    with _store(db_url or config.db_url) as session_factory:
        _process(directory, force=force, config=config, session_factory=session_factory)


@app.command()
def ratings(
    db_url: DbUrlOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Recompute the leaderboard, performance ratings and eligibility."""
    config = _load_config(config_path)
    with _store(db_url or config.db_url) as session_factory:
        _ratings(config, session_factory)


@app.command()
def init(
    directory: Annotated[Path, typer.Argument(help="Directory containing .xlsx/.xls crosstables.")],
    force: ForceOption = False,
    db_url: DbUrlOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Ingest DIRECTORY, then run the rating computations."""
    config = _load_config(config_path)
    with _store(db_url or config.db_url) as session_factory:
        _process(directory, force=force, config=config, session_factory=session_factory)
        _ratings(config, session_factory)


@app.command()
def inspect(
    tournament: Annotated[str, typer.Argument(help="Tournament id or part of its name.")],
    db_url: DbUrlOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Print the stored standings, games and performance ratings of one tournament."""
    config = _load_config(config_path)
    with _store(db_url or config.db_url) as session_factory:
        with session_factory() as session:
            inspection = inspect_tournament(session, tournament)

    if inspection is None:
        typer.echo(f"no tournament matches {tournament!r}")
        raise typer.Exit(code=1)

    summary = inspection.summary
    typer.echo(
        f"tournament_id={summary.tournament_id} name={summary.name!r} date={summary.date.isoformat()} "
        f"rounds={summary.rounds} players={summary.player_count} file={summary.file_name}"
    )
    for standing in inspection.standings:
        typer.echo(
            f"rank={standing.rank} name={standing.name!r} title={standing.title or '-'} "
            f"fed={standing.federation or '-'} rating={standing.rating or '-'} points={standing.points:g}"
        )
    for game in inspection.games:
        typer.echo(
            f"round={game.round} white={game.white!r} black={game.black!r} result={game.result}"
        )
    typer.echo(f"performance_rows={len(inspection.performance_rows)}")
    for rating in inspection.performance_ratings:
        typer.echo(
            f"player_id={rating.player_id} games={rating.games_played} "
            f"score_pct={rating.score_percentage:.1f} tpr={rating.performance_rating} "
            f"linear={rating.linear_performance_rating} step_table={rating.table_performance_rating}"
        )


@app.command()
def summary(
    db_url: DbUrlOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Print tournament summaries, category statistics and eligibility counts."""
    config = _load_config(config_path)
    with _store(db_url or config.db_url) as session_factory:
        with session_factory() as session:
            counts = count_store_rows(session)
            tournaments = fetch_tournament_summaries(session)
            statistics = category_statistics(fetch_circuit_aggregates(session))
            eligible = eligibility_summary(session)

    typer.echo(" ".join(f"{label}={count}" for label, count in counts.items()))
    for item in tournaments:
        typer.echo(
            f"tournament_id={item.tournament_id} date={item.date.isoformat()} "
            f"players={item.player_count} rounds={item.rounds} name={item.name!r}"
        )
    for stat in statistics.by_title:
        typer.echo(f"title={stat.category} players={stat.player_count} avg_points={stat.avg_total_points:.2f}")
    for stat in statistics.by_federation:
        typer.echo(f"fed={stat.category} players={stat.player_count} avg_points={stat.avg_total_points:.2f}")
    for band, members in statistics.top_by_rating_band.items():
        names = ", ".join(f"{member.name} ({member.total_points:g})" for member in members)
        typer.echo(f"band={band!r} top={names}")
    average = "-" if eligible.avg_estimated_rating is None else f"{eligible.avg_estimated_rating:.0f}"
    typer.echo(
        f"eligible_single={eligible.single_count} eligible_combined={eligible.combined_count} "
        f"avg_estimated_rating={average}"
    )


@app.command()
def list_formulas() -> None:
    """Print the registered performance-rating formulas."""
    for descriptor in get_all():
        typer.echo(f"{descriptor.formula.value}: {descriptor.description}")


if __name__ == "__main__":
    app()
