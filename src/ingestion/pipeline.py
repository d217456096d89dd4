"""Batch ingestion of a directory of tournament files."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from domain.config import CircuitConfig, IngestionParameters
from domain.errors import IngestionError, StoreUnavailableError
from ingestion.crosstable import extract_metadata, locate_header, resolve_columns
from ingestion.materializer import MaterializeStats, TournamentMaterializer
from ingestion.spreadsheet import read_grid
from repositories.tournament_repository import (
    get_tournament_by_file_name,
    prune_tournament,
    upsert_tournament,
)

logger = logging.getLogger(__name__)


class FileStatus(str, Enum):
    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class FileOutcome:
    """Outcome for one tournament file."""

    file_name: str
    status: FileStatus
    message: str | None = None
    tournament_id: int | None = None
    stats: MaterializeStats | None = None
    pruned_results: int = 0
    pruned_games: int = 0


def list_tournament_files(directory: Path, extensions: Sequence[str]) -> list[Path]:
    """Tournament files in listing order (sorted by name)."""
    if not directory.exists():
        raise FileNotFoundError(f"Input directory not found: {directory}")
    if not directory.is_dir():
        raise NotADirectoryError(f"Input path is not a directory: {directory}")
    suffixes = {extension.lower() for extension in extensions}
    return sorted(
        (path for path in directory.iterdir() if path.is_file() and path.suffix.lower() in suffixes),
        key=lambda path: path.name,
    )


def ingest_file(
    session: Session,
    path: Path,
    *,
    force: bool = False,
    params: IngestionParameters | None = None,
) -> FileOutcome:
    """Ingest one file inside the caller's transaction."""
    params = params or IngestionParameters()
    file_name = path.name

    existing = get_tournament_by_file_name(session, file_name)
    if existing is not None and not force:
        return FileOutcome(
            file_name=file_name,
            status=FileStatus.SKIPPED,
            message="already processed (use --force to reprocess)",
            tournament_id=existing.id,
        )

    grid = read_grid(path)
    header_index = locate_header(grid)
    header = grid[header_index]
    layout = resolve_columns(header, max_tiebreaks=params.max_tiebreaks)
    info = extract_metadata(grid, file_name, header=header, layout=layout, params=params)

    tournament, existed = upsert_tournament(session, info)
    materializer = TournamentMaterializer(session, tournament.id, file_name=file_name)
    stats = materializer.materialize(grid, header_index, layout)

    pruned_results = pruned_games = 0
    if existed:
        pruned_results, pruned_games = prune_tournament(
            session,
            tournament.id,
            keep_result_ids=materializer.result_ids,
            keep_game_ids=materializer.game_ids,
        )

    return FileOutcome(
        file_name=file_name,
        status=FileStatus.PROCESSED,
        tournament_id=tournament.id,
        stats=stats,
        pruned_results=pruned_results,
        pruned_games=pruned_games,
    )


def ingest_directory(
    directory: Path,
    *,
    session_factory,
    config: CircuitConfig | None = None,
    force: bool = False,
    echo: Callable[[str], None] | None = None,
) -> list[FileOutcome]:
    """Ingest every tournament file; a failing file is reported and the batch continues."""
    params = config.ingestion if config is not None else IngestionParameters()
    files = list_tournament_files(directory, params.extensions)
    if echo is not None:
        echo(f"directory={directory} files={len(files)} force={force}")

    outcomes: list[FileOutcome] = []
    for path in files:
        with session_factory() as session:
            try:
                outcome = ingest_file(session, path, force=force, params=params)
                session.commit()
            except OperationalError as exc:
                session.rollback()
                raise StoreUnavailableError(f"Store failed while processing {path.name}: {exc}") from exc
            except (IngestionError, SQLAlchemyError) as exc:
                session.rollback()
                logger.error("Error processing %s: %s", path.name, exc)
                outcome = FileOutcome(file_name=path.name, status=FileStatus.FAILED, message=str(exc))

        outcomes.append(outcome)
        if outcome.status is FileStatus.SKIPPED:
            logger.info("Skipping already processed file: %s", path.name)
        elif outcome.status is FileStatus.PROCESSED:
            logger.info("Processed %s", path.name)
        if echo is not None:
            echo(_outcome_line(outcome))

    return outcomes


def _outcome_line(outcome: FileOutcome) -> str:
    parts = [f"file={outcome.file_name}", f"status={outcome.status.value}"]
    if outcome.tournament_id is not None:
        parts.append(f"tournament_id={outcome.tournament_id}")
    if outcome.stats is not None:
        parts.extend(
            [
                f"results={outcome.stats.results}",
                f"games_created={outcome.stats.games_created}",
                f"games_updated={outcome.stats.games_updated}",
                f"row_defects={outcome.stats.row_defects}",
            ]
        )
    if outcome.pruned_results or outcome.pruned_games:
        parts.append(f"pruned_results={outcome.pruned_results} pruned_games={outcome.pruned_games}")
    if outcome.message:
        parts.append(f"message={outcome.message!r}")
    return " ".join(parts)


__all__ = [
    "FileOutcome",
    "FileStatus",
    "ingest_directory",
    "ingest_file",
    "list_tournament_files",
]
