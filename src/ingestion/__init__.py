"""Crosstable ingestion: spreadsheet decoding, locating and materializing."""

from ingestion.crosstable import (
    OUTCOME_TABLE,
    ColumnLayout,
    RoundToken,
    decode_round_token,
    extract_metadata,
    locate_header,
    resolve_columns,
)
from ingestion.materializer import MaterializeStats, TournamentMaterializer
from ingestion.pipeline import FileOutcome, FileStatus, ingest_directory, ingest_file
from ingestion.spreadsheet import read_grid

__all__ = [
    "OUTCOME_TABLE",
    "ColumnLayout",
    "FileOutcome",
    "FileStatus",
    "MaterializeStats",
    "RoundToken",
    "TournamentMaterializer",
    "decode_round_token",
    "extract_metadata",
    "ingest_directory",
    "ingest_file",
    "locate_header",
    "read_grid",
    "resolve_columns",
]
