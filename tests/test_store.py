"""Store-level tests: opening the store, failures that end a run and table constraints."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from conftest import SheetPlayer
from db import open_store
from domain.errors import StoreUnavailableError
from domain.pipeline import compute_circuit_ratings
from ingestion.crosstable import OUTCOME_TABLE
from ingestion.pipeline import ingest_directory
from models import GAME_RESULTS, Game, PerformanceRating, Player, Tournament

PAIR = [
    SheetPlayer(rank=1, name="Alpha", rating=1800, points=1.0, rounds=["2w1"]),
    SheetPlayer(rank=2, name="Bravo", rating=1700, points=0.0, rounds=["1b0"]),
]


def _drop_table(engine, table_name: str) -> None:
    with engine.begin() as connection:
        connection.exec_driver_sql(f"DROP TABLE {table_name}")


def test_open_store_answers_a_trivial_query(tmp_path: Path) -> None:
    engine = open_store(f"sqlite:///{tmp_path / 'circuit.db'}")
    try:
        with engine.connect() as connection:
            assert connection.execute(text("SELECT 1")).scalar_one() == 1
    finally:
        engine.dispose()


def test_open_store_raises_when_the_store_cannot_be_opened(tmp_path: Path) -> None:
    db_path = tmp_path / "missing" / "circuit.db"

    with pytest.raises(StoreUnavailableError, match="Cannot open store"):
        open_store(f"sqlite:///{db_path}")


def test_store_failure_ends_the_ingestion_batch(
    engine, session_factory, make_crosstable, crosstable_dir: Path
) -> None:
    make_crosstable("a_first.xlsx", PAIR, rounds=1)
    make_crosstable("b_second.xlsx", PAIR, rounds=1)
    _drop_table(engine, "games")
    lines: list[str] = []

    with pytest.raises(StoreUnavailableError, match="a_first.xlsx"):
        ingest_directory(crosstable_dir, session_factory=session_factory, echo=lines.append)

    # Neither file reported an outcome and the failing file's rows were rolled back.
    assert len(lines) == 1
    assert lines[0].startswith("directory=")
    with session_factory() as session:
        assert session.execute(text("SELECT COUNT(*) FROM tournaments")).scalar_one() == 0


def test_store_failure_stops_the_rating_run(
    engine, session_factory, make_crosstable, crosstable_dir: Path
) -> None:
    make_crosstable("pair.xlsx", PAIR, rounds=1)
    ingest_directory(crosstable_dir, session_factory=session_factory)
    _drop_table(engine, "leaderboard")

    with pytest.raises(StoreUnavailableError, match="leaderboard"):
        compute_circuit_ratings(session_factory=session_factory)

    with session_factory() as session:
        assert session.execute(select(PerformanceRating)).scalars().all() == []


def test_games_accept_only_known_results(session_factory) -> None:
    assert set(OUTCOME_TABLE.values()) == set(GAME_RESULTS)

    with session_factory() as session:
        tournament = Tournament(name="Club Night", date=date(2025, 1, 1), rounds=1, file_name="club.xlsx")
        white = Player(name="Alpha")
        black = Player(name="Bravo")
        session.add_all([tournament, white, black])
        session.flush()
        session.add(
            Game(
                tournament_id=tournament.id,
                round=1,
                white_player_id=white.id,
                black_player_id=black.id,
                result="2-0",
            )
        )
        with pytest.raises(IntegrityError, match="ck_games_result"):
            session.flush()
