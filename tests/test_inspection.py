"""Tests for the read-only inspection summaries."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import SheetPlayer
from domain.common import CircuitAggregate
from domain.pipeline import compute_circuit_ratings
from ingestion.pipeline import ingest_directory
from models import RatingEligibility
from repositories.inspection import (
    UNKNOWN_FEDERATION,
    UNTITLED,
    GameLine,
    category_statistics,
    eligibility_summary,
    fetch_tournament_summaries,
    find_tournament,
    inspect_tournament,
    rating_band,
)
from repositories.ratings.common import fetch_circuit_aggregates

SPRING = [
    SheetPlayer(rank=1, name="Alpha", title="FM", federation="IND", rating=1850, points=1.0, rounds=["3w1"]),
    SheetPlayer(rank=2, name="Bravo", federation="SRI", rating=1450, points=1.0, rounds=["4b1"]),
    SheetPlayer(rank=3, name="Charlie", title="CM", federation="IND", rating=1650, points=0.0, rounds=["1b0"]),
    SheetPlayer(rank=4, name="Delta", rating=0, points=0.0, rounds=["2w0"]),
]
AUTUMN = [
    SheetPlayer(rank=1, name="Alpha", title="FM", federation="IND", rating=1850, points=1.0, rounds=["2w1"]),
    SheetPlayer(rank=2, name="Bravo", federation="SRI", rating=1450, points=0.0, rounds=["1b0"]),
]


@pytest.fixture
def store(session_factory, make_crosstable, crosstable_dir: Path):
    make_crosstable(
        "spring.xlsx",
        SPRING,
        rounds=1,
        preamble=("Chess-Results Server", "Spring Open", "Date : March 2025"),
    )
    make_crosstable(
        "autumn.xlsx",
        AUTUMN,
        rounds=1,
        preamble=("Chess-Results Server", "Autumn Open", "Date : September 2025"),
    )
    ingest_directory(crosstable_dir, session_factory=session_factory)
    return session_factory


def _aggregate(
    player_id: int,
    name: str,
    *,
    title: str | None = None,
    federation: str | None = None,
    avg_rating: float | None = None,
    total_points: float = 0.0,
    tournaments: int = 1,
) -> CircuitAggregate:
    return CircuitAggregate(
        player_id=player_id,
        name=name,
        federation=federation,
        title=title,
        tournaments_played=tournaments,
        total_points=total_points,
        avg_points_per_tournament=total_points / tournaments,
        avg_rating=avg_rating,
        avg_opponent_rating=None,
        total_game_points=total_points,
        total_games_played=tournaments,
    )


def test_tournament_summaries_are_most_recent_first(store) -> None:
    with store() as session:
        summaries = fetch_tournament_summaries(session)

    assert [item.name for item in summaries] == ["Autumn Open", "Spring Open"]
    assert [item.player_count for item in summaries] == [2, 4]
    assert [item.date.month for item in summaries] == [9, 3]
    assert [item.file_name for item in summaries] == ["autumn.xlsx", "spring.xlsx"]
    assert all(item.rounds == 1 for item in summaries)


def test_find_tournament_by_id_or_name_fragment(store) -> None:
    with store() as session:
        spring = find_tournament(session, "spring")
        assert spring is not None
        assert spring.name == "Spring Open"
        assert find_tournament(session, str(spring.id)).id == spring.id
        assert find_tournament(session, spring.id).id == spring.id
        # Several names match; the most recent tournament wins.
        assert find_tournament(session, "open").name == "Autumn Open"
        assert find_tournament(session, "winter") is None


def test_inspect_tournament_lists_standings_and_games(store) -> None:
    with store() as session:
        inspection = inspect_tournament(session, "Spring")

    assert inspection is not None
    assert inspection.summary.name == "Spring Open"
    assert inspection.summary.player_count == 4
    assert [line.name for line in inspection.standings] == ["Alpha", "Bravo", "Charlie", "Delta"]
    assert [line.rank for line in inspection.standings] == [1, 2, 3, 4]
    assert inspection.standings[0].title == "FM"
    delta = inspection.standings[3]
    assert (delta.rating, delta.federation, delta.title) == (None, None, None)
    assert inspection.games == (
        GameLine(round=1, white="Alpha", black="Charlie", white_rating=1850, black_rating=1650, result="1-0"),
        GameLine(round=1, white="Delta", black="Bravo", white_rating=None, black_rating=1450, result="0-1"),
    )
    assert len(inspection.performance_rows) == 4
    assert inspection.performance_ratings == ()


def test_inspect_tournament_includes_performance_ratings_after_a_run(store) -> None:
    compute_circuit_ratings(session_factory=store)

    with store() as session:
        inspection = inspect_tournament(session, "spring")

    assert inspection is not None
    # Bravo only met the unrated Delta, so no rating is produced for Bravo.
    assert len(inspection.performance_ratings) == 3
    ratings = [rating.performance_rating for rating in inspection.performance_ratings]
    assert ratings == sorted(ratings, reverse=True)


def test_inspect_tournament_returns_none_without_match(store) -> None:
    with store() as session:
        assert inspect_tournament(session, "Winter Classic") is None
        assert inspect_tournament(session, 999) is None


@pytest.mark.parametrize(
    ("rating", "expected"),
    [
        (None, None),
        (0, None),
        (1200, "Under 1400"),
        (1399.9, "Under 1400"),
        (1400, "1400-1599"),
        (1650, "1600-1799"),
        (1999, "1800-1999"),
        (2100, "2000-2199"),
        (2200, "2200+"),
        (2750, "2200+"),
    ],
)
def test_rating_band(rating: float | None, expected: str | None) -> None:
    assert rating_band(rating) == expected


def test_category_statistics_groups_by_title_federation_and_band() -> None:
    aggregates = [
        _aggregate(1, "Alpha", title="FM", federation="IND", avg_rating=1850, total_points=2.0, tournaments=2),
        _aggregate(2, "Bravo", federation="SRI", avg_rating=1450, total_points=1.0, tournaments=2),
        _aggregate(3, "Charlie", title="CM", federation="IND", avg_rating=1650, total_points=0.0),
        _aggregate(4, "Delta", total_points=0.0),
    ]

    statistics = category_statistics(aggregates)

    assert [(stat.category, stat.player_count) for stat in statistics.by_title] == [
        (UNTITLED, 2),
        ("CM", 1),
        ("FM", 1),
    ]
    assert statistics.by_title[0].avg_total_points == pytest.approx(0.5)
    assert [(stat.category, stat.player_count) for stat in statistics.by_federation] == [
        ("IND", 2),
        ("SRI", 1),
        (UNKNOWN_FEDERATION, 1),
    ]
    assert statistics.by_federation[0].avg_total_points == pytest.approx(1.0)
    assert {band: [item.name for item in members] for band, members in statistics.top_by_rating_band.items()} == {
        "1400-1599": ["Bravo"],
        "1600-1799": ["Charlie"],
        "1800-1999": ["Alpha"],
    }


def test_category_statistics_keeps_top_players_per_band() -> None:
    aggregates = [
        _aggregate(index, f"Player {index}", avg_rating=1500, total_points=float(index))
        for index in range(1, 6)
    ]

    statistics = category_statistics(aggregates, top_n=2)

    assert [item.player_id for item in statistics.top_by_rating_band["1400-1599"]] == [5, 4]


def test_category_statistics_from_the_store(store) -> None:
    with store() as session:
        statistics = category_statistics(fetch_circuit_aggregates(session))

    federations = {stat.category: stat.player_count for stat in statistics.by_federation}
    assert federations == {"IND": 2, "SRI": 1, UNKNOWN_FEDERATION: 1}


def test_eligibility_summary_counts_single_and_combined_rows(store) -> None:
    with store() as session:
        assert eligibility_summary(session).single_count == 0
        assert eligibility_summary(session).avg_estimated_rating is None

        spring = find_tournament(session, "spring")
        delta = inspect_tournament(session, "spring").standings[3].player_id
        session.add_all(
            [
                RatingEligibility(
                    player_id=delta,
                    tournament_id=spring.id,
                    games_vs_rated=5,
                    score_vs_rated=3.0,
                    avg_opponent_rating=1500.0,
                    estimated_rating=1557,
                    combined_tournaments=False,
                ),
                RatingEligibility(
                    player_id=delta,
                    tournament_id=None,
                    games_vs_rated=6,
                    score_vs_rated=3.0,
                    avg_opponent_rating=1500.0,
                    estimated_rating=1500,
                    combined_tournaments=True,
                    combined_tournament_ids=[spring.id],
                ),
            ]
        )
        session.commit()

        summary = eligibility_summary(session)

    assert summary.single_count == 1
    assert summary.combined_count == 1
    assert summary.avg_estimated_rating == pytest.approx(1528.5)
