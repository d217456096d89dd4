"""Unit tests for circuit leaderboard ranking."""

from __future__ import annotations

import pytest

from domain.common import CircuitAggregate
from domain.ratings.leaderboard import rank_circuit, win_percentage


def _aggregate(
    player_id: int,
    name: str,
    total_points: float,
    tournaments_played: int,
    *,
    games: int = 0,
    game_points: float = 0.0,
    avg_rating: float | None = None,
) -> CircuitAggregate:
    return CircuitAggregate(
        player_id=player_id,
        name=name,
        federation=None,
        title=None,
        tournaments_played=tournaments_played,
        total_points=total_points,
        avg_points_per_tournament=total_points / tournaments_played,
        avg_rating=avg_rating,
        avg_opponent_rating=None,
        total_game_points=game_points,
        total_games_played=games,
    )


def test_rank_by_total_points_then_average_points() -> None:
    standings = rank_circuit(
        [
            _aggregate(1, "Alpha", 6.0, 3),
            _aggregate(2, "Bravo", 6.0, 2),
            _aggregate(3, "Charlie", 8.0, 4),
            _aggregate(4, "Delta", 1.0, 1),
        ]
    )

    assert [standing.player_id for standing in standings] == [3, 2, 1, 4]
    assert [standing.rank for standing in standings] == [1, 2, 3, 4]


def test_full_ties_are_ordered_by_name_and_ranks_stay_dense() -> None:
    standings = rank_circuit(
        [
            _aggregate(9, "zeta", 4.0, 2),
            _aggregate(8, "Echo", 4.0, 2),
        ]
    )

    assert [(standing.rank, standing.player_id) for standing in standings] == [(1, 8), (2, 9)]


def test_win_percentage() -> None:
    assert win_percentage(3.5, 5) == pytest.approx(70.0)
    assert win_percentage(0.0, 0) == pytest.approx(0.0)


def test_standing_carries_aggregate_values() -> None:
    standing = rank_circuit([_aggregate(1, "Alpha", 4.5, 2, games=9, game_points=4.5, avg_rating=1720.0)])[0]

    assert standing.tournaments_played == 2
    assert standing.avg_points_per_tournament == pytest.approx(2.25)
    assert standing.avg_rating == pytest.approx(1720.0)
    assert standing.avg_opponent_rating == pytest.approx(0.0)
    assert standing.win_percentage == pytest.approx(50.0)


def test_empty_circuit_has_no_standings() -> None:
    assert rank_circuit([]) == []
