"""Circuit leaderboard ranking."""

from __future__ import annotations

from collections.abc import Iterable

from domain.common import CircuitAggregate, LeaderboardStanding


def win_percentage(total_game_points: float, total_games_played: int) -> float:
    if total_games_played <= 0:
        return 0.0
    return (total_game_points / total_games_played) * 100.0


def rank_circuit(aggregates: Iterable[CircuitAggregate]) -> list[LeaderboardStanding]:
    """Order by total points, then average points per tournament, both descending.

    Ranks are 1..N with no gaps; players tied on both keys are ordered by name
    and id so reruns give the same snapshot.
    """
    ordered = sorted(
        aggregates,
        key=lambda item: (
            -item.total_points,
            -item.avg_points_per_tournament,
            item.name.casefold(),
            item.player_id,
        ),
    )
    return [
        LeaderboardStanding(
            player_id=aggregate.player_id,
            rank=rank,
            tournaments_played=aggregate.tournaments_played,
            total_points=aggregate.total_points,
            avg_points_per_tournament=aggregate.avg_points_per_tournament,
            avg_rating=aggregate.avg_rating or 0.0,
            avg_opponent_rating=aggregate.avg_opponent_rating or 0.0,
            total_game_points=aggregate.total_game_points,
            total_games_played=aggregate.total_games_played,
            win_percentage=win_percentage(aggregate.total_game_points, aggregate.total_games_played),
        )
        for rank, aggregate in enumerate(ordered, start=1)
    ]


__all__ = ["rank_circuit", "win_percentage"]
