"""Database repository helpers."""

from repositories.ratings.common import (
    fetch_circuit_aggregates,
    fetch_performance_games,
    fetch_tournament_appearances,
)
from repositories.ratings.definitions import (
    LEADERBOARD_REPOSITORY,
    PERFORMANCE_RATING_REPOSITORY,
    RATING_ELIGIBILITY_REPOSITORY,
)
from repositories.schema import ensure_circuit_schema
from repositories.tournament_repository import count_store_rows, get_tournament_by_file_name

__all__ = [
    "LEADERBOARD_REPOSITORY",
    "PERFORMANCE_RATING_REPOSITORY",
    "RATING_ELIGIBILITY_REPOSITORY",
    "count_store_rows",
    "ensure_circuit_schema",
    "fetch_circuit_aggregates",
    "fetch_performance_games",
    "fetch_tournament_appearances",
    "get_tournament_by_file_name",
]
