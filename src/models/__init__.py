"""ORM models."""

from models.base import Base
from models.game import GAME_RESULTS, Game
from models.player import Player
from models.ratings import LeaderboardEntry, PerformanceRating, RatingEligibility
from models.tournament import Tournament
from models.tournament_result import TournamentResult

__all__ = [
    "Base",
    "GAME_RESULTS",
    "Game",
    "LeaderboardEntry",
    "PerformanceRating",
    "Player",
    "RatingEligibility",
    "Tournament",
    "TournamentResult",
]
