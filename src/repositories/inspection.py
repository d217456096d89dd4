"""Read-only summaries over the store for the inspection commands."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

from domain.common import CircuitAggregate, PerformanceGame
from models import Game, Player, PerformanceRating, RatingEligibility, Tournament, TournamentResult
from repositories.ratings.common import fetch_performance_games

RATING_BANDS: tuple[tuple[str, int | None, int | None], ...] = (
    ("Under 1400", None, 1400),
    ("1400-1599", 1400, 1600),
    ("1600-1799", 1600, 1800),
    ("1800-1999", 1800, 2000),
    ("2000-2199", 2000, 2200),
    ("2200+", 2200, None),
)
UNTITLED = "Untitled"
UNKNOWN_FEDERATION = "Unknown"


@dataclass(frozen=True)
class TournamentSummary:
    tournament_id: int
    name: str
    date: date
    rounds: int
    player_count: int
    file_name: str


@dataclass(frozen=True)
class StandingLine:
    rank: int | None
    player_id: int
    name: str
    federation: str | None
    title: str | None
    rating: int | None
    points: float


@dataclass(frozen=True)
class GameLine:
    round: int
    white: str
    black: str
    white_rating: int | None
    black_rating: int | None
    result: str


@dataclass(frozen=True)
class TournamentInspection:
    """Everything stored for one tournament."""

    summary: TournamentSummary
    standings: tuple[StandingLine, ...]
    games: tuple[GameLine, ...]
    performance_rows: tuple[PerformanceGame, ...]
    performance_ratings: tuple[PerformanceRating, ...]


@dataclass(frozen=True)
class CategoryStat:
    category: str
    player_count: int
    avg_total_points: float


@dataclass(frozen=True)
class CategoryStatistics:
    by_title: tuple[CategoryStat, ...]
    by_federation: tuple[CategoryStat, ...]
    top_by_rating_band: dict[str, tuple[CircuitAggregate, ...]]


@dataclass(frozen=True)
class EligibilitySummary:
    single_count: int
    combined_count: int
    avg_estimated_rating: float | None


def _summary_statement():
    player_count = func.count(TournamentResult.id).label("player_count")
    return (
        select(
            Tournament.id,
            Tournament.name,
            Tournament.date,
            Tournament.rounds,
            Tournament.file_name,
            player_count,
        )
        .outerjoin(TournamentResult, TournamentResult.tournament_id == Tournament.id)
        .group_by(Tournament.id, Tournament.name, Tournament.date, Tournament.rounds, Tournament.file_name)
    )


def _to_summary(row) -> TournamentSummary:
    return TournamentSummary(
        tournament_id=int(row["id"]),
        name=row["name"],
        date=row["date"],
        rounds=int(row["rounds"] or 0),
        player_count=int(row["player_count"] or 0),
        file_name=row["file_name"],
    )


def fetch_tournament_summaries(session: Session) -> list[TournamentSummary]:
    """Player count and rounds per tournament, most recent first."""
    statement = _summary_statement().order_by(Tournament.date.desc(), Tournament.id.desc())
    return [_to_summary(row) for row in session.execute(statement).mappings()]


def find_tournament(session: Session, reference: str | int) -> Tournament | None:
    """Resolve a tournament by numeric id, else by name fragment (most recent match)."""
    text_reference = str(reference).strip()
    if text_reference.isdigit():
        tournament = session.get(Tournament, int(text_reference))
        if tournament is not None:
            return tournament
    return session.execute(
        select(Tournament)
        .where(Tournament.name.ilike(f"%{text_reference}%"))
        .order_by(Tournament.date.desc(), Tournament.id.desc())
        .limit(1)
    ).scalar_one_or_none()


def inspect_tournament(session: Session, reference: str | int) -> TournamentInspection | None:
    tournament = find_tournament(session, reference)
    if tournament is None:
        return None

    summary_row = session.execute(
        _summary_statement().where(Tournament.id == tournament.id)
    ).mappings().one()

    standings = tuple(
        StandingLine(
            rank=row.rank,
            player_id=row.player_id,
            name=row.name,
            federation=row.federation,
            title=row.title,
            rating=row.rating,
            points=float(row.points),
        )
        for row in session.execute(
            select(
                TournamentResult.rank,
                TournamentResult.player_id,
                Player.name,
                Player.federation,
                TournamentResult.title,
                TournamentResult.rating,
                TournamentResult.points,
            )
            .join(Player, Player.id == TournamentResult.player_id)
            .where(TournamentResult.tournament_id == tournament.id)
            .order_by(TournamentResult.rank, Player.name)
        )
    )

    white = aliased(Player)
    black = aliased(Player)
    games = tuple(
        GameLine(
            round=row.round,
            white=row.white_name,
            black=row.black_name,
            white_rating=row.white_rating,
            black_rating=row.black_rating,
            result=row.result,
        )
        for row in session.execute(
            select(
                Game.round,
                white.name.label("white_name"),
                black.name.label("black_name"),
                Game.white_rating,
                Game.black_rating,
                Game.result,
            )
            .join(white, white.id == Game.white_player_id)
            .join(black, black.id == Game.black_player_id)
            .where(Game.tournament_id == tournament.id)
            .order_by(Game.round, Game.id)
        )
    )

    ratings = tuple(
        session.execute(
            select(PerformanceRating)
            .where(PerformanceRating.tournament_id == tournament.id)
            .order_by(PerformanceRating.performance_rating.desc(), PerformanceRating.player_id)
        ).scalars()
    )

    return TournamentInspection(
        summary=_to_summary(summary_row),
        standings=standings,
        games=games,
        performance_rows=tuple(fetch_performance_games(session, tournament_id=tournament.id)),
        performance_ratings=ratings,
    )


def rating_band(rating: float | None) -> str | None:
    if rating is None or rating <= 0:
        return None
    for label, lower, upper in RATING_BANDS:
        if (lower is None or rating >= lower) and (upper is None or rating < upper):
            return label
    return None


def _category_stats(groups: dict[str, list[CircuitAggregate]]) -> tuple[CategoryStat, ...]:
    stats = [
        CategoryStat(
            category=category,
            player_count=len(members),
            avg_total_points=sum(member.total_points for member in members) / len(members),
        )
        for category, members in groups.items()
    ]
    return tuple(sorted(stats, key=lambda stat: (-stat.player_count, stat.category)))


def category_statistics(aggregates: list[CircuitAggregate], *, top_n: int = 3) -> CategoryStatistics:
    """Distribution by title and federation, plus the best players of each rating band."""
    by_title: dict[str, list[CircuitAggregate]] = defaultdict(list)
    by_federation: dict[str, list[CircuitAggregate]] = defaultdict(list)
    by_band: dict[str, list[CircuitAggregate]] = defaultdict(list)
    for aggregate in aggregates:
        by_title[aggregate.title or UNTITLED].append(aggregate)
        by_federation[aggregate.federation or UNKNOWN_FEDERATION].append(aggregate)
        band = rating_band(aggregate.avg_rating)
        if band is not None:
            by_band[band].append(aggregate)

    top_by_band: dict[str, tuple[CircuitAggregate, ...]] = {}
    for label, _, _ in RATING_BANDS:
        members = sorted(
            by_band.get(label, []),
            key=lambda item: (-item.total_points, -item.avg_points_per_tournament, item.player_id),
        )
        if members:
            top_by_band[label] = tuple(members[:top_n])

    return CategoryStatistics(
        by_title=_category_stats(by_title),
        by_federation=_category_stats(by_federation),
        top_by_rating_band=top_by_band,
    )


def eligibility_summary(session: Session) -> EligibilitySummary:
    row = session.execute(
        select(
            func.count(RatingEligibility.id).filter(RatingEligibility.combined_tournaments.is_(False)),
            func.count(RatingEligibility.id).filter(RatingEligibility.combined_tournaments.is_(True)),
            func.avg(RatingEligibility.estimated_rating),
        )
    ).one()
    return EligibilitySummary(
        single_count=int(row[0] or 0),
        combined_count=int(row[1] or 0),
        avg_estimated_rating=None if row[2] is None else float(row[2]),
    )


__all__ = [
    "RATING_BANDS",
    "CategoryStat",
    "CategoryStatistics",
    "EligibilitySummary",
    "GameLine",
    "StandingLine",
    "TournamentInspection",
    "TournamentSummary",
    "category_statistics",
    "eligibility_summary",
    "fetch_tournament_summaries",
    "find_tournament",
    "inspect_tournament",
    "rating_band",
]
