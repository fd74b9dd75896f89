"""Helpers for slicing game lists on the schedule and season pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from nextup.models import Game, Team, TeamRef

COMPLETED_STATUSES = frozenset({"Completed"})
UPCOMING_STATUSES = frozenset({"Scheduled", "InProgress"})


@dataclass(frozen=True)
class SeasonSummary:
    """Aggregate counts for one season of games."""

    season: int
    teams: Tuple[Team, ...]
    games: Tuple[Game, ...]
    total_teams: int
    total_games: int
    completed_games: int
    upcoming_games: int


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.lower()


def game_matches(game: Game, search: str) -> bool:
    needle = search.strip().lower()
    if not needle:
        return True
    return (
        _contains(game.away_team.name if game.away_team else None, needle)
        or _contains(game.home_team.name if game.home_team else None, needle)
        or _contains(game.location, needle)
        or (game.week is not None and needle in str(game.week))
    )


def filter_games(games: Iterable[Game], search: Optional[str]) -> List[Game]:
    """Keep games whose teams, location or week match ``search``."""

    if not search:
        return list(games)
    return [game for game in games if game_matches(game, search)]


def summarize_season(teams: Sequence[Team], games: Iterable[Game], season: int) -> SeasonSummary:
    season_games = tuple(game for game in games if game.season == season)
    completed = sum(1 for game in season_games if game.status in COMPLETED_STATUSES)
    upcoming = sum(1 for game in season_games if game.status in UPCOMING_STATUSES)
    return SeasonSummary(
        season=season,
        teams=tuple(teams),
        games=season_games,
        total_teams=len(teams),
        total_games=len(season_games),
        completed_games=completed,
        upcoming_games=upcoming,
    )


def opponent_for(game: Game, team_id: Optional[int]) -> Optional[TeamRef]:
    """Return the side of ``game`` that ``team_id`` is playing against."""

    if team_id is None:
        return None
    home_id = game.home_team_id if game.home_team_id is not None else (
        game.home_team.team_id if game.home_team else None
    )
    away_id = game.away_team_id if game.away_team_id is not None else (
        game.away_team.team_id if game.away_team else None
    )
    if home_id == team_id:
        return game.away_team
    if away_id == team_id:
        return game.home_team
    return None


def season_options(year: int) -> List[int]:
    return [year + offset for offset in range(-2, 3)]
