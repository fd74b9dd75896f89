"""Schedule and season helpers."""

from .filtering import (
    SeasonSummary,
    filter_games,
    game_matches,
    opponent_for,
    season_options,
    summarize_season,
)

__all__ = [
    "SeasonSummary",
    "filter_games",
    "game_matches",
    "opponent_for",
    "season_options",
    "summarize_season",
]
