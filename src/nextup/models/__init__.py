"""Typed views of backend payloads."""

from .player import Coach, Game, Player, PlayerGoal, Team, TeamRef
from .user import User

__all__ = ["Coach", "Game", "Player", "PlayerGoal", "Team", "TeamRef", "User"]
