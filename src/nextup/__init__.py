"""NextUp: role-aware web front end for team and league management."""

__version__ = "0.1.0"
