"""Static configuration: position registry and role route table."""

from .positions import (
    DEFENSE_POSITIONS,
    OFFENSE_POSITIONS,
    POSITION_ALIASES,
    POSITION_DISPLAY_NAMES,
    POSITION_STAT_FIELDS,
    SPECIAL_TEAMS_POSITIONS,
    PositionInfo,
    display_name,
    iter_positions,
    normalize_position,
    stat_fields_for,
    stats_for_position,
)
from .routes import (
    GENERIC_DASHBOARD_ROUTE,
    LANDING_ROUTE,
    LOGIN_ROUTE,
    REGISTER_ROUTE,
    ROLE_ATHLETIC_DIRECTOR,
    ROLE_COACH,
    ROLE_DASHBOARDS,
    ROLE_PLAYER,
    dashboard_route_for,
    navigation_for,
)

__all__ = [
    "DEFENSE_POSITIONS",
    "OFFENSE_POSITIONS",
    "POSITION_ALIASES",
    "POSITION_DISPLAY_NAMES",
    "POSITION_STAT_FIELDS",
    "SPECIAL_TEAMS_POSITIONS",
    "PositionInfo",
    "display_name",
    "iter_positions",
    "normalize_position",
    "stat_fields_for",
    "stats_for_position",
    "GENERIC_DASHBOARD_ROUTE",
    "LANDING_ROUTE",
    "LOGIN_ROUTE",
    "REGISTER_ROUTE",
    "ROLE_ATHLETIC_DIRECTOR",
    "ROLE_COACH",
    "ROLE_DASHBOARDS",
    "ROLE_PLAYER",
    "dashboard_route_for",
    "navigation_for",
]
