"""Route table shared by the access guard, login flow and navigation bar."""

from __future__ import annotations

from typing import Mapping, Optional, Tuple

LANDING_ROUTE = "/"
LOGIN_ROUTE = "/login"
REGISTER_ROUTE = "/register"
GENERIC_DASHBOARD_ROUTE = "/dashboard"

ROLE_COACH = "Coach"
ROLE_PLAYER = "Player"
ROLE_ATHLETIC_DIRECTOR = "AthleticDirector"

ROLE_DASHBOARDS: Mapping[str, str] = {
    ROLE_COACH: "/coach/dashboard",
    ROLE_PLAYER: "/player/dashboard",
    ROLE_ATHLETIC_DIRECTOR: "/athletic-director/dashboard",
}

ROLE_NAVIGATION: Mapping[str, Tuple[Tuple[str, str], ...]] = {
    ROLE_COACH: (
        ("Dashboard", "/coach/dashboard"),
        ("Depth Chart", "/coach/depth-chart"),
        ("Schedule", "/coach/schedule"),
        ("Opponents", "/coach/opponents"),
    ),
    ROLE_PLAYER: (
        ("Dashboard", "/player/dashboard"),
        ("My Stats", "/player/my-stats"),
        ("My Goals", "/player/my-goals"),
        ("Team Info", "/player/team-info"),
    ),
    ROLE_ATHLETIC_DIRECTOR: (
        ("Dashboard", "/athletic-director/dashboard"),
        ("Teams", "/athletic-director/teams"),
        ("Games", "/athletic-director/games"),
        ("Season Overview", "/athletic-director/season-overview"),
    ),
}

GUEST_NAVIGATION: Tuple[Tuple[str, str], ...] = (
    ("Login", LOGIN_ROUTE),
    ("Sign Up", REGISTER_ROUTE),
)


def dashboard_route_for(role: Optional[str]) -> str:
    """Return the default dashboard for ``role``; unknown roles get the generic one."""

    if role is None:
        return GENERIC_DASHBOARD_ROUTE
    return ROLE_DASHBOARDS.get(role, GENERIC_DASHBOARD_ROUTE)


def navigation_for(role: Optional[str]) -> Tuple[Tuple[str, str], ...]:
    if role is None:
        return GUEST_NAVIGATION
    return ROLE_NAVIGATION.get(role, (("Dashboard", GENERIC_DASHBOARD_ROUTE),))
