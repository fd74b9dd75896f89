"""Page views. Each takes a :class:`PageContext` plus route inputs and returns HTML or a response."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from html import escape
from typing import Any, Iterable, Mapping, Optional

from fastapi.responses import RedirectResponse, Response
from pydantic import ValidationError

from nextup.config.routes import (
    ROLE_ATHLETIC_DIRECTOR,
    ROLE_COACH,
    ROLE_PLAYER,
    dashboard_route_for,
)
from nextup.gateway import BackendClient, BackendError, InvalidCredentials, NetworkError, SessionConfirmation
from nextup.guard import guest_only, protect
from nextup.models import Game, Team, User
from nextup.roster import categorize, group_by_position
from nextup.schedule import filter_games, opponent_for, season_options, summarize_season
from nextup.session import SessionStore
from nextup.stats import aggregate_stats, build_player_card
from nextup.web import pages
from nextup.web.forms import (
    CoachRegistration,
    GameForm,
    GoalForm,
    PlayerRegistration,
    TeamForm,
    describe_errors,
)

logger = logging.getLogger("uvicorn.error")

FETCH_ERRORS = (BackendError, NetworkError, ValidationError)
UNITS = ("offense", "defense", "special_teams", "other")


@dataclass(frozen=True)
class PageContext:
    store: SessionStore
    backend: BackendClient

    @property
    def user(self) -> Optional[User]:
        return self.store.identity


def relay_cookies(response: Response, confirmation: SessionConfirmation) -> Response:
    for cookie in confirmation.cookies:
        expires = None
        if cookie.expires is not None:
            expires = datetime.fromtimestamp(cookie.expires, tz=timezone.utc)
        response.set_cookie(
            cookie.name,
            cookie.value,
            path=cookie.path,
            expires=expires,
            secure=cookie.secure,
            httponly=cookie.httponly,
            samesite=cookie.samesite,
        )
    return response


def _unit(value: Optional[str]) -> str:
    return value if value in UNITS else "offense"


def _find(items: Iterable[Any], attribute: str, key: int) -> Optional[Any]:
    return next((item for item in items if getattr(item, attribute) == key), None)


# Guest pages


async def login_form(ctx: PageContext) -> str:
    return pages.render_login()


async def login_submit(ctx: PageContext, email: str, password: str) -> Any:
    try:
        confirmation = await ctx.backend.submit_credentials(email, password)
        identity = await ctx.backend.get_current_identity()
    except InvalidCredentials:
        return pages.render_login(error="Invalid credentials", email=email)
    except FETCH_ERRORS as exc:
        logger.warning("Login failed for %s: %s", email, exc)
        return pages.render_login(error="Login failed", email=email)
    ctx.store.login(identity)
    if not ctx.store.is_authenticated:
        return pages.render_login(error="Login failed", email=email)
    target = dashboard_route_for(ctx.store.snapshot.role)
    return relay_cookies(RedirectResponse(target, status_code=303), confirmation)


async def _register_teams(ctx: PageContext) -> list[Team]:
    try:
        return await ctx.backend.fetch_teams()
    except FETCH_ERRORS as exc:
        logger.warning("Unable to load teams for registration: %s", exc)
        return []


async def register_form(ctx: PageContext) -> str:
    return pages.render_register(await _register_teams(ctx))


async def register_submit(ctx: PageContext, form: Mapping[str, Any]) -> Any:
    user_type = "coach" if form.get("user_type") == "coach" else "player"
    try:
        if user_type == "player":
            confirmation = await ctx.backend.register_player(PlayerRegistration.model_validate(form).to_payload())
            role = ROLE_PLAYER
        else:
            confirmation = await ctx.backend.register_coach(CoachRegistration.model_validate(form).to_payload())
            role = ROLE_COACH
    except ValidationError as exc:
        return pages.render_register(await _register_teams(ctx), user_type=user_type, error=describe_errors(exc))
    except (BackendError, NetworkError) as exc:
        logger.warning("Registration failed: %s", exc)
        return pages.render_register(await _register_teams(ctx), user_type=user_type, error="Registration failed")
    return relay_cookies(RedirectResponse(dashboard_route_for(role), status_code=303), confirmation)


# Shared pages


async def generic_dashboard(ctx: PageContext) -> str:
    return pages.render_generic_dashboard(ctx.user)


async def team_info(ctx: PageContext) -> str:
    try:
        team = await ctx.backend.fetch_my_team()
    except FETCH_ERRORS as exc:
        logger.warning("Unable to load team info: %s", exc)
        return "<h1>Team Info</h1>" + pages.render_notice("Failed to load team information")
    categorized = categorize(group_by_position(team.players))
    return (
        f"<h1>{escape(team.name)}</h1>"
        f'<p class="muted">{escape(team.location or "")} &bull; Record {team.record}</p>'
        f"<h2>Depth Chart</h2>{pages.render_depth_table(categorized)}"
    )


# Coach pages


async def coach_dashboard(ctx: PageContext) -> str:
    body = f"<h1>Coach Dashboard</h1><p>Welcome back, {escape(ctx.user.first_name or 'Coach')}.</p>"
    try:
        coach = await ctx.backend.get_current_coach()
        games: list[Game] = []
        if coach.team and coach.team.team_id is not None:
            games = await ctx.backend.fetch_upcoming_games(coach.team.team_id)
    except FETCH_ERRORS as exc:
        logger.warning("Unable to load coach dashboard: %s", exc)
        return body + pages.render_notice("Failed to load dashboard data")
    if coach.team is None:
        return body + '<p class="muted">You are not assigned to a team yet.</p>'
    return (
        body
        + f"<h2>{escape(coach.team.name or '')}</h2>"
        + "<h3>Upcoming games</h3>"
        + pages.render_game_rows(games[:3])
    )


async def depth_chart(ctx: PageContext, unit: Optional[str] = None) -> str:
    body = "<h1>Depth Chart</h1>"
    try:
        coach = await ctx.backend.get_current_coach()
        team: Optional[Team] = None
        if coach.team and coach.team.team_id is not None:
            team = await ctx.backend.fetch_team_by_id(coach.team.team_id)
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load team data: %s", exc)
        return body + pages.render_notice("Failed to load team data")
    if coach.team:
        body += f"<h2>{escape(coach.team.name or '')}</h2><p class=\"muted\">{escape(coach.team.location or '')}</p>"
    categorized = categorize(group_by_position(team.players if team else []))
    return body + pages.render_depth_chart(categorized, active=_unit(unit), base_url="/coach/depth-chart")


async def coach_player(ctx: PageContext, player_id: int) -> str:
    back = '<p><a href="/coach/depth-chart">&larr; Back to Depth Chart</a></p>'
    try:
        player = await ctx.backend.fetch_player_by_id(player_id)
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load player %s: %s", player_id, exc)
        return back + pages.render_notice("Failed to load player information")
    try:
        games = await ctx.backend.fetch_player_stats(player_id)
    except FETCH_ERRORS as exc:
        logger.info("No stats for player %s: %s", player_id, exc)
        games = []
    card = build_player_card(player, aggregate_stats(games))
    return back + pages.render_player_card(card)


async def coach_schedule(ctx: PageContext) -> str:
    body = "<h1>Schedule</h1><h2>Upcoming Matchups</h2>"
    try:
        coach = await ctx.backend.get_current_coach()
        games: list[Game] = []
        if coach.team and coach.team.team_id is not None:
            games = await ctx.backend.fetch_upcoming_games(coach.team.team_id)
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load schedule: %s", exc)
        return body + pages.render_notice("Failed to load schedule")
    return body + pages.render_game_rows(games)


async def coach_opponents(ctx: PageContext) -> str:
    body = "<h1>Browse Opponents</h1>"
    try:
        coach = await ctx.backend.get_current_coach()
        teams = await ctx.backend.fetch_teams()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load opponents: %s", exc)
        return body + pages.render_notice("Failed to load teams")
    own_id = coach.team.team_id if coach.team else None
    opponents = [team for team in teams if team.team_id != own_id]
    return body + pages.render_team_list(opponents, link_prefix="/coach/opponent/")


async def coach_opponent(ctx: PageContext, team_id: int) -> str:
    back = '<p><a href="/coach/opponents">&larr; Back to Opponents</a></p>'
    try:
        team = await ctx.backend.fetch_team_by_id(team_id)
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load opponent %s: %s", team_id, exc)
        return back + pages.render_notice("Failed to load team overview")
    categorized = categorize(group_by_position(team.players))
    return (
        back
        + f"<h1>{escape(team.name)}</h1>"
        + f'<p class="muted">{escape(team.location or "")} &bull; Record {team.record}</p>'
        + "<h2>Depth Chart</h2>"
        + pages.render_depth_table(categorized)
    )


# Player pages


async def player_dashboard(ctx: PageContext) -> str:
    body = (
        f"<h1>Player Dashboard</h1><p>Welcome back, {escape(ctx.user.first_name or 'Player')}. "
        "Track your progress and team performance.</p>"
    )
    try:
        player = await ctx.backend.get_current_player()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load current player: %s", exc)
        return body + pages.render_notice("Failed to load player information")
    body += pages.render_player_card(build_player_card(player))
    team_id = player.team.team_id if player.team else None
    if team_id is None:
        return body + '<p class="muted">You are not on a team yet.</p>'
    try:
        games = await ctx.backend.fetch_upcoming_games(team_id)
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load upcoming games for team %s: %s", team_id, exc)
        return body + pages.render_notice("Failed to load upcoming games")
    if not games:
        return body + '<h2>Next Game</h2><p class="muted">No upcoming games.</p>'
    next_game = games[0]
    opponent = opponent_for(next_game, team_id)
    opponent_name = opponent.name if opponent and opponent.name else "TBD"
    return (
        body
        + f"<h2>Next Game</h2><p>vs {escape(opponent_name)}</p>"
        + pages.render_game_rows([next_game])
    )


async def player_my_stats(ctx: PageContext) -> str:
    body = "<h1>My Stats</h1>"
    try:
        player = await ctx.backend.get_current_player()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load current player: %s", exc)
        return body + pages.render_notice("Failed to load player information")
    games: list = []
    if player.player_id is not None:
        try:
            games = await ctx.backend.fetch_player_stats(player.player_id)
        except FETCH_ERRORS as exc:
            logger.info("No stats for player %s: %s", player.player_id, exc)
    stats = aggregate_stats(games) if games else None
    return body + pages.render_player_card(build_player_card(player, stats))


async def player_goals(ctx: PageContext, notice: Optional[str] = None, error: Optional[str] = None) -> str:
    body = "<h1>My Goals</h1>" + pages.render_notice(notice, "success") + pages.render_notice(error)
    try:
        goals = await ctx.backend.fetch_my_goals()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load goals: %s", exc)
        return body + pages.render_notice("Failed to load goals") + pages.render_goal_form()
    return body + pages.render_goals(goals) + pages.render_goal_form()


async def player_goal_create(ctx: PageContext, form: Mapping[str, Any]) -> Any:
    try:
        player = await ctx.backend.get_current_player()
        goal = GoalForm.model_validate({**form, "player_id": player.player_id})
        await ctx.backend.create_player_goal(goal.to_payload())
    except ValidationError as exc:
        return await player_goals(ctx, error=describe_errors(exc))
    except (BackendError, NetworkError) as exc:
        logger.warning("Failed to save goal: %s", exc)
        return await player_goals(ctx, error="Failed to save goal")
    return RedirectResponse("/player/my-goals?notice=Goal+saved", status_code=303)


async def player_goal_edit(ctx: PageContext, goal_id: int, error: Optional[str] = None) -> str:
    body = "<h1>Edit Goal</h1>" + pages.render_notice(error)
    try:
        goals = await ctx.backend.fetch_my_goals()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load goal %s: %s", goal_id, exc)
        return body + pages.render_notice("Failed to load goals")
    goal = _find(goals, "player_goal_id", goal_id)
    if goal is None:
        return body + pages.render_notice("Goal not found")
    return body + pages.render_goal_form(goal)


async def player_goal_update(ctx: PageContext, goal_id: int, form: Mapping[str, Any]) -> Any:
    try:
        player = await ctx.backend.get_current_player()
        goal = GoalForm.model_validate({**form, "player_id": player.player_id})
        await ctx.backend.update_player_goal(goal_id, goal.to_payload())
    except ValidationError as exc:
        return await player_goal_edit(ctx, goal_id, error=describe_errors(exc))
    except (BackendError, NetworkError) as exc:
        logger.warning("Failed to update goal %s: %s", goal_id, exc)
        return await player_goal_edit(ctx, goal_id, error="Failed to update goal")
    return RedirectResponse("/player/my-goals?notice=Goal+updated", status_code=303)


async def player_goal_delete(ctx: PageContext, goal_id: int) -> Any:
    try:
        await ctx.backend.delete_player_goal(goal_id)
    except (BackendError, NetworkError) as exc:
        logger.warning("Failed to delete goal %s: %s", goal_id, exc)
        return await player_goals(ctx, error="Failed to delete goal")
    return RedirectResponse("/player/my-goals?notice=Goal+deleted", status_code=303)


# Athletic Director pages


async def ad_dashboard(ctx: PageContext) -> str:
    body = (
        "<h1>Athletic Director Dashboard</h1>"
        f"<p>Welcome back, {escape(ctx.user.name or '')}! Manage your football season from here.</p>"
    )
    try:
        data = await ctx.backend.fetch_athletic_director_dashboard()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load dashboard data: %s", exc)
        return body + pages.render_notice("Failed to load dashboard data") + pages.render_ad_counts({})
    return body + pages.render_ad_counts(data)


async def ad_teams(ctx: PageContext, notice: Optional[str] = None, error: Optional[str] = None) -> str:
    body = "<h1>Teams Management</h1>" + pages.render_notice(notice, "success") + pages.render_notice(error)
    try:
        teams = await ctx.backend.fetch_athletic_director_teams()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load teams: %s", exc)
        return body + pages.render_notice("Failed to load teams") + pages.render_team_form()
    return body + pages.render_team_form() + pages.render_team_list(teams, manage=True)


async def ad_team_create(ctx: PageContext, form: Mapping[str, Any]) -> Any:
    try:
        team = TeamForm.model_validate(form)
        await ctx.backend.create_athletic_director_team(team.to_payload())
    except ValidationError as exc:
        return await ad_teams(ctx, error=describe_errors(exc))
    except (BackendError, NetworkError) as exc:
        logger.warning("Failed to save team: %s", exc)
        return await ad_teams(ctx, error="Failed to save team")
    return RedirectResponse("/athletic-director/teams?notice=Team+saved", status_code=303)


async def ad_team_edit(ctx: PageContext, team_id: int, error: Optional[str] = None) -> str:
    body = "<h1>Edit Team</h1>" + pages.render_notice(error)
    try:
        teams = await ctx.backend.fetch_athletic_director_teams()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load team %s: %s", team_id, exc)
        return body + pages.render_notice("Failed to load teams")
    team = _find(teams, "team_id", team_id)
    if team is None:
        return body + pages.render_notice("Team not found")
    return body + pages.render_team_form(team)


async def ad_team_update(ctx: PageContext, team_id: int, form: Mapping[str, Any]) -> Any:
    try:
        team = TeamForm.model_validate(form)
        await ctx.backend.update_athletic_director_team(team_id, team.to_payload())
    except ValidationError as exc:
        return await ad_team_edit(ctx, team_id, error=describe_errors(exc))
    except (BackendError, NetworkError) as exc:
        logger.warning("Failed to update team %s: %s", team_id, exc)
        return await ad_team_edit(ctx, team_id, error="Failed to update team")
    return RedirectResponse("/athletic-director/teams?notice=Team+updated", status_code=303)


async def ad_team_delete(ctx: PageContext, team_id: int) -> Any:
    try:
        await ctx.backend.delete_athletic_director_team(team_id)
    except (BackendError, NetworkError) as exc:
        logger.warning("Failed to delete team %s: %s", team_id, exc)
        return await ad_teams(ctx, error="Failed to delete team")
    return RedirectResponse("/athletic-director/teams?notice=Team+deleted", status_code=303)


async def ad_games(
    ctx: PageContext,
    search: Optional[str] = None,
    notice: Optional[str] = None,
    error: Optional[str] = None,
) -> str:
    body = "<h1>Games Management</h1>" + pages.render_notice(notice, "success") + pages.render_notice(error)
    try:
        games = await ctx.backend.fetch_athletic_director_games()
        teams = await ctx.backend.fetch_athletic_director_teams()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load games: %s", exc)
        return body + pages.render_notice("Failed to load games")
    search_value = escape(search or "")
    search_form = (
        '<form method="get" action="/athletic-director/games">'
        f'<input name="q" value="{search_value}" placeholder="Search by team, location or week">'
        '<button type="submit">Search</button></form>'
    )
    return (
        body
        + pages.render_game_form(teams, date.today().year)
        + search_form
        + pages.render_game_rows(filter_games(games, search), show_actions=True)
    )


async def ad_game_create(ctx: PageContext, form: Mapping[str, Any]) -> Any:
    try:
        game = GameForm.model_validate(form)
        await ctx.backend.create_athletic_director_game(game.to_payload())
    except ValidationError as exc:
        return await ad_games(ctx, error=describe_errors(exc))
    except (BackendError, NetworkError) as exc:
        logger.warning("Failed to save game: %s", exc)
        return await ad_games(ctx, error="Failed to save game")
    return RedirectResponse("/athletic-director/games?notice=Game+saved", status_code=303)


async def ad_game_edit(ctx: PageContext, game_id: int, error: Optional[str] = None) -> str:
    body = "<h1>Edit Game</h1>" + pages.render_notice(error)
    try:
        games = await ctx.backend.fetch_athletic_director_games()
        teams = await ctx.backend.fetch_athletic_director_teams()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load game %s: %s", game_id, exc)
        return body + pages.render_notice("Failed to load games")
    game = _find(games, "game_id", game_id)
    if game is None:
        return body + pages.render_notice("Game not found")
    return body + pages.render_game_form(teams, game.season or date.today().year, game)


async def ad_game_update(ctx: PageContext, game_id: int, form: Mapping[str, Any]) -> Any:
    try:
        game = GameForm.model_validate(form)
        await ctx.backend.update_athletic_director_game(game_id, game.to_payload())
    except ValidationError as exc:
        return await ad_game_edit(ctx, game_id, error=describe_errors(exc))
    except (BackendError, NetworkError) as exc:
        logger.warning("Failed to update game %s: %s", game_id, exc)
        return await ad_game_edit(ctx, game_id, error="Failed to update game")
    return RedirectResponse("/athletic-director/games?notice=Game+updated", status_code=303)


async def ad_game_delete(ctx: PageContext, game_id: int) -> Any:
    try:
        await ctx.backend.delete_athletic_director_game(game_id)
    except (BackendError, NetworkError) as exc:
        logger.warning("Failed to delete game %s: %s", game_id, exc)
        return await ad_games(ctx, error="Failed to delete game")
    return RedirectResponse("/athletic-director/games?notice=Game+deleted", status_code=303)


async def ad_season_overview(ctx: PageContext, season: Optional[int] = None) -> str:
    current_year = date.today().year
    selected = season or current_year
    try:
        teams = await ctx.backend.fetch_athletic_director_teams()
        games = await ctx.backend.fetch_athletic_director_games()
    except FETCH_ERRORS as exc:
        logger.warning("Failed to load season data: %s", exc)
        return "<h1>Season Overview</h1>" + pages.render_notice("Failed to load season data")
    summary = summarize_season(teams, games, selected)
    options = sorted(set(season_options(current_year)) | {selected})
    return pages.render_season_overview(summary, options)


LOGIN = guest_only(login_form)
LOGIN_SUBMIT = guest_only(login_submit)
REGISTER = guest_only(register_form)
REGISTER_SUBMIT = guest_only(register_submit)

DASHBOARD = protect(generic_dashboard)
TEAM_INFO = protect(team_info)

COACH_DASHBOARD = protect(coach_dashboard, ROLE_COACH)
DEPTH_CHART = protect(depth_chart, ROLE_COACH)
COACH_PLAYER = protect(coach_player, ROLE_COACH)
COACH_SCHEDULE = protect(coach_schedule, ROLE_COACH)
COACH_OPPONENTS = protect(coach_opponents, ROLE_COACH)
COACH_OPPONENT = protect(coach_opponent, ROLE_COACH)

PLAYER_DASHBOARD = protect(player_dashboard, ROLE_PLAYER)
PLAYER_STATS = protect(player_my_stats, ROLE_PLAYER)
PLAYER_GOALS = protect(player_goals, ROLE_PLAYER)
PLAYER_GOAL_CREATE = protect(player_goal_create, ROLE_PLAYER)
PLAYER_GOAL_EDIT = protect(player_goal_edit, ROLE_PLAYER)
PLAYER_GOAL_UPDATE = protect(player_goal_update, ROLE_PLAYER)
PLAYER_GOAL_DELETE = protect(player_goal_delete, ROLE_PLAYER)

AD_DASHBOARD = protect(ad_dashboard, {ROLE_ATHLETIC_DIRECTOR})
AD_TEAMS = protect(ad_teams, {ROLE_ATHLETIC_DIRECTOR})
AD_TEAM_CREATE = protect(ad_team_create, {ROLE_ATHLETIC_DIRECTOR})
AD_TEAM_EDIT = protect(ad_team_edit, {ROLE_ATHLETIC_DIRECTOR})
AD_TEAM_UPDATE = protect(ad_team_update, {ROLE_ATHLETIC_DIRECTOR})
AD_TEAM_DELETE = protect(ad_team_delete, {ROLE_ATHLETIC_DIRECTOR})
AD_GAMES = protect(ad_games, {ROLE_ATHLETIC_DIRECTOR})
AD_GAME_CREATE = protect(ad_game_create, {ROLE_ATHLETIC_DIRECTOR})
AD_GAME_EDIT = protect(ad_game_edit, {ROLE_ATHLETIC_DIRECTOR})
AD_GAME_UPDATE = protect(ad_game_update, {ROLE_ATHLETIC_DIRECTOR})
AD_GAME_DELETE = protect(ad_game_delete, {ROLE_ATHLETIC_DIRECTOR})
AD_SEASON_OVERVIEW = protect(ad_season_overview, {ROLE_ATHLETIC_DIRECTOR})
