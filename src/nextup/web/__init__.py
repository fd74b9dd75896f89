"""FastAPI front end for NextUp.

Every request resolves its own session against the backend, then hands the
snapshot to the page's access guard before any view code runs. Browser
cookies are relayed to the backend untouched, and cookies the backend sets
during login or registration are relayed back to the browser.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from nextup import __version__
from nextup.config.routes import GENERIC_DASHBOARD_ROUTE, LANDING_ROUTE, LOGIN_ROUTE, REGISTER_ROUTE
from nextup.config_loader import Settings
from nextup.gateway import BackendClient
from nextup.guard import GuardedView, ViewOutcome
from nextup.models import User
from nextup.session import SessionStore, sign_out
from nextup.web import views
from nextup.web.pages import render_landing, render_loading, render_page
from nextup.web.views import PageContext

logger = logging.getLogger("uvicorn.error")


def to_response(outcome: ViewOutcome, *, user: Optional[User], title: str) -> Response:
    """Turn a guard outcome into an HTTP response."""

    if outcome.redirect_to:
        return RedirectResponse(outcome.redirect_to, status_code=303)
    if not outcome.rendered:
        return HTMLResponse(render_page(render_loading(), title=title, user=user))
    if isinstance(outcome.content, Response):
        return outcome.content
    return HTMLResponse(render_page(outcome.content or "", title=title, user=user))


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title=settings.app_title, version=__version__)
    app.state.settings = settings

    def backend_for(request: Request) -> BackendClient:
        return BackendClient(settings.api_base_url, cookies=request.cookies, transport=transport)

    async def serve(request: Request, guarded: GuardedView, *args: Any, **kwargs: Any) -> Response:
        async with backend_for(request) as backend:
            store = SessionStore(backend)
            await store.check_session()
            outcome = await guarded(store, PageContext(store, backend), *args, **kwargs)
            user = store.identity if store.is_authenticated else None
        return to_response(outcome, user=user, title=settings.app_title)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(LANDING_ROUTE, response_class=HTMLResponse)
    async def landing(request: Request):
        async with backend_for(request) as backend:
            store = SessionStore(backend)
            await store.check_session()
        user = store.identity if store.is_authenticated else None
        return HTMLResponse(render_page(render_landing(user), title=settings.app_title, user=user))

    @app.get(LOGIN_ROUTE, response_class=HTMLResponse)
    async def login_page(request: Request):
        return await serve(request, views.LOGIN)

    @app.post(LOGIN_ROUTE, response_class=HTMLResponse)
    async def login_submit(request: Request, email: str = Form(...), password: str = Form(...)):
        return await serve(request, views.LOGIN_SUBMIT, email, password)

    @app.get(REGISTER_ROUTE, response_class=HTMLResponse)
    async def register_page(request: Request):
        return await serve(request, views.REGISTER)

    @app.post(REGISTER_ROUTE, response_class=HTMLResponse)
    async def register_submit(request: Request):
        form = await request.form()
        return await serve(request, views.REGISTER_SUBMIT, dict(form))

    @app.post("/logout")
    async def logout(request: Request):
        navigations: list[str] = []
        async with backend_for(request) as backend:
            store = SessionStore(backend, navigate=navigations.append)
            await store.check_session()
            target = await sign_out(store, backend)
            store.complete_navigation()
        logger.info("Signed out; redirecting to %s", navigations[-1] if navigations else target)
        response = RedirectResponse(target, status_code=303)
        for name in request.cookies:
            response.delete_cookie(name)
        return response

    @app.get(GENERIC_DASHBOARD_ROUTE, response_class=HTMLResponse)
    async def dashboard(request: Request):
        return await serve(request, views.DASHBOARD)

    @app.get("/player/team-info", response_class=HTMLResponse)
    async def team_info(request: Request):
        return await serve(request, views.TEAM_INFO)

    # Coach

    @app.get("/coach/dashboard", response_class=HTMLResponse)
    async def coach_dashboard(request: Request):
        return await serve(request, views.COACH_DASHBOARD)

    @app.get("/coach/depth-chart", response_class=HTMLResponse)
    async def depth_chart(request: Request, unit: Optional[str] = None):
        return await serve(request, views.DEPTH_CHART, unit)

    @app.get("/coach/player/{player_id}", response_class=HTMLResponse)
    async def coach_player(request: Request, player_id: int):
        return await serve(request, views.COACH_PLAYER, player_id)

    @app.get("/coach/schedule", response_class=HTMLResponse)
    async def coach_schedule(request: Request):
        return await serve(request, views.COACH_SCHEDULE)

    @app.get("/coach/opponents", response_class=HTMLResponse)
    async def coach_opponents(request: Request):
        return await serve(request, views.COACH_OPPONENTS)

    @app.get("/coach/opponent/{team_id}", response_class=HTMLResponse)
    async def coach_opponent(request: Request, team_id: int):
        return await serve(request, views.COACH_OPPONENT, team_id)

    # Player

    @app.get("/player/dashboard", response_class=HTMLResponse)
    async def player_dashboard(request: Request):
        return await serve(request, views.PLAYER_DASHBOARD)

    @app.get("/player/my-stats", response_class=HTMLResponse)
    async def player_stats(request: Request):
        return await serve(request, views.PLAYER_STATS)

    @app.get("/player/my-goals", response_class=HTMLResponse)
    async def player_goals(request: Request, notice: Optional[str] = None):
        return await serve(request, views.PLAYER_GOALS, notice=notice)

    @app.post("/player/my-goals", response_class=HTMLResponse)
    async def player_goal_create(request: Request):
        form = await request.form()
        return await serve(request, views.PLAYER_GOAL_CREATE, dict(form))

    @app.get("/player/my-goals/{goal_id}/edit", response_class=HTMLResponse)
    async def player_goal_edit(request: Request, goal_id: int):
        return await serve(request, views.PLAYER_GOAL_EDIT, goal_id)

    @app.post("/player/my-goals/{goal_id}", response_class=HTMLResponse)
    async def player_goal_update(request: Request, goal_id: int):
        form = await request.form()
        return await serve(request, views.PLAYER_GOAL_UPDATE, goal_id, dict(form))

    @app.post("/player/my-goals/{goal_id}/delete", response_class=HTMLResponse)
    async def player_goal_delete(request: Request, goal_id: int):
        return await serve(request, views.PLAYER_GOAL_DELETE, goal_id)

    # Athletic Director

    @app.get("/athletic-director/dashboard", response_class=HTMLResponse)
    async def ad_dashboard(request: Request):
        return await serve(request, views.AD_DASHBOARD)

    @app.get("/athletic-director/teams", response_class=HTMLResponse)
    async def ad_teams(request: Request, notice: Optional[str] = None):
        return await serve(request, views.AD_TEAMS, notice=notice)

    @app.post("/athletic-director/teams", response_class=HTMLResponse)
    async def ad_team_create(request: Request):
        form = await request.form()
        return await serve(request, views.AD_TEAM_CREATE, dict(form))

    @app.get("/athletic-director/teams/{team_id}/edit", response_class=HTMLResponse)
    async def ad_team_edit(request: Request, team_id: int):
        return await serve(request, views.AD_TEAM_EDIT, team_id)

    @app.post("/athletic-director/teams/{team_id}", response_class=HTMLResponse)
    async def ad_team_update(request: Request, team_id: int):
        form = await request.form()
        return await serve(request, views.AD_TEAM_UPDATE, team_id, dict(form))

    @app.post("/athletic-director/teams/{team_id}/delete", response_class=HTMLResponse)
    async def ad_team_delete(request: Request, team_id: int):
        return await serve(request, views.AD_TEAM_DELETE, team_id)

    @app.get("/athletic-director/games", response_class=HTMLResponse)
    async def ad_games(request: Request, q: Optional[str] = None, notice: Optional[str] = None):
        return await serve(request, views.AD_GAMES, search=q, notice=notice)

    @app.post("/athletic-director/games", response_class=HTMLResponse)
    async def ad_game_create(request: Request):
        form = await request.form()
        return await serve(request, views.AD_GAME_CREATE, dict(form))

    @app.get("/athletic-director/games/{game_id}/edit", response_class=HTMLResponse)
    async def ad_game_edit(request: Request, game_id: int):
        return await serve(request, views.AD_GAME_EDIT, game_id)

    @app.post("/athletic-director/games/{game_id}", response_class=HTMLResponse)
    async def ad_game_update(request: Request, game_id: int):
        form = await request.form()
        return await serve(request, views.AD_GAME_UPDATE, game_id, dict(form))

    @app.post("/athletic-director/games/{game_id}/delete", response_class=HTMLResponse)
    async def ad_game_delete(request: Request, game_id: int):
        return await serve(request, views.AD_GAME_DELETE, game_id)

    @app.get("/athletic-director/season-overview", response_class=HTMLResponse)
    async def ad_season_overview(request: Request, season: Optional[int] = None):
        return await serve(request, views.AD_SEASON_OVERVIEW, season)

    return app


__all__ = ["create_app", "to_response"]
