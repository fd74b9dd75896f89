import json
import logging

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from nextup.config_loader import Settings
from nextup.web import create_app

IDENTITIES = {
    "coach-token": {"role": "Coach", "name": "Casey Coach", "email": "casey@example.com", "isAuthenticated": True},
    "player-token": {"role": "Player", "name": "Pat Player", "email": "pat@example.com", "isAuthenticated": True},
    "ad-token": {
        "role": "AthleticDirector",
        "name": "Alex Director",
        "email": "alex@example.com",
        "isAuthenticated": True,
    },
    "scout-token": {"role": "Scout", "name": "Sky Scout", "email": "sky@example.com", "isAuthenticated": True},
}
TOKENS_BY_EMAIL = {identity["email"]: token for token, identity in IDENTITIES.items()}

HAWKS = {"teamId": 10, "name": "Hawks", "location": "Springfield"}
EAGLES = {"teamId": 11, "name": "Eagles", "location": "Shelbyville"}

ROSTER = [
    {"playerId": 1, "name": "Sam Passer", "position": "Quarterback", "jerseyNumber": 7, "age": 17},
    {"playerId": 2, "name": "Backup Arm", "position": "QB", "jerseyNumber": 12},
    {"playerId": 3, "name": "Cory Cover", "position": "Cornerback", "jerseyNumber": 21},
    {"playerId": 4, "name": "Kai Boot", "position": "Kicker", "jerseyNumber": 3},
]

GAMES = [
    {
        "gameId": 100,
        "homeTeamId": 10,
        "awayTeamId": 11,
        "homeTeam": HAWKS,
        "awayTeam": EAGLES,
        "gameDate": "2025-09-05T19:00",
        "location": "Hawks Field",
        "week": 1,
        "season": 2025,
        "status": "Completed",
    },
    {
        "gameId": 101,
        "homeTeamId": 11,
        "awayTeamId": 10,
        "homeTeam": EAGLES,
        "awayTeam": HAWKS,
        "gameDate": "2025-09-12T19:00",
        "location": "Eagle Dome",
        "week": 2,
        "season": 2025,
        "status": "Scheduled",
    },
]


class FakeBackend:
    """In-memory stand-in for the NextUp backend behind ``httpx.MockTransport``."""

    def __init__(self):
        self.requests: list[tuple[str, str, object]] = []
        self.failing: set[str] = set()
        self.undecodable: set[str] = set()
        self.player = {"playerId": 5, "name": "Pat Player", "position": "Running Back", "weight": 190, "team": HAWKS}
        self.ad_teams = [{**HAWKS, "wins": 1, "division": "5A", "isPublic": True}, {**EAGLES, "losses": 1}]
        self.goals = [
            {"playerGoalId": 1, "playerId": 5, "goalType": "Rushing Yards", "targetValue": 1000, "currentValue": 250}
        ]

    def token(self, request: httpx.Request) -> str | None:
        for part in request.headers.get("cookie", "").split(";"):
            name, _, value = part.strip().partition("=")
            if name == "session":
                return value
        return None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))
        if path in self.failing:
            return httpx.Response(500, json={"error": "boom"})
        if path in self.undecodable:
            return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"notgzip")

        if path == "/auth/me":
            identity = IDENTITIES.get(self.token(request) or "")
            return httpx.Response(200, json=identity) if identity else httpx.Response(401)
        if path == "/auth/login":
            token = TOKENS_BY_EMAIL.get(body["email"])
            if token is None or body["password"] != "secret":
                return httpx.Response(401, json={"message": "Invalid credentials"})
            return httpx.Response(
                200,
                json={"message": "Logged in successfully"},
                headers={
                    "set-cookie": (
                        f"session={token}; Path=/; Expires=Wed, 01 Jan 2031 00:00:00 GMT; "
                        "Secure; HttpOnly; SameSite=Strict"
                    )
                },
            )
        if path == "/auth/logout":
            return httpx.Response(200, json={"message": "Logged out"})
        if path == "/auth/register/player":
            return httpx.Response(
                200,
                json={"message": "Player registered and signed in."},
                headers={"set-cookie": "session=player-token; Path=/"},
            )

        if request.method == "PUT":
            return httpx.Response(200, json={**body, "success": True})
        if path == "/api/coaches/me":
            return httpx.Response(200, json={"coachId": 1, "name": "Casey Coach", "team": HAWKS})
        if path == "/api/teams":
            return httpx.Response(200, json=[HAWKS, EAGLES])
        if path == "/api/teams/10":
            return httpx.Response(200, json={**HAWKS, "wins": 1, "losses": 0, "players": ROSTER})
        if path == "/api/teams/11":
            return httpx.Response(200, json={**EAGLES, "players": []})
        if path == "/api/games/upcoming/10":
            return httpx.Response(200, json=GAMES[1:])
        if path == "/api/players/me":
            return httpx.Response(200, json=self.player)
        if path == "/api/players/1":
            return httpx.Response(200, json={**ROSTER[0], "team": HAWKS})
        if path == "/api/stats/player/1":
            return httpx.Response(200, json=[{"completions": 10}, {"completions": 12, "touchdowns": 2}])
        if path == "/api/stats/player/5":
            return httpx.Response(200, json=[{"rushingYards": 80}, {"rushingYards": 45, "rushingTDs": 1}])
        if path == "/api/player-goals/my-goals":
            return httpx.Response(200, json=self.goals)
        if path == "/api/player-goals" and request.method == "POST":
            return httpx.Response(201, json={**body, "playerGoalId": 2})
        if path.startswith("/api/player-goals/") and request.method == "DELETE":
            return httpx.Response(204)
        if path == "/api/athletic-directors/dashboard":
            return httpx.Response(
                200, json={"totalTeams": 2, "totalGames": 2, "completedGames": 1, "upcomingGames": 1}
            )
        if path == "/api/athletic-directors/teams":
            if request.method == "POST":
                return httpx.Response(201, json={**body, "teamId": 12})
            return httpx.Response(200, json=self.ad_teams)
        if path == "/api/athletic-directors/games":
            if request.method == "POST":
                return httpx.Response(201, json={**body, "gameId": 102})
            return httpx.Response(200, json=GAMES)
        return httpx.Response(404)

    def calls(self, method: str, path: str) -> list[object]:
        return [body for m, p, body in self.requests if m == method and p == path]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def client(backend: FakeBackend):
    app = create_app(Settings(api_base_url="http://backend.test"), transport=httpx.MockTransport(backend))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


def _sign_in(client: AsyncClient, token: str) -> None:
    client.cookies.set("session", token)


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_landing_for_guest(client: AsyncClient):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert 'href="/login"' in resp.text
    assert "Log out" not in resp.text


@pytest.mark.anyio
async def test_anonymous_user_is_sent_to_login(client: AsyncClient, backend: FakeBackend):
    resp = await client.get("/coach/dashboard")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"
    assert backend.calls("GET", "/api/coaches/me") == []


@pytest.mark.anyio
async def test_signed_in_user_skips_login_form(client: AsyncClient):
    _sign_in(client, "ad-token")
    resp = await client.get("/login")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/athletic-director/dashboard"


@pytest.mark.anyio
async def test_wrong_role_goes_to_own_dashboard(client: AsyncClient):
    _sign_in(client, "coach-token")
    resp = await client.get("/player/my-goals")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/coach/dashboard"


@pytest.mark.anyio
async def test_unknown_role_uses_generic_dashboard(client: AsyncClient):
    _sign_in(client, "scout-token")
    resp = await client.get("/athletic-director/teams")
    assert resp.headers["location"] == "/dashboard"

    resp = await client.get("/dashboard")
    assert resp.status_code == 200
    assert "Sky Scout" in resp.text


@pytest.mark.anyio
async def test_login_redirects_to_role_dashboard_and_relays_cookie(client: AsyncClient):
    resp = await client.post("/login", data={"email": "casey@example.com", "password": "secret"})
    assert resp.status_code == 303
    assert resp.headers["location"] == "/coach/dashboard"
    cookie = resp.headers["set-cookie"]
    assert "session=coach-token" in cookie
    assert "Path=/" in cookie
    assert "expires=Wed, 01 Jan 2031 00:00:00 GMT" in cookie
    assert "Secure" in cookie
    assert "HttpOnly" in cookie
    assert "samesite=strict" in cookie.lower()


@pytest.mark.anyio
async def test_login_with_bad_password_shows_error(client: AsyncClient):
    resp = await client.post("/login", data={"email": "casey@example.com", "password": "nope"})
    assert resp.status_code == 200
    assert "Invalid credentials" in resp.text
    assert 'value="casey@example.com"' in resp.text


@pytest.mark.anyio
async def test_login_backend_down_shows_generic_error(client: AsyncClient, backend: FakeBackend):
    backend.failing.add("/auth/login")
    resp = await client.post("/login", data={"email": "casey@example.com", "password": "secret"})
    assert resp.status_code == 200
    assert "Login failed" in resp.text


@pytest.mark.anyio
async def test_register_player(client: AsyncClient, backend: FakeBackend):
    form = {
        "user_type": "player",
        "first_name": "Pat",
        "last_name": "Player",
        "email": "pat@example.com",
        "password": "secret",
        "team_id": "10",
        "position": "RB",
        "weight": "",
    }
    resp = await client.post("/register", data=form)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/player/dashboard"
    (payload,) = backend.calls("POST", "/auth/register/player")
    assert payload["teamId"] == 10
    assert payload["firstName"] == "Pat"
    assert payload["weight"] is None


@pytest.mark.anyio
async def test_register_player_requires_team(client: AsyncClient, backend: FakeBackend):
    form = {
        "user_type": "player",
        "first_name": "Pat",
        "last_name": "Player",
        "email": "pat@example.com",
        "password": "secret",
    }
    resp = await client.post("/register", data=form)
    assert resp.status_code == 200
    assert "teamId: Field required" in resp.text
    assert backend.calls("POST", "/auth/register/player") == []


@pytest.mark.anyio
async def test_logout_clears_cookies(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "player-token")
    resp = await client.post("/logout")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    assert 'session=""' in resp.headers["set-cookie"]
    assert backend.calls("POST", "/auth/logout") == [None]


@pytest.mark.anyio
async def test_logout_survives_backend_failure(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "player-token")
    backend.failing.add("/auth/logout")
    resp = await client.post("/logout")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/"


@pytest.mark.anyio
async def test_coach_depth_chart(client: AsyncClient):
    _sign_in(client, "coach-token")
    resp = await client.get("/coach/depth-chart")
    assert resp.status_code == 200
    text = resp.text
    assert "Hawks" in text
    assert text.index("Sam Passer") < text.index("Backup Arm")
    assert '<span class="depth">1st</span>' in text
    assert "Cory Cover" not in text

    resp = await client.get("/coach/depth-chart", params={"unit": "defense"})
    assert "Cory Cover" in resp.text
    assert "Sam Passer" not in resp.text


@pytest.mark.anyio
async def test_coach_player_detail_aggregates_stats(client: AsyncClient):
    _sign_in(client, "coach-token")
    resp = await client.get("/coach/player/1")
    assert resp.status_code == 200
    assert "Sam Passer" in resp.text
    assert '<div class="value">22</div><div class="label">CMP</div>' in resp.text
    assert '<div class="value">--</div><div class="label">ATT</div>' in resp.text


@pytest.mark.anyio
async def test_coach_schedule_error_is_inline(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "coach-token")
    backend.failing.add("/api/games/upcoming/10")
    resp = await client.get("/coach/schedule")
    assert resp.status_code == 200
    assert "Failed to load schedule" in resp.text


@pytest.mark.anyio
async def test_coach_opponents_exclude_own_team(client: AsyncClient):
    _sign_in(client, "coach-token")
    resp = await client.get("/coach/opponents")
    assert 'href="/coach/opponent/11"' in resp.text
    assert 'href="/coach/opponent/10"' not in resp.text


@pytest.mark.anyio
async def test_player_dashboard_shows_next_opponent(client: AsyncClient):
    _sign_in(client, "player-token")
    resp = await client.get("/player/dashboard")
    assert resp.status_code == 200
    assert "vs Eagles" in resp.text
    assert "190 lbs" in resp.text


@pytest.mark.anyio
async def test_player_stats_are_summed(client: AsyncClient):
    _sign_in(client, "player-token")
    resp = await client.get("/player/my-stats")
    assert '<div class="value">125</div><div class="label">RUSH YDS</div>' in resp.text


@pytest.mark.anyio
async def test_player_team_info(client: AsyncClient):
    _sign_in(client, "player-token")
    resp = await client.get("/player/team-info")
    assert resp.status_code == 200
    assert "Record 1-0" in resp.text
    assert "Kai Boot" in resp.text


@pytest.mark.anyio
async def test_player_goal_create_and_delete(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "player-token")
    resp = await client.get("/player/my-goals")
    assert "Rushing Yards" in resp.text
    assert "25%" in resp.text

    resp = await client.post(
        "/player/my-goals", data={"goal_type": "Touchdowns", "target_value": "12", "current_value": ""}
    )
    assert resp.status_code == 303
    (payload,) = backend.calls("POST", "/api/player-goals")
    assert payload["goalType"] == "Touchdowns"
    assert payload["targetValue"] == 12
    assert payload["currentValue"] == 0
    assert payload["playerId"] == 5

    resp = await client.post("/player/my-goals/1/delete")
    assert resp.status_code == 303
    assert backend.calls("DELETE", "/api/player-goals/1") == [None]


@pytest.mark.anyio
async def test_player_goal_validation_error(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "player-token")
    resp = await client.post("/player/my-goals", data={"goal_type": "Sacks", "target_value": "-1"})
    assert resp.status_code == 200
    assert 'class="notice error"' in resp.text
    assert backend.calls("POST", "/api/player-goals") == []


@pytest.mark.anyio
async def test_athletic_director_dashboard_counts(client: AsyncClient):
    _sign_in(client, "ad-token")
    resp = await client.get("/athletic-director/dashboard")
    assert resp.status_code == 200
    assert '<div class="value">2</div><div class="label">Total Teams</div>' in resp.text


@pytest.mark.anyio
async def test_athletic_director_games_search(client: AsyncClient):
    _sign_in(client, "ad-token")
    resp = await client.get("/athletic-director/games", params={"q": "eagle dome"})
    assert resp.status_code == 200
    assert "Eagle Dome" in resp.text
    assert "Hawks Field" not in resp.text


@pytest.mark.anyio
async def test_athletic_director_creates_game(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "ad-token")
    form = {
        "home_team_id": "10",
        "away_team_id": "11",
        "game_date": "2025-10-03",
        "game_time": "19:00",
        "season": "2025",
        "week": "5",
        "status": "Scheduled",
    }
    resp = await client.post("/athletic-director/games", data=form)
    assert resp.status_code == 303
    (payload,) = backend.calls("POST", "/api/athletic-directors/games")
    assert payload["gameDate"] == "2025-10-03T19:00"
    assert payload["season"] == "2025"


@pytest.mark.anyio
async def test_athletic_director_rejects_same_team_game(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "ad-token")
    form = {"home_team_id": "10", "away_team_id": "10", "game_date": "2025-10-03", "game_time": "19:00", "season": "2025"}
    resp = await client.post("/athletic-director/games", data=form)
    assert resp.status_code == 200
    assert "Home and away teams must be different" in resp.text
    assert backend.calls("POST", "/api/athletic-directors/games") == []


@pytest.mark.anyio
async def test_athletic_director_creates_team(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "ad-token")
    resp = await client.post("/athletic-director/teams", data={"name": "Owls", "is_public": "on"})
    assert resp.status_code == 303
    (payload,) = backend.calls("POST", "/api/athletic-directors/teams")
    assert payload["name"] == "Owls"
    assert payload["isPublic"] is True


@pytest.mark.anyio
async def test_season_overview(client: AsyncClient):
    _sign_in(client, "ad-token")
    resp = await client.get("/athletic-director/season-overview", params={"season": 2025})
    assert resp.status_code == 200
    assert '<option value="2025" selected>' in resp.text
    assert '<div class="value">1</div><div class="label">Completed Games</div>' in resp.text


def test_create_app_leaves_server_log_level_alone():
    server_logger = logging.getLogger("uvicorn.error")
    before = server_logger.level

    create_app(Settings(api_base_url="http://backend.test", log_level="DEBUG"))

    assert server_logger.level == before


@pytest.mark.anyio
async def test_undecodable_session_response_redirects_to_login(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "coach-token")
    backend.undecodable.add("/auth/me")
    resp = await client.get("/coach/dashboard")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"


@pytest.mark.anyio
async def test_player_dashboard_tolerates_null_stats(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "player-token")
    backend.player = {**backend.player, "stats": None, "height": None}
    resp = await client.get("/player/dashboard")
    assert resp.status_code == 200
    assert "Failed to load" not in resp.text
    assert "190 lbs" in resp.text
    assert "vs Eagles" in resp.text


@pytest.mark.anyio
async def test_team_list_tolerates_null_team_name(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "ad-token")
    backend.ad_teams = [*backend.ad_teams, {"teamId": 12, "name": None, "isPublic": None}]
    resp = await client.get("/athletic-director/teams")
    assert resp.status_code == 200
    assert "Failed to load teams" not in resp.text
    assert "Unnamed team" in resp.text


@pytest.mark.anyio
async def test_player_goal_edit_and_update(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "player-token")
    resp = await client.get("/player/my-goals")
    assert 'href="/player/my-goals/1/edit"' in resp.text

    resp = await client.get("/player/my-goals/1/edit")
    assert resp.status_code == 200
    assert 'action="/player/my-goals/1"' in resp.text
    assert 'value="Rushing Yards"' in resp.text
    assert 'value="250"' in resp.text

    resp = await client.post(
        "/player/my-goals/1", data={"goal_type": "Rushing Yards", "target_value": "1000", "current_value": "400"}
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/player/my-goals?notice=Goal+updated"
    (payload,) = backend.calls("PUT", "/api/player-goals/1")
    assert payload["currentValue"] == 400
    assert payload["targetValue"] == 1000
    assert payload["playerId"] == 5


@pytest.mark.anyio
async def test_player_goal_edit_unknown_goal(client: AsyncClient):
    _sign_in(client, "player-token")
    resp = await client.get("/player/my-goals/99/edit")
    assert resp.status_code == 200
    assert "Goal not found" in resp.text


@pytest.mark.anyio
async def test_athletic_director_edits_team(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "ad-token")
    resp = await client.get("/athletic-director/teams/10/edit")
    assert resp.status_code == 200
    assert 'action="/athletic-director/teams/10"' in resp.text
    assert 'value="Hawks"' in resp.text
    assert 'value="5A"' in resp.text
    assert 'name="is_public" checked' in resp.text

    resp = await client.post("/athletic-director/teams/10", data={"name": "Hawks", "division": "6A"})
    assert resp.status_code == 303
    assert resp.headers["location"] == "/athletic-director/teams?notice=Team+updated"
    (payload,) = backend.calls("PUT", "/api/athletic-directors/teams/10")
    assert payload["name"] == "Hawks"
    assert payload["division"] == "6A"
    assert payload["isPublic"] is False


@pytest.mark.anyio
async def test_team_edit_requires_athletic_director(client: AsyncClient):
    _sign_in(client, "player-token")
    resp = await client.get("/athletic-director/teams/10/edit")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/player/dashboard"


@pytest.mark.anyio
async def test_athletic_director_edits_game(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "ad-token")
    resp = await client.get("/athletic-director/games")
    assert 'href="/athletic-director/games/101/edit"' in resp.text

    resp = await client.get("/athletic-director/games/101/edit")
    assert resp.status_code == 200
    assert 'action="/athletic-director/games/101"' in resp.text
    assert '<option value="11" selected>Eagles</option>' in resp.text
    assert '<option value="10" selected>Hawks</option>' in resp.text
    assert 'value="2025-09-12"' in resp.text
    assert 'value="19:00"' in resp.text
    assert "<option selected>Scheduled</option>" in resp.text

    form = {
        "home_team_id": "11",
        "away_team_id": "10",
        "game_date": "2025-09-12",
        "game_time": "18:30",
        "season": "2025",
        "week": "2",
        "status": "Completed",
    }
    resp = await client.post("/athletic-director/games/101", data=form)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/athletic-director/games?notice=Game+updated"
    (payload,) = backend.calls("PUT", "/api/athletic-directors/games/101")
    assert payload["gameDate"] == "2025-09-12T18:30"
    assert payload["status"] == "Completed"


@pytest.mark.anyio
async def test_athletic_director_game_update_rejects_same_team(client: AsyncClient, backend: FakeBackend):
    _sign_in(client, "ad-token")
    form = {"home_team_id": "10", "away_team_id": "10", "game_date": "2025-09-12", "game_time": "19:00", "season": "2025"}
    resp = await client.post("/athletic-director/games/101", data=form)
    assert resp.status_code == 200
    assert "Home and away teams must be different" in resp.text
    assert 'action="/athletic-director/games/101"' in resp.text
    assert backend.calls("PUT", "/api/athletic-directors/games/101") == []


@pytest.mark.anyio
async def test_athletic_director_edit_unknown_game(client: AsyncClient):
    _sign_in(client, "ad-token")
    resp = await client.get("/athletic-director/games/999/edit")
    assert resp.status_code == 200
    assert "Game not found" in resp.text
