"""HTTP client for the NextUp backend (auth gateway and domain API)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel

from nextup.models import Coach, Game, Player, PlayerGoal, Team, User

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5164"
LOGIN_SUCCESS_MESSAGE = "Logged in successfully"
REGISTER_SUCCESS_MESSAGES = frozenset(
    {"Player registered and signed in.", "Coach registered and signed in."}
)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BackendError(Exception):
    """Non-success response from the backend."""

    def __init__(self, status_code: Optional[int], message: Optional[str] = None):
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code


class Unauthenticated(BackendError):
    """No valid session is attached to the request."""


class InvalidCredentials(BackendError):
    """The backend rejected an email/password pair."""


class NetworkError(Exception):
    """The backend could not be reached."""


@dataclass(frozen=True)
class BackendCookie:
    """A cookie set by the backend, with the attributes the browser needs."""

    name: str
    value: str
    path: str = "/"
    expires: Optional[int] = None
    secure: bool = False
    httponly: bool = False
    samesite: str = "lax"


@dataclass(frozen=True)
class SessionConfirmation:
    payload: Dict[str, Any]
    cookies: Tuple[BackendCookie, ...] = ()


def _has_attr(cookie: Any, name: str) -> bool:
    # ASP.NET writes attribute names in lower case.
    return cookie.has_nonstandard_attr(name) or cookie.has_nonstandard_attr(name.lower())


def _backend_cookies(response: httpx.Response) -> Tuple[BackendCookie, ...]:
    cookies = []
    for cookie in response.cookies.jar:
        samesite = cookie.get_nonstandard_attr("SameSite") or cookie.get_nonstandard_attr("samesite") or "lax"
        samesite = str(samesite).lower()
        cookies.append(
            BackendCookie(
                name=cookie.name,
                value=cookie.value or "",
                path=cookie.path or "/",
                expires=cookie.expires,
                secure=bool(cookie.secure),
                httponly=_has_attr(cookie, "HttpOnly"),
                samesite=samesite if samesite in ("lax", "strict", "none") else "lax",
            )
        )
    return tuple(cookies)


def _as_model(payload: Any, model: Type[ModelT]) -> ModelT:
    if not isinstance(payload, Mapping):
        raise BackendError(None, f"Unexpected {model.__name__} payload")
    return model.model_validate(payload)


def _as_models(payload: Any, model: Type[ModelT]) -> List[ModelT]:
    if not payload:
        return []
    if not isinstance(payload, list):
        raise BackendError(None, f"Expected a list of {model.__name__}")
    return [model.model_validate(item) for item in payload]


class BackendClient:
    """Thin async wrapper over ``httpx.AsyncClient``.

    ``cookies`` are the browser's cookies, relayed untouched so the backend
    sees its own session credential.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        cookies: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            cookies=dict(cookies or {}),
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        try:
            return await self._client.request(method, path, json=json)
        except httpx.RequestError as exc:
            logger.warning("Backend request %s %s failed: %s", method, path, exc)
            raise NetworkError(str(exc)) from exc

    @staticmethod
    def _payload(response: httpx.Response) -> Any:
        if response.status_code == 204:
            return {"success": True}
        if response.is_error:
            raise BackendError(response.status_code)
        try:
            return response.json()
        except ValueError:
            return None

    async def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        response = await self._send(method, path, json=json)
        return self._payload(response)

    # Auth gateway

    async def get_current_identity(self) -> User:
        try:
            payload = await self._request("GET", "/auth/me")
        except BackendError as exc:
            if exc.status_code in (401, 403):
                raise Unauthenticated(exc.status_code) from exc
            raise
        if not isinstance(payload, Mapping):
            raise Unauthenticated(None, "No identity in session response")
        return User.model_validate(payload)

    async def submit_credentials(self, email: str, password: str) -> SessionConfirmation:
        response = await self._send("POST", "/auth/login", json={"email": email, "password": password})
        if response.status_code in (400, 401):
            raise InvalidCredentials(response.status_code, "Invalid credentials")
        payload = self._payload(response)
        if not isinstance(payload, Mapping) or not (
            payload.get("message") == LOGIN_SUCCESS_MESSAGE or payload.get("success")
        ):
            raise InvalidCredentials(response.status_code, "Invalid credentials")
        return SessionConfirmation(payload=dict(payload), cookies=_backend_cookies(response))

    async def end_session(self) -> Any:
        return await self._request("POST", "/auth/logout")

    async def _register(self, path: str, data: Mapping[str, Any]) -> SessionConfirmation:
        response = await self._send("POST", path, json=dict(data))
        payload = self._payload(response)
        if not isinstance(payload, Mapping) or payload.get("message") not in REGISTER_SUCCESS_MESSAGES:
            raise BackendError(response.status_code, "Registration failed")
        return SessionConfirmation(payload=dict(payload), cookies=_backend_cookies(response))

    async def register_player(self, data: Mapping[str, Any]) -> SessionConfirmation:
        return await self._register("/auth/register/player", data)

    async def register_coach(self, data: Mapping[str, Any]) -> SessionConfirmation:
        return await self._register("/auth/register/coach", data)

    # Domain API

    async def fetch_teams(self) -> List[Team]:
        return _as_models(await self._request("GET", "/api/teams"), Team)

    async def get_current_player(self) -> Player:
        return _as_model(await self._request("GET", "/api/players/me"), Player)

    async def get_current_coach(self) -> Coach:
        return _as_model(await self._request("GET", "/api/coaches/me"), Coach)

    async def fetch_team_by_id(self, team_id: int) -> Team:
        return _as_model(await self._request("GET", f"/api/teams/{team_id}"), Team)

    async def fetch_my_team(self) -> Team:
        player = await self.get_current_player()
        if player.team is None or player.team.team_id is None:
            raise BackendError(None, "Player team information not available")
        return await self.fetch_team_by_id(player.team.team_id)

    async def fetch_upcoming_games(self, team_id: int) -> List[Game]:
        return _as_models(await self._request("GET", f"/api/games/upcoming/{team_id}"), Game)

    async def fetch_player_by_id(self, player_id: int) -> Player:
        return _as_model(await self._request("GET", f"/api/players/{player_id}"), Player)

    async def fetch_player_stats(self, player_id: int) -> List[Dict[str, Any]]:
        payload = await self._request("GET", f"/api/stats/player/{player_id}")
        return list(payload) if isinstance(payload, list) else []

    async def fetch_my_goals(self) -> List[PlayerGoal]:
        return _as_models(await self._request("GET", "/api/player-goals/my-goals"), PlayerGoal)

    async def create_player_goal(self, data: Mapping[str, Any]) -> Any:
        return await self._request("POST", "/api/player-goals", json=dict(data))

    async def update_player_goal(self, goal_id: int, data: Mapping[str, Any]) -> Any:
        return await self._request("PUT", f"/api/player-goals/{goal_id}", json=dict(data))

    async def delete_player_goal(self, goal_id: int) -> Any:
        return await self._request("DELETE", f"/api/player-goals/{goal_id}")

    async def fetch_athletic_director_dashboard(self) -> Dict[str, Any]:
        payload = await self._request("GET", "/api/athletic-directors/dashboard")
        return dict(payload) if isinstance(payload, Mapping) else {}

    async def fetch_athletic_director_teams(self) -> List[Team]:
        return _as_models(await self._request("GET", "/api/athletic-directors/teams"), Team)

    async def create_athletic_director_team(self, data: Mapping[str, Any]) -> Any:
        return await self._request("POST", "/api/athletic-directors/teams", json=dict(data))

    async def update_athletic_director_team(self, team_id: int, data: Mapping[str, Any]) -> Any:
        return await self._request("PUT", f"/api/athletic-directors/teams/{team_id}", json=dict(data))

    async def delete_athletic_director_team(self, team_id: int) -> Any:
        return await self._request("DELETE", f"/api/athletic-directors/teams/{team_id}")

    async def fetch_athletic_director_games(self) -> List[Game]:
        return _as_models(await self._request("GET", "/api/athletic-directors/games"), Game)

    async def create_athletic_director_game(self, data: Mapping[str, Any]) -> Any:
        return await self._request("POST", "/api/athletic-directors/games", json=dict(data))

    async def update_athletic_director_game(self, game_id: int, data: Mapping[str, Any]) -> Any:
        return await self._request("PUT", f"/api/athletic-directors/games/{game_id}", json=dict(data))

    async def delete_athletic_director_game(self, game_id: int) -> Any:
        return await self._request("DELETE", f"/api/athletic-directors/games/{game_id}")


__all__ = [
    "DEFAULT_BASE_URL",
    "BackendClient",
    "BackendCookie",
    "BackendError",
    "InvalidCredentials",
    "NetworkError",
    "SessionConfirmation",
    "Unauthenticated",
]
