import httpx
import pytest

from nextup.gateway import BackendClient
from nextup.guard import (
    DecisionKind,
    evaluate,
    evaluate_guest,
    guest_only,
    normalize_roles,
    protect,
)
from nextup.models import User
from nextup.session import SessionSnapshot, SessionStore


def _snapshot(role=None, *, authenticated=True, loading=False, logging_out=False) -> SessionSnapshot:
    identity = None
    if role is not None:
        identity = User(role=role, name=f"{role} User", is_authenticated=authenticated)
    return SessionSnapshot(identity=identity, loading=loading, logging_out=logging_out)


def _store(identity_payload=None) -> SessionStore:
    def handler(request: httpx.Request) -> httpx.Response:
        if identity_payload is None:
            return httpx.Response(401)
        return httpx.Response(200, json=identity_payload)

    return SessionStore(BackendClient("http://backend.test", transport=httpx.MockTransport(handler)))


def test_anonymous_redirects_to_login():
    decision = evaluate(_snapshot())
    assert decision.kind is DecisionKind.REDIRECT
    assert decision.location == "/login"


def test_role_mismatch_redirects_to_own_dashboard():
    decision = evaluate(_snapshot("Coach"), {"Player"})
    assert decision.location == "/coach/dashboard"


def test_unknown_role_mismatch_goes_to_generic_dashboard():
    decision = evaluate(_snapshot("Referee"), "Coach")
    assert decision.location == "/dashboard"


def test_matching_role_renders():
    assert evaluate(_snapshot("Player"), ["Player", "Coach"]).kind is DecisionKind.RENDER


def test_no_roles_means_any_authenticated_user():
    assert evaluate(_snapshot("Referee")).kind is DecisionKind.RENDER
    assert evaluate(_snapshot("Referee"), set()).kind is DecisionKind.RENDER


def test_loading_and_logging_out_show_indicator():
    assert evaluate(_snapshot("Coach", loading=True), "Coach").kind is DecisionKind.LOADING
    assert evaluate(_snapshot(logging_out=True)).kind is DecisionKind.LOADING
    assert evaluate_guest(_snapshot(loading=True)).kind is DecisionKind.LOADING


def test_unauthenticated_identity_is_treated_as_anonymous():
    decision = evaluate(_snapshot("Coach", authenticated=False), "Coach")
    assert decision.location == "/login"


def test_guest_view_redirects_signed_in_user():
    decision = evaluate_guest(_snapshot("AthleticDirector"))
    assert decision.location == "/athletic-director/dashboard"
    assert evaluate_guest(_snapshot()).kind is DecisionKind.RENDER


def test_normalize_roles():
    assert normalize_roles(None) is None
    assert normalize_roles([]) is None
    assert normalize_roles("Coach") == frozenset({"Coach"})
    assert normalize_roles(("Coach", "Player")) == frozenset({"Coach", "Player"})


@pytest.mark.anyio
async def test_protected_view_does_not_run_for_anonymous():
    calls = []

    async def coach_dashboard():
        calls.append("rendered")
        return "<h1>Coach</h1>"

    store = _store({"role": "Coach", "isAuthenticated": False})
    await store.check_session()

    outcome = await protect(coach_dashboard, "Coach")(store)

    assert outcome.redirect_to == "/login"
    assert outcome.content is None
    assert calls == []


@pytest.mark.anyio
async def test_guest_only_login_redirects_athletic_director():
    def login_page():
        raise AssertionError("login form must not render")

    store = _store({"role": "AthleticDirector", "name": "Alex Director", "isAuthenticated": True})
    await store.check_session()

    outcome = await guest_only(login_page)(store)

    assert outcome.redirect_to == "/athletic-director/dashboard"
    assert not outcome.rendered


@pytest.mark.anyio
async def test_protected_view_renders_with_arguments():
    def player_page(player_id):
        return f"player {player_id}"

    store = _store({"role": "Coach", "isAuthenticated": True})
    await store.check_session()

    outcome = await protect(player_page, {"Coach"})(store, 42)

    assert outcome.rendered
    assert outcome.content == "player 42"


def test_attached_guard_follows_store_changes():
    navigations = []
    store = _store()
    guarded = protect(lambda: "coach", "Coach")
    unsubscribe = guarded.attach(store, navigations.append)

    assert navigations == []

    store.login(User(role="Player", is_authenticated=True))
    assert navigations == ["/player/dashboard"]

    store.logout()
    store.complete_navigation()
    assert navigations[-1] == "/login"

    unsubscribe()
    store.login(User(role="Coach", is_authenticated=True))
    assert navigations[-1] == "/login"
