"""Render-or-redirect guards for protected and guest-only views."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, FrozenSet, Iterable, Optional, Union

from nextup.config.routes import LOGIN_ROUTE, dashboard_route_for
from nextup.session import Navigate, SessionSnapshot, SessionStore

RequiredRoles = Union[str, Iterable[str], None]


class DecisionKind(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    RENDER = "render"


@dataclass(frozen=True)
class GuardDecision:
    kind: DecisionKind
    location: Optional[str] = None

    @classmethod
    def loading(cls) -> "GuardDecision":
        return cls(DecisionKind.LOADING)

    @classmethod
    def redirect(cls, location: str) -> "GuardDecision":
        return cls(DecisionKind.REDIRECT, location)

    @classmethod
    def render(cls) -> "GuardDecision":
        return cls(DecisionKind.RENDER)


@dataclass(frozen=True)
class ViewOutcome:
    decision: GuardDecision
    content: Any = None

    @property
    def rendered(self) -> bool:
        return self.decision.kind is DecisionKind.RENDER

    @property
    def redirect_to(self) -> Optional[str]:
        return self.decision.location if self.decision.kind is DecisionKind.REDIRECT else None


def normalize_roles(required_roles: RequiredRoles) -> Optional[FrozenSet[str]]:
    if required_roles is None:
        return None
    if isinstance(required_roles, str):
        return frozenset({required_roles})
    roles = frozenset(required_roles)
    return roles or None


def evaluate(snapshot: SessionSnapshot, required_roles: RequiredRoles = None) -> GuardDecision:
    """Decide what a protected view should do for the given session."""

    if snapshot.loading or snapshot.logging_out:
        return GuardDecision.loading()
    if not snapshot.is_authenticated:
        return GuardDecision.redirect(LOGIN_ROUTE)
    roles = normalize_roles(required_roles)
    if roles is not None and snapshot.role not in roles:
        return GuardDecision.redirect(dashboard_route_for(snapshot.role))
    return GuardDecision.render()


def evaluate_guest(snapshot: SessionSnapshot) -> GuardDecision:
    """Decide what a guest-only view (login, register) should do."""

    if snapshot.loading or snapshot.logging_out:
        return GuardDecision.loading()
    if snapshot.is_authenticated:
        return GuardDecision.redirect(dashboard_route_for(snapshot.role))
    return GuardDecision.render()


class GuardedView:
    """A view paired with the rule that decides whether it may render.

    The decision is recomputed from the store's current snapshot on every
    call and on every store change; nothing is cached between transitions.
    """

    def __init__(self, view: Callable[..., Any], decide: Callable[[SessionSnapshot], GuardDecision]):
        self.view = view
        self._decide = decide
        self.__name__ = getattr(view, "__name__", type(self).__name__)
        self.__doc__ = getattr(view, "__doc__", None)

    def decide(self, snapshot: SessionSnapshot) -> GuardDecision:
        return self._decide(snapshot)

    async def __call__(self, store: SessionStore, *args: Any, **kwargs: Any) -> ViewOutcome:
        decision = self._decide(store.snapshot)
        if decision.kind is not DecisionKind.RENDER:
            return ViewOutcome(decision)
        content = self.view(*args, **kwargs)
        if inspect.isawaitable(content):
            content = await content
        return ViewOutcome(decision, content)

    def attach(self, store: SessionStore, navigate: Navigate) -> Callable[[], None]:
        """Follow the store, calling ``navigate`` whenever the decision is a redirect."""

        def on_change(snapshot: SessionSnapshot) -> None:
            decision = self._decide(snapshot)
            if decision.kind is DecisionKind.REDIRECT and decision.location:
                navigate(decision.location)

        unsubscribe = store.subscribe(on_change)
        on_change(store.snapshot)
        return unsubscribe


def protect(view: Callable[..., Any], required_roles: RequiredRoles = None) -> GuardedView:
    roles = normalize_roles(required_roles)
    return GuardedView(view, lambda snapshot: evaluate(snapshot, roles))


def guest_only(view: Callable[..., Any]) -> GuardedView:
    return GuardedView(view, evaluate_guest)


__all__ = [
    "DecisionKind",
    "GuardDecision",
    "GuardedView",
    "ViewOutcome",
    "evaluate",
    "evaluate_guest",
    "guest_only",
    "normalize_roles",
    "protect",
]
