"""Session state for the signed-in user.

A :class:`SessionStore` is the only writer of session state. Views and guards
read :attr:`SessionStore.snapshot` or subscribe to changes; they never mutate
it. Each store is built explicitly around a gateway and handed to whoever
needs it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from pydantic import ValidationError

from nextup.config.routes import LANDING_ROUTE
from nextup.gateway import BackendClient, BackendError, NetworkError
from nextup.models import User

logger = logging.getLogger(__name__)

Navigate = Callable[[str], None]
Listener = Callable[["SessionSnapshot"], None]


class SessionState(str, Enum):
    INITIALIZING = "initializing"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    LOGGING_OUT = "logging_out"


@dataclass(frozen=True)
class SessionSnapshot:
    identity: Optional[User] = None
    loading: bool = True
    logging_out: bool = False

    @property
    def is_authenticated(self) -> bool:
        return (
            self.identity is not None
            and self.identity.is_authenticated
            and not self.loading
            and not self.logging_out
        )

    @property
    def state(self) -> SessionState:
        if self.logging_out:
            return SessionState.LOGGING_OUT
        if self.loading:
            return SessionState.INITIALIZING
        if self.is_authenticated:
            return SessionState.AUTHENTICATED
        return SessionState.ANONYMOUS

    @property
    def role(self) -> Optional[str]:
        return self.identity.role if self.identity is not None else None


class SessionStore:
    """Single-owner session state machine with change notifications."""

    def __init__(self, gateway: BackendClient, *, navigate: Optional[Navigate] = None) -> None:
        self._gateway = gateway
        self._navigate = navigate
        self._snapshot = SessionSnapshot()
        self._listeners: List[Listener] = []
        # Bumped on every transition; a session check only applies its result
        # if no other transition happened while it was in flight.
        self._generation = 0

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def state(self) -> SessionState:
        return self._snapshot.state

    @property
    def identity(self) -> Optional[User]:
        return self._snapshot.identity

    @property
    def is_authenticated(self) -> bool:
        return self._snapshot.is_authenticated

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, snapshot: SessionSnapshot) -> None:
        self._generation += 1
        if snapshot == self._snapshot:
            return
        previous = self._snapshot.state
        self._snapshot = snapshot
        logger.debug("Session %s -> %s", previous.value, snapshot.state.value)
        for listener in list(self._listeners):
            listener(snapshot)

    async def check_session(self) -> SessionSnapshot:
        """Resolve the session against the gateway; failures mean signed out."""

        self._transition(SessionSnapshot(identity=None, loading=True))
        generation = self._generation
        identity: Optional[User]
        try:
            identity = await self._gateway.get_current_identity()
        except (BackendError, NetworkError, ValidationError) as exc:
            logger.info("Session check failed, treating as signed out: %s", exc)
            identity = None
        if generation != self._generation:
            logger.debug("Discarding stale session check result")
            return self._snapshot
        self._transition(SessionSnapshot(identity=identity, loading=False))
        return self._snapshot

    async def refresh(self) -> SessionSnapshot:
        return await self.check_session()

    def login(self, identity: User) -> None:
        """Record an identity after the caller completed the credential exchange."""

        logger.info("Signed in as %s (%s)", identity.name or identity.email, identity.role)
        self._transition(SessionSnapshot(identity=identity, loading=False))

    def logout(self) -> str:
        """Drop the identity locally and navigate to the landing page."""

        self._transition(SessionSnapshot(identity=None, loading=False, logging_out=True))
        self.redirect(LANDING_ROUTE)
        return LANDING_ROUTE

    def complete_navigation(self) -> None:
        if self._snapshot.logging_out:
            self._transition(SessionSnapshot(identity=None, loading=False))

    def redirect(self, route: str) -> None:
        if self._navigate is not None:
            self._navigate(route)


async def sign_out(store: SessionStore, gateway: BackendClient) -> str:
    """Log out locally, then tell the backend.

    The backend call never blocks or reverses the local transition; if it
    fails, a second redirect to the landing page is issued.
    """

    target = store.logout()
    try:
        await gateway.end_session()
    except (BackendError, NetworkError) as exc:
        logger.warning("Backend logout failed: %s", exc)
        store.redirect(LANDING_ROUTE)
    return target


__all__ = [
    "SessionSnapshot",
    "SessionState",
    "SessionStore",
    "sign_out",
]
