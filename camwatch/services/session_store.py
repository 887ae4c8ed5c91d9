"""Explicit holder of the current authenticated principal."""

import logging
from typing import Callable

from camwatch.models.principal import Principal

logger = logging.getLogger(__name__)

SessionListener = Callable[[Principal | None], None]


class SessionStore:
    """
    Current identity for one client session.

    Passed explicitly to whatever needs the identity (role resolver, route
    guard, services) instead of living in module state. Components that
    cache per-identity data subscribe and are told when the principal
    changes.

    States:
    - pending: identity not resolved yet (token still being checked)
    - anonymous: resolved, nobody signed in
    - authenticated: principal, token and session_id are set
    """

    def __init__(self) -> None:
        self.principal: Principal | None = None
        self.token: str | None = None
        self.session_id: int | None = None
        self.pending = True
        self._listeners: list[SessionListener] = []

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener for identity changes.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_session(self, principal: Principal, token: str, session_id: int) -> None:
        """Store a signed-in identity, notifying listeners if it differs from the current one."""
        changed = self.principal is None or self.principal.id != principal.id
        self.principal = principal
        self.token = token
        self.session_id = session_id
        self.pending = False
        if changed:
            self._notify(principal)

    def clear(self) -> None:
        """Drop the identity (sign-out or invalid token)."""
        changed = self.principal is not None
        self.principal = None
        self.token = None
        self.session_id = None
        self.pending = False
        if changed:
            self._notify(None)

    def _notify(self, principal: Principal | None) -> None:
        logger.debug("Session identity changed to %s", principal.id if principal else None)
        for listener in list(self._listeners):
            listener(principal)
