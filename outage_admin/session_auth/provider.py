"""In-process session provider with change notification."""

from __future__ import annotations

import logging
from typing import Callable

from .context import SessionRecord, SessionState

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]


class SessionProvider:
    """
    Holds the latest ``SessionState`` and notifies subscribers on every publish.

    Starts in ``LOADING``. Only the most recent state is kept; nothing is queued.
    """

    def __init__(self, initial: SessionState | None = None) -> None:
        self._state = initial or SessionState.loading()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``, deliver the current state to it, return an unsubscribe callable."""
        self._listeners.append(listener)
        listener(self._state)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, state: SessionState) -> None:
        self._state = state
        logger.debug("Session state -> %s", state.status.value)
        for listener in list(self._listeners):
            listener(state)

    def begin_loading(self) -> None:
        self.publish(SessionState.loading())

    def sign_in(self, session: SessionRecord) -> None:
        self.publish(SessionState.authenticated(session))

    def sign_out(self) -> None:
        self.publish(SessionState.unauthenticated())
