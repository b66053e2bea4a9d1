"""Session Holder — owns the bearer credential read by every outgoing gateway call.

Invariants:
    - current() is None until set(), and again after clear() or invalidation
    - invalidate(token) clears only if token is still the current credential, so N
      concurrent 401s for the same token produce exactly one clear and one notification
    - Listeners are notified once per actual change, never for no-op writes
    - When a CredentialStore is attached, set/clear write through to it

Design Decisions:
    - Compare-and-clear instead of a lock: single event loop, and the check and the
      write happen without an await in between
    - Persistence optional: the holder works purely in memory for tests and fixture mode
"""

import logging
from collections.abc import Callable

from bankard.core.repository_protocols import CredentialStore

logger = logging.getLogger(__name__)

SessionListener = Callable[[str | None], None]


class SessionHolder:
    """Tracks the authentication credential."""

    def __init__(self, store: CredentialStore | None = None):
        self._token: str | None = None
        self._store = store
        self._listeners: list[SessionListener] = []

    def current(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def restore(self) -> bool:
        """Load a persisted credential. Returns whether one was found."""
        if self._store is None:
            return False
        token = await self._store.get_token()
        if token:
            self._replace(token)
            logger.info("Session restored from store")
        return bool(token)

    async def set(self, token: str) -> None:
        if not token:
            raise ValueError("token cannot be empty")
        self._replace(token)
        if self._store is not None:
            await self._store.set_token(token)

    async def clear(self) -> None:
        self._replace(None)
        if self._store is not None:
            await self._store.clear_token()

    async def invalidate(self, token: str | None) -> bool:
        """Clear the session if token is still current. Returns whether it cleared."""
        if token is None or token != self._token:
            return False
        self._replace(None)
        logger.warning("Session invalidated after authorization failure")
        if self._store is not None:
            await self._store.clear_token()
        return True

    def _replace(self, token: str | None) -> None:
        if token == self._token:
            return
        self._token = token
        for listener in list(self._listeners):
            listener(token)
