"""Observable session state changes.

The identity routes publish an event whenever a session starts, ends or is
refreshed. Subscribers (the shared query cache) react without the routes
knowing about them.
"""

import enum
import logging
from collections.abc import Callable
from uuid import UUID

logger = logging.getLogger(__name__)


class SessionEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


Listener = Callable[[SessionEvent, UUID | None], None]


class SessionEvents:
    """Synchronous publish/subscribe for session events."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: SessionEvent, user_id: UUID | None = None) -> None:
        logger.info("Session event %s for user %s", event.value, user_id)
        for listener in list(self._listeners):
            listener(event, user_id)
