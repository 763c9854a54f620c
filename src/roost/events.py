"""Session lifecycle events: closed event set and broadcast bus.

Every outcome the session core reports is one ``SessionEventType``
member. Listeners register per type with ``on()`` (or for every type
with ``on_any()``); ``subscribe()`` returns an async iterator for
consumers that prefer to pull events, such as an SSE stream.

Emission is fire-and-forget: listeners run synchronously in
registration order, a listener that returns a coroutine has it
scheduled on the running loop, and a listener that raises is logged
without stopping the broadcast.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

from roost._internal.invoke import fire

logger = logging.getLogger("roost.events")


class SessionEventType(StrEnum):
    """Every event the session core can broadcast."""

    SIGN_IN_SUCCESS = "signInSuccess"
    SIGN_IN_FAILURE = "signInFailure"
    SIGN_OUT_SUCCESS = "signOutSuccess"
    SIGN_UP_SUCCESS = "signUpSuccess"
    SIGN_UP_FAILURE = "signUpFailure"
    SIGN_UP_CONFIRMATION_SUCCESS = "signUpConfirmationSuccess"
    SIGN_UP_CONFIRMATION_FAILURE = "signUpConfirmationFailure"
    REQUEST_PASSWORD_RESET_SUCCESS = "requestPasswordResetSuccess"
    REQUEST_PASSWORD_RESET_FAILURE = "requestPasswordResetFailure"
    SUBMIT_PASSWORD_RESET_SUCCESS = "submitPasswordResetSuccess"
    SUBMIT_PASSWORD_RESET_FAILURE = "submitPasswordResetFailure"
    AUTHENTICATED = "authenticated"
    SIGN_IN_REQUIRED = "signInRequired"
    SIGN_IN_START = "signInStart"


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """A single broadcast event."""

    type: SessionEventType
    payload: Any = None


Listener: TypeAlias = Callable[[SessionEvent], Any]


class EventBus:
    """Broadcast channel for session events.

    Usage::

        bus = EventBus()
        bus.on(SessionEventType.SIGN_IN_FAILURE, lambda e: show(e.payload["message"]))
        bus.emit(SessionEventType.SIGN_IN_FAILURE, {"message": "Bad password"})

        async for event in bus.subscribe():
            ...
    """

    __slots__ = ("_any", "_listeners", "_queues")

    def __init__(self) -> None:
        self._listeners: dict[SessionEventType, list[Listener]] = {}
        self._any: list[Listener] = []
        self._queues: set[asyncio.Queue[SessionEvent | None]] = set()

    def on(self, event_type: SessionEventType | str, listener: Listener) -> Callable[[], None]:
        """Register *listener* for one event type. Returns an unsubscribe callable.

        Raises ``ValueError`` for an unknown event name.
        """
        key = SessionEventType(event_type)
        listeners = self._listeners.setdefault(key, [])
        listeners.append(listener)

        def unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def on_any(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for every event type."""
        self._any.append(listener)

        def unsubscribe() -> None:
            if listener in self._any:
                self._any.remove(listener)

        return unsubscribe

    def emit(self, event_type: SessionEventType | str, payload: Any = None) -> SessionEvent:
        """Broadcast an event to all listeners and subscribers."""
        event = SessionEvent(type=SessionEventType(event_type), payload=payload)
        logger.debug("Broadcasting %s", event.type)

        listeners = (*self._listeners.get(event.type, ()), *self._any)
        for listener in listeners:
            try:
                fire(listener, event)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, event.type)

        for queue in tuple(self._queues):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                # Drop event for slow consumers rather than blocking
                logger.warning("Dropping %s for a slow subscriber", event.type)
        return event

    async def subscribe(self) -> AsyncIterator[SessionEvent]:
        """Subscribe to every event.

        Returns an async iterator that yields events as they are emitted.
        The subscription is cleaned up when the iterator exits.
        """
        queue: asyncio.Queue[SessionEvent | None] = asyncio.Queue(maxsize=256)
        self._queues.add(queue)
        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
        finally:
            self._queues.discard(queue)

    def close(self) -> None:
        """Signal all subscribers to stop."""
        for queue in self._queues:
            try:
                queue.put_nowait(None)
            except asyncio.QueueFull:
                pass
        self._queues.clear()
