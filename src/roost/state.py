"""Session state: the single owner of the current user.

The flow controller and the guard receive the same ``SessionState`` by
reference. Nothing else stores the current user; every write goes
through ``set()`` / ``clear()``.

Users are whatever the session service returns: an object with an ``id``
attribute or a mapping with an ``"id"`` key. ``identity_of()`` reads
either form.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable, TypeAlias

from roost._internal.invoke import fire

logger = logging.getLogger("roost.session")


@runtime_checkable
class User(Protocol):
    """Minimal user protocol. Any object with an ``id`` satisfies it."""

    @property
    def id(self) -> Any: ...


UserListener: TypeAlias = Callable[[Any, Any], Any]


def identity_of(user: Any) -> Any:
    """Return the user's identifier, or ``None`` for a guest/id-less user."""
    if user is None:
        return None
    if isinstance(user, Mapping):
        return user.get("id")
    return getattr(user, "id", None)


def has_identity(user: Any) -> bool:
    """True if *user* carries a truthy identifier."""
    return bool(identity_of(user))


class SessionState:
    """Holds the current user for the lifetime of the application.

    ``None`` means no one is signed in (guest or not yet probed).

    Usage::

        state = SessionState()
        state.on_change(lambda new, old: print("user changed", new))
        state.set({"id": 7, "name": "alice"})
        state.is_logged_in  # True
        state.clear()
    """

    __slots__ = ("_listeners", "_user")

    def __init__(self, user: Any = None) -> None:
        self._user = user
        self._listeners: list[UserListener] = []

    def get(self) -> Any:
        return self._user

    @property
    def user(self) -> Any:
        return self._user

    @property
    def is_logged_in(self) -> bool:
        return has_identity(self._user)

    def set(self, user: Any) -> None:
        """Replace the current user and notify watchers."""
        previous = self._user
        self._user = user
        logger.debug("Current user set to id=%r", identity_of(user))
        self._notify(user, previous)

    def clear(self) -> None:
        """Forget the current user."""
        if self._user is None:
            return
        previous = self._user
        self._user = None
        logger.debug("Current user cleared")
        self._notify(None, previous)

    def on_change(self, listener: UserListener) -> Callable[[], None]:
        """Watch the current user. Returns a callable that stops watching.

        The listener receives ``(new_user, previous_user)``.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, user: Any, previous: Any) -> None:
        if user is previous:
            return
        for listener in tuple(self._listeners):
            try:
                fire(listener, user, previous)
            except Exception:
                logger.exception("Current-user watcher %r failed", listener)
