"""Navigation guard: one-shot session probe plus per-navigation access check.

Every navigation start goes through ``on_location_change_start()``:

1. The first navigation after load probes the session service for an
   existing session. The probe runs once per guard lifetime; navigations
   that arrive while it is in flight wait for the same probe. Success
   with an identified user signs that user in; anything else leaves the
   session as guest. Either way the guard is ``PROBED`` afterwards.
2. The ``locationChange`` hook runs with the event and its destination.

The default ``locationChange`` lets signed-in users through and checks
guests against the route table: the first matching route decides, and a
private match starts the sign-in flow with the destination as redirect
target.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlsplit

from roost.errors import RoostError, SessionProbeFailure
from roost.events import EventBus, SessionEventType
from roost.handlers import HandlerName, HandlerRegistry
from roost.routing.table import RouteTable
from roost.services.protocol import SessionService
from roost.services.results import Failure, Success, call_service, require_identity
from roost.state import SessionState, has_identity, identity_of

logger = logging.getLogger("roost.guard")


class BootstrapState(StrEnum):
    UNPROBED = "unprobed"
    PROBED = "probed"


@dataclass(slots=True)
class NavigationEvent:
    """A navigation attempt.

    ``next_url`` may be a full URL or a path. A custom ``locationChange``
    hook can call ``prevent_default()`` to tell the host router to stay
    put.
    """

    next_url: str
    current_url: str | None = None
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


def normalize_path(url: str, base_path: str = "") -> str:
    """Reduce a navigation URL to the app-relative path.

    Drops the scheme and host, the *base_path* prefix, the query string,
    the fragment and a single trailing ``/``::

        >>> normalize_path("https://example.com/users/?tab=1")
        '/users'
        >>> normalize_path("/app/users/42", base_path="/app")
        '/users/42'
    """
    path = urlsplit(url).path if "://" in url else url.split("?", 1)[0].split("#", 1)[0]

    base = base_path.rstrip("/")
    if base and (path == base or path.startswith(base + "/")):
        path = path[len(base) :]

    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return path


class NavigationGuard:
    """Intercepts navigation attempts for a single application lifetime."""

    __slots__ = (
        "_base_path",
        "_bus",
        "_handlers",
        "_probe",
        "_routes",
        "_sessions",
        "_state",
        "_status",
    )

    def __init__(
        self,
        *,
        state: SessionState,
        bus: EventBus,
        handlers: HandlerRegistry | None,
        sessions: SessionService,
        routes: RouteTable,
        base_path: str = "",
    ) -> None:
        self._state = state
        self._bus = bus
        self._handlers = handlers
        self._sessions = sessions
        self._routes = routes
        self._base_path = base_path
        self._status = BootstrapState.UNPROBED
        self._probe: asyncio.Future[None] | None = None

    def bind(self, handlers: HandlerRegistry) -> None:
        """Attach the registry holding this guard's ``locationChange`` default.

        The registry is built after the guard, since it stores
        ``default_location_change`` as one of its defaults.
        """
        self._handlers = handlers

    @property
    def status(self) -> BootstrapState:
        return self._status

    @property
    def routes(self) -> RouteTable:
        return self._routes

    async def on_location_change_start(self, event: NavigationEvent) -> None:
        """Handle one navigation start."""
        if self._handlers is None:
            msg = "NavigationGuard has no handler registry bound."
            raise RuntimeError(msg)

        if self._probe is None:
            logger.info("Welcome newcomer! Checking your session...")
            self._probe = asyncio.ensure_future(self._probe_session())

        if self._status is BootstrapState.UNPROBED:
            # A later navigation must not cancel the shared probe
            await asyncio.shield(self._probe)

        await self._handlers.call(HandlerName.LOCATION_CHANGE, event, event.next_url)

    async def navigate(self, next_url: str, current_url: str | None = None) -> NavigationEvent:
        """Run the guard for a navigation to *next_url* and return the event."""
        event = NavigationEvent(next_url=next_url, current_url=current_url)
        await self.on_location_change_start(event)
        return event

    async def _probe_session(self) -> None:
        try:
            match require_identity(await call_service(self._sessions.session)):
                case Success(value=user):
                    logger.info("Session restored for id=%r", identity_of(user))
                    self._state.set(user)
                case Failure(error=error, message=message):
                    failure = SessionProbeFailure(message, cause=error)
                    logger.info("Session check failed: %s", failure)
                    logger.info("Proceeding as guest.")
        finally:
            self._status = BootstrapState.PROBED

    async def default_location_change(self, event: NavigationEvent, next_url: str) -> None:
        """Let signed-in users through; challenge guests on private routes."""
        path = normalize_path(next_url, self._base_path)

        if has_identity(self._state.get()):
            logger.debug("Proceeding to load %s", path)
            return

        try:
            route = self._routes.first_match(path)
        except RoostError:
            logger.exception("Could not classify %s; treating it as unrestricted", path)
            route = None

        if route is None:
            logger.debug("Guest access to %s: no route declared", path)
            return

        logger.debug(
            "Guest access to %s: %s", path, "public" if route.public else "private"
        )
        if not route.public:
            self._bus.emit(SessionEventType.SIGN_IN_START, path)
            await self._handlers.call(HandlerName.SIGN_IN_START, path[1:])  # type: ignore[union-attr]

    def is_public(self, url: str) -> bool | None:
        """Classify *url* against the route table; ``None`` if undeclared."""
        route = self._routes.first_match(normalize_path(url, self._base_path))
        if route is None:
            return None
        return route.public
