"""Session provider: configure once, then build the running session.

Configuration happens before first use: choose the backing services by
name or instance and override any hook. ``build()`` validates the
configuration, seeds every default hook, wires the flow controller and
the navigation guard to one shared ``SessionState`` and ``EventBus``,
and returns the ``Session`` the application talks to.

Usage::

    from roost import RouteTable, SessionConfig, SessionProvider
    from roost.services.http import HttpAccountService, HttpSessionService

    provider = SessionProvider(SessionConfig(base_path="/app"))
    provider.register_service("SessionService", lambda: HttpSessionService(API))
    provider.register_service("AccountService", lambda: HttpAccountService(API))
    provider.set_handler("signInStart", lambda redirect: modal.open(redirect))

    routes = RouteTable.from_mapping({
        "/": {"public": True},
        "/users": {},          # private: any falsy ``public`` requires sign-in
        "/error": {"public": True},
    })
    session = provider.build(route_table=routes)

    await session.navigate("/users")   # guest -> signInStart("users")
    await session.sign_in({"email": "...", "password": "..."})
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import replace
from typing import Any

from roost.config import SessionConfig
from roost.errors import ConfigurationError
from roost.events import EventBus, Listener, SessionEvent, SessionEventType
from roost.flow import AuthFlowController
from roost.guard import NavigationEvent, NavigationGuard
from roost.handlers import DefaultHandlers, Handler, HandlerName, HandlerRegistry, validate_handler
from roost.location import Location, MemoryLocation
from roost.notify import LogNotifier, Notifier
from roost.routing.table import RouteTable
from roost.services.protocol import AccountService, SessionService
from roost.services.registry import ServiceFactory, ServiceRegistry
from roost.state import SessionState

logger = logging.getLogger("roost.session")

# Hooks whose default use is announced at build time
_ANNOUNCED_DEFAULTS = (
    HandlerName.SIGN_IN_START,
    HandlerName.SIGN_IN_SUCCESS,
    HandlerName.LOCATION_CHANGE,
)


class SessionProvider:
    """Collects session configuration and builds the ``Session``."""

    __slots__ = ("_config", "_overrides", "_services")

    def __init__(
        self,
        config: SessionConfig | None = None,
        services: ServiceRegistry | None = None,
    ) -> None:
        self._config = config or SessionConfig()
        self._services = services or ServiceRegistry()
        self._overrides: dict[HandlerName, Handler] = {}

    @property
    def config(self) -> SessionConfig:
        return self._config

    def register_service(self, name: str, factory: ServiceFactory) -> None:
        """Make a service available by name to ``set_*_service()``."""
        self._services.register(name, factory)

    def set_session_service(self, service: str | SessionService) -> None:
        """Select the session service by registered name or instance."""
        self._config = replace(self._config, session_service=_check_service(service, "sessionService"))

    def set_account_service(self, service: str | AccountService) -> None:
        """Select the account service by registered name or instance."""
        self._config = replace(self._config, account_service=_check_service(service, "accountService"))

    def set_handler(self, name: Any, fn: Handler) -> None:
        """Override a hook. Validated now, applied when the session is built."""
        key = validate_handler(name, fn)
        self._overrides[key] = fn

    def build(
        self,
        *,
        route_table: RouteTable | None = None,
        location: Location | None = None,
        notifier: Notifier | None = None,
    ) -> Session:
        """Resolve services and wire the running session.

        Raises ``ConfigurationError`` if either service is missing or does
        not implement its protocol.
        """
        cfg = self._config
        sessions = self._services.resolve(cfg.session_service, SessionService, role="sessionService")
        accounts = self._services.resolve(cfg.account_service, AccountService, role="accountService")

        state = SessionState()
        bus = EventBus()
        location = location if location is not None else MemoryLocation()
        notifier = notifier if notifier is not None else LogNotifier()
        routes = route_table if route_table is not None else RouteTable()

        guard = NavigationGuard(
            state=state,
            bus=bus,
            handlers=None,
            sessions=sessions,
            routes=routes,
            base_path=cfg.base_path,
        )
        defaults = DefaultHandlers(
            config=cfg,
            state=state,
            bus=bus,
            location=location,
            notifier=notifier,
            accounts=accounts,
        )
        handlers = HandlerRegistry(
            defaults.as_mapping(guard.default_location_change),
            self._overrides,
        )
        guard.bind(handlers)

        for name in _ANNOUNCED_DEFAULTS:
            if handlers.is_default(name):
                logger.debug("Using default %s method", name.value)

        flow = AuthFlowController(
            state=state,
            bus=bus,
            handlers=handlers,
            sessions=sessions,
            accounts=accounts,
        )
        session = Session(
            config=cfg,
            state=state,
            bus=bus,
            handlers=handlers,
            flow=flow,
            guard=guard,
            location=location,
            notifier=notifier,
        )
        session._install_listeners()
        return session


def _check_service(service: Any, role: str) -> Any:
    if service is None or (isinstance(service, str) and not service):
        msg = f"SessionProvider: set_{role} expects a service name or instance"
        raise ConfigurationError(msg)
    return service


class Session:
    """The running session: current user, auth flows, navigation guard.

    Built by ``SessionProvider.build()``; not meant to be constructed
    directly.
    """

    __slots__ = (
        "_bus",
        "_config",
        "_flow",
        "_guard",
        "_handlers",
        "_location",
        "_notifier",
        "_state",
    )

    def __init__(
        self,
        *,
        config: SessionConfig,
        state: SessionState,
        bus: EventBus,
        handlers: HandlerRegistry,
        flow: AuthFlowController,
        guard: NavigationGuard,
        location: Location,
        notifier: Notifier,
    ) -> None:
        self._config = config
        self._state = state
        self._bus = bus
        self._handlers = handlers
        self._flow = flow
        self._guard = guard
        self._location = location
        self._notifier = notifier

    def _install_listeners(self) -> None:
        self._bus.on(SessionEventType.SIGN_IN_SUCCESS, self._on_sign_in_success)
        self._bus.on(SessionEventType.SIGN_OUT_SUCCESS, self._on_sign_out_success)
        self._bus.on(SessionEventType.SIGN_IN_REQUIRED, self._on_sign_in_required)

    def _on_sign_in_success(self, event: SessionEvent) -> None:
        self._handlers.fire(HandlerName.SIGN_IN_SUCCESS)

    def _on_sign_out_success(self, event: SessionEvent) -> None:
        self._handlers.fire(HandlerName.SIGN_OUT_SUCCESS)

    def _on_sign_in_required(self, event: SessionEvent) -> None:
        self._notifier.error(self._config.sign_in_required_message)
        self._location.path = self._config.sign_in_path

    # -- Collaborators --

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def events(self) -> EventBus:
        return self._bus

    @property
    def handlers(self) -> HandlerRegistry:
        return self._handlers

    @property
    def guard(self) -> NavigationGuard:
        return self._guard

    @property
    def location(self) -> Location:
        return self._location

    # -- Current user --

    @property
    def current_user(self) -> Any:
        return self._state.get()

    @property
    def is_logged_in(self) -> bool:
        return self._state.is_logged_in

    async def reload_user(self) -> None:
        """Run the ``userReload`` hook."""
        await self._handlers.call(HandlerName.USER_RELOAD)

    # -- Hooks and events --

    def set_handler(self, name: Any, fn: Handler) -> None:
        """Override a hook at runtime; used from the next invocation on."""
        self._handlers.set_handler(name, fn)

    def on(self, event_type: SessionEventType | str, listener: Listener) -> Callable[[], None]:
        return self._bus.on(event_type, listener)

    def emit(self, event_type: SessionEventType | str, payload: Any = None) -> SessionEvent:
        """Broadcast an event, e.g. ``signInRequired`` from an HTTP interceptor."""
        return self._bus.emit(event_type, payload)

    def subscribe(self) -> AsyncIterator[SessionEvent]:
        return self._bus.subscribe()

    # -- Navigation --

    async def navigate(self, next_url: str, current_url: str | None = None) -> NavigationEvent:
        return await self._guard.navigate(next_url, current_url)

    async def on_location_change_start(self, event: NavigationEvent) -> None:
        await self._guard.on_location_change_start(event)

    # -- Auth flows --

    async def sign_in(self, credentials: Any) -> bool:
        return await self._flow.sign_in(credentials)

    async def sign_out(self) -> None:
        await self._flow.sign_out()

    def authenticate(self, user: Any) -> None:
        self._flow.authenticate(user)

    async def sign_up(self, credentials: Any) -> Any:
        return await self._flow.sign_up(credentials)

    async def confirm_sign_up(self, token: Any) -> bool:
        return await self._flow.confirm_sign_up(token)

    async def request_password_reset(self, email: str) -> bool:
        return await self._flow.request_password_reset(email)

    async def submit_password_reset(self, data: Any) -> bool:
        return await self._flow.submit_password_reset(data)
