"""Handler registry: the overridable lifecycle hooks.

The hook set is fixed (``HandlerName``). Every hook has a default, seeded
when the registry is built; overrides replace a default through the one
validated entry point, ``set_handler()``::

    provider.set_handler("signInStart", lambda redirect: modal.open(redirect))
    session.set_handler(HandlerName.SIGN_IN_SUCCESS, modal.close)

Hook names are accepted as the ``HandlerName`` member, its camelCase
value (``"signInStart"``), the ``handle``-prefixed form
(``"handleSignInStart"``) or snake_case (``"sign_in_start"``).

Hooks are looked up at call time, so an override takes effect on the
very next invocation. Hooks can be ``def`` or ``async def``.
"""

import logging
import re
from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any, TypeAlias
from urllib.parse import quote, unquote

from roost._internal.invoke import fire, invoke
from roost.config import SessionConfig
from roost.errors import ConfigurationError, InvalidHandlerName, InvalidHandlerValue
from roost.events import EventBus, SessionEventType
from roost.location import Location
from roost.notify import Notifier
from roost.services.protocol import AccountService
from roost.services.results import Failure, Success, call_service
from roost.state import SessionState, has_identity

logger = logging.getLogger("roost.session")


class HandlerName(StrEnum):
    """The fixed set of overridable hooks."""

    SIGN_IN_START = "signInStart"
    SIGN_IN_SUCCESS = "signInSuccess"
    SIGN_OUT_SUCCESS = "signOutSuccess"
    SIGN_UP_SUCCESS = "signUpSuccess"
    SIGN_UP_FAILURE = "signUpFailure"
    LOCATION_CHANGE = "locationChange"
    USER_RELOAD = "userReload"


Handler: TypeAlias = Callable[..., Any]


def _aliases() -> dict[str, HandlerName]:
    table: dict[str, HandlerName] = {}
    for member in HandlerName:
        key = member.value
        table[key] = member
        table["handle" + key[0].upper() + key[1:]] = member
        table[re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()] = member
    return table


_ALIASES: dict[str, HandlerName] = _aliases()


def resolve_handler_name(name: object) -> HandlerName:
    """Map any accepted spelling of a hook name to its ``HandlerName``.

    Raises ``InvalidHandlerName`` for anything outside the fixed set.
    """
    if isinstance(name, HandlerName):
        return name
    if isinstance(name, str) and name in _ALIASES:
        return _ALIASES[name]
    raise InvalidHandlerName(name)


def validate_handler(name: object, fn: object) -> HandlerName:
    """Validate a hook override. Returns the resolved hook name."""
    key = resolve_handler_name(name)
    if not callable(fn):
        raise InvalidHandlerValue(key.value, fn)
    return key


class HandlerRegistry:
    """Validated table of lifecycle hooks.

    Built with a default for every ``HandlerName``; *overrides* recorded
    before the build are applied on top of the defaults.
    """

    __slots__ = ("_defaults", "_handlers")

    def __init__(
        self,
        defaults: Mapping[HandlerName, Handler],
        overrides: Mapping[Any, Handler] | None = None,
    ) -> None:
        missing = [name.value for name in HandlerName if name not in defaults]
        if missing:
            msg = f"Missing default handlers: {', '.join(missing)}"
            raise ConfigurationError(msg)

        self._defaults: dict[HandlerName, Handler] = dict(defaults)
        self._handlers: dict[HandlerName, Handler] = dict(defaults)
        for name, fn in (overrides or {}).items():
            self.set_handler(name, fn)

    def set_handler(self, name: Any, fn: Handler) -> None:
        """Replace a hook.

        Raises ``InvalidHandlerName`` or ``InvalidHandlerValue``; the
        previous hook stays in place on failure.
        """
        key = validate_handler(name, fn)
        self._handlers[key] = fn

    def reset(self, name: Any) -> None:
        """Restore the default for a hook."""
        key = resolve_handler_name(name)
        self._handlers[key] = self._defaults[key]

    def get(self, name: Any) -> Handler:
        return self._handlers[resolve_handler_name(name)]

    def __getitem__(self, name: Any) -> Handler:
        return self.get(name)

    def is_default(self, name: Any) -> bool:
        key = resolve_handler_name(name)
        return self._handlers[key] is self._defaults[key]

    async def call(self, name: Any, *args: Any) -> Any:
        """Invoke a hook and await it if it is async."""
        return await invoke(self.get(name), *args)

    def fire(self, name: Any, *args: Any) -> None:
        """Invoke a hook from sync code; an async hook is scheduled."""
        fire(self.get(name), *args)


class DefaultHandlers:
    """The built-in behavior of every hook except ``locationChange``.

    ``locationChange`` belongs to the navigation guard and is passed to
    ``as_mapping()``.
    """

    __slots__ = ("_accounts", "_bus", "_config", "_location", "_notifier", "_state")

    def __init__(
        self,
        *,
        config: SessionConfig,
        state: SessionState,
        bus: EventBus,
        location: Location,
        notifier: Notifier,
        accounts: AccountService,
    ) -> None:
        self._config = config
        self._state = state
        self._bus = bus
        self._location = location
        self._notifier = notifier
        self._accounts = accounts

    def as_mapping(self, location_change: Handler) -> dict[HandlerName, Handler]:
        return {
            HandlerName.SIGN_IN_START: self.sign_in_start,
            HandlerName.SIGN_IN_SUCCESS: self.sign_in_success,
            HandlerName.SIGN_OUT_SUCCESS: self.sign_out_success,
            HandlerName.SIGN_UP_SUCCESS: self.sign_up_success,
            HandlerName.SIGN_UP_FAILURE: self.sign_up_failure,
            HandlerName.LOCATION_CHANGE: location_change,
            HandlerName.USER_RELOAD: self.user_reload,
        }

    def sign_in_start(self, redirect: str) -> None:
        """Send the user to the sign-in view, remembering where they were going."""
        logger.info("Redirecting to %s", self._config.sign_in_path)
        self._location.path = self._config.sign_in_path
        self._location.search = {self._config.redirect_param: quote(redirect, safe="")}

    def sign_in_success(self) -> None:
        """Resume the remembered redirect, or go home."""
        redirect = self._location.search.get(self._config.redirect_param)
        if redirect:
            target = unquote(redirect)
            if not target.startswith("/"):
                target = "/" + target
            logger.info("Redirecting to %s", target)
            self._location.path = target
            self._location.search = {}
        else:
            self._location.path = self._config.root_path

    def sign_out_success(self) -> None:
        self._notifier.success(self._config.sign_out_message)
        self._location.path = self._config.root_path

    def sign_up_success(self, user: Any, current_user: Any = None) -> None:
        # An account service can resolve without creating anyone
        if not has_identity(user):
            self._bus.emit(SessionEventType.SIGN_UP_FAILURE, user)
        else:
            self._bus.emit(SessionEventType.SIGN_UP_SUCCESS, user)

    def sign_up_failure(self, error: Any, current_user: Any = None) -> None:
        self._state.clear()
        self._bus.emit(SessionEventType.SIGN_UP_FAILURE, error)

    async def user_reload(self) -> None:
        """Re-fetch the current user, bypassing any service-side cache."""
        match await call_service(self._accounts.get_current_user, force_reload=True):
            case Success(value=user):
                self._state.set(user)
            case Failure(message=message):
                logger.warning("User reload failed: %s", message)
