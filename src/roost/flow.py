"""Auth flows: sign-in, sign-up, sign-out, confirmation, password reset.

Each operation calls one service method, updates ``SessionState`` where
the flow owns the user, and reports the outcome on the event bus. Remote
rejections never escape as exceptions: they become failure events.

Operations are not deduplicated; two concurrent ``sign_in()`` calls each
report their own outcome.
"""

import logging
from typing import Any

from roost.errors import InvalidUser
from roost.events import EventBus, SessionEventType
from roost.handlers import HandlerName, HandlerRegistry
from roost.services.protocol import AccountService, SessionService
from roost.services.results import Failure, Success, call_service, require_identity
from roost.state import SessionState, has_identity, identity_of

logger = logging.getLogger("roost.flow")


class AuthFlowController:
    """Runs the auth workflows against the session and account services."""

    __slots__ = ("_accounts", "_bus", "_handlers", "_sessions", "_state")

    def __init__(
        self,
        *,
        state: SessionState,
        bus: EventBus,
        handlers: HandlerRegistry,
        sessions: SessionService,
        accounts: AccountService,
    ) -> None:
        self._state = state
        self._bus = bus
        self._handlers = handlers
        self._sessions = sessions
        self._accounts = accounts

    async def sign_in(self, credentials: Any) -> bool:
        """Sign in with *credentials*.

        Emits exactly one of ``signInSuccess`` (payload: the user) or
        ``signInFailure`` (payload: ``{"message": ...}``). Returns whether
        sign-in succeeded.
        """
        match require_identity(await call_service(self._sessions.sign_in, credentials)):
            case Success(value=user):
                logger.info("Signed in as id=%r", identity_of(user))
                self._state.set(user)
                self._bus.emit(SessionEventType.SIGN_IN_SUCCESS, user)
                return True
            case Failure(message=message):
                logger.info("Sign-in failed: %s", message)
                self._bus.emit(SessionEventType.SIGN_IN_FAILURE, {"message": message})
                return False

    async def sign_out(self) -> None:
        """Sign out.

        ``signOutSuccess`` is emitted up front. The remote sign-out only
        runs when someone is signed in; the user is cleared once it
        completes.
        """
        self._bus.emit(SessionEventType.SIGN_OUT_SUCCESS)
        if not has_identity(self._state.get()):
            return

        match await call_service(self._sessions.sign_out):
            case Success():
                self._state.clear()
            case Failure(message=message):
                logger.warning("Remote sign-out failed: %s", message)

    def authenticate(self, user: Any) -> None:
        """Trust *user* as signed in without asking the session service.

        Raises ``InvalidUser`` if *user* is falsy or has no identifier.
        """
        if not user or not has_identity(user):
            raise InvalidUser(user)
        self._state.set(user)
        self._bus.emit(SessionEventType.SIGN_IN_SUCCESS, user)
        self._bus.emit(SessionEventType.AUTHENTICATED, user)

    async def sign_up(self, credentials: Any) -> Any:
        """Create an account; the outcome goes through the sign-up hooks.

        Both hooks receive the current user as a second argument.
        Returns whatever the hook returns.
        """
        result = await call_service(self._accounts.create, credentials)
        current = self._state.get()
        match result:
            case Success(value=user):
                return await self._handlers.call(HandlerName.SIGN_UP_SUCCESS, user, current)
            case Failure(error=error):
                logger.info("Sign-up rejected: %s", result.message)
                return await self._handlers.call(HandlerName.SIGN_UP_FAILURE, error, current)

    async def confirm_sign_up(self, token: Any) -> bool:
        match await call_service(self._accounts.confirm, token):
            case Success():
                self._bus.emit(SessionEventType.SIGN_UP_CONFIRMATION_SUCCESS)
                return True
            case Failure(error=error):
                self._bus.emit(SessionEventType.SIGN_UP_CONFIRMATION_FAILURE, {"err": error})
                return False

    async def request_password_reset(self, email: str) -> bool:
        match await call_service(self._sessions.request_password_reset, email):
            case Success():
                self._bus.emit(SessionEventType.REQUEST_PASSWORD_RESET_SUCCESS)
                return True
            case Failure(message=message):
                self._bus.emit(SessionEventType.REQUEST_PASSWORD_RESET_FAILURE, message)
                return False

    async def submit_password_reset(self, data: Any) -> bool:
        match await call_service(self._sessions.submit_password_reset, data):
            case Success():
                self._bus.emit(SessionEventType.SUBMIT_PASSWORD_RESET_SUCCESS)
                return True
            case Failure(message=message):
                self._bus.emit(SessionEventType.SUBMIT_PASSWORD_RESET_FAILURE, message)
                return False
