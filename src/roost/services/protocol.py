"""Service protocols: the two identity back-ends the session core calls.

Any object with these async methods satisfies the protocol: an httpx
client wrapper (``roost.services.http``), an in-memory fake
(``roost.testing``), or an adapter around an existing SDK.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SessionService(Protocol):
    """Session back-end: session check, sign-in/out, password reset."""

    async def session(self) -> Any: ...

    async def sign_in(self, credentials: Any) -> Any: ...

    async def sign_out(self) -> Any: ...

    async def request_password_reset(self, email: str) -> Any: ...

    async def submit_password_reset(self, data: Any) -> Any: ...


@runtime_checkable
class AccountService(Protocol):
    """Account back-end: registration, confirmation, user reload."""

    async def create(self, credentials: Any) -> Any: ...

    async def confirm(self, token: Any) -> Any: ...

    async def get_current_user(self, force_reload: bool = False) -> Any: ...
