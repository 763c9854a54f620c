"""HTTP session and account services over a JSON REST API.

Both services wrap an ``httpx.AsyncClient``. Pass your own client to
share connection pools, add auth headers, or mount a mock transport::

    client = httpx.AsyncClient(base_url="https://api.example.com")
    sessions = HttpSessionService(client=client)
    accounts = HttpAccountService(client=client)

Endpoints (relative to the client's base URL):

========================  ===========================
``GET /session``          current session's user
``POST /session``         sign in
``DELETE /session``       sign out
``POST /password/reset``  request a reset email
``PUT /password/reset``   submit a new password
``POST /accounts``        sign up
``POST /accounts/confirm`` confirm a sign-up token
``GET /accounts/me``      current user
========================  ===========================

Non-2xx responses raise ``ServiceError`` with the status and the
server's ``message`` (or ``error``) field.
"""

import logging
from typing import Any

import httpx

from roost.errors import ServiceError

logger = logging.getLogger("roost.services")


class _HttpService:
    """Shared request/response handling."""

    __slots__ = ("_client", "_owns_client")

    def __init__(
        self,
        base_url: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        logger.debug("%s %s", method, url)
        response = await self._client.request(method, url, **kwargs)
        if response.is_error:
            raise ServiceError(status=response.status_code, detail=_error_detail(response))
        if not response.content:
            return None
        return response.json()

    async def aclose(self) -> None:
        """Close the underlying client if this service created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Any:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _error_detail(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase


class HttpSessionService(_HttpService):
    """Session back-end over HTTP."""

    __slots__ = ()

    async def session(self) -> Any:
        return await self._request("GET", "/session")

    async def sign_in(self, credentials: Any) -> Any:
        return await self._request("POST", "/session", json=credentials)

    async def sign_out(self) -> Any:
        return await self._request("DELETE", "/session")

    async def request_password_reset(self, email: str) -> Any:
        return await self._request("POST", "/password/reset", json={"email": email})

    async def submit_password_reset(self, data: Any) -> Any:
        return await self._request("PUT", "/password/reset", json=data)


class HttpAccountService(_HttpService):
    """Account back-end over HTTP.

    ``get_current_user()`` caches the last fetched user; pass
    ``force_reload=True`` to bypass the cache.
    """

    __slots__ = ("_current",)

    def __init__(
        self,
        base_url: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(base_url, client=client, timeout=timeout)
        self._current: Any = None

    async def create(self, credentials: Any) -> Any:
        return await self._request("POST", "/accounts", json=credentials)

    async def confirm(self, token: Any) -> Any:
        return await self._request("POST", "/accounts/confirm", json={"token": token})

    async def get_current_user(self, force_reload: bool = False) -> Any:
        if self._current is None or force_reload:
            self._current = await self._request("GET", "/accounts/me")
        return self._current
