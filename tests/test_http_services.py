"""Tests for roost.services.http: httpx-backed session and account services."""

import json

import httpx
import pytest

from roost.errors import ServiceError
from roost.events import SessionEventType
from roost.services.http import HttpAccountService, HttpSessionService
from roost.services.protocol import AccountService, SessionService
from roost.testing import EventRecorder, assert_emitted_once, build_test_session


class FakeApi:
    """A tiny in-memory REST API mounted through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, str, object]] = []
        self.user: dict[str, object] | None = None
        self.me_calls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, body))
        route = (request.method, request.url.path)

        if route == ("GET", "/session"):
            if self.user is None:
                return httpx.Response(401, json={"message": "No session"})
            return httpx.Response(200, json=self.user)
        if route == ("POST", "/session"):
            if body == {"email": "a@b.c", "password": "pw"}:
                self.user = {"id": 1, "email": "a@b.c"}
                return httpx.Response(200, json=self.user)
            return httpx.Response(401, json={"error": "Invalid credentials"})
        if route == ("DELETE", "/session"):
            self.user = None
            return httpx.Response(204)
        if route in {("POST", "/password/reset"), ("PUT", "/password/reset")}:
            return httpx.Response(202)
        if route == ("POST", "/accounts"):
            return httpx.Response(201, json={"id": 2, **(body or {})})
        if route == ("POST", "/accounts/confirm"):
            if body == {"token": "good"}:
                return httpx.Response(200, json={})
            return httpx.Response(410, text="Gone for good")
        if route == ("GET", "/accounts/me"):
            self.me_calls += 1
            return httpx.Response(200, json={"id": 1, "version": self.me_calls})
        return httpx.Response(404)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler),
            base_url="https://api.test",
        )


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


class TestProtocols:
    def test_satisfy_protocols(self, api: FakeApi) -> None:
        client = api.client()
        assert isinstance(HttpSessionService(client=client), SessionService)
        assert isinstance(HttpAccountService(client=client), AccountService)


class TestHttpSessionService:
    @pytest.mark.asyncio
    async def test_sign_in_and_session(self, api: FakeApi) -> None:
        service = HttpSessionService(client=api.client())

        user = await service.sign_in({"email": "a@b.c", "password": "pw"})
        assert user == {"id": 1, "email": "a@b.c"}
        assert await service.session() == user

    @pytest.mark.asyncio
    async def test_error_carries_server_message(self, api: FakeApi) -> None:
        service = HttpSessionService(client=api.client())

        with pytest.raises(ServiceError) as exc_info:
            await service.session()
        assert exc_info.value.status == 401
        assert exc_info.value.detail == "No session"

    @pytest.mark.asyncio
    async def test_error_key_fallback(self, api: FakeApi) -> None:
        service = HttpSessionService(client=api.client())

        with pytest.raises(ServiceError, match="Invalid credentials"):
            await service.sign_in({"email": "a@b.c", "password": "wrong"})

    @pytest.mark.asyncio
    async def test_empty_body_is_none(self, api: FakeApi) -> None:
        service = HttpSessionService(client=api.client())
        assert await service.sign_out() is None
        assert await service.request_password_reset("a@b.c") is None
        assert api.requests[-1] == ("POST", "/password/reset", {"email": "a@b.c"})

    @pytest.mark.asyncio
    async def test_submit_reset(self, api: FakeApi) -> None:
        service = HttpSessionService(client=api.client())
        await service.submit_password_reset({"token": "t", "password": "new"})
        assert api.requests[-1] == ("PUT", "/password/reset", {"token": "t", "password": "new"})

    @pytest.mark.asyncio
    async def test_context_manager_owns_client(self) -> None:
        async with HttpSessionService("https://api.test") as service:
            assert isinstance(service, HttpSessionService)


class TestHttpAccountService:
    @pytest.mark.asyncio
    async def test_create(self, api: FakeApi) -> None:
        service = HttpAccountService(client=api.client())
        assert await service.create({"email": "n@e.w"}) == {"id": 2, "email": "n@e.w"}

    @pytest.mark.asyncio
    async def test_confirm_text_error(self, api: FakeApi) -> None:
        service = HttpAccountService(client=api.client())
        assert await service.confirm("good") == {}
        with pytest.raises(ServiceError) as exc_info:
            await service.confirm("bad")
        assert exc_info.value.status == 410
        assert exc_info.value.detail == "Gone for good"

    @pytest.mark.asyncio
    async def test_current_user_cache(self, api: FakeApi) -> None:
        service = HttpAccountService(client=api.client())

        first = await service.get_current_user()
        cached = await service.get_current_user()
        fresh = await service.get_current_user(force_reload=True)

        assert first is cached
        assert fresh == {"id": 1, "version": 2}
        assert api.me_calls == 2


class TestSessionOverHttp:
    @pytest.mark.asyncio
    async def test_guest_challenge_then_sign_in(self, api: FakeApi) -> None:
        client = api.client()
        session = build_test_session(
            routes={"/": {"public": True}, "/users": {}},
            sessions=HttpSessionService(client=client),
            accounts=HttpAccountService(client=client),
        )
        recorder = EventRecorder()
        session.events.on_any(recorder)

        await session.navigate("/users")
        assert session.location.path == "/signIn"
        assert session.location.search == {"redirect": "users"}

        assert await session.sign_in({"email": "a@b.c", "password": "pw"}) is True
        assert session.current_user == {"id": 1, "email": "a@b.c"}
        assert session.location.path == "/users"

        await session.sign_out()
        assert session.current_user is None
        assert ("DELETE", "/session", None) in api.requests

    @pytest.mark.asyncio
    async def test_failed_sign_in_event(self, api: FakeApi) -> None:
        client = api.client()
        session = build_test_session(
            sessions=HttpSessionService(client=client),
            accounts=HttpAccountService(client=client),
        )
        recorder = EventRecorder()
        session.events.on_any(recorder)

        await session.sign_in({"email": "a@b.c", "password": "nope"})

        payload = assert_emitted_once(recorder, SessionEventType.SIGN_IN_FAILURE)
        assert payload == {"message": "401: Invalid credentials"}
