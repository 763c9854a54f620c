"""Tests for roost.events: event types and the broadcast bus."""

import asyncio

import pytest

from roost.events import EventBus, SessionEvent, SessionEventType
from roost.testing import EventRecorder


class TestSessionEventType:
    def test_values_are_event_names(self) -> None:
        assert SessionEventType.SIGN_IN_SUCCESS == "signInSuccess"
        assert SessionEventType("submitPasswordResetFailure") is SessionEventType.SUBMIT_PASSWORD_RESET_FAILURE

    def test_closed_set(self) -> None:
        assert len(SessionEventType) == 14
        with pytest.raises(ValueError):
            SessionEventType("loggedIn")


class TestEmit:
    def test_listener_receives_event(self) -> None:
        bus = EventBus()
        received: list[SessionEvent] = []
        bus.on(SessionEventType.SIGN_IN_FAILURE, received.append)

        event = bus.emit(SessionEventType.SIGN_IN_FAILURE, {"message": "nope"})

        assert received == [event]
        assert event.payload == {"message": "nope"}

    def test_only_matching_type(self) -> None:
        bus = EventBus()
        received: list[SessionEvent] = []
        bus.on("signOutSuccess", received.append)
        bus.emit(SessionEventType.SIGN_IN_SUCCESS)
        assert received == []

    def test_unknown_name_rejected(self) -> None:
        bus = EventBus()
        with pytest.raises(ValueError):
            bus.on("bogus", lambda e: None)
        with pytest.raises(ValueError):
            bus.emit("bogus")

    def test_registration_order(self) -> None:
        bus = EventBus()
        order: list[str] = []
        bus.on(SessionEventType.AUTHENTICATED, lambda e: order.append("a"))
        bus.on(SessionEventType.AUTHENTICATED, lambda e: order.append("b"))
        bus.emit(SessionEventType.AUTHENTICATED)
        assert order == ["a", "b"]

    def test_on_any(self) -> None:
        bus = EventBus()
        recorder = EventRecorder()
        bus.on_any(recorder)
        bus.emit(SessionEventType.SIGN_IN_START)
        bus.emit(SessionEventType.SIGN_OUT_SUCCESS)
        assert recorder.types == [SessionEventType.SIGN_IN_START, SessionEventType.SIGN_OUT_SUCCESS]

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        recorder = EventRecorder()
        stop = bus.on(SessionEventType.SIGN_IN_START, recorder)
        stop()
        bus.emit(SessionEventType.SIGN_IN_START)
        assert recorder.events == []

    def test_failing_listener_does_not_stop_broadcast(self) -> None:
        bus = EventBus()
        recorder = EventRecorder()

        def broken(event: SessionEvent) -> None:
            raise RuntimeError("boom")

        bus.on(SessionEventType.SIGN_IN_START, broken)
        bus.on(SessionEventType.SIGN_IN_START, recorder)
        bus.emit(SessionEventType.SIGN_IN_START)
        assert recorder.count(SessionEventType.SIGN_IN_START) == 1

    @pytest.mark.asyncio
    async def test_async_listener_is_scheduled(self) -> None:
        bus = EventBus()
        done = asyncio.Event()

        async def listener(event: SessionEvent) -> None:
            done.set()

        bus.on(SessionEventType.SIGN_IN_SUCCESS, listener)
        bus.emit(SessionEventType.SIGN_IN_SUCCESS)
        await asyncio.wait_for(done.wait(), timeout=1.0)


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_emit_and_subscribe(self) -> None:
        bus = EventBus()
        received: list[SessionEvent] = []

        async def collector() -> None:
            async for event in bus.subscribe():
                received.append(event)
                if len(received) >= 2:
                    break

        task = asyncio.create_task(collector())
        await asyncio.sleep(0.01)

        bus.emit(SessionEventType.SIGN_IN_SUCCESS)
        bus.emit(SessionEventType.AUTHENTICATED)

        await asyncio.wait_for(task, timeout=2.0)
        assert [e.type for e in received] == [
            SessionEventType.SIGN_IN_SUCCESS,
            SessionEventType.AUTHENTICATED,
        ]

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        bus = EventBus()
        received: list[SessionEvent] = []

        async def collector() -> None:
            async for event in bus.subscribe():
                received.append(event)

        task = asyncio.create_task(collector())
        await asyncio.sleep(0.01)
        bus.close()
        await asyncio.wait_for(task, timeout=2.0)
        assert received == []
