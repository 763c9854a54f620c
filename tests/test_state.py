"""Tests for roost.state: current user ownership and identity checks."""

from dataclasses import dataclass

from roost.state import SessionState, User, has_identity, identity_of


@dataclass(frozen=True, slots=True)
class FakeUser:
    id: str
    name: str = "alice"


class TestIdentity:
    def test_none(self) -> None:
        assert identity_of(None) is None
        assert has_identity(None) is False

    def test_mapping(self) -> None:
        assert identity_of({"id": 7}) == 7
        assert has_identity({"name": "no id"}) is False

    def test_object(self) -> None:
        assert identity_of(FakeUser(id="u1")) == "u1"

    def test_empty_id_is_not_identity(self) -> None:
        assert has_identity(FakeUser(id="")) is False
        assert has_identity({"id": 0}) is False

    def test_user_protocol(self) -> None:
        assert isinstance(FakeUser(id="x"), User)


class TestSessionState:
    def test_starts_empty(self) -> None:
        state = SessionState()
        assert state.get() is None
        assert state.is_logged_in is False

    def test_set_and_clear(self) -> None:
        state = SessionState()
        user = FakeUser(id="1")
        state.set(user)
        assert state.get() is user
        assert state.user is user
        assert state.is_logged_in is True
        state.clear()
        assert state.get() is None

    def test_id_less_user_is_not_logged_in(self) -> None:
        state = SessionState({"name": "ghost"})
        assert state.is_logged_in is False


class TestOnChange:
    def test_notified_with_new_and_previous(self) -> None:
        state = SessionState()
        seen: list[tuple[object, object]] = []
        state.on_change(lambda new, old: seen.append((new, old)))

        state.set({"id": 1})
        state.clear()
        assert seen == [({"id": 1}, None), (None, {"id": 1})]

    def test_clear_when_empty_does_not_notify(self) -> None:
        state = SessionState()
        seen: list[object] = []
        state.on_change(lambda new, old: seen.append(new))
        state.clear()
        assert seen == []

    def test_unsubscribe(self) -> None:
        state = SessionState()
        seen: list[object] = []
        stop = state.on_change(lambda new, old: seen.append(new))
        stop()
        state.set({"id": 1})
        assert seen == []

    def test_failing_watcher_does_not_block_others(self) -> None:
        state = SessionState()
        seen: list[object] = []

        def broken(new: object, old: object) -> None:
            raise RuntimeError("boom")

        state.on_change(broken)
        state.on_change(lambda new, old: seen.append(new))
        state.set({"id": 2})
        assert state.get() == {"id": 2}
        assert seen == [{"id": 2}]
