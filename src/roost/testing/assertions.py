"""Event assertion helpers for roost tests.

Each assertion produces a clear error message listing what was
actually broadcast.
"""

from typing import Any

from roost.events import SessionEventType
from roost.testing.fakes import EventRecorder


def assert_emitted_once(recorder: EventRecorder, event_type: SessionEventType | str) -> Any:
    """Assert *event_type* was broadcast exactly once. Returns its payload."""
    count = recorder.count(event_type)
    assert count == 1, (
        f"Expected {event_type!s} once, got {count}.\n"
        f"Broadcast: {[str(t) for t in recorder.types]}"
    )
    return recorder.payloads(event_type)[0]


def assert_not_emitted(recorder: EventRecorder, event_type: SessionEventType | str) -> None:
    """Assert *event_type* was never broadcast."""
    assert recorder.count(event_type) == 0, (
        f"{event_type!s} was unexpectedly broadcast.\n"
        f"Broadcast: {[str(t) for t in recorder.types]}"
    )
