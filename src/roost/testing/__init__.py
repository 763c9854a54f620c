"""Test utilities for roost sessions.

Provides in-memory services, an event recorder, a session factory, and
event assertions::

    from roost.testing import EventRecorder, build_test_session, assert_emitted_once
"""

from roost.testing.assertions import assert_emitted_once, assert_not_emitted
from roost.testing.fakes import (
    EventRecorder,
    FakeAccountService,
    FakeSessionService,
    RecordingNotifier,
    build_test_session,
)

__all__ = [
    "EventRecorder",
    "FakeAccountService",
    "FakeSessionService",
    "RecordingNotifier",
    "assert_emitted_once",
    "assert_not_emitted",
    "build_test_session",
]
