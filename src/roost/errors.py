"""Roost exception hierarchy.

Shared across the router, handler registry, flow controller, guard, and
services so every module raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when session configuration is invalid.

    Typically raised by ``SessionProvider.build()`` at startup, before the
    session becomes usable.
    """


class InvalidHandlerName(ConfigurationError, ValueError):  # noqa: N818
    """The handler name is not one of the fixed hook keys."""

    def __init__(self, name: object) -> None:
        super().__init__(f"Handler name {name!r} is not a valid hook.")
        self.name = name


class InvalidHandlerValue(ConfigurationError, TypeError):  # noqa: N818
    """The handler value is not callable."""

    def __init__(self, name: str, value: object) -> None:
        super().__init__(
            f"Handler for {name!r} must be callable, got {type(value).__name__}."
        )
        self.value = value


class InvalidUser(RoostError, ValueError):  # noqa: N818
    """Raised by ``authenticate()`` for a missing or id-less user."""

    def __init__(self, user: object) -> None:
        super().__init__(f"Unable to authenticate with {user!r}")
        self.user = user


@dataclass(frozen=True, slots=True)
class AuthFailure(RoostError):
    """A remote auth operation was rejected.

    Never raised out of a flow operation: it is carried inside a
    ``Failure`` result and broadcast as a failure event.
    """

    message: str
    cause: Any = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class SessionProbeFailure(RoostError):
    """The initial session check failed. The guard degrades to guest."""

    message: str
    cause: Any = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class ServiceError(RoostError):
    """An HTTP service answered with a non-success status."""

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)
