"""Explicit result types for service calls.

Service wrappers never raise: they return ``Success(value)`` or
``Failure(error, message)`` and callers branch on the variant::

    match await call_service(service.sign_in, credentials):
        case Success(value=user):
            ...
        case Failure(message=message):
            ...

A resolved user without an identifier is a *soft* failure:
``require_identity()`` turns it into a ``Failure``.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar, Union

from roost._internal.invoke import invoke
from roost.errors import AuthFailure
from roost.state import has_identity

T = TypeVar("T")

MISSING_IDENTITY = "The service response did not identify a user."


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """The service call resolved."""

    value: T


@dataclass(frozen=True, slots=True)
class Failure:
    """The service call was rejected or resolved to an unusable value."""

    error: Any
    message: str


ServiceResult: TypeAlias = Union[Success[T], Failure]


def failure_message(error: Any) -> str:
    """Normalize a rejection into a user-facing message.

    Prefers an explicit ``message`` (attribute or mapping key), then an
    ``error`` key, then the exception text.
    """
    if isinstance(error, Mapping):
        for key in ("message", "error"):
            if error.get(key):
                return str(error[key])
        return MISSING_IDENTITY

    message = getattr(error, "message", None)
    if message:
        return str(message)
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)


async def call_service(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> ServiceResult[Any]:
    """Call a service method and capture the outcome as a result."""
    try:
        value = await invoke(fn, *args, **kwargs)
    except Exception as exc:
        return Failure(error=exc, message=failure_message(exc))
    return Success(value)


def require_identity(result: ServiceResult[Any]) -> ServiceResult[Any]:
    """Turn a resolved-but-id-less user into a ``Failure``."""
    match result:
        case Success(value=user) if not has_identity(user):
            message = failure_message(user) if isinstance(user, Mapping) else MISSING_IDENTITY
            return Failure(error=AuthFailure(message, cause=user), message=message)
    return result
