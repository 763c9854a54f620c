"""Roost: session lifecycle and route guarding for single-page applications.

Tracks who is signed in, guards navigation against a public/private
route table, and runs the sign-in, sign-up, sign-out and password-reset
flows against your session and account services.

Basic usage::

    from roost import RouteTable, SessionConfig, SessionProvider

    provider = SessionProvider(SessionConfig(
        session_service=my_session_service,
        account_service=my_account_service,
    ))
    session = provider.build(route_table=RouteTable.from_mapping({
        "/": {"public": True},
        "/users": {},
    }))

    await session.navigate("/users")   # guests are sent to /signIn?redirect=users
"""

__version__ = "0.1.0"
__all__ = [
    "AuthFailure",
    "BootstrapState",
    "ConfigurationError",
    "EventBus",
    "HandlerName",
    "InvalidHandlerName",
    "InvalidHandlerValue",
    "InvalidUser",
    "MemoryLocation",
    "NavigationEvent",
    "RoostError",
    "RouteEntry",
    "RouteTable",
    "ServiceError",
    "Session",
    "SessionConfig",
    "SessionEvent",
    "SessionEventType",
    "SessionProbeFailure",
    "SessionProvider",
    "SessionState",
    "match",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    if name in ("Session", "SessionProvider"):
        from roost import provider as _provider

        return getattr(_provider, name)

    if name == "SessionConfig":
        from roost.config import SessionConfig

        return SessionConfig

    if name in ("RouteEntry", "RouteTable", "match"):
        from roost import routing as _routing

        return getattr(_routing, name)

    if name in ("EventBus", "SessionEvent", "SessionEventType"):
        from roost import events as _events

        return getattr(_events, name)

    if name in ("BootstrapState", "NavigationEvent"):
        from roost import guard as _guard

        return getattr(_guard, name)

    if name == "HandlerName":
        from roost.handlers import HandlerName

        return HandlerName

    if name == "SessionState":
        from roost.state import SessionState

        return SessionState

    if name == "MemoryLocation":
        from roost.location import MemoryLocation

        return MemoryLocation

    if name in (
        "AuthFailure",
        "ConfigurationError",
        "InvalidHandlerName",
        "InvalidHandlerValue",
        "InvalidUser",
        "RoostError",
        "ServiceError",
        "SessionProbeFailure",
    ):
        from roost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
