"""Backing services: protocols, result types, name registry, HTTP clients."""

from roost.services.protocol import AccountService, SessionService
from roost.services.registry import ServiceRegistry
from roost.services.results import (
    Failure,
    ServiceResult,
    Success,
    call_service,
    failure_message,
    require_identity,
)

__all__ = [
    "AccountService",
    "Failure",
    "ServiceRegistry",
    "ServiceResult",
    "SessionService",
    "Success",
    "call_service",
    "failure_message",
    "require_identity",
]
