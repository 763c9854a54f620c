"""Session configuration.

SessionConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SessionConfig(sign_in_path="/login", base_path="/app")

    ``session_service`` and ``account_service`` are either the name of a
    factory registered on the ``SessionProvider`` or a ready service
    instance.
    """

    # Services
    session_service: Any = "SessionService"
    account_service: Any = "AccountService"

    # Navigation
    sign_in_path: str = "/signIn"
    root_path: str = "/"
    redirect_param: str = "redirect"
    base_path: str = ""  # App prefix stripped from navigation URLs (e.g. "/app")

    # Notices
    sign_out_message: str = "User has successfully signed out."
    sign_in_required_message: str = "User is not authenticated, please sign in to continue."
