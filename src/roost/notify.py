"""User-facing notices (toasts, flash messages).

The default hooks report sign-out and sign-in-required through a
``Notifier``. Without a UI-provided notifier, ``LogNotifier`` writes the
notices to the ``roost.notify`` logger.
"""

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger("roost.notify")


@runtime_checkable
class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LogNotifier:
    """Notifier that logs notices instead of displaying them."""

    __slots__ = ()

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)
