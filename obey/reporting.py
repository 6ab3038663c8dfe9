"""Diagnostics channel for rule-cycle failures.

The engine never raises per-rule failures to its caller; it hands one
message per failure to a Reporter. The default reporter writes them to the
``obey.engine`` logger at ERROR.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

_ENGINE_LOGGER = logging.getLogger("obey.engine")


class Reporter(Protocol):
    """Receives one message per rule-cycle failure."""

    def report(self, message: str, error: Optional[BaseException] = None) -> None: ...


class LoggingReporter:
    """Report failures through ``logging``."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or _ENGINE_LOGGER

    def report(self, message: str, error: Optional[BaseException] = None) -> None:
        if error is not None:
            self.logger.error(message, exc_info=(type(error), error, error.__traceback__))
        else:
            self.logger.error(message)


class CollectingReporter:
    """Keep reported messages in memory, e.g. for display after a run."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.errors: list[Optional[BaseException]] = []

    def report(self, message: str, error: Optional[BaseException] = None) -> None:
        self.messages.append(message)
        self.errors.append(error)

    def clear(self) -> None:
        self.messages.clear()
        self.errors.clear()
