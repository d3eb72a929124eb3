"""
Reporters for user-facing import progress.

The pipeline never writes progress through module loggers directly; it
receives a Reporter and calls info/warn/error on it. LoggingReporter is the
default and forwards to the standard logging module.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple


class Reporter(Protocol):
    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingReporter:
    """Reporter backed by a logging.Logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("mercadoworker.import")

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warn(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)


class RecordingReporter:
    """Reporter that keeps every message, optionally forwarding to another."""

    def __init__(self, forward: Optional[Reporter] = None):
        self.forward = forward
        self.messages: List[Tuple[str, str]] = []

    def _record(self, level: str, message: str) -> None:
        self.messages.append((level, message))
        if self.forward is not None:
            getattr(self.forward, level)(message)

    def info(self, message: str) -> None:
        self._record("info", message)

    def warn(self, message: str) -> None:
        self._record("warn", message)

    def error(self, message: str) -> None:
        self._record("error", message)

    def of_level(self, level: str) -> List[str]:
        """Messages reported at the given level."""
        return [msg for lvl, msg in self.messages if lvl == level]
