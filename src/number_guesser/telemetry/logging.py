"""Logging setup and the contract for runtime telemetry sinks."""

from __future__ import annotations

import logging
from typing import Protocol

from rich.logging import RichHandler


class Telemetry(Protocol):
    """Reports operational events and game outcomes."""

    def emit(self, event_name: str, payload: dict) -> None:
        """Publish telemetry event to the configured sink."""


class LoggingTelemetry:
    """Telemetry sink that forwards events to a standard logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("number_guesser.telemetry")

    def emit(self, event_name: str, payload: dict) -> None:
        self._logger.info(event_name, extra={"telemetry": payload})


def configure_logging(level: str = "INFO") -> None:
    """Route ``number_guesser`` loggers through a rich console handler."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
