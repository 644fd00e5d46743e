"""Structured logging configuration with suite correlation."""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import IO, Any
from uuid import uuid4

LOGGER_NAME = "fixture_foundry"

_suite_id: ContextVar[str | None] = ContextVar("foundry_suite_id", default=None)

log = logging.getLogger(LOGGER_NAME)


class JSONFormatter(logging.Formatter):
    """Render log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting logic
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "suite_id": getattr(record, "suite_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        extra_keys = {"section", "entity", "count"}
        for key in extra_keys:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload, default=str)


class SuiteIdFilter(logging.Filter):
    """Ensure a ``suite_id`` attribute is always present on log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        record.suite_id = current_suite_id()
        return True


def current_suite_id() -> str | None:
    """Return the correlation id of the running suite, if one started."""
    return _suite_id.get()


def start_suite() -> str:
    """Assign a fresh correlation id to the suite being booted."""
    suite_id = str(uuid4())
    _suite_id.set(suite_id)
    return suite_id


def end_suite() -> None:
    """Forget the current suite correlation id."""
    _suite_id.set(None)


def debug_section(section: str, message: str) -> None:
    """Write a human-readable progress note, e.g. ``[Foundry] Booting foundry.``"""
    log.debug("[%s] %s", section, message, extra={"section": section})


def configure_logging(level: str | int = "INFO", stream: IO[str] | None = None) -> None:
    """Attach JSON-formatted output to the ``fixture_foundry`` logger.

    Only the package logger is touched so the host runner's own handlers
    (pytest's log capture included) keep working.
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(SuiteIdFilter())
    for existing in list(log.handlers):
        if isinstance(existing.formatter, JSONFormatter):
            log.removeHandler(existing)
    log.addHandler(handler)
    level_value: int | str = level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level_value = resolved if isinstance(resolved, int) else level.upper()
    log.setLevel(level_value)


__all__ = [
    "JSONFormatter",
    "LOGGER_NAME",
    "SuiteIdFilter",
    "configure_logging",
    "current_suite_id",
    "debug_section",
    "end_suite",
    "start_suite",
]
