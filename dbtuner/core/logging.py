"""Structured JSON logging with run correlation and section timing helpers."""

from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, TextIO


class JSONFormatter(logging.Formatter):
    """Emit structured JSON log lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        run_id = get_run_id()
        if run_id:
            log_entry["run_id"] = run_id
        # Attach extras (section, elapsed_ms, etc.)
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Configure root logger with JSON formatter.

    Logs go to stderr by default: stdout carries the report itself when the
    output directory is unavailable.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter())
    root.addHandler(handler)


# ---------------------------------------------------------------------------
# Run correlation
# ---------------------------------------------------------------------------

_run_id: str = ""


def set_run_id(rid: str | None = None) -> str:
    """Set or generate a run correlation ID."""
    global _run_id
    _run_id = rid or str(uuid.uuid4())
    return _run_id


def get_run_id() -> str:
    return _run_id


# ---------------------------------------------------------------------------
# Timing helpers
# ---------------------------------------------------------------------------


@contextmanager
def timed_section(
    logger: logging.Logger,
    section: str,
    **fields: Any,
) -> Generator[dict[str, Any], None, None]:
    """Log one structured line with the elapsed milliseconds of a report section.

    The yielded dict is merged into the log line, so callers can attach
    values (row counts) discovered while the section runs.
    """
    extra_fields: dict[str, Any] = {"section": section, **fields}
    start = time.perf_counter()
    yield extra_fields
    extra_fields["elapsed_ms"] = round((time.perf_counter() - start) * 1000, 3)
    logger.info("section rendered", extra={"extra_fields": extra_fields})
