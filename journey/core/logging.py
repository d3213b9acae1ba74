"""
journey.core.logging — Structured logging support.

Provides a JSON formatter for stdlib logging.  When enabled, every
``journey.*`` logger writes one machine-parseable JSON object per line
instead of human-readable text.

Usage::

    from journey.core.logging import configure_logging

    configure_logging(structured=True, level="DEBUG")

With ``structured=False`` (default) only the level is applied and the
handlers are left to the application.
"""

from __future__ import annotations

import json
import logging
from typing import Optional, TextIO

#: Attributes passed through ``extra=`` that are copied into the JSON line.
CONTEXT_FIELDS = ("journal_id", "image", "location_state")


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects.

    Fields emitted: ``ts``, ``level``, ``logger``, ``msg``, ``module``,
    ``func`` and ``line``, plus any of :data:`CONTEXT_FIELDS` the record
    carries (``log.info(..., extra={"journal_id": j.id})``).  A record
    with ``exc_info`` also gets an ``exception`` field.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S")
            + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(
    structured: bool = False,
    level: str = "INFO",
    logger_name: str = "journey",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the journey logger tree and return its root.

    Parameters
    ----------
    structured:
        When True, a single ``StreamHandler`` with ``StructuredFormatter``
        replaces any handlers on the journey root logger and propagation
        is switched off to avoid duplicate lines.
    level:
        Log level name (``"DEBUG"``, ``"INFO"``, ...).  Unknown names
        fall back to INFO.
    logger_name:
        Root logger name to configure.
    stream:
        Stream for the structured handler (stderr when None).
    """
    root = logging.getLogger(logger_name)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if structured:
        root.handlers.clear()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.propagate = False

    return root
