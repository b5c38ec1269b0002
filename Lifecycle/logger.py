"""Structured JSON logging for machine operations."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class _JsonFormatter(logging.Formatter):
    """Emit each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "machine": getattr(record, "machine", "unknown"),
            "operation": getattr(record, "operation", None),
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
        return json.dumps(entry, ensure_ascii=False)


class _ContextFilter(logging.Filter):
    """Inject the machine name into every record of one logger."""

    def __init__(self, machine_name: str) -> None:
        super().__init__()
        self.machine_name = machine_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.machine = self.machine_name
        if not hasattr(record, "operation"):
            record.operation = None
        return True


def get_logger(machine_name: str) -> logging.Logger:
    """Return a logger configured for structured JSON output.

    Args:
        machine_name: Injected into every record as ``machine``.  Pass
            ``extra={"operation": ...}`` on individual calls to tag them.
    """
    logger = logging.getLogger(f"machine.{machine_name}")

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    for f in list(logger.filters):
        if isinstance(f, _ContextFilter):
            logger.removeFilter(f)
    logger.addFilter(_ContextFilter(machine_name))

    return logger
