"""
Logging Configuration — Structured logging setup.

Provides consistent logging across all modules with:
- JSON output for CI logs (machine-readable)
- Human-readable output for terminals
- Configurable log levels

## Environment Variables

- GHDEPS_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- GHDEPS_LOG_FORMAT: json, text (default: text)

## Usage

    from ghdeps.logging_config import setup_logging

    setup_logging()  # Call once at startup

Pass `extra={"owner": ..., "repo": ..., "version": ...}` to attach
repository context to a JSON log line.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

CONTEXT_FIELDS = ("owner", "repo", "version")


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Repository context attached through `extra=`, in field order."""
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line, repository context as top-level keys.

    Output format:
    {"ts": "...", "level": "...", "logger": "...", "message": "...", "owner": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


class HumanFormatter(logging.Formatter):
    """
    Terminal formatter. Lines about one repository are labelled with it
    instead of the module name.

    Output format:
    12:34:56 INFO    [acme/tools     ] Message
    12:34:56 DEBUG   [scanner        ] Message
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def label(self, record: logging.LogRecord) -> str:
        context = record_context(record)
        if "owner" in context and "repo" in context:
            label = f"{context['owner']}/{context['repo']}"
        else:
            label = record.name.split(".")[-1]
        return label[:15]

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        level = f"{record.levelname:7}"
        if sys.stderr.isatty():
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        msg = record.getMessage()
        if record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"

        return f"{time_str} {level} [{self.label(record):15}] {msg}"


def setup_logging(
    level: Optional[str] = None,
    format_type: Optional[str] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
               Defaults to GHDEPS_LOG_LEVEL env var or INFO.
        format_type: Output format (json, text).
                     Defaults to GHDEPS_LOG_FORMAT env var or text.
    """
    log_level = (level or os.environ.get("GHDEPS_LOG_LEVEL", "INFO")).upper()
    log_format = (format_type or os.environ.get("GHDEPS_LOG_FORMAT", "text")).lower()

    numeric_level = getattr(logging, log_level, logging.INFO)

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JSONFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    # stderr keeps stdout clean for --json output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(numeric_level)
    root.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={log_level}, format={log_format}"
    )
