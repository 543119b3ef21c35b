"""
Centralized Logging

Architectural Intent:
- Single place that wires the otrs_bridge logger to its two sinks: a
  persistent file at full verbosity and the console at reduced verbosity
- Adds a NOTICE level between INFO and WARNING for ticket state changes
- Redacts password values before any record is emitted
"""

import json
import logging
import re
import sys
from datetime import datetime, UTC
from typing import Optional

NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

LOGGER_NAME = "otrs_bridge"
TIME_FORMAT = "%Y%m%d-%H%M%S"
REDACTED = "********"

_SECRET_PATTERN = re.compile(
    r"(?P<key>otrs_pass|password|Password)(?P<sep>\s*[=:]\s*|>)(?P<value>[^\n<]+)"
)


def level_from_name(name: str) -> int:
    """Numeric level for a level name such as "debug" or "NOTICE"."""
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def notice(logger: logging.Logger, msg: str, *args) -> None:
    """Log msg at NOTICE level on logger."""
    logger.log(NOTICE, msg, *args)


def redact(text: str) -> str:
    return _SECRET_PATTERN.sub(
        lambda m: f"{m.group('key')}{m.group('sep')}{REDACTED}", text
    )


class RedactingFilter(logging.Filter):
    """Masks password values in the fully formatted message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def _formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JSONFormatter()
    return logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt=TIME_FORMAT
    )


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure logging for otrs-bridge.

    Args:
        level: Console logging level (DEBUG with --verbose, INFO otherwise).
        log_file: Path of the persistent log, always written at DEBUG.
        json_format: If True, use JSON structured output. Otherwise human-readable.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(logging.DEBUG)

    # Remove existing handlers
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(_formatter(json_format))
    console.addFilter(RedactingFilter())
    root.addHandler(console)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            root.warning("Cannot open log file %s: %s", log_file, e)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(_formatter(json_format))
            file_handler.addFilter(RedactingFilter())
            root.addHandler(file_handler)

    return root
