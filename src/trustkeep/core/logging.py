# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Logging setup for TrustKeep.

Every trust command runs inside a ``correlation_context`` that records a
correlation ID and the acting principal. Both formatters stamp those onto
each line, so the store writes and evictions caused by one command can be
picked out of a busy log.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_actor: ContextVar[str | None] = ContextVar("actor", default=None)

# Libraries whose debug output drowns out trust events
_QUIET_LOGGERS = ("pydantic", "asyncio")


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def get_actor() -> str | None:
    """Name of the principal whose command is running, if any."""
    return _actor.get()


@contextmanager
def correlation_context(
    correlation_id: str | None = None,
    actor: str | None = None,
) -> Generator[str, None, None]:
    """Scope log lines to one command.

    Args:
        correlation_id: ID to use. A fresh one is generated if None.
        actor: Acting principal's display name. Inherits the outer value if None.

    Yields:
        The correlation ID in effect.

    Example:
        with correlation_context(actor="alice") as cid:
            logger.info("Confirming pending trustees")
    """
    cid = correlation_id or generate_correlation_id()
    cid_token = _correlation_id.set(cid)
    actor_token = _actor.set(actor) if actor is not None else None
    try:
        yield cid
    finally:
        if actor_token is not None:
            _actor.reset(actor_token)
        _correlation_id.reset(cid_token)


def _context_tag() -> str:
    parts = []
    cid = get_correlation_id()
    if cid:
        parts.append(cid[:8])
    actor = get_actor()
    if actor:
        parts.append(actor)
    return f"[{' '.join(parts)}]" if parts else ""


class JSONFormatter(logging.Formatter):
    """One JSON object per line. Always used for log files."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        cid = get_correlation_id()
        if cid:
            entry["correlation_id"] = cid
        actor = get_actor()
        if actor:
            entry["actor"] = actor

        # Where it happened, for anything an operator should look at
        if record.levelno >= logging.WARNING:
            entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "extra_data"):
            entry["extra"] = record.extra_data

        return json.dumps(entry, default=str)


class StandardFormatter(logging.Formatter):
    """Single-line terminal format, coloured by level when stderr is a TTY."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        tag = _context_tag()
        if tag:
            line = f"{tag} {line}"
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            line = f"{color}{line}{self.RESET}"
        return line


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _wants_json(log_format: str) -> bool:
    log_format = log_format.lower()
    if log_format in ("json", "text"):
        return log_format == "json"
    # Unset: JSON unless a person is watching
    return not sys.stderr.isatty()


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Install TrustKeep's handlers on the root logger.

    Arguments left as None are taken from config (``TRUSTKEEP_LOG_LEVEL``,
    ``TRUSTKEEP_LOG_FORMAT``, ``TRUSTKEEP_LOG_FILE``). Existing root
    handlers are replaced. A log file, if any, is always written as JSON.
    """
    from .config import get_config

    config = get_config()
    if level is None:
        level = config.log_level
    if json_format is None:
        json_format = _wants_json(config.log_format)
    if log_file is None:
        log_file = config.log_file

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(JSONFormatter() if json_format else StandardFormatter())
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        root.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
