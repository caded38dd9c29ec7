# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Custom exception hierarchy for TrustKeep.

Provides specific exception types for the failure modes of the trust
store and its collaborators, so callers can tell a corrupt record apart
from a failed write.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class TrustKeepException(Exception):  # noqa: N818
    """Base exception for all TrustKeep errors.

    All TrustKeep-specific exceptions should inherit from this class.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class DeserializationError(TrustKeepException):
    """Exception for trust files that exist but cannot be decoded.

    Raised when:
    - A line in a backing file is not a valid identity
    - A backing file cannot be read (permissions, I/O fault)
    - A backing file is not valid UTF-8
    """

    def __init__(self, path: str | Path, message: str, line: int | None = None):
        details: dict[str, Any] = {"path": str(path)}
        if line is not None:
            details["line"] = line
        super().__init__(message, details)
        self.path = Path(path)
        self.line = line


class PersistenceError(TrustKeepException):
    """Exception for failed writes to the backing store.

    Raised when:
    - A trust file cannot be created or replaced
    - The backing directory is not writable
    - The disk is full
    """

    def __init__(self, path: str | Path, message: str):
        super().__init__(message, {"path": str(path)})
        self.path = Path(path)


class ValidationException(TrustKeepException):
    """Exception for validation errors.

    Raised when:
    - A principal directory file is malformed
    - Required fields are missing
    - Field values are out of range
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigException(TrustKeepException):
    """Exception for configuration errors.

    Raised when:
    - A store is built with a non-positive capacity
    - A persistent store has no backing directory
    - Settings are invalid
    """

    def __init__(self, message: str, missing_vars: list[str] | None = None):
        details = {}
        if missing_vars:
            details["missing_vars"] = missing_vars
        super().__init__(message, details)
        self.missing_vars = missing_vars or []
