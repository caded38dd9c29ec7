# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Output formatting for CLI commands."""

from __future__ import annotations

import sys

from ..trust.controller import CommandResult
from ..trust.identity import IdentityResolver


def output_result(result: CommandResult, resolver: IdentityResolver) -> None:
    """Print the actor's messages, then notifications addressed to others."""
    stream = sys.stdout if result.ok else sys.stderr
    for message in result.messages:
        print(message, file=stream)
    for note in result.notifications:
        recipient = resolver.name_of(note.recipient) or str(note.recipient)
        print(f"  → {recipient}: {note.text}")


def output_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)
