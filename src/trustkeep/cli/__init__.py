# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""TrustKeep CLI - manage who you trust from the command line."""

from .main import app, main

__all__ = ["main", "app"]
