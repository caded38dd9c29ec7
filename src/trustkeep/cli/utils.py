"""Utility functions for the TrustKeep CLI."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..core.config import CoreSettings, get_config
from ..trust.controller import TrustController
from ..trust.identity import DirectoryResolver, Principal

logger = logging.getLogger(__name__)

DIRECTORY_FILENAME = "principals.json"


def settings_from_args(args: argparse.Namespace) -> CoreSettings:
    """Apply global CLI flags on top of the environment-derived settings."""
    updates: dict = {}
    if getattr(args, "data_dir", None) is not None:
        updates["data_dir"] = Path(args.data_dir)
    if getattr(args, "directory", None) is not None:
        updates["directory_path"] = args.directory
    if getattr(args, "locale", None) is not None:
        updates["locale"] = args.locale
    if getattr(args, "cache_size", None) is not None:
        updates["cache_size"] = args.cache_size
    config = get_config()
    return config.model_copy(update=updates) if updates else config


def get_resolver(config: CoreSettings) -> DirectoryResolver:
    """Load the principal directory named in config, or the data dir default."""
    path = Path(config.directory_path) if config.directory_path else config.data_dir / DIRECTORY_FILENAME
    return DirectoryResolver.from_file(path)


def open_session(args: argparse.Namespace) -> tuple[TrustController, Principal | None]:
    """Build a controller and resolve the acting principal from ``--as``.

    The actor is None when the name is not in the directory.
    """
    config = settings_from_args(args)
    resolver = get_resolver(config)
    controller = TrustController.from_config(resolver, config)
    controller.catalog.use_colors = sys.stdout.isatty()
    actor = resolver.resolve(args.actor) if args.actor else None
    return controller, actor
