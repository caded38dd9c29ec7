"""TrustKeep Core - configuration, logging, errors and cache primitives."""

from .config import CoreSettings, clear_config_cache, get_config
from .exceptions import (
    ConfigException,
    DeserializationError,
    PersistenceError,
    TrustKeepException,
    ValidationException,
)
from .logging import configure_logging, correlation_context
from .lru_cache import DEFAULT_CACHE_MAX_SIZE, LRUDict

__all__ = [
    "CoreSettings",
    "get_config",
    "clear_config_cache",
    "TrustKeepException",
    "DeserializationError",
    "PersistenceError",
    "ConfigException",
    "ValidationException",
    "configure_logging",
    "correlation_context",
    "LRUDict",
    "DEFAULT_CACHE_MAX_SIZE",
]
