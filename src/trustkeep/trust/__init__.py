"""Trust lists: the cache, its file format, and the command layer on top."""

from .codec import decode_trustees, encode_trustees, trust_file_path
from .controller import CommandResult, Notification, TrustController
from .identity import (
    DEFAULT_PERMISSIONS,
    PERM_ADD,
    PERM_LIST,
    PERM_LIST_OTHERS,
    PERM_REMOVE,
    DirectoryResolver,
    IdentityResolver,
    Principal,
)
from .messages import DEFAULT_MESSAGES, MessageCatalog
from .store import TrustStore

__all__ = [
    "TrustStore",
    "TrustController",
    "CommandResult",
    "Notification",
    "IdentityResolver",
    "DirectoryResolver",
    "Principal",
    "MessageCatalog",
    "DEFAULT_MESSAGES",
    "DEFAULT_PERMISSIONS",
    "PERM_ADD",
    "PERM_REMOVE",
    "PERM_LIST",
    "PERM_LIST_OTHERS",
    "decode_trustees",
    "encode_trustees",
    "trust_file_path",
]
