"""Identity resolution for trust commands.

The trust store only ever sees UUIDs. Turning a display name into an
identity (and knowing whether that principal is online) is the job of an
``IdentityResolver``. ``DirectoryResolver`` is the file-backed
implementation used by the CLI.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationException

logger = logging.getLogger(__name__)

PERM_ADD = "trust.add"
PERM_REMOVE = "trust.remove"
PERM_LIST = "trust.list"
PERM_LIST_OTHERS = "trust.list.others"

DEFAULT_PERMISSIONS = frozenset({PERM_ADD, PERM_REMOVE, PERM_LIST})


@dataclass(frozen=True)
class Principal:
    """A resolved principal."""

    identity: UUID
    name: str
    has_history: bool = True
    online: bool = False
    permissions: frozenset[str] = field(default_factory=lambda: DEFAULT_PERMISSIONS)

    @property
    def exists(self) -> bool:
        """Whether the principal has ever been seen, or is here now."""
        return self.has_history or self.online

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions


@runtime_checkable
class IdentityResolver(Protocol):
    """Capability the controller needs from the host's identity service."""

    def resolve(self, name: str) -> Principal | None:
        """Resolve a display name, or None if nobody has that name."""
        ...

    def name_of(self, identity: UUID) -> str | None:
        """Display name for an identity, if known."""
        ...

    def is_online(self, identity: UUID) -> bool:
        """Whether the principal can receive a notification right now."""
        ...

    def names(self) -> list[str]:
        """Known display names, for command completion."""
        ...


# =============================================================================
# DIRECTORY FILE MODELS
# =============================================================================


class PrincipalEntry(BaseModel):
    """One principal in a directory file."""

    id: UUID = Field(..., description="Stable identity of the principal")
    name: str = Field(..., min_length=1, description="Display name")
    online: bool = Field(False, description="Whether the principal is connected")
    has_history: bool = Field(True, description="Whether the principal has been seen before")
    permissions: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_PERMISSIONS),
        description="Granted trust permissions",
    )

    def to_principal(self) -> Principal:
        return Principal(
            identity=self.id,
            name=self.name,
            has_history=self.has_history,
            online=self.online,
            permissions=frozenset(self.permissions),
        )


class DirectoryFile(BaseModel):
    """Top-level shape of a directory file."""

    principals: list[PrincipalEntry] = Field(default_factory=list)


class DirectoryResolver:
    """In-memory principal directory, optionally loaded from a JSON file.

    File layout::

        {"principals": [{"id": "<uuid>", "name": "alice", "online": true,
                         "permissions": ["trust.add", "trust.list"]}]}

    Name lookup is case-insensitive.
    """

    def __init__(self, principals: Iterable[Principal] = ()) -> None:
        self._by_name: dict[str, Principal] = {}
        self._by_id: dict[UUID, Principal] = {}
        for principal in principals:
            self._add(principal)

    @classmethod
    def from_file(cls, path: str | Path) -> DirectoryResolver:
        """Load a directory file. A missing file gives an empty directory.

        Raises:
            ValidationException: If the file is not a valid directory.
        """
        path = Path(path)
        if not path.exists():
            logger.debug(f"No principal directory at {path}")
            return cls()

        try:
            with open(path) as f:
                data = json.load(f)
            parsed = DirectoryFile.model_validate(data)
        except json.JSONDecodeError as e:
            raise ValidationException(f"Directory file {path} is not valid JSON: {e}") from e
        except PydanticValidationError as e:
            raise ValidationException(
                f"Directory file {path} is malformed: {e.error_count()} error(s)",
                field="principals",
                value=e.errors()[0]["loc"],
            ) from e

        resolver = cls(entry.to_principal() for entry in parsed.principals)
        logger.debug(f"Loaded {len(resolver)} principal(s) from {path}")
        return resolver

    def _add(self, principal: Principal) -> None:
        key = principal.name.lower()
        if key in self._by_name:
            raise ValidationException("Duplicate principal name", field="name", value=principal.name)
        if principal.identity in self._by_id:
            raise ValidationException("Duplicate principal id", field="id", value=principal.identity)
        self._by_name[key] = principal
        self._by_id[principal.identity] = principal

    def resolve(self, name: str) -> Principal | None:
        return self._by_name.get(name.lower())

    def name_of(self, identity: UUID) -> str | None:
        principal = self._by_id.get(identity)
        return principal.name if principal else None

    def is_online(self, identity: UUID) -> bool:
        principal = self._by_id.get(identity)
        return principal.online if principal else False

    def names(self) -> list[str]:
        """All display names, sorted."""
        return sorted(p.name for p in self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)
