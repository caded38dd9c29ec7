# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Bounded, disk-backed cache of trust records.

A TrustStore maps an owner identity to the ordered list of identities that
owner trusts. It is instantiated twice by the application:

- a persistent store for trust records, written to one file per owner
- a non-persistent store for pending add-confirmations

Lists handed out by ``load`` and ``get`` are the cached objects themselves.
Callers mutate them in place and then call ``save``. Because mutations
happen outside the store, dirtiness is detected by comparing the list with
a snapshot of what was last written or read.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from uuid import UUID

from ..core.exceptions import ConfigException, PersistenceError
from ..core.lru_cache import LRUDict
from .codec import read_trust_file, trust_file_path, write_trust_file

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    """A resident trust record plus the contents last synchronized with disk."""

    trustees: list[UUID]
    synced: tuple[UUID, ...]

    @property
    def dirty(self) -> bool:
        return tuple(self.trustees) != self.synced


class TrustStore:
    """LRU cache of owner -> trustee lists with optional write-back files.

    Every operation runs under one re-entrant lock, shared with the
    underlying LRUDict, so the store can be used from several threads
    without caller-side locking. File I/O for an operation happens while
    the lock is held.

    Args:
        capacity: Maximum number of resident owners.
        persistent: Whether save and eviction write to ``backing_root``.
        backing_root: Directory of trust files. Required iff persistent.
        name: Label used in log messages.

    Raises:
        ConfigException: If capacity is not positive, or backing_root is
            missing for a persistent store or given for a transient one.
        PersistenceError: If the backing directory cannot be created.
    """

    def __init__(
        self,
        capacity: int,
        persistent: bool = False,
        backing_root: str | Path | None = None,
        name: str = "trusts",
    ) -> None:
        if capacity < 1:
            raise ConfigException(f"Trust store capacity must be positive, got {capacity}")
        if persistent and backing_root is None:
            raise ConfigException(
                "A persistent trust store needs a backing directory",
                missing_vars=["backing_root"],
            )
        if not persistent and backing_root is not None:
            raise ConfigException("A non-persistent trust store takes no backing directory")

        self.name = name
        self._persistent = persistent
        self._root = Path(backing_root) if backing_root is not None else None
        if self._root is not None:
            try:
                self._root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PersistenceError(self._root, f"Cannot create trust directory: {e}") from e

        self._entries: LRUDict[UUID, _Entry] = LRUDict(max_size=capacity, on_evict=self._on_evict)
        self._lock = self._entries.lock

    @property
    def capacity(self) -> int:
        return self._entries.max_size

    @property
    def persistent(self) -> bool:
        return self._persistent

    @property
    def backing_root(self) -> Path | None:
        return self._root

    @property
    def lock(self) -> threading.RLock:
        """Re-entrant lock held by every store operation.

        Hold it to make a load, mutate and save sequence atomic.
        """
        return self._lock

    # -------------------------------------------------------------------------
    # CACHE OPERATIONS
    # -------------------------------------------------------------------------

    def load(self, owner: UUID) -> list[UUID]:
        """Return the trustee list for an owner, creating it if needed.

        A non-resident owner of a persistent store is read from its file
        first. An owner with no file gets a new empty list. The entry
        becomes the most recently used.

        Raises:
            DeserializationError: If the owner's file exists but is corrupt.
                Nothing is cached in that case.
        """
        with self._lock:
            if owner in self._entries:
                return self._entries[owner].trustees

            trustees: list[UUID] = []
            if self._persistent:
                stored = read_trust_file(self._path_for(owner))
                if stored is not None:
                    trustees = stored
                    logger.debug(f"Loaded {len(stored)} trustee(s) for {owner} into {self.name}")

            self._entries[owner] = _Entry(trustees=trustees, synced=tuple(trustees))
            return trustees

    def get(self, owner: UUID) -> list[UUID] | None:
        """Return the resident list for an owner, or None.

        Never reads disk and never creates an entry, but does refresh the
        owner's recency.
        """
        with self._lock:
            if owner not in self._entries:
                return None
            return self._entries[owner].trustees

    def contains_key(self, owner: UUID) -> bool:
        """Whether an owner is resident. Does not touch recency or disk."""
        return owner in self._entries

    def save(self, owner: UUID) -> None:
        """Write an owner's resident list to its backing file.

        No-op for transient stores and for owners that are not resident.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        if not self._persistent:
            return
        with self._lock:
            entry = self._entries.peek(owner)
            if entry is None:
                return
            self._write(owner, entry)

    def remove(self, owner: UUID) -> bool:
        """Drop an owner's resident entry. The backing file is left alone.

        Returns:
            True if an entry was dropped.
        """
        with self._lock:
            return self._entries.pop(owner, None) is not None

    def flush(self) -> int:
        """Write every dirty resident entry to disk.

        Every entry is attempted even if an earlier one fails.

        Returns:
            Number of entries written.

        Raises:
            PersistenceError: The first write failure, after all attempts.
        """
        if not self._persistent:
            return 0
        written = 0
        first_error: PersistenceError | None = None
        with self._lock:
            for owner, entry in self._entries.items():
                if not entry.dirty:
                    continue
                try:
                    self._write(owner, entry)
                    written += 1
                except PersistenceError as e:
                    logger.error(f"Failed to flush trust record for {owner}: {e}")
                    if first_error is None:
                        first_error = e
        if first_error is not None:
            raise first_error
        if written:
            logger.info(f"Flushed {written} trust record(s) from {self.name}")
        return written

    # -------------------------------------------------------------------------
    # INTROSPECTION
    # -------------------------------------------------------------------------

    def resident_owners(self) -> list[UUID]:
        """Resident owners, least recently used first."""
        return self._entries.keys()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics."""
        stats = self._entries.stats()
        stats["name"] = self.name
        stats["persistent"] = self._persistent
        return stats

    def __len__(self) -> int:
        return len(self._entries)

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    def _path_for(self, owner: UUID) -> Path:
        assert self._root is not None
        return trust_file_path(self._root, owner)

    def _write(self, owner: UUID, entry: _Entry) -> None:
        snapshot = tuple(entry.trustees)
        write_trust_file(self._path_for(owner), snapshot)
        entry.synced = snapshot
        logger.debug(f"Saved {len(snapshot)} trustee(s) for {owner} in {self.name}")

    def _on_evict(self, owner: UUID, entry: _Entry) -> None:
        """Flush a dirty evicted entry. Failures are logged, never raised.

        Errors never reach the operation that caused the eviction, and the
        entry is gone either way.
        """
        if not self._persistent or not entry.dirty:
            logger.debug(f"Evicted {owner} from {self.name}")
            return
        try:
            self._write(owner, entry)
            logger.debug(f"Evicted {owner} from {self.name} after flushing")
        except PersistenceError as e:
            logger.error(f"Lost unsaved trust record for {owner} on eviction: {e}")
