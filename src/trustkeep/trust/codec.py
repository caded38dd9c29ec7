"""On-disk format for trust records.

One file per owner, named ``<owner-uuid>.txt``, holding one trustee UUID
per line. No header and no checksum. An absent file and an empty file
both mean "no trustees".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from uuid import UUID

from ..core.exceptions import DeserializationError, PersistenceError

logger = logging.getLogger(__name__)

TRUST_FILE_SUFFIX = ".txt"


def trust_file_path(root: Path, owner: UUID) -> Path:
    """Backing file for an owner. The canonical UUID form is collision-free."""
    return root / f"{owner}{TRUST_FILE_SUFFIX}"


def encode_trustees(trustees: Iterable[UUID]) -> str:
    """Serialize trustees to the line-per-identity text form."""
    return "".join(f"{trustee}\n" for trustee in trustees)


def decode_trustees(text: str, path: str | Path = "<memory>") -> list[UUID]:
    """Parse the line-per-identity text form.

    Blank lines are skipped. Any other line that is not a UUID fails the
    whole decode, so a caller never sees a partial record.

    Raises:
        DeserializationError: If a line is not a valid UUID.
    """
    trustees: list[UUID] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        token = raw.strip()
        if not token:
            continue
        try:
            trustees.append(UUID(token))
        except ValueError:
            raise DeserializationError(
                path, f"Invalid trustee identity {token!r} in {path}", line=lineno
            ) from None
    return trustees


def read_trust_file(path: Path) -> list[UUID] | None:
    """Read and decode a trust file.

    Returns:
        The trustees, or None if the file does not exist.

    Raises:
        DeserializationError: If the file exists but is unreadable or corrupt.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise DeserializationError(path, f"Failed to read trust file {path}: {e}") from e
    return decode_trustees(text, path)


def write_trust_file(path: Path, trustees: Iterable[UUID]) -> None:
    """Write a trust file atomically.

    The content goes to a sibling temp file which is then renamed over
    the target, so readers see either the old or the new record.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    temp_path = path.with_suffix(f"{TRUST_FILE_SUFFIX}.tmp")
    try:
        temp_path.write_text(encode_trustees(trustees), encoding="utf-8")
        temp_path.replace(path)
    except OSError as e:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                logger.debug(f"Could not remove temp file {temp_path}")
        raise PersistenceError(path, f"Failed to write trust file {path}: {e}") from e
