"""Tests for the trust file format."""

from __future__ import annotations

from unittest.mock import patch
from uuid import UUID, uuid4

import pytest

from trustkeep.core.exceptions import DeserializationError, PersistenceError
from trustkeep.trust.codec import (
    decode_trustees,
    encode_trustees,
    read_trust_file,
    trust_file_path,
    write_trust_file,
)

A = UUID("00000000-0000-0000-0000-00000000000a")
B = UUID("00000000-0000-0000-0000-00000000000b")


class TestTrustFilePath:
    def test_named_by_canonical_uuid(self, tmp_path):
        owner = UUID("12345678-1234-5678-1234-567812345678")
        assert trust_file_path(tmp_path, owner) == tmp_path / "12345678-1234-5678-1234-567812345678.txt"

    def test_distinct_owners_get_distinct_files(self, tmp_path):
        assert trust_file_path(tmp_path, uuid4()) != trust_file_path(tmp_path, uuid4())


class TestEncodeDecode:
    def test_encode_one_per_line(self):
        assert encode_trustees([A, B]) == f"{A}\n{B}\n"

    def test_encode_empty(self):
        assert encode_trustees([]) == ""

    def test_decode_preserves_order_and_duplicates(self):
        assert decode_trustees(f"{B}\n{A}\n{B}\n") == [B, A, B]

    def test_decode_skips_blank_lines_and_whitespace(self):
        assert decode_trustees(f"\n  {A}  \n\n{B}") == [A, B]

    def test_decode_accepts_uppercase(self):
        assert decode_trustees(str(A).upper()) == [A]

    def test_decode_empty(self):
        assert decode_trustees("") == []

    def test_bad_token_fails_whole_decode(self):
        with pytest.raises(DeserializationError) as exc_info:
            decode_trustees(f"{A}\nnot-a-uuid\n{B}\n", path="owner.txt")

        assert exc_info.value.line == 2
        assert "not-a-uuid" in exc_info.value.message
        assert exc_info.value.details["path"] == "owner.txt"


class TestReadWrite:
    def test_missing_file_reads_as_none(self, tmp_path):
        assert read_trust_file(tmp_path / "absent.txt") is None

    def test_empty_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("")

        assert read_trust_file(path) == []

    def test_write_then_read(self, tmp_path):
        path = tmp_path / "owner.txt"

        write_trust_file(path, [A, B])

        assert path.read_text() == f"{A}\n{B}\n"
        assert read_trust_file(path) == [A, B]
        assert not path.with_suffix(".txt.tmp").exists()

    def test_write_overwrites(self, tmp_path):
        path = tmp_path / "owner.txt"
        write_trust_file(path, [A, B])

        write_trust_file(path, [B])

        assert read_trust_file(path) == [B]

    def test_write_failure_raises_persistence_error(self, tmp_path):
        path = tmp_path / "missing-dir" / "owner.txt"

        with pytest.raises(PersistenceError) as exc_info:
            write_trust_file(path, [A])

        assert exc_info.value.path == path

    def test_failed_rename_cleans_up_temp_file(self, tmp_path):
        path = tmp_path / "owner.txt"

        with patch("pathlib.Path.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                write_trust_file(path, [A])

        assert not path.exists()
        assert not path.with_suffix(".txt.tmp").exists()

    def test_invalid_utf8_raises_deserialization_error(self, tmp_path):
        path = tmp_path / "owner.txt"
        path.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(DeserializationError):
            read_trust_file(path)

    def test_unreadable_path_raises_deserialization_error(self, tmp_path):
        # A directory where a file is expected cannot be read as text
        path = tmp_path / "owner.txt"
        path.mkdir()

        with pytest.raises(DeserializationError):
            read_trust_file(path)
