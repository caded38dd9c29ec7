"""Tests for principals and the file-backed directory resolver."""

from __future__ import annotations

import json
from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from trustkeep.core.exceptions import ValidationException
from trustkeep.trust.identity import (
    DEFAULT_PERMISSIONS,
    PERM_ADD,
    PERM_LIST_OTHERS,
    DirectoryResolver,
    IdentityResolver,
    Principal,
    PrincipalEntry,
)


class TestPrincipal:
    def test_exists_with_history(self):
        assert Principal(identity=uuid4(), name="a", has_history=True, online=False).exists

    def test_exists_when_online(self):
        assert Principal(identity=uuid4(), name="a", has_history=False, online=True).exists

    def test_does_not_exist_without_history_or_presence(self, ghost):
        assert not ghost.exists

    def test_default_permissions(self, alice):
        assert alice.permissions == DEFAULT_PERMISSIONS
        assert alice.has_permission(PERM_ADD)
        assert not alice.has_permission(PERM_LIST_OTHERS)

    def test_is_frozen(self, alice):
        with pytest.raises(AttributeError):
            alice.name = "mallory"


class TestDirectoryResolver:
    def test_satisfies_protocol(self, resolver):
        assert isinstance(resolver, IdentityResolver)

    def test_resolve_is_case_insensitive(self, resolver, alice):
        assert resolver.resolve("ALICE") == alice
        assert resolver.resolve("nobody") is None

    def test_name_of(self, resolver, bob):
        assert resolver.name_of(bob.identity) == "bob"
        assert resolver.name_of(uuid4()) is None

    def test_is_online(self, resolver, alice, carol):
        assert resolver.is_online(alice.identity)
        assert not resolver.is_online(carol.identity)
        assert not resolver.is_online(uuid4())

    def test_names_sorted(self, resolver):
        assert resolver.names() == ["admin", "alice", "bob", "carol", "ghost"]
        assert len(resolver) == 5

    def test_duplicate_name_rejected(self, alice):
        twin = Principal(identity=uuid4(), name="Alice")
        with pytest.raises(ValidationException) as exc_info:
            DirectoryResolver([alice, twin])
        assert exc_info.value.field == "name"

    def test_duplicate_id_rejected(self, alice):
        clone = Principal(identity=alice.identity, name="alice2")
        with pytest.raises(ValidationException) as exc_info:
            DirectoryResolver([alice, clone])
        assert exc_info.value.field == "id"


class TestDirectoryFile:
    def test_missing_file_is_empty(self, tmp_path):
        resolver = DirectoryResolver.from_file(tmp_path / "principals.json")
        assert len(resolver) == 0

    def test_load_valid_file(self, tmp_path):
        alice_id = UUID("00000000-0000-0000-0000-000000000001")
        path = tmp_path / "principals.json"
        path.write_text(
            json.dumps(
                {
                    "principals": [
                        {"id": str(alice_id), "name": "alice", "online": True},
                        {
                            "id": "00000000-0000-0000-0000-000000000002",
                            "name": "root",
                            "has_history": False,
                            "permissions": ["trust.list", "trust.list.others"],
                        },
                    ]
                }
            )
        )

        resolver = DirectoryResolver.from_file(path)

        alice = resolver.resolve("alice")
        assert alice.identity == alice_id
        assert alice.online
        assert alice.permissions == DEFAULT_PERMISSIONS
        root = resolver.resolve("root")
        assert not root.exists
        assert root.has_permission(PERM_LIST_OTHERS)
        assert not root.has_permission(PERM_ADD)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "principals.json"
        path.write_text("{not json")

        with pytest.raises(ValidationException):
            DirectoryResolver.from_file(path)

    def test_invalid_entry(self, tmp_path):
        path = tmp_path / "principals.json"
        path.write_text(json.dumps({"principals": [{"id": "not-a-uuid", "name": "x"}]}))

        with pytest.raises(ValidationException) as exc_info:
            DirectoryResolver.from_file(path)
        assert exc_info.value.field == "principals"

    def test_duplicate_in_file(self, tmp_path):
        path = tmp_path / "principals.json"
        entries = [{"id": str(uuid4()), "name": "dup"}, {"id": str(uuid4()), "name": "DUP"}]
        path.write_text(json.dumps({"principals": entries}))

        with pytest.raises(ValidationException):
            DirectoryResolver.from_file(path)

    def test_entry_requires_name(self):
        with pytest.raises(ValidationError):
            PrincipalEntry(id=uuid4(), name="")
