"""Global test fixtures for the TrustKeep test suite."""

from __future__ import annotations

import os
from uuid import uuid4

import pytest

from trustkeep.core.config import clear_config_cache
from trustkeep.trust.identity import (
    DEFAULT_PERMISSIONS,
    PERM_LIST_OTHERS,
    DirectoryResolver,
    Principal,
)
from trustkeep.trust.store import TrustStore

# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all TRUSTKEEP_ environment variables and the cached config."""
    for key in list(os.environ.keys()):
        if key.startswith("TRUSTKEEP_"):
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture(autouse=True)
def reset_config():
    """Never leak a cached config between tests."""
    clear_config_cache()
    yield
    clear_config_cache()


# ============================================================================
# Identity Fixtures
# ============================================================================


@pytest.fixture
def alice() -> Principal:
    return Principal(identity=uuid4(), name="alice", online=True)


@pytest.fixture
def bob() -> Principal:
    return Principal(identity=uuid4(), name="bob", online=True)


@pytest.fixture
def carol() -> Principal:
    """Offline but known."""
    return Principal(identity=uuid4(), name="carol", online=False)


@pytest.fixture
def ghost() -> Principal:
    """Never seen and not online, so not a valid trustee."""
    return Principal(identity=uuid4(), name="ghost", has_history=False, online=False)


@pytest.fixture
def admin() -> Principal:
    return Principal(
        identity=uuid4(),
        name="admin",
        permissions=DEFAULT_PERMISSIONS | {PERM_LIST_OTHERS},
    )


@pytest.fixture
def resolver(alice, bob, carol, ghost, admin) -> DirectoryResolver:
    return DirectoryResolver([alice, bob, carol, ghost, admin])


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def trusts_dir(tmp_path):
    return tmp_path / "trusts"


@pytest.fixture
def persistent_store(trusts_dir) -> TrustStore:
    return TrustStore(capacity=2, persistent=True, backing_root=trusts_dir)


@pytest.fixture
def transient_store() -> TrustStore:
    return TrustStore(capacity=2, name="confirmations")
