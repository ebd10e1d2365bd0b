"""Tests for capabilities and the per-backend capability sets."""

from __future__ import annotations

import pytest

from share_fs._capabilities import Capability, CapabilitySet
from share_fs._config import ShareFSConfig
from share_fs._connection import ConnectionManager
from share_fs._credentials import CredentialStore
from share_fs._errors import OperationNotSupported
from share_fs.backends._local import LocalBackend
from share_fs.backends._smb import SMBBackend
from tests.fake_smb import FakeServer


class TestCapabilityEnum:
    def test_members(self) -> None:
        expected = {"READ", "WRITE", "DELETE", "LIST", "METADATA", "ACCESS_CONTROL", "LIST_SHARES"}
        assert {c.name for c in Capability} == expected


class TestCapabilitySet:
    def test_construction(self) -> None:
        cs = CapabilitySet({Capability.READ, Capability.WRITE})
        assert len(cs) == 2

    def test_supports(self) -> None:
        cs = CapabilitySet({Capability.READ})
        assert cs.supports(Capability.READ) is True
        assert cs.supports(Capability.WRITE) is False

    def test_require_passes(self) -> None:
        CapabilitySet({Capability.READ}).require(Capability.READ)

    def test_require_raises(self) -> None:
        cs = CapabilitySet({Capability.READ})
        with pytest.raises(OperationNotSupported) as exc_info:
            cs.require(Capability.ACCESS_CONTROL, path=r"\\h\s\a", host="h")
        assert exc_info.value.operation == "access_control"
        assert exc_info.value.host == "h"

    def test_contains_and_iteration(self) -> None:
        caps = {Capability.READ, Capability.WRITE}
        cs = CapabilitySet(caps)
        assert Capability.READ in cs
        assert Capability.DELETE not in cs
        assert set(cs) == caps

    def test_immutable(self) -> None:
        cs = CapabilitySet({Capability.READ})
        with pytest.raises(AttributeError, match="immutable"):
            cs.x = 1  # type: ignore[attr-defined]
        with pytest.raises(AttributeError, match="immutable"):
            del cs._caps  # type: ignore[attr-defined]


class TestBackendCapabilities:
    def test_local_has_no_share_listing(self) -> None:
        caps = LocalBackend().capabilities
        assert Capability.ACCESS_CONTROL in caps
        assert Capability.LIST_SHARES not in caps

    def test_remote_has_no_access_control(self) -> None:
        connections = ConnectionManager(FakeServer().factory, ShareFSConfig())
        caps = SMBBackend(CredentialStore(), connections).capabilities
        assert Capability.ACCESS_CONTROL not in caps
        assert Capability.LIST_SHARES in caps
        assert Capability.METADATA in caps
