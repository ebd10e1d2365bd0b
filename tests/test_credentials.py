"""Tests for credentials and their resolution."""

from __future__ import annotations

import dataclasses
import threading

import pytest

from share_fs._credentials import Credential, CredentialProvider, CredentialStore, resolve_credential
from share_fs._errors import CredentialNotFound, InvalidPath
from share_fs._path import SharePath


def _cred(path: str, username: str = "alice") -> Credential:
    return Credential(domain="CORP", username=username, password="secret", path=path)


class TestCredential:
    def test_scope_parsed(self) -> None:
        cred = _cred(r"\\fileserver\data\team")
        assert cred.scope == SharePath("fileserver", "data", "team")

    def test_uri_scope(self) -> None:
        assert _cred("smb://fileserver/data").scope == SharePath("fileserver", "data")

    def test_local_scope_rejected(self) -> None:
        with pytest.raises(InvalidPath):
            _cred(r"C:\data")

    def test_password_hidden_from_repr(self) -> None:
        assert "secret" not in repr(_cred(r"\\h\s"))

    def test_principal(self) -> None:
        assert _cred(r"\\h\s").principal == "CORP\\alice"
        assert Credential("", "bob", "pw", r"\\h\s").principal == "bob"
        assert Credential("CORP", "OTHER\\bob", "pw", r"\\h\s").principal == "OTHER\\bob"

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            _cred(r"\\h\s").username = "mallory"  # type: ignore[misc]


class TestCredentialStore:
    def test_is_provider(self) -> None:
        assert isinstance(CredentialStore(), CredentialProvider)

    def test_resolve_scope_and_descendants(self) -> None:
        cred = _cred(r"\\fileserver\data\team")
        store = CredentialStore([cred])
        assert store.resolve(SharePath("fileserver", "data", "team")) is cred
        assert store.resolve(SharePath("FILESERVER", "Data", r"Team\docs\a.txt")) is cred

    def test_resolve_outside_scope(self) -> None:
        store = CredentialStore([_cred(r"\\fileserver\data\team")])
        assert store.resolve(SharePath("fileserver", "data", "other")) is None
        assert store.resolve(SharePath("fileserver", "public", "team")) is None
        assert store.resolve(SharePath("elsewhere", "data", "team")) is None

    def test_first_registered_match_wins(self) -> None:
        broad = _cred(r"\\fileserver\data", "broad")
        narrow = _cred(r"\\fileserver\data\team", "narrow")
        store = CredentialStore([broad, narrow])
        resolved = store.resolve(SharePath("fileserver", "data", r"team\a.txt"))
        assert resolved is not None
        assert resolved.username == "broad"

    def test_add_and_remove(self) -> None:
        store = CredentialStore()
        cred = _cred(r"\\h\s")
        store.add(cred)
        assert store.all_credentials() == (cred,)
        store.remove(cred)
        store.remove(cred)
        assert store.all_credentials() == ()

    def test_register_is_scoped(self) -> None:
        store = CredentialStore()
        target = SharePath("h", "s", "x")
        with store.register(_cred(r"\\h\s")) as cred:
            assert store.resolve(target) is cred
        assert store.resolve(target) is None

    def test_register_removes_on_error(self) -> None:
        store = CredentialStore()
        with pytest.raises(RuntimeError):
            with store.register(_cred(r"\\h\s")):
                raise RuntimeError("boom")
        assert store.all_credentials() == ()

    def test_concurrent_adds(self) -> None:
        store = CredentialStore()

        def add_many(offset: int) -> None:
            for i in range(50):
                store.add(_cred(f"//h/s/{offset}-{i}"))

        threads = [threading.Thread(target=add_many, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store.all_credentials()) == 200

    def test_repr_lists_scopes_only(self) -> None:
        r = repr(CredentialStore([_cred(r"\\h\s")]))
        assert "secret" not in r
        assert "CredentialStore" in r


class TestResolveCredential:
    def test_found(self) -> None:
        cred = _cred(r"\\h\s")
        assert resolve_credential(CredentialStore([cred]), SharePath("h", "s", "a")) is cred

    def test_missing_raises(self) -> None:
        with pytest.raises(CredentialNotFound) as exc_info:
            resolve_credential(CredentialStore(), SharePath("h", "s", "a"))
        assert exc_info.value.host == "h"
