"""Backend test fixtures -- the same filesystem operations against local and remote roots."""

from __future__ import annotations

import dataclasses
import os
from typing import TYPE_CHECKING

import pytest

from share_fs import Credential, CredentialStore, NotFound, ShareFileSystem, ShareFSConfig
from tests.fake_smb import FakeServer

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@dataclasses.dataclass
class Location:
    """A writable root reachable through ``fs``.

    :param kind: ``"local"`` or ``"smb"``.
    :param fs: Filesystem to drive.
    :param root: Root folder in the backend's own path form.
    :param sep: Separator used to build child paths.
    :param missing_error: What a missing file raises on this backend.
    """

    kind: str
    fs: ShareFileSystem
    root: str
    sep: str
    missing_error: type[Exception]

    def path(self, *names: str) -> str:
        return self.sep.join((self.root, *names))


@pytest.fixture(params=["local", "smb"])
def location(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[Location]:
    """Parameterized root fixture. Add new backends here."""
    if request.param == "local":
        with ShareFileSystem() as fs:
            yield Location("local", fs, str(tmp_path), os.sep, FileNotFoundError)
    else:
        server = FakeServer(host="nas", shares=("team",))
        root = r"\\nas\team"
        fs = ShareFileSystem(
            CredentialStore([Credential("", "svc", "pw", root)]),
            client_factory=server.factory,
            config=ShareFSConfig(max_transfer_size=8),
            resolver=lambda host: "192.0.2.10",
        )
        with fs:
            yield Location("smb", fs, root, "\\", NotFound)
        assert server.live_clients == []
