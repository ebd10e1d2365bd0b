"""Quickstart — the same calls for a local folder and an SMB share.

Demonstrates:
- Creating a ShareFileSystem with a credential for one share
- Writing and reading a local file
- Doing the same on a share, when ``SHARE_FS_ROOT`` names one

Set ``SHARE_FS_ROOT`` (e.g. ``\\\\fileserver\\data``), ``SHARE_FS_USER``,
``SHARE_FS_PASSWORD`` and optionally ``SHARE_FS_DOMAIN`` to try the remote part.
"""

from __future__ import annotations

import os
import tempfile

from share_fs import Credential, CredentialStore, ShareFileSystem


def tour(fs: ShareFileSystem, root: str, sep: str) -> None:
    target = sep.join((root, "hello.txt"))

    # Write a file
    fs.write_text(target, "Hello, world!")
    print(f"File exists: {fs.exists(target)}")

    # Read it back
    print(f"Content: {fs.read_text(target)}")

    # Check metadata
    info = fs.get_file_info(target)
    print(f"Size: {info.size} bytes")
    print(f"Modified: {info.modified_at}")

    fs.delete(target)


if __name__ == "__main__":
    credentials = CredentialStore()
    remote_root = os.environ.get("SHARE_FS_ROOT")
    if remote_root:
        credentials.add(
            Credential(
                domain=os.environ.get("SHARE_FS_DOMAIN", ""),
                username=os.environ["SHARE_FS_USER"],
                password=os.environ["SHARE_FS_PASSWORD"],
                path=remote_root,
            )
        )

    with ShareFileSystem(credentials) as fs:
        with tempfile.TemporaryDirectory() as tmp:
            print(f"--- local: {tmp}")
            tour(fs, tmp, os.sep)

        if remote_root:
            print(f"\n--- remote: {remote_root}")
            tour(fs, remote_root.rstrip("\\/"), "\\")

    print("\nDone!")
