"""Error handling — what local and remote paths raise, and what never raises.

Local paths raise the host's own ``OSError`` subclasses. Remote paths raise
``ShareFSError`` subclasses with structured ``path`` and ``host`` attributes.
None of the remote cases below reach the network.
"""

from __future__ import annotations

import os
import tempfile

from share_fs import (
    CredentialNotFound,
    CredentialStore,
    InvalidPath,
    OperationNotSupported,
    ShareFileSystem,
    ShareFSError,
)

if __name__ == "__main__":
    fs = ShareFileSystem(CredentialStore())

    with tempfile.TemporaryDirectory() as tmp:
        # --- Local errors are untranslated ---
        try:
            fs.read_bytes(os.path.join(tmp, "nonexistent.txt"))
        except FileNotFoundError as exc:
            print(f"FileNotFoundError: {exc}")

    # --- No credential covers the share ---
    try:
        fs.read_bytes(r"\\fileserver\finance\q3.xlsx")
    except CredentialNotFound as exc:
        print(f"\nCredentialNotFound: {exc}")
        print(f"  path={exc.path}, host={exc.host}")

    # --- Malformed remote path ---
    try:
        fs.read_bytes("\\\\fileserver")
    except InvalidPath as exc:
        print(f"\nInvalidPath: {exc}")

    # --- Permission bits exist only for local paths ---
    try:
        fs.get_access_control("smb://fileserver/data/report.docx")
    except OperationNotSupported as exc:
        print(f"\nOperationNotSupported: {exc}")
        print(f"  operation={exc.operation}")

    # --- Catch any remote error with the base class ---
    for path in [r"\\fileserver\data\a.txt", "smb://"]:
        try:
            fs.delete(path)
        except ShareFSError as exc:
            print(f"\nShareFSError ({type(exc).__name__}): {exc}")

    # --- Existence checks never raise ---
    unreachable = r"\\nowhere.invalid\data\x"
    print(f"\nexists on an unreachable share: {fs.exists(unreachable)}")

    print("\nDone!")
