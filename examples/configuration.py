"""Configuration — config-as-code, from_dict(), and scoped credentials.

Demonstrates building a ShareFSConfig in Python or from a parsed TOML/JSON
dict, and registering credentials whose scope covers a share or a subtree.
Nothing here connects to a server.
"""

from __future__ import annotations

import json

from share_fs import Credential, CredentialStore, ShareFileSystem, ShareFSConfig, SharePath, TransportType, classify

if __name__ == "__main__":
    # --- Option 1: Config-as-code ---
    config = ShareFSConfig(
        transport=TransportType.DIRECT_TCP,
        max_transfer_size=1 << 20,
        timeout=30,
        require_encryption=True,
    )
    print(f"Code config: port={config.effective_port}, chunk={config.max_transfer_size}")

    # --- Option 2: from_dict() — e.g. loaded from TOML or JSON ---
    raw = json.loads('{"transport": "netbios", "timeout": 5, "encoding": "cp1252"}')
    loaded = ShareFSConfig.from_dict(raw)
    print(f"Dict config: transport={loaded.transport.value}, port={loaded.effective_port}")

    try:
        ShareFSConfig.from_dict({"chunk": 4096})
    except TypeError as exc:
        print(f"Unknown key rejected: {exc}")

    # --- Credentials are matched by scope, first registered wins ---
    credentials = CredentialStore(
        [
            Credential("CORP", "reports-svc", "s3cret", r"\\fileserver\data\reports"),
            Credential("CORP", "data-svc", "s3cret", "smb://fileserver/data"),
        ]
    )
    for target in (r"\\fileserver\data\reports\q4.csv", r"\\FILESERVER\Data\raw\dump.bin", r"\\fileserver\other"):
        path = classify(target)
        assert isinstance(path, SharePath)
        match = credentials.resolve(path)
        print(f"{target} -> {match.principal if match else None}")

    # --- Temporary credential for one block ---
    with credentials.register(Credential("", "guest", "", r"\\fileserver\public")) as guest:
        print(f"Registered {guest.principal} for {guest.scope.unc}")
    print(f"Credentials after block: {len(credentials.all_credentials())}")

    with ShareFileSystem(credentials, config=config) as fs:
        print(f"\n{fs!r}")

    print("\nDone!")
