"""Streaming I/O — seekable streams, line iteration, and chunked processing.

Runs against a local temp folder. Pass a UNC root as the first
argument to stream from a share, with ``SHARE_FS_USER`` and ``SHARE_FS_PASSWORD``
set for it.
"""

from __future__ import annotations

import io
import os
import sys
import tempfile

from share_fs import Credential, CredentialStore, FileAccess, FileMode, ShareFileSystem


def demo(fs: ShareFileSystem, root: str, sep: str) -> None:
    path = sep.join((root, "streamed.txt"))

    # --- Write through a stream ---
    with fs.create(path) as stream:
        stream.write(b"line1\nline2\nline3\n")
        print(f"Wrote {stream.tell()} bytes through {type(stream).__name__}.")

    # --- Line iteration over a buffered reader ---
    with io.BufferedReader(fs.open_read(path)) as reader:
        print("\nLines:")
        for line in reader:
            print(f"  {line.rstrip().decode()}")

    # --- Random access ---
    with fs.open(path, FileMode.OPEN, FileAccess.READ_WRITE) as stream:
        stream.seek(-6, io.SEEK_END)
        stream.write(b"LINE3\n")
    print(f"\nAfter patching: {fs.read_text(path)!r}")

    # --- Chunked processing ---
    big = sep.join((root, "large.bin"))
    fs.write_bytes(big, b"X" * 10_000)
    total = 0
    chunk_count = 0
    with fs.open_read(big) as reader:
        while True:
            chunk = reader.read(4096)
            if not chunk:
                break
            total += len(chunk)
            chunk_count += 1
    print(f"\nRead large.bin in {chunk_count} chunk(s), {total} bytes total.")

    fs.delete(path)
    fs.delete(big)


if __name__ == "__main__":
    credentials = CredentialStore()
    if len(sys.argv) > 1:
        credentials.add(
            Credential(
                os.environ.get("SHARE_FS_DOMAIN", ""),
                os.environ["SHARE_FS_USER"],
                os.environ["SHARE_FS_PASSWORD"],
                sys.argv[1],
            )
        )

    with ShareFileSystem(credentials) as fs:
        if len(sys.argv) > 1:
            demo(fs, sys.argv[1].rstrip("\\/"), "\\")
        else:
            with tempfile.TemporaryDirectory() as tmp:
                demo(fs, tmp, os.sep)

    print("\nDone!")
