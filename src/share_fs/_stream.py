"""RemoteStream — a seekable binary stream over an open remote handle."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Optional

from share_fs._errors import ProtocolError
from share_fs._modes import FileAccess
from share_fs._status import NTStatus, is_success, raise_for_status, status_name

if TYPE_CHECKING:
    from collections.abc import Buffer

    from share_fs._client import FileStore
    from share_fs._connection import Connection
    from share_fs._types import RemoteHandle

log = logging.getLogger(__name__)


class RemoteStream(io.RawIOBase):
    """Binary stream that owns a remote handle and the connection it came from.

    The logical length starts at the size reported when the handle was opened
    and grows with writes past the end. Closing releases the handle, then the
    connection, exactly once. Not safe for concurrent use.

    :param store: File store the handle belongs to.
    :param handle: Open handle.
    :param connection: Connection to close after the handle.
    :param length: Object size at open time.
    :param access: Access the handle was opened with.
    :param max_transfer_size: Largest single read or write request.
    :param path: Path literal, for errors and ``name``.
    """

    def __init__(
        self,
        store: FileStore,
        handle: RemoteHandle,
        connection: Connection,
        length: int,
        *,
        access: FileAccess = FileAccess.READ_WRITE,
        max_transfer_size: int = 65536,
        path: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._store = store
        self._handle = handle
        self._connection = connection
        self._length = length
        self._access = access
        self._max_transfer_size = max_transfer_size
        self._path = path
        self._position = 0
        self._handle_open = True

    def __repr__(self) -> str:
        return f"RemoteStream(path={self._path!r}, position={self._position}, size={self._length})"

    @property
    def name(self) -> Optional[str]:
        return self._path

    @property
    def size(self) -> int:
        """Current logical length in bytes."""
        return self._length

    def readable(self) -> bool:
        return self._access.readable

    def writable(self) -> bool:
        return self._access.writable

    def seekable(self) -> bool:
        return True

    def _check_readable(self) -> None:
        self._checkClosed()  # type: ignore[attr-defined]
        if not self.readable():
            raise io.UnsupportedOperation("Stream was not opened for reading")

    def _check_writable(self) -> None:
        self._checkClosed()  # type: ignore[attr-defined]
        if not self.writable():
            raise io.UnsupportedOperation("Stream was not opened for writing")

    # region: reading

    def readinto(self, buffer: Buffer) -> int:
        self._check_readable()
        view = memoryview(buffer).cast("B")
        remaining = self._length - self._position
        if remaining <= 0 or not len(view):
            return 0
        count = min(len(view), self._max_transfer_size, remaining)
        status, data = self._store.read_file(self._handle, self._position, count)
        if status == NTStatus.STATUS_END_OF_FILE:
            return 0
        raise_for_status(status, path=self._path, host=self._connection.host)
        if len(data) > remaining:
            raise ProtocolError(
                f"Server returned {len(data)} bytes with only {remaining} left in the file",
                path=self._path,
                host=self._connection.host,
            )
        n = len(data)
        view[:n] = data
        self._position += n
        return n

    def readall(self) -> bytes:
        self._check_readable()
        chunks = []
        while True:
            chunk = self.read(self._max_transfer_size)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    # endregion

    # region: writing

    def write(self, buffer: Buffer) -> int:
        self._check_writable()
        data = memoryview(buffer).cast("B")
        total = 0
        while total < len(data):
            chunk = bytes(data[total : total + self._max_transfer_size])
            status, written = self._store.write_file(self._handle, self._position, chunk)
            raise_for_status(status, path=self._path, host=self._connection.host)
            if written <= 0:
                raise ProtocolError("Server accepted no bytes", path=self._path, host=self._connection.host)
            self._position += written
            total += written
        self._length = max(self._length, self._position)
        return total

    # endregion

    # region: positioning

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._checkClosed()  # type: ignore[attr-defined]
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._position + offset
        elif whence == io.SEEK_END:
            target = self._length + offset
        else:
            raise ValueError(f"Invalid whence ({whence})")
        if target < 0:
            raise ValueError(f"Negative seek position {target}")
        self._position = target
        return target

    def tell(self) -> int:
        self._checkClosed()  # type: ignore[attr-defined]
        return self._position

    # endregion

    def close(self) -> None:
        """Close the handle, then the connection. Safe to call more than once."""
        if self.closed:
            return
        try:
            if self._handle_open:
                self._handle_open = False
                status = self._store.close_file(self._handle)
                if not is_success(status):
                    log.debug("Closing %s returned %s", self._path, status_name(status))
        finally:
            try:
                self._connection.close()
            finally:
                super().close()
