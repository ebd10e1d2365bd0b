"""Abstract SMB engine contract — the remote capability share_fs drives but does not implement.

Engines report failures as NT status codes rather than exceptions, so the
retry policy can inspect transient statuses. Only transport-level failures
(socket errors, protocol violations) may raise.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Protocol

from share_fs._protocol import FileAttributes

if TYPE_CHECKING:
    from share_fs._config import ShareFSConfig
    from share_fs._models import DirectoryEntry, FileBasicInfo, FileStandardInfo
    from share_fs._protocol import AccessMask, CreateDisposition, CreateOptions, FileInformationClass, ShareAccess
    from share_fs._types import RemoteHandle


class FileStore(abc.ABC):
    """Handle-level operations on one attached share (a tree-connect)."""

    @abc.abstractmethod
    def create_file(
        self,
        path: str,
        access: AccessMask,
        share_access: ShareAccess,
        disposition: CreateDisposition,
        options: CreateOptions,
        attributes: FileAttributes = FileAttributes.NORMAL,
    ) -> tuple[int, RemoteHandle]:
        """Open or create ``path`` (share-relative, backslash separated).

        :returns: ``(status, handle)``; ``handle`` is ``None`` unless the status is success.
        """

    @abc.abstractmethod
    def close_file(self, handle: RemoteHandle) -> int:
        """Close ``handle``; closing an already closed handle is not an error."""

    @abc.abstractmethod
    def read_file(self, handle: RemoteHandle, offset: int, length: int) -> tuple[int, bytes]:
        """Read up to ``length`` bytes at ``offset``; ``STATUS_END_OF_FILE`` past the end."""

    @abc.abstractmethod
    def write_file(self, handle: RemoteHandle, offset: int, data: bytes) -> tuple[int, int]:
        """Write ``data`` at ``offset``; returns ``(status, bytes_written)``."""

    @abc.abstractmethod
    def get_file_information(
        self, handle: RemoteHandle, info_class: FileInformationClass
    ) -> tuple[int, FileBasicInfo | FileStandardInfo | None]:
        """Query ``FILE_BASIC_INFORMATION`` or ``FILE_STANDARD_INFORMATION``."""

    @abc.abstractmethod
    def set_file_information(self, handle: RemoteHandle, info: FileBasicInfo) -> int:
        """Apply basic information; ``None`` times are left unchanged."""

    @abc.abstractmethod
    def query_directory(
        self, handle: RemoteHandle, pattern: str, info_class: FileInformationClass
    ) -> tuple[int, list[DirectoryEntry]]:
        """List entries of the open directory ``handle`` matching ``pattern``."""

    @abc.abstractmethod
    def disconnect(self) -> int:
        """Tree-disconnect from the share."""


class SMBClient(abc.ABC):
    """One SMB session to one server."""

    @property
    @abc.abstractmethod
    def max_read_size(self) -> int:
        """Largest single read the server negotiated."""

    @property
    @abc.abstractmethod
    def max_write_size(self) -> int:
        """Largest single write the server negotiated."""

    @abc.abstractmethod
    def connect(self) -> bool:
        """Open the transport and negotiate a dialect. ``False`` if unreachable."""

    @abc.abstractmethod
    def login(self, domain: str, username: str, password: str) -> int:
        """Authenticate the session."""

    @abc.abstractmethod
    def logoff(self) -> int:
        """End the authenticated session."""

    @abc.abstractmethod
    def disconnect(self) -> None:
        """Close the transport."""

    @abc.abstractmethod
    def tree_connect(self, share: str) -> tuple[int, FileStore | None]:
        """Attach to ``share``."""

    @abc.abstractmethod
    def list_shares(self) -> tuple[int, list[str]]:
        """Names of the disk shares the server exposes."""


class ClientFactory(Protocol):
    """Builds an unconnected :class:`SMBClient` for a resolved server address."""

    def __call__(self, address: str, server_name: str, config: ShareFSConfig) -> SMBClient: ...
