"""Backend abstract base class — the per-verb contract both path kinds implement."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, BinaryIO, Generic, TypeVar, Union

if TYPE_CHECKING:
    from collections.abc import Iterator

    from share_fs._capabilities import CapabilitySet
    from share_fs._models import FileBasicInfo, FileInfo, FolderInfo
    from share_fs._modes import FileAccess, FileMode, FileOptions, FileShare

P = TypeVar("P")

Entry = Union["FileInfo", "FolderInfo"]


class Backend(abc.ABC, Generic[P]):
    """Abstract base class for the local and remote backends.

    ``P`` is the classified path type the backend receives: a plain string for
    the local backend, a :class:`~share_fs.SharePath` for the SMB backend.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Identifier for this backend (``'local'`` or ``'smb'``)."""

    @property
    @abc.abstractmethod
    def capabilities(self) -> CapabilitySet:
        """Declared capabilities of this backend."""

    @abc.abstractmethod
    def exists(self, path: P) -> bool:
        """Check if a file or folder exists. Never raises."""

    @abc.abstractmethod
    def is_file(self, path: P) -> bool:
        """Return ``True`` if ``path`` is an existing file. Never raises."""

    @abc.abstractmethod
    def is_folder(self, path: P) -> bool:
        """Return ``True`` if ``path`` is an existing folder. Never raises."""

    @abc.abstractmethod
    def open(
        self,
        path: P,
        mode: FileMode,
        access: FileAccess,
        share: FileShare,
        options: FileOptions,
    ) -> BinaryIO:
        """Open a file and return a seekable binary stream."""

    @abc.abstractmethod
    def delete(self, path: P) -> None:
        """Delete a file."""

    @abc.abstractmethod
    def create_folder(self, path: P) -> None:
        """Create a folder and any missing parents. Existing folders are fine."""

    @abc.abstractmethod
    def delete_folder(self, path: P, *, recursive: bool = False) -> None:
        """Delete a folder, and its contents when ``recursive``."""

    @abc.abstractmethod
    def list_entries(self, path: P, pattern: str = "*", *, recursive: bool = False) -> Iterator[Entry]:
        """Yield files and folders under ``path`` whose names match ``pattern``."""

    @abc.abstractmethod
    def get_basic_info(self, path: P) -> FileBasicInfo:
        """Timestamps and attributes of a file or folder."""

    @abc.abstractmethod
    def set_basic_info(self, path: P, info: FileBasicInfo) -> None:
        """Apply timestamps and attributes; ``None`` times are left unchanged."""

    @abc.abstractmethod
    def get_file_info(self, path: P) -> FileInfo:
        """Metadata of a file."""

    @abc.abstractmethod
    def get_folder_info(self, path: P) -> FolderInfo:
        """Metadata of a folder."""

    @abc.abstractmethod
    def get_access_control(self, path: P) -> int:
        """Permission bits of ``path``."""

    @abc.abstractmethod
    def set_access_control(self, path: P, mode: int) -> None:
        """Apply permission bits to ``path``."""

    @abc.abstractmethod
    def list_shares(self, path: P) -> list[str]:
        """Names of the shares exposed by the host of ``path``."""

    def close(self) -> None:  # noqa: B027
        """Release resources. Default is a no-op."""
