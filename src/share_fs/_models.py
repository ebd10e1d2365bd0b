"""Immutable metadata models shared by the remote engine interface and callers."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from typing import Optional

from share_fs._protocol import FileAttributes


def to_utc(value: datetime, *, assume_local: bool) -> datetime:
    """Convert ``value`` to an aware UTC datetime.

    Naive values are interpreted as host-local time when ``assume_local`` is
    set, otherwise as UTC.
    """
    if value.tzinfo is None:
        if assume_local:
            return value.astimezone(timezone.utc)
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_local(value: datetime) -> datetime:
    """Convert an aware datetime to a naive host-local datetime."""
    return value.astimezone().replace(tzinfo=None)


@dataclasses.dataclass(frozen=True)
class FileBasicInfo:
    """Timestamps and attributes of a remote object (``FILE_BASIC_INFORMATION``).

    Times are aware UTC datetimes; ``None`` means "not reported" when read and
    "leave unchanged" when written.
    """

    creation_time: Optional[datetime] = None
    last_access_time: Optional[datetime] = None
    last_write_time: Optional[datetime] = None
    change_time: Optional[datetime] = None
    attributes: FileAttributes = FileAttributes.NONE

    @property
    def is_directory(self) -> bool:
        return bool(self.attributes & FileAttributes.DIRECTORY)


@dataclasses.dataclass(frozen=True)
class FileStandardInfo:
    """Size information of an open remote object (``FILE_STANDARD_INFORMATION``)."""

    end_of_file: int
    allocation_size: int = 0
    number_of_links: int = 1
    delete_pending: bool = False
    directory: bool = False


@dataclasses.dataclass(frozen=True)
class DirectoryEntry:
    """One row of a remote directory listing."""

    name: str
    attributes: FileAttributes = FileAttributes.NORMAL
    end_of_file: int = 0
    creation_time: Optional[datetime] = None
    last_access_time: Optional[datetime] = None
    last_write_time: Optional[datetime] = None

    @property
    def is_directory(self) -> bool:
        return bool(self.attributes & FileAttributes.DIRECTORY)


@dataclasses.dataclass(frozen=True, eq=False)
class FileInfo:
    """Immutable snapshot of file metadata.

    :param path: Full path literal (local or remote form).
    :param name: File name (final path component).
    :param size: File size in bytes.
    :param modified_at: Last write time (aware UTC).
    :param created_at: Creation time (aware UTC), if reported.
    :param accessed_at: Last access time (aware UTC), if reported.
    :param attributes: File attribute flags.
    """

    path: str
    name: str
    size: int
    modified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    accessed_at: Optional[datetime] = None
    attributes: FileAttributes = FileAttributes.NORMAL

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FileInfo):
            return self.path == other.path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.path)


@dataclasses.dataclass(frozen=True, eq=False)
class FolderInfo:
    """Immutable snapshot of folder metadata.

    :param path: Full path literal (local or remote form).
    :param name: Folder name (final path component, empty for a share root).
    :param modified_at: Last write time (aware UTC), if reported.
    :param created_at: Creation time (aware UTC), if reported.
    :param accessed_at: Last access time (aware UTC), if reported.
    :param attributes: Attribute flags; always include ``DIRECTORY``.
    """

    path: str
    name: str
    modified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    accessed_at: Optional[datetime] = None
    attributes: FileAttributes = FileAttributes.DIRECTORY

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FolderInfo):
            return self.path == other.path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.path)
