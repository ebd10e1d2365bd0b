"""Local filesystem backend — a pass-through to the host OS.

Errors are the host's own ``OSError`` subclasses and are never translated.
"""

from __future__ import annotations

import errno
import fnmatch
import logging
import os
import shutil
import stat
from datetime import datetime, timezone
from typing import TYPE_CHECKING, BinaryIO

from share_fs._backend import Backend
from share_fs._capabilities import Capability, CapabilitySet
from share_fs._errors import OperationNotSupported
from share_fs._models import FileBasicInfo, FileInfo, FolderInfo
from share_fs._modes import FileAccess, FileMode, FileOptions
from share_fs._protocol import FileAttributes

if TYPE_CHECKING:
    from collections.abc import Iterator

    from share_fs._backend import Entry
    from share_fs._modes import FileShare

log = logging.getLogger(__name__)

_LOCAL_CAPABILITIES = CapabilitySet({c for c in Capability if c is not Capability.LIST_SHARES})

_MODE_FLAGS = {
    FileMode.CREATE_NEW: os.O_CREAT | os.O_EXCL,
    FileMode.CREATE: os.O_CREAT | os.O_TRUNC,
    FileMode.OPEN: 0,
    FileMode.OPEN_OR_CREATE: os.O_CREAT,
    FileMode.TRUNCATE: os.O_TRUNC,
    FileMode.APPEND: os.O_CREAT,
}

_ACCESS_FLAGS = {
    FileAccess.READ: os.O_RDONLY,
    FileAccess.WRITE: os.O_WRONLY,
    FileAccess.READ_WRITE: os.O_RDWR,
}

_PY_MODES = {
    FileAccess.READ: "rb",
    FileAccess.WRITE: "wb",
    FileAccess.READ_WRITE: "r+b",
}

_ADVICE = {
    FileOptions.RANDOM_ACCESS: "POSIX_FADV_RANDOM",
    FileOptions.SEQUENTIAL_SCAN: "POSIX_FADV_SEQUENTIAL",
}


def _timestamp(value: float | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


class LocalBackend(Backend[str]):
    """Host filesystem access with the host's own semantics and errors.

    Share flags are accepted but not enforced, since POSIX has no share modes.
    """

    @property
    def name(self) -> str:
        return "local"

    @property
    def capabilities(self) -> CapabilitySet:
        return _LOCAL_CAPABILITIES

    # region: existence checks
    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_folder(self, path: str) -> bool:
        return os.path.isdir(path)

    # endregion

    # region: streams
    def open(
        self,
        path: str,
        mode: FileMode,
        access: FileAccess,
        share: FileShare,
        options: FileOptions,
    ) -> BinaryIO:
        flags = _MODE_FLAGS[mode] | _ACCESS_FLAGS[access] | getattr(os, "O_BINARY", 0)
        if options is FileOptions.WRITE_THROUGH:
            flags |= getattr(os, "O_SYNC", 0)
        if options is FileOptions.DELETE_ON_CLOSE:
            flags |= getattr(os, "O_TEMPORARY", 0)

        fd = os.open(path, flags, 0o666)
        try:
            if options is FileOptions.DELETE_ON_CLOSE and not hasattr(os, "O_TEMPORARY"):
                # POSIX keeps the inode alive until the descriptor closes
                os.unlink(path)
            advice = _ADVICE.get(options)
            if advice is not None and hasattr(os, "posix_fadvise"):
                os.posix_fadvise(fd, 0, 0, getattr(os, advice))
            stream = os.fdopen(fd, _PY_MODES[access])
        except BaseException:
            os.close(fd)
            raise
        if mode is FileMode.APPEND:
            stream.seek(0, os.SEEK_END)
        return stream  # type: ignore[return-value]

    # endregion

    # region: delete and create
    def delete(self, path: str) -> None:
        os.remove(path)

    def create_folder(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def delete_folder(self, path: str, *, recursive: bool = False) -> None:
        if recursive:
            shutil.rmtree(path)
        else:
            os.rmdir(path)

    def copy(self, src: str, dst: str, *, overwrite: bool = False) -> None:
        if not overwrite and os.path.exists(dst):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), dst)
        shutil.copy2(src, dst)

    def move(self, src: str, dst: str) -> None:
        if os.path.exists(dst):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), dst)
        shutil.move(src, dst)

    # endregion

    # region: listing and metadata
    def _entry(self, path: str, st: os.stat_result) -> Entry:
        name = os.path.basename(os.path.normpath(path))
        info = self._basic_from_stat(name, st)
        if stat.S_ISDIR(st.st_mode):
            return FolderInfo(
                path=path,
                name=name,
                modified_at=info.last_write_time,
                created_at=info.creation_time,
                accessed_at=info.last_access_time,
                attributes=info.attributes,
            )
        return FileInfo(
            path=path,
            name=name,
            size=st.st_size,
            modified_at=info.last_write_time,
            created_at=info.creation_time,
            accessed_at=info.last_access_time,
            attributes=info.attributes,
        )

    def list_entries(self, path: str, pattern: str = "*", *, recursive: bool = False) -> Iterator[Entry]:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            if fnmatch.fnmatch(entry.name, pattern):
                yield self._entry(entry.path, entry.stat())
            if recursive and entry.is_dir(follow_symlinks=False):
                yield from self.list_entries(entry.path, pattern, recursive=True)

    @staticmethod
    def _basic_from_stat(name: str, st: os.stat_result) -> FileBasicInfo:
        attributes = FileAttributes.NONE
        if stat.S_ISDIR(st.st_mode):
            attributes |= FileAttributes.DIRECTORY
        if not st.st_mode & (stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH):
            attributes |= FileAttributes.READONLY
        if name.startswith("."):
            attributes |= FileAttributes.HIDDEN
        if not attributes:
            attributes = FileAttributes.NORMAL
        created = getattr(st, "st_birthtime", None)
        return FileBasicInfo(
            creation_time=_timestamp(created if created is not None else st.st_ctime),
            last_access_time=_timestamp(st.st_atime),
            last_write_time=_timestamp(st.st_mtime),
            change_time=_timestamp(st.st_ctime),
            attributes=attributes,
        )

    def get_basic_info(self, path: str) -> FileBasicInfo:
        return self._basic_from_stat(os.path.basename(os.path.normpath(path)), os.stat(path))

    def set_basic_info(self, path: str, info: FileBasicInfo) -> None:
        if info.last_access_time is not None or info.last_write_time is not None:
            st = os.stat(path)
            atime = info.last_access_time.timestamp() if info.last_access_time else st.st_atime
            mtime = info.last_write_time.timestamp() if info.last_write_time else st.st_mtime
            os.utime(path, (atime, mtime))
        if info.creation_time is not None:
            log.debug("Creation time of %s is not settable on this platform; ignored", path)
        if info.attributes:
            mode = stat.S_IMODE(os.stat(path).st_mode)
            if info.attributes & FileAttributes.READONLY:
                mode &= ~(stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH)
            else:
                mode |= stat.S_IWUSR
            os.chmod(path, mode)

    def get_file_info(self, path: str) -> FileInfo:
        st = os.stat(path)
        if stat.S_ISDIR(st.st_mode):
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), path)
        return self._entry(path, st)  # type: ignore[return-value]

    def get_folder_info(self, path: str) -> FolderInfo:
        st = os.stat(path)
        if not stat.S_ISDIR(st.st_mode):
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
        return self._entry(path, st)  # type: ignore[return-value]

    def get_access_control(self, path: str) -> int:
        return stat.S_IMODE(os.stat(path).st_mode)

    def set_access_control(self, path: str, mode: int) -> None:
        os.chmod(path, mode)

    def list_shares(self, path: str) -> list[str]:
        raise OperationNotSupported("Local paths have no shares", path=path, operation="list_shares")

    # endregion
