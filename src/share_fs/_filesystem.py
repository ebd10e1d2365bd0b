"""ShareFileSystem — the primary user-facing abstraction."""

from __future__ import annotations

import asyncio
import io
import logging
import os
import shutil
from typing import TYPE_CHECKING, Any, BinaryIO, Optional, Union

from share_fs._capabilities import Capability
from share_fs._config import ShareFSConfig
from share_fs._connection import ConnectionManager, resolve_host
from share_fs._credentials import CredentialStore
from share_fs._models import FileBasicInfo, FileInfo, FolderInfo, to_local, to_utc
from share_fs._modes import FileAccess, FileMode, FileOptions, FileShare, default_access
from share_fs._path import LocalPath, SharePath, classify
from share_fs._protocol import FileAttributes
from share_fs.backends._local import LocalBackend
from share_fs.backends._smb import SMBBackend
from share_fs.backends._smbprotocol import smbprotocol_client

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime
    from types import TracebackType

    from share_fs._backend import Backend, Entry
    from share_fs._client import ClientFactory
    from share_fs._credentials import CredentialProvider
    from share_fs._types import HostResolver, Lines, PathLike

log = logging.getLogger(__name__)

_Target = Union[str, SharePath]


class ShareFileSystem:
    """File and folder operations over local paths and remote SMB shares alike.

    Every call classifies its path once: UNC (``\\\\host\\share\\...``) and
    ``smb://host/share/...`` paths go to the SMB backend, anything else is
    passed to the host OS unmodified. Local errors are the host's own
    ``OSError`` subclasses; remote errors are :class:`~share_fs.ShareFSError`
    subclasses.

    :param credentials: Credential provider for remote paths. Defaults to an
        empty :class:`~share_fs.CredentialStore`.
    :param client_factory: Builds SMB engine clients. Defaults to the
        smbprotocol engine.
    :param config: Transport and sizing options.
    :param resolver: Host name resolver.
    """

    def __init__(
        self,
        credentials: Optional[CredentialProvider] = None,
        client_factory: Optional[ClientFactory] = None,
        config: Optional[ShareFSConfig] = None,
        *,
        resolver: HostResolver = resolve_host,
    ) -> None:
        self._config = config if config is not None else ShareFSConfig()
        self._config.validate()
        self._credentials = credentials if credentials is not None else CredentialStore()
        self._connections = ConnectionManager(client_factory or smbprotocol_client, self._config, resolver)
        self._local = LocalBackend()
        self._remote = SMBBackend(self._credentials, self._connections)

    def __repr__(self) -> str:
        return f"ShareFileSystem(config={self._config!r})"

    @property
    def config(self) -> ShareFSConfig:
        return self._config

    @property
    def credentials(self) -> CredentialProvider:
        return self._credentials

    def close(self) -> None:
        """Release backend resources. Connections never outlive a call, so this is cheap."""
        self._local.close()
        self._remote.close()

    def __enter__(self) -> ShareFileSystem:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # region: routing

    def _route(self, path: PathLike | SharePath) -> tuple[Backend[Any], _Target]:
        classified = path if isinstance(path, SharePath) else classify(os.fspath(path))
        if isinstance(classified, LocalPath):
            return self._local, classified.path
        return self._remote, classified

    @staticmethod
    def _require(backend: Backend[Any], target: _Target, capability: Capability) -> None:
        if isinstance(target, SharePath):
            backend.capabilities.require(capability, path=target.literal, host=target.host)
        else:
            backend.capabilities.require(capability, path=target)

    def _routed(self, path: PathLike | SharePath, capability: Capability) -> tuple[Backend[Any], _Target]:
        backend, target = self._route(path)
        self._require(backend, target, capability)
        return backend, target

    def _probe(self, path: PathLike | SharePath, check: str) -> bool:
        try:
            backend, target = self._route(path)
            return bool(getattr(backend, check)(target))
        except Exception as exc:
            log.debug("%s(%r) failed: %s", check, path, exc)
            return False

    def supports(self, path: PathLike | SharePath, capability: Capability) -> bool:
        """Check whether the backend serving ``path`` supports a capability."""
        backend, _ = self._route(path)
        return backend.capabilities.supports(capability)

    # endregion

    # region: existence checks

    def exists(self, path: PathLike | SharePath) -> bool:
        """Check if a file or folder exists. Never raises; failures read as ``False``."""
        return self._probe(path, "exists")

    def is_file(self, path: PathLike | SharePath) -> bool:
        return self._probe(path, "is_file")

    def is_folder(self, path: PathLike | SharePath) -> bool:
        return self._probe(path, "is_folder")

    # endregion

    # region: streams

    def open(
        self,
        path: PathLike | SharePath,
        mode: FileMode,
        access: Optional[FileAccess] = None,
        share: Optional[FileShare] = None,
        options: FileOptions = FileOptions.NONE,
    ) -> BinaryIO:
        """Open a file and return a seekable binary stream.

        Remote streams own their connection; close the stream (or use it as a
        context manager) to release it.

        :param mode: How to open or create the file.
        :param access: Defaults to write-only for ``APPEND``, else read-write.
        :param share: Sharing granted to other openers; remote opens derive it
            from ``access``.
        :param options: Advisory open options.
        :raises NotFound: If the file is missing and ``mode`` requires it.
        :raises AlreadyExists: If ``mode`` is ``CREATE_NEW`` and the file exists.
        :raises CredentialNotFound: If no credential covers a remote path.
        """
        access = access if access is not None else default_access(mode)
        backend, target = self._route(path)
        if access.readable:
            self._require(backend, target, Capability.READ)
        if access.writable:
            self._require(backend, target, Capability.WRITE)
        share = share if share is not None else FileShare.NONE
        return backend.open(target, mode, access, share, options)

    def open_read(self, path: PathLike | SharePath) -> BinaryIO:
        """Open an existing file for reading."""
        return self.open(path, FileMode.OPEN, FileAccess.READ, FileShare.READ)

    def open_write(self, path: PathLike | SharePath) -> BinaryIO:
        """Open a file for writing at offset 0, creating it if missing. Existing content is kept."""
        return self.open(path, FileMode.OPEN_OR_CREATE, FileAccess.WRITE)

    def create(self, path: PathLike | SharePath) -> BinaryIO:
        """Create or truncate a file and open it read-write."""
        return self.open(path, FileMode.CREATE, FileAccess.READ_WRITE)

    # endregion

    # region: whole-file content

    def read_bytes(self, path: PathLike | SharePath) -> bytes:
        """Read full file content as bytes.

        :raises NotFound: If the remote file does not exist.
        """
        with self.open_read(path) as stream:
            return stream.read()

    def _write(self, path: PathLike | SharePath, data: bytes, *, append: bool) -> None:
        mode = FileMode.OPEN_OR_CREATE if append else FileMode.CREATE
        with self.open(path, mode, FileAccess.WRITE) as stream:
            if append:
                stream.seek(0, io.SEEK_END)
            stream.write(data)

    def write_bytes(self, path: PathLike | SharePath, data: bytes) -> None:
        """Create or replace a file with ``data``."""
        self._write(path, data, append=False)

    def append_bytes(self, path: PathLike | SharePath, data: bytes) -> None:
        """Append ``data`` to a file, creating it if missing."""
        self._write(path, data, append=True)

    def read_text(self, path: PathLike | SharePath, encoding: Optional[str] = None) -> str:
        return self.read_bytes(path).decode(encoding or self._config.encoding)

    def write_text(self, path: PathLike | SharePath, text: str, encoding: Optional[str] = None) -> None:
        self.write_bytes(path, text.encode(encoding or self._config.encoding))

    def append_text(self, path: PathLike | SharePath, text: str, encoding: Optional[str] = None) -> None:
        self.append_bytes(path, text.encode(encoding or self._config.encoding))

    def read_lines(self, path: PathLike | SharePath, encoding: Optional[str] = None) -> list[str]:
        """Read a text file as a list of lines without line terminators."""
        return self.read_text(path, encoding).splitlines()

    def write_lines(self, path: PathLike | SharePath, lines: Lines, encoding: Optional[str] = None) -> None:
        """Create or replace a file with ``lines``, each followed by a newline."""
        self.write_text(path, "".join(f"{line}\n" for line in lines), encoding)

    def append_lines(self, path: PathLike | SharePath, lines: Lines, encoding: Optional[str] = None) -> None:
        self.append_text(path, "".join(f"{line}\n" for line in lines), encoding)

    # endregion

    # region: delete, copy and move

    def delete(self, path: PathLike | SharePath) -> None:
        """Delete a file.

        :raises NotFound: If the remote file does not exist.
        :raises FileNotFoundError: If the local file does not exist.
        """
        backend, target = self._routed(path, Capability.DELETE)
        backend.delete(target)

    def copy(self, src: PathLike | SharePath, dst: PathLike | SharePath, *, overwrite: bool = False) -> None:
        """Copy a file, between any combination of local and remote paths.

        :raises NotFound: If a remote ``src`` does not exist.
        :raises AlreadyExists: If a remote ``dst`` exists and ``overwrite`` is ``False``.
        :raises FileExistsError: If a local ``dst`` exists and ``overwrite`` is ``False``.
        """
        src_backend, src_target = self._routed(src, Capability.READ)
        dst_backend, dst_target = self._routed(dst, Capability.WRITE)
        if isinstance(src_backend, LocalBackend) and isinstance(dst_backend, LocalBackend):
            src_backend.copy(src_target, dst_target, overwrite=overwrite)  # type: ignore[arg-type]
            return

        with self.open_read(src) as reader:
            if overwrite and self.exists(dst):
                self.delete(dst)
            mode = FileMode.CREATE if overwrite else FileMode.CREATE_NEW
            with self.open(dst, mode, FileAccess.WRITE) as writer:
                shutil.copyfileobj(reader, writer, self._config.max_transfer_size)
        log.debug("Copied %s to %s", src, dst)

    def move(self, src: PathLike | SharePath, dst: PathLike | SharePath) -> None:
        """Move a file; across backends this copies, then deletes the source.

        :raises AlreadyExists: If a remote ``dst`` exists.
        :raises FileExistsError: If a local ``dst`` exists.
        """
        src_backend, src_target = self._routed(src, Capability.DELETE)
        dst_backend, dst_target = self._route(dst)
        if isinstance(src_backend, LocalBackend) and isinstance(dst_backend, LocalBackend):
            src_backend.move(src_target, dst_target)  # type: ignore[arg-type]
            return
        self.copy(src, dst)
        self.delete(src)

    # endregion

    # region: timestamps and attributes

    def _basic_info(self, path: PathLike | SharePath) -> FileBasicInfo:
        backend, target = self._routed(path, Capability.METADATA)
        return backend.get_basic_info(target)

    def _set_basic_info(self, path: PathLike | SharePath, info: FileBasicInfo) -> None:
        backend, target = self._routed(path, Capability.METADATA)
        backend.set_basic_info(target, info)

    @staticmethod
    def _local_time(value: Optional[datetime]) -> Optional[datetime]:
        return to_local(value) if value is not None else None

    def get_creation_time(self, path: PathLike | SharePath) -> Optional[datetime]:
        """Creation time as a naive host-local datetime, ``None`` if not reported."""
        return self._local_time(self._basic_info(path).creation_time)

    def get_creation_time_utc(self, path: PathLike | SharePath) -> Optional[datetime]:
        """Creation time as an aware UTC datetime, ``None`` if not reported."""
        return self._basic_info(path).creation_time

    def set_creation_time(self, path: PathLike | SharePath, value: datetime) -> None:
        """Set the creation time; naive values are host-local time."""
        self._set_basic_info(path, FileBasicInfo(creation_time=to_utc(value, assume_local=True)))

    def set_creation_time_utc(self, path: PathLike | SharePath, value: datetime) -> None:
        """Set the creation time; naive values are UTC."""
        self._set_basic_info(path, FileBasicInfo(creation_time=to_utc(value, assume_local=False)))

    def get_last_access_time(self, path: PathLike | SharePath) -> Optional[datetime]:
        return self._local_time(self._basic_info(path).last_access_time)

    def get_last_access_time_utc(self, path: PathLike | SharePath) -> Optional[datetime]:
        return self._basic_info(path).last_access_time

    def set_last_access_time(self, path: PathLike | SharePath, value: datetime) -> None:
        self._set_basic_info(path, FileBasicInfo(last_access_time=to_utc(value, assume_local=True)))

    def set_last_access_time_utc(self, path: PathLike | SharePath, value: datetime) -> None:
        self._set_basic_info(path, FileBasicInfo(last_access_time=to_utc(value, assume_local=False)))

    def get_last_write_time(self, path: PathLike | SharePath) -> Optional[datetime]:
        return self._local_time(self._basic_info(path).last_write_time)

    def get_last_write_time_utc(self, path: PathLike | SharePath) -> Optional[datetime]:
        return self._basic_info(path).last_write_time

    def set_last_write_time(self, path: PathLike | SharePath, value: datetime) -> None:
        self._set_basic_info(path, FileBasicInfo(last_write_time=to_utc(value, assume_local=True)))

    def set_last_write_time_utc(self, path: PathLike | SharePath, value: datetime) -> None:
        self._set_basic_info(path, FileBasicInfo(last_write_time=to_utc(value, assume_local=False)))

    def get_attributes(self, path: PathLike | SharePath) -> FileAttributes:
        return self._basic_info(path).attributes

    def set_attributes(self, path: PathLike | SharePath, attributes: FileAttributes) -> None:
        """Replace the attribute flags of a file or folder.

        ``FileAttributes.NONE`` leaves attributes unchanged; pass ``NORMAL`` to clear them.
        """
        self._set_basic_info(path, FileBasicInfo(attributes=attributes))

    def get_access_control(self, path: PathLike | SharePath) -> int:
        """Permission bits of a local path.

        :raises OperationNotSupported: For remote paths, before any connection is made.
        """
        backend, target = self._routed(path, Capability.ACCESS_CONTROL)
        return backend.get_access_control(target)

    def set_access_control(self, path: PathLike | SharePath, mode: int) -> None:
        """Apply permission bits to a local path.

        :raises OperationNotSupported: For remote paths, before any connection is made.
        """
        backend, target = self._routed(path, Capability.ACCESS_CONTROL)
        backend.set_access_control(target, mode)

    # endregion

    # region: folders

    def create_folder(self, path: PathLike | SharePath) -> None:
        """Create a folder and any missing parents. Existing folders are fine."""
        backend, target = self._routed(path, Capability.WRITE)
        backend.create_folder(target)

    def delete_folder(self, path: PathLike | SharePath, *, recursive: bool = False) -> None:
        """Delete a folder.

        :raises DirectoryNotEmpty: If a remote folder has contents and ``recursive`` is ``False``.
        :raises InvalidPath: If ``path`` is a share root.
        """
        backend, target = self._routed(path, Capability.DELETE)
        backend.delete_folder(target, recursive=recursive)

    def list_entries(
        self, path: PathLike | SharePath, pattern: str = "*", *, recursive: bool = False
    ) -> Iterator[Entry]:
        """List files and folders under ``path`` whose names match ``pattern``.

        :param pattern: Wildcard pattern (``*`` and ``?``).
        :param recursive: Descend into every subfolder.
        """
        backend, target = self._routed(path, Capability.LIST)
        return backend.list_entries(target, pattern, recursive=recursive)

    def list_files(self, path: PathLike | SharePath, pattern: str = "*", *, recursive: bool = False) -> list[FileInfo]:
        return [e for e in self.list_entries(path, pattern, recursive=recursive) if isinstance(e, FileInfo)]

    def list_folders(
        self, path: PathLike | SharePath, pattern: str = "*", *, recursive: bool = False
    ) -> list[FolderInfo]:
        return [e for e in self.list_entries(path, pattern, recursive=recursive) if isinstance(e, FolderInfo)]

    def get_file_info(self, path: PathLike | SharePath) -> FileInfo:
        """Get file metadata.

        :raises NotFound: If the remote path is missing or is a folder.
        """
        backend, target = self._routed(path, Capability.METADATA)
        return backend.get_file_info(target)

    def get_folder_info(self, path: PathLike | SharePath) -> FolderInfo:
        """Get folder metadata.

        :raises NotFound: If the remote path is missing or is a file.
        """
        backend, target = self._routed(path, Capability.METADATA)
        return backend.get_folder_info(target)

    def get_parent(self, path: PathLike | SharePath) -> Optional[str]:
        """Parent of ``path`` in the same form, or ``None`` at a share or filesystem root."""
        _, target = self._route(path)
        if isinstance(target, SharePath):
            parent = target.parent
            return parent.literal if parent is not None else None
        normalized = os.path.normpath(target)
        parent_path = os.path.dirname(normalized)
        if not parent_path or parent_path == normalized:
            return None
        return parent_path

    def list_shares(self, path: PathLike | SharePath) -> list[str]:
        """Names of the shares exposed by the host of a remote ``path``.

        :raises OperationNotSupported: For local paths, or when the engine cannot enumerate shares.
        """
        backend, target = self._routed(path, Capability.LIST_SHARES)
        return backend.list_shares(target)

    # endregion

    # region: async wrappers

    async def read_bytes_async(self, path: PathLike | SharePath) -> bytes:
        return await asyncio.to_thread(self.read_bytes, path)

    async def write_bytes_async(self, path: PathLike | SharePath, data: bytes) -> None:
        await asyncio.to_thread(self.write_bytes, path, data)

    async def read_text_async(self, path: PathLike | SharePath, encoding: Optional[str] = None) -> str:
        return await asyncio.to_thread(self.read_text, path, encoding)

    async def write_text_async(self, path: PathLike | SharePath, text: str, encoding: Optional[str] = None) -> None:
        await asyncio.to_thread(self.write_text, path, text, encoding)

    async def append_text_async(self, path: PathLike | SharePath, text: str, encoding: Optional[str] = None) -> None:
        await asyncio.to_thread(self.append_text, path, text, encoding)

    async def read_lines_async(self, path: PathLike | SharePath, encoding: Optional[str] = None) -> list[str]:
        return await asyncio.to_thread(self.read_lines, path, encoding)

    async def write_lines_async(
        self, path: PathLike | SharePath, lines: Lines, encoding: Optional[str] = None
    ) -> None:
        await asyncio.to_thread(self.write_lines, path, list(lines), encoding)

    async def append_lines_async(
        self, path: PathLike | SharePath, lines: Lines, encoding: Optional[str] = None
    ) -> None:
        await asyncio.to_thread(self.append_lines, path, list(lines), encoding)

    async def copy_async(
        self, src: PathLike | SharePath, dst: PathLike | SharePath, *, overwrite: bool = False
    ) -> None:
        await asyncio.to_thread(self.copy, src, dst, overwrite=overwrite)

    # endregion
