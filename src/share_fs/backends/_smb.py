"""SMB backend — drives an :class:`~share_fs.SMBClient` engine one connection per operation."""

from __future__ import annotations

import contextlib
import fnmatch
import io
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, BinaryIO, Optional

from share_fs._backend import Backend
from share_fs._capabilities import Capability, CapabilitySet
from share_fs._credentials import resolve_credential
from share_fs._errors import (
    ConnectionFailed,
    DirectoryNotEmpty,
    InvalidPath,
    NotFound,
    ProtocolError,
    ShareFSError,
)
from share_fs._models import DirectoryEntry, FileBasicInfo, FileInfo, FileStandardInfo, FolderInfo
from share_fs._modes import FileMode, access_and_share, create_disposition, create_options
from share_fs._path import SharePath
from share_fs._protocol import (
    AccessMask,
    CreateDisposition,
    CreateOptions,
    FileAttributes,
    FileInformationClass,
    ShareAccess,
)
from share_fs._retry import DELETE_RETRY, OPEN_INFO_RETRY, OPEN_RETRY, RetryPolicy
from share_fs._status import NTStatus, is_success, raise_for_status, status_name
from share_fs._stream import RemoteStream

if TYPE_CHECKING:
    from collections.abc import Iterator

    from share_fs._backend import Entry
    from share_fs._client import FileStore
    from share_fs._connection import Connection, ConnectionManager
    from share_fs._credentials import CredentialProvider
    from share_fs._modes import FileAccess, FileOptions, FileShare
    from share_fs._types import RemoteHandle

log = logging.getLogger(__name__)

_SMB_CAPABILITIES = CapabilitySet({c for c in Capability if c is not Capability.ACCESS_CONTROL})

_SHARE_ALL = ShareAccess.READ | ShareAccess.WRITE | ShareAccess.DELETE

# Directory queries that match nothing answer with one of these instead of an empty list.
_EMPTY_LISTING = frozenset({NTStatus.STATUS_NO_MORE_FILES, NTStatus.STATUS_NO_SUCH_FILE})


class SMBBackend(Backend[SharePath]):
    """Remote backend for UNC and ``smb://`` paths.

    Every call resolves a credential, opens a dedicated connection, attaches
    the share and releases all of it before returning. Streams returned by
    :meth:`open` own their connection until closed.

    :param credentials: Source of credentials for remote paths.
    :param connections: Connection manager used to reach hosts.
    """

    def __init__(self, credentials: CredentialProvider, connections: ConnectionManager) -> None:
        self._credentials = credentials
        self._connections = connections

    @property
    def name(self) -> str:
        return "smb"

    @property
    def capabilities(self) -> CapabilitySet:
        return _SMB_CAPABILITIES

    # region: error mapping and plumbing

    @contextmanager
    def _errors(self, path: SharePath) -> Iterator[None]:
        """Map transport exceptions to share_fs errors."""
        try:
            yield
        except ShareFSError:
            raise
        except (OSError, EOFError) as exc:
            raise ConnectionFailed(str(exc) or type(exc).__name__, path=path.literal, host=path.host) from exc
        except Exception as exc:  # pragma: no cover
            raise ShareFSError(str(exc), path=path.literal, host=path.host) from exc

    @contextmanager
    def _session(self, path: SharePath) -> Iterator[tuple[Connection, FileStore]]:
        credential = resolve_credential(self._credentials, path)
        with self._errors(path), self._connections.connect(path, credential) as (connection, store):
            yield connection, store

    def _create(
        self,
        store: FileStore,
        path: SharePath,
        access: AccessMask,
        share_access: ShareAccess,
        disposition: CreateDisposition,
        options: CreateOptions,
        *,
        attributes: FileAttributes = FileAttributes.NORMAL,
        policy: RetryPolicy = OPEN_RETRY,
    ) -> RemoteHandle:
        status, handle = policy.call(
            lambda: store.create_file(path.relative_path, access, share_access, disposition, options, attributes)
        )
        policy.check(status, path=path.literal, host=path.host)
        log.debug("Opened %s (%s)", path.unc, policy.name)
        return handle

    @staticmethod
    def _close(store: FileStore, handle: RemoteHandle, path: SharePath) -> None:
        status = store.close_file(handle)
        if not is_success(status):
            log.debug("Closing %s returned %s", path.unc, status_name(status))

    @contextmanager
    def _opened(
        self,
        store: FileStore,
        path: SharePath,
        access: AccessMask,
        share_access: ShareAccess,
        disposition: CreateDisposition,
        options: CreateOptions,
    ) -> Iterator[RemoteHandle]:
        handle = self._create(store, path, access, share_access, disposition, options)
        try:
            yield handle
        finally:
            self._close(store, handle, path)

    def _opened_folder(self, store: FileStore, path: SharePath) -> contextlib.AbstractContextManager[RemoteHandle]:
        return self._opened(
            store, path, AccessMask.GENERIC_READ, ShareAccess.READ, CreateDisposition.OPEN, CreateOptions.DIRECTORY_FILE
        )

    def _query(self, store: FileStore, folder: SharePath, pattern: str) -> list[DirectoryEntry]:
        with self._opened_folder(store, folder) as handle:
            status, entries = store.query_directory(handle, pattern, FileInformationClass.FILE_DIRECTORY_INFORMATION)
        if status in _EMPTY_LISTING:
            return []
        raise_for_status(status, path=folder.literal, host=folder.host)
        return [e for e in entries if e.name not in (".", "..")]

    def _transfer_size(self, connection: Connection, access: FileAccess) -> int:
        size = self._connections.config.max_transfer_size
        negotiated = [connection.max_read_size if access.readable else 0]
        negotiated.append(connection.max_write_size if access.writable else 0)
        for limit in negotiated:
            if limit > 0:
                size = min(size, limit)
        return size

    # endregion

    # region: existence checks

    def _probe(self, path: SharePath) -> Optional[DirectoryEntry]:
        """Look ``path`` up in its parent listing; a share root is a nameless folder."""
        with self._session(path) as (_, store):
            parent = path.parent
            if parent is None:
                with self._opened_folder(store, path):
                    return DirectoryEntry(name="", attributes=FileAttributes.DIRECTORY)
            wanted = path.name.casefold()
            for entry in self._query(store, parent, path.name or "*"):
                if entry.name.casefold() == wanted:
                    return entry
            return None

    def _lookup(self, path: SharePath) -> Optional[DirectoryEntry]:
        try:
            return self._probe(path)
        except (ShareFSError, OSError) as exc:
            log.debug("Existence check of %s failed: %s", path.literal, exc)
            return None

    def exists(self, path: SharePath) -> bool:
        return self._lookup(path) is not None

    def is_file(self, path: SharePath) -> bool:
        entry = self._lookup(path)
        return entry is not None and not entry.is_directory

    def is_folder(self, path: SharePath) -> bool:
        entry = self._lookup(path)
        return entry is not None and entry.is_directory

    # endregion

    # region: streams

    def _open_with_size(
        self,
        store: FileStore,
        path: SharePath,
        access: AccessMask,
        share_access: ShareAccess,
        disposition: CreateDisposition,
        options: CreateOptions,
    ) -> tuple[RemoteHandle, FileStandardInfo]:
        def attempt() -> tuple[int, Optional[tuple[RemoteHandle, FileStandardInfo]]]:
            handle = self._create(store, path, access, share_access, disposition, options)
            try:
                status, info = store.get_file_information(handle, FileInformationClass.FILE_STANDARD_INFORMATION)
            except BaseException:
                self._close(store, handle, path)
                raise
            if is_success(status) and isinstance(info, FileStandardInfo):
                return status, (handle, info)
            self._close(store, handle, path)
            if is_success(status):
                raise ProtocolError("Server returned no standard information", path=path.literal, host=path.host)
            return status, None

        status, result = OPEN_INFO_RETRY.call(attempt)
        OPEN_INFO_RETRY.check(status, path=path.literal, host=path.host)
        if result is None:
            raise ProtocolError("Server returned no standard information", path=path.literal, host=path.host)
        return result

    def open(
        self,
        path: SharePath,
        mode: FileMode,
        access: FileAccess,
        share: FileShare,
        options: FileOptions,
    ) -> BinaryIO:
        if path.is_share_root:
            raise InvalidPath("A share root is not a file", path=path.literal, host=path.host)
        credential = resolve_credential(self._credentials, path)
        access_mask, share_access = access_and_share(access)
        disposition = create_disposition(mode)
        create_opts = create_options(options)

        with self._errors(path), contextlib.ExitStack() as stack:
            connection = stack.enter_context(self._connections.open(path.host, credential))
            store = connection.attach(path.share)
            handle, info = self._open_with_size(store, path, access_mask, share_access, disposition, create_opts)
            stack.callback(self._close, store, handle, path)
            stream = RemoteStream(
                store,
                handle,
                connection,
                info.end_of_file,
                access=access,
                max_transfer_size=self._transfer_size(connection, access),
                path=path.literal,
            )
            stack.pop_all()

        if mode is FileMode.APPEND:
            stream.seek(0, io.SEEK_END)
        return stream  # type: ignore[return-value]

    # endregion

    # region: delete and create

    def _delete_handle(self, store: FileStore, path: SharePath, options: CreateOptions) -> None:
        handle = self._create(
            store,
            path,
            AccessMask.DELETE,
            ShareAccess.READ,
            CreateDisposition.OPEN,
            options | CreateOptions.DELETE_ON_CLOSE,
            policy=DELETE_RETRY,
        )
        self._close(store, handle, path)

    def delete(self, path: SharePath) -> None:
        if path.is_share_root:
            raise InvalidPath("A share root is not a file", path=path.literal, host=path.host)
        with self._session(path) as (_, store):
            self._delete_handle(store, path, CreateOptions.NON_DIRECTORY_FILE)
        log.debug("Deleted %s", path.unc)

    def create_folder(self, path: SharePath) -> None:
        with self._session(path) as (_, store):
            current = path.share_root
            for part in path.parts:
                current = current.join(part)
                handle = self._create(
                    store,
                    current,
                    AccessMask.GENERIC_READ,
                    ShareAccess.READ | ShareAccess.WRITE,
                    CreateDisposition.OPEN_IF,
                    CreateOptions.DIRECTORY_FILE,
                    attributes=FileAttributes.DIRECTORY,
                )
                self._close(store, handle, current)

    def _delete_tree(self, store: FileStore, folder: SharePath, recursive: bool) -> None:
        if recursive:
            for entry in self._query(store, folder, "*"):
                child = folder.join(entry.name)
                if entry.is_directory:
                    self._delete_tree(store, child, True)
                else:
                    self._delete_handle(store, child, CreateOptions.NON_DIRECTORY_FILE)
        self._delete_handle(store, folder, CreateOptions.DIRECTORY_FILE)

    def delete_folder(self, path: SharePath, *, recursive: bool = False) -> None:
        if path.is_share_root:
            raise InvalidPath("A share root cannot be deleted", path=path.literal, host=path.host)
        with self._session(path) as (_, store):
            try:
                self._delete_tree(store, path, recursive)
            except DirectoryNotEmpty as exc:
                raise DirectoryNotEmpty(f"Folder not empty: {path.literal}", path=path.literal, host=path.host) from exc

    # endregion

    # region: listing

    def _entry(self, path: SharePath, entry: DirectoryEntry) -> Entry:
        if entry.is_directory:
            return FolderInfo(
                path=path.literal,
                name=entry.name,
                modified_at=entry.last_write_time,
                created_at=entry.creation_time,
                accessed_at=entry.last_access_time,
                attributes=entry.attributes,
            )
        return FileInfo(
            path=path.literal,
            name=entry.name,
            size=entry.end_of_file,
            modified_at=entry.last_write_time,
            created_at=entry.creation_time,
            accessed_at=entry.last_access_time,
            attributes=entry.attributes,
        )

    def _walk(self, store: FileStore, folder: SharePath, pattern: str) -> Iterator[Entry]:
        wanted = pattern.casefold()
        for entry in self._query(store, folder, "*"):
            child = folder.join(entry.name)
            if fnmatch.fnmatchcase(entry.name.casefold(), wanted):
                yield self._entry(child, entry)
            if entry.is_directory:
                yield from self._walk(store, child, pattern)

    def list_entries(self, path: SharePath, pattern: str = "*", *, recursive: bool = False) -> Iterator[Entry]:
        with self._session(path) as (_, store):
            if recursive:
                entries = list(self._walk(store, path, pattern))
            else:
                entries = [self._entry(path.join(e.name), e) for e in self._query(store, path, pattern)]
        return iter(entries)

    # endregion

    # region: metadata

    def _attribute_handle(
        self, store: FileStore, path: SharePath, access: AccessMask
    ) -> contextlib.AbstractContextManager[RemoteHandle]:
        return self._opened(store, path, access, _SHARE_ALL, CreateDisposition.OPEN, CreateOptions.NONE)

    @staticmethod
    def _query_info(
        store: FileStore, handle: RemoteHandle, path: SharePath, info_class: FileInformationClass
    ) -> FileBasicInfo | FileStandardInfo:
        status, info = store.get_file_information(handle, info_class)
        raise_for_status(status, path=path.literal, host=path.host)
        if info is None:
            raise ProtocolError(f"Server returned no {info_class.name}", path=path.literal, host=path.host)
        return info

    def get_basic_info(self, path: SharePath) -> FileBasicInfo:
        with self._session(path) as (_, store):
            with self._attribute_handle(store, path, AccessMask.FILE_READ_ATTRIBUTES) as handle:
                info = self._query_info(store, handle, path, FileInformationClass.FILE_BASIC_INFORMATION)
        return info  # type: ignore[return-value]

    def set_basic_info(self, path: SharePath, info: FileBasicInfo) -> None:
        with self._session(path) as (_, store):
            with self._attribute_handle(store, path, AccessMask.FILE_WRITE_ATTRIBUTES) as handle:
                status = store.set_file_information(handle, info)
                raise_for_status(status, path=path.literal, host=path.host)

    def _describe(self, path: SharePath) -> tuple[FileBasicInfo, FileStandardInfo]:
        with self._session(path) as (_, store):
            with self._attribute_handle(store, path, AccessMask.FILE_READ_ATTRIBUTES) as handle:
                basic = self._query_info(store, handle, path, FileInformationClass.FILE_BASIC_INFORMATION)
                standard = self._query_info(store, handle, path, FileInformationClass.FILE_STANDARD_INFORMATION)
        return basic, standard  # type: ignore[return-value]

    def get_file_info(self, path: SharePath) -> FileInfo:
        basic, standard = self._describe(path)
        if standard.directory or basic.is_directory:
            raise NotFound(f"Not a file: {path.literal}", path=path.literal, host=path.host)
        return FileInfo(
            path=path.literal,
            name=path.name,
            size=standard.end_of_file,
            modified_at=basic.last_write_time,
            created_at=basic.creation_time,
            accessed_at=basic.last_access_time,
            attributes=basic.attributes,
        )

    def get_folder_info(self, path: SharePath) -> FolderInfo:
        basic, standard = self._describe(path)
        if not (standard.directory or basic.is_directory):
            raise NotFound(f"Not a folder: {path.literal}", path=path.literal, host=path.host)
        return FolderInfo(
            path=path.literal,
            name=path.name,
            modified_at=basic.last_write_time,
            created_at=basic.creation_time,
            accessed_at=basic.last_access_time,
            attributes=basic.attributes | FileAttributes.DIRECTORY,
        )

    def get_access_control(self, path: SharePath) -> int:
        _SMB_CAPABILITIES.require(Capability.ACCESS_CONTROL, path=path.literal, host=path.host)
        raise AssertionError("unreachable")  # pragma: no cover

    def set_access_control(self, path: SharePath, mode: int) -> None:
        _SMB_CAPABILITIES.require(Capability.ACCESS_CONTROL, path=path.literal, host=path.host)

    def list_shares(self, path: SharePath) -> list[str]:
        credential = resolve_credential(self._credentials, path)
        with self._errors(path), self._connections.open(path.host, credential) as connection:
            return connection.list_shares()

    # endregion
