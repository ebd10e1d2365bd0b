"""SMB engine built on smbprotocol.

smbprotocol raises on every non-success response; the adapter folds those
responses back into NT status codes so retries and error mapping happen in
one place.
"""

from __future__ import annotations

import logging
import struct
import uuid
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar

from share_fs._client import FileStore, SMBClient
from share_fs._models import DirectoryEntry, FileBasicInfo, FileStandardInfo
from share_fs._protocol import FileAttributes, FileInformationClass
from share_fs._status import NTStatus

if TYPE_CHECKING:
    from share_fs._config import ShareFSConfig
    from share_fs._protocol import AccessMask, CreateDisposition, CreateOptions, ShareAccess

T = TypeVar("T")

log = logging.getLogger(__name__)

_FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)

# SMB2 QUERY_INFO answers larger than this are truncated by the server.
_INFO_BUFFER_SIZE = 65535

# ImpersonationLevel.Impersonation
_IMPERSONATION = 2


# region: helpers


def to_filetime(value: Optional[datetime]) -> int:
    """100ns ticks since 1601-01-01 UTC; ``None`` becomes 0 ("leave unchanged")."""
    if value is None:
        return 0
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - _FILETIME_EPOCH
    return (delta.days * 86400 + delta.seconds) * 10_000_000 + delta.microseconds * 10


def from_filetime(ticks: int) -> Optional[datetime]:
    """Inverse of :func:`to_filetime`; 0 means "not reported"."""
    if ticks <= 0:
        return None
    return _FILETIME_EPOCH + timedelta(microseconds=ticks // 10)


def _ticks(field: Any) -> int:
    return int(struct.unpack("<q", field.pack())[0])


def _call(fn: Callable[..., T], *args: Any, **kwargs: Any) -> tuple[int, Optional[T]]:
    """Run an smbprotocol call, returning the failed response's status instead of raising."""
    from smbprotocol.exceptions import SMBResponseException

    try:
        return NTStatus.STATUS_SUCCESS, fn(*args, **kwargs)
    except SMBResponseException as exc:
        return int(exc.status), None


def _entry(raw: Any) -> DirectoryEntry:
    return DirectoryEntry(
        name=raw["file_name"].get_value().decode("utf-16-le"),
        attributes=FileAttributes(raw["file_attributes"].get_value()),
        end_of_file=int(raw["end_of_file"].get_value()),
        creation_time=from_filetime(_ticks(raw["creation_time"])),
        last_access_time=from_filetime(_ticks(raw["last_access_time"])),
        last_write_time=from_filetime(_ticks(raw["last_write_time"])),
    )


# endregion


class SMBProtocolFileStore(FileStore):
    """:class:`FileStore` over one smbprotocol ``TreeConnect``.

    Handles are smbprotocol ``Open`` objects.
    """

    def __init__(self, tree: Any) -> None:
        self._tree = tree

    def __repr__(self) -> str:
        return f"SMBProtocolFileStore(share={self._tree.share_name!r})"

    def create_file(
        self,
        path: str,
        access: AccessMask,
        share_access: ShareAccess,
        disposition: CreateDisposition,
        options: CreateOptions,
        attributes: FileAttributes = FileAttributes.NORMAL,
    ) -> tuple[int, Any]:
        from smbprotocol.open import Open

        handle = Open(self._tree, path)
        status, _ = _call(
            handle.create,
            _IMPERSONATION,
            int(access),
            int(attributes),
            int(share_access),
            int(disposition),
            int(options),
        )
        return status, handle if status == NTStatus.STATUS_SUCCESS else None

    def close_file(self, handle: Any) -> int:
        status, _ = _call(handle.close, get_attributes=False)
        return status

    def read_file(self, handle: Any, offset: int, length: int) -> tuple[int, bytes]:
        status, data = _call(handle.read, offset, length)
        return status, data or b""

    def write_file(self, handle: Any, offset: int, data: bytes) -> tuple[int, int]:
        status, written = _call(handle.write, data, offset)
        return status, written or 0

    def _query_info(self, handle: Any, info_class: int) -> bytes:
        from smbprotocol.file_info import InfoType
        from smbprotocol.open import SMB2QueryInfoRequest, SMB2QueryInfoResponse

        request = SMB2QueryInfoRequest()
        request["info_type"] = InfoType.SMB2_0_INFO_FILE
        request["file_info_class"] = info_class
        request["output_buffer_length"] = _INFO_BUFFER_SIZE
        request["file_id"] = handle.file_id
        connection = handle.connection
        sent = connection.send(
            request, sid=handle.tree_connect.session.session_id, tid=handle.tree_connect.tree_connect_id
        )
        response = SMB2QueryInfoResponse()
        response.unpack(connection.receive(sent)["data"].get_value())
        return bytes(response["buffer"].get_value())

    def get_file_information(
        self, handle: Any, info_class: FileInformationClass
    ) -> tuple[int, FileBasicInfo | FileStandardInfo | None]:
        from smbprotocol.file_info import FileBasicInformation, FileStandardInformation

        status, buffer = _call(self._query_info, handle, int(info_class))
        if status != NTStatus.STATUS_SUCCESS or buffer is None:
            return status, None

        if info_class == FileInformationClass.FILE_BASIC_INFORMATION:
            basic = FileBasicInformation()
            basic.unpack(buffer)
            return status, FileBasicInfo(
                creation_time=from_filetime(_ticks(basic["creation_time"])),
                last_access_time=from_filetime(_ticks(basic["last_access_time"])),
                last_write_time=from_filetime(_ticks(basic["last_write_time"])),
                change_time=from_filetime(_ticks(basic["change_time"])),
                attributes=FileAttributes(basic["file_attributes"].get_value()),
            )
        if info_class == FileInformationClass.FILE_STANDARD_INFORMATION:
            standard = FileStandardInformation()
            standard.unpack(buffer)
            return status, FileStandardInfo(
                end_of_file=int(standard["end_of_file"].get_value()),
                allocation_size=int(standard["allocation_size"].get_value()),
                number_of_links=int(standard["number_of_links"].get_value()),
                delete_pending=bool(standard["delete_pending"].get_value()),
                directory=bool(standard["directory"].get_value()),
            )
        return NTStatus.STATUS_NOT_SUPPORTED, None

    def _set_basic(self, handle: Any, info: FileBasicInfo) -> None:
        from smbprotocol.file_info import FileBasicInformation, InfoType
        from smbprotocol.open import SMB2SetInfoRequest

        basic = FileBasicInformation()
        basic["creation_time"] = to_filetime(info.creation_time)
        basic["last_access_time"] = to_filetime(info.last_access_time)
        basic["last_write_time"] = to_filetime(info.last_write_time)
        basic["change_time"] = to_filetime(info.change_time)
        basic["file_attributes"] = int(info.attributes)

        request = SMB2SetInfoRequest()
        request["info_type"] = InfoType.SMB2_0_INFO_FILE
        request["file_info_class"] = int(FileInformationClass.FILE_BASIC_INFORMATION)
        request["file_id"] = handle.file_id
        request["buffer"] = basic
        connection = handle.connection
        sent = connection.send(
            request, sid=handle.tree_connect.session.session_id, tid=handle.tree_connect.tree_connect_id
        )
        connection.receive(sent)

    def set_file_information(self, handle: Any, info: FileBasicInfo) -> int:
        status, _ = _call(self._set_basic, handle, info)
        return status

    def query_directory(
        self, handle: Any, pattern: str, info_class: FileInformationClass
    ) -> tuple[int, list[DirectoryEntry]]:
        entries: list[DirectoryEntry] = []
        while True:
            status, batch = _call(handle.query_directory, pattern, int(info_class))
            if status == NTStatus.STATUS_NO_MORE_FILES and entries:
                return NTStatus.STATUS_SUCCESS, entries
            if status != NTStatus.STATUS_SUCCESS:
                return status, entries
            if not batch:
                return NTStatus.STATUS_SUCCESS, entries
            entries.extend(_entry(raw) for raw in batch)

    def disconnect(self) -> int:
        status, _ = _call(self._tree.disconnect)
        return status


class SMBProtocolClient(SMBClient):
    """:class:`SMBClient` on smbprotocol ``Connection``/``Session``/``TreeConnect``.

    :param address: Resolved server address.
    :param server_name: Host name as written in the path; used for tree-connect names.
    :param config: Transport options.
    """

    def __init__(self, address: str, server_name: str, config: ShareFSConfig) -> None:
        self._address = address
        self._server_name = server_name
        self._config = config
        self._connection: Any = None
        self._session: Any = None

    def __repr__(self) -> str:
        return f"SMBProtocolClient(server={self._server_name!r}, address={self._address!r})"

    @property
    def max_read_size(self) -> int:
        return int(getattr(self._connection, "max_read_size", 0) or 0)

    @property
    def max_write_size(self) -> int:
        return int(getattr(self._connection, "max_write_size", 0) or 0)

    def connect(self) -> bool:
        from smbprotocol.connection import Connection

        if not self._config.require_signing:
            log.warning("Message signing is not required for %s", self._server_name)
        connection = Connection(
            uuid.uuid4(),
            self._address,
            self._config.effective_port,
            require_signing=self._config.require_signing,
        )
        try:
            connection.connect(timeout=self._config.timeout)
        except (OSError, ValueError) as exc:
            log.debug("Connecting to %s:%s failed: %s", self._address, self._config.effective_port, exc)
            return False
        self._connection = connection
        return True

    def login(self, domain: str, username: str, password: str) -> int:
        from smbprotocol.exceptions import SMBAuthenticationError
        from smbprotocol.session import Session

        principal = f"{domain}\\{username}" if domain and "\\" not in username else username
        session = Session(
            self._connection,
            principal,
            password,
            require_encryption=self._config.require_encryption,
        )
        try:
            status, _ = _call(session.connect)
        except SMBAuthenticationError as exc:
            log.debug("Authentication as %s failed: %s", principal, exc)
            return NTStatus.STATUS_LOGON_FAILURE
        if status == NTStatus.STATUS_SUCCESS:
            self._session = session
        return status

    def logoff(self) -> int:
        if self._session is None:
            return NTStatus.STATUS_SUCCESS
        session, self._session = self._session, None
        status, _ = _call(session.disconnect, True)
        return status

    def disconnect(self) -> None:
        if self._connection is not None:
            connection, self._connection = self._connection, None
            connection.disconnect(True)

    def tree_connect(self, share: str) -> tuple[int, FileStore | None]:
        from smbprotocol.tree import TreeConnect

        tree = TreeConnect(self._session, rf"\\{self._server_name}\{share}")
        status, _ = _call(tree.connect)
        if status != NTStatus.STATUS_SUCCESS:
            return status, None
        return status, SMBProtocolFileStore(tree)

    def list_shares(self) -> tuple[int, list[str]]:
        # Share enumeration needs the srvsvc RPC pipe, which smbprotocol does not expose.
        return NTStatus.STATUS_NOT_SUPPORTED, []


def smbprotocol_client(address: str, server_name: str, config: ShareFSConfig) -> SMBClient:
    """Default :class:`~share_fs.ClientFactory`."""
    return SMBProtocolClient(address, server_name, config)
