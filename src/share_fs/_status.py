"""NT status codes returned by SMB servers and their mapping to share_fs errors."""

from __future__ import annotations

import enum
from typing import Optional

from share_fs._errors import (
    AlreadyExists,
    AuthenticationFailed,
    DirectoryNotEmpty,
    InvalidPath,
    NotFound,
    OperationNotSupported,
    PermissionDenied,
    ProtocolError,
    ShareFSError,
    ShareUnavailable,
)


class NTStatus(enum.IntEnum):
    """Subset of NTSTATUS values (MS-ERREF 2.3) seen on SMB2 file operations."""

    STATUS_SUCCESS = 0x00000000
    STATUS_PENDING = 0x00000103
    STATUS_BUFFER_OVERFLOW = 0x80000005
    STATUS_NO_MORE_FILES = 0x80000006
    STATUS_INVALID_PARAMETER = 0xC000000D
    STATUS_NO_SUCH_FILE = 0xC000000F
    STATUS_END_OF_FILE = 0xC0000011
    STATUS_ACCESS_DENIED = 0xC0000022
    STATUS_OBJECT_NAME_INVALID = 0xC0000033
    STATUS_OBJECT_NAME_NOT_FOUND = 0xC0000034
    STATUS_OBJECT_NAME_COLLISION = 0xC0000035
    STATUS_OBJECT_PATH_NOT_FOUND = 0xC000003A
    STATUS_OBJECT_PATH_SYNTAX_BAD = 0xC000003B
    STATUS_SHARING_VIOLATION = 0xC0000043
    STATUS_DELETE_PENDING = 0xC0000056
    STATUS_LOGON_FAILURE = 0xC000006D
    STATUS_INSUFFICIENT_RESOURCES = 0xC000009A
    STATUS_IO_TIMEOUT = 0xC00000B5
    STATUS_FILE_IS_A_DIRECTORY = 0xC00000BA
    STATUS_NOT_SUPPORTED = 0xC00000BB
    STATUS_NETWORK_NAME_DELETED = 0xC00000C9
    STATUS_BAD_NETWORK_NAME = 0xC00000CC
    STATUS_DIRECTORY_NOT_EMPTY = 0xC0000101
    STATUS_NOT_A_DIRECTORY = 0xC0000103
    STATUS_CANNOT_DELETE = 0xC0000121
    STATUS_FILE_CLOSED = 0xC0000128
    STATUS_USER_SESSION_DELETED = 0xC0000203


_NOT_FOUND = frozenset(
    {
        NTStatus.STATUS_NO_SUCH_FILE,
        NTStatus.STATUS_OBJECT_NAME_NOT_FOUND,
        NTStatus.STATUS_OBJECT_PATH_NOT_FOUND,
        NTStatus.STATUS_NOT_A_DIRECTORY,
    }
)

_DENIED = frozenset(
    {
        NTStatus.STATUS_ACCESS_DENIED,
        NTStatus.STATUS_SHARING_VIOLATION,
        NTStatus.STATUS_CANNOT_DELETE,
        NTStatus.STATUS_DELETE_PENDING,
        NTStatus.STATUS_FILE_IS_A_DIRECTORY,
    }
)

_INVALID = frozenset({NTStatus.STATUS_OBJECT_NAME_INVALID, NTStatus.STATUS_OBJECT_PATH_SYNTAX_BAD})


def status_name(status: int) -> str:
    """Render a status code as its symbolic name when known, else as hex."""
    try:
        return NTStatus(status).name
    except ValueError:
        return f"0x{status:08X}"


def is_success(status: int) -> bool:
    return status == NTStatus.STATUS_SUCCESS


def error_for_status(status: int, *, path: Optional[str] = None, host: Optional[str] = None) -> ShareFSError:
    """Build the caller-facing error for a non-success status."""
    name = status_name(status)
    if status in _NOT_FOUND:
        return NotFound(f"Not found ({name})", path=path, host=host)
    if status == NTStatus.STATUS_OBJECT_NAME_COLLISION:
        return AlreadyExists(f"Already exists ({name})", path=path, host=host)
    if status in _DENIED:
        return PermissionDenied(f"Permission denied ({name})", path=path, host=host)
    if status == NTStatus.STATUS_DIRECTORY_NOT_EMPTY:
        return DirectoryNotEmpty(f"Folder not empty ({name})", path=path, host=host)
    if status in _INVALID:
        return InvalidPath(f"Invalid remote name ({name})", path=path, host=host)
    if status == NTStatus.STATUS_BAD_NETWORK_NAME:
        return ShareUnavailable(f"Share not available ({name})", path=path, host=host)
    if status == NTStatus.STATUS_LOGON_FAILURE:
        return AuthenticationFailed(f"Logon failed ({name})", path=path, host=host)
    if status == NTStatus.STATUS_NOT_SUPPORTED:
        return OperationNotSupported(f"Not supported by the server ({name})", path=path, host=host)
    return ProtocolError(f"SMB operation failed ({name})", path=path, host=host, status=status)


def raise_for_status(status: int, *, path: Optional[str] = None, host: Optional[str] = None) -> None:
    """Raise the mapped error unless ``status`` is ``STATUS_SUCCESS``."""
    if status != NTStatus.STATUS_SUCCESS:
        raise error_for_status(status, path=path, host=host)
