"""Caller-facing open modes and their translation to SMB2 create parameters."""

from __future__ import annotations

import enum

from share_fs._protocol import AccessMask, CreateDisposition, CreateOptions, ShareAccess


class FileMode(enum.Enum):
    """How to open or create a file."""

    CREATE_NEW = "create_new"
    CREATE = "create"
    OPEN = "open"
    OPEN_OR_CREATE = "open_or_create"
    TRUNCATE = "truncate"
    APPEND = "append"


class FileAccess(enum.Enum):
    READ = "read"
    WRITE = "write"
    READ_WRITE = "read_write"

    @property
    def readable(self) -> bool:
        return self is not FileAccess.WRITE

    @property
    def writable(self) -> bool:
        return self is not FileAccess.READ


class FileShare(enum.Flag):
    """Sharing the caller asks for on local opens; remote opens derive it from access."""

    NONE = 0
    READ = 1
    WRITE = 2
    READ_WRITE = 3
    DELETE = 4


class FileOptions(enum.Enum):
    NONE = "none"
    DELETE_ON_CLOSE = "delete_on_close"
    RANDOM_ACCESS = "random_access"
    SEQUENTIAL_SCAN = "sequential_scan"
    WRITE_THROUGH = "write_through"
    ENCRYPTED = "encrypted"
    ASYNCHRONOUS = "asynchronous"


_DISPOSITIONS = {
    FileMode.CREATE: CreateDisposition.OVERWRITE_IF,
    FileMode.CREATE_NEW: CreateDisposition.CREATE,
    FileMode.OPEN: CreateDisposition.OPEN,
    FileMode.OPEN_OR_CREATE: CreateDisposition.OPEN_IF,
    FileMode.TRUNCATE: CreateDisposition.OVERWRITE,
    FileMode.APPEND: CreateDisposition.OPEN,
}

_ACCESS = {
    FileAccess.READ: (AccessMask.GENERIC_READ, ShareAccess.READ),
    FileAccess.WRITE: (AccessMask.GENERIC_WRITE, ShareAccess.WRITE),
    FileAccess.READ_WRITE: (AccessMask.GENERIC_ALL, ShareAccess.WRITE),
}

_OPTIONS = {
    FileOptions.DELETE_ON_CLOSE: CreateOptions.DELETE_ON_CLOSE,
    FileOptions.RANDOM_ACCESS: CreateOptions.RANDOM_ACCESS,
    FileOptions.SEQUENTIAL_SCAN: CreateOptions.SEQUENTIAL_ONLY,
    FileOptions.WRITE_THROUGH: CreateOptions.WRITE_THROUGH,
}


def create_disposition(mode: FileMode) -> CreateDisposition:
    """Disposition for ``mode``; APPEND opens the existing file and seeks afterwards."""
    return _DISPOSITIONS[mode]


def access_and_share(access: FileAccess) -> tuple[AccessMask, ShareAccess]:
    """Desired access mask and the share access granted to other openers."""
    return _ACCESS[access]


def create_options(options: FileOptions) -> CreateOptions:
    """Create options for ``options``; anything without an analogue is a plain file open."""
    return _OPTIONS.get(options, CreateOptions.NON_DIRECTORY_FILE)


def default_access(mode: FileMode) -> FileAccess:
    """Access used when the caller gives only a mode."""
    return FileAccess.WRITE if mode is FileMode.APPEND else FileAccess.READ_WRITE
