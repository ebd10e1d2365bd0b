"""SMB2 wire constants used when creating and querying remote objects (MS-SMB2 2.2.13, MS-FSCC)."""

from __future__ import annotations

import enum


class AccessMask(enum.IntFlag):
    FILE_READ_DATA = 0x00000001
    FILE_WRITE_DATA = 0x00000002
    FILE_APPEND_DATA = 0x00000004
    FILE_READ_EA = 0x00000008
    FILE_WRITE_EA = 0x00000010
    FILE_EXECUTE = 0x00000020
    FILE_READ_ATTRIBUTES = 0x00000080
    FILE_WRITE_ATTRIBUTES = 0x00000100
    DELETE = 0x00010000
    READ_CONTROL = 0x00020000
    SYNCHRONIZE = 0x00100000
    MAXIMUM_ALLOWED = 0x02000000
    GENERIC_ALL = 0x10000000
    GENERIC_EXECUTE = 0x20000000
    GENERIC_WRITE = 0x40000000
    GENERIC_READ = 0x80000000


class ShareAccess(enum.IntFlag):
    NONE = 0x0
    READ = 0x1
    WRITE = 0x2
    DELETE = 0x4


class CreateDisposition(enum.IntEnum):
    SUPERSEDE = 0x0
    OPEN = 0x1
    CREATE = 0x2
    OPEN_IF = 0x3
    OVERWRITE = 0x4
    OVERWRITE_IF = 0x5


class CreateOptions(enum.IntFlag):
    NONE = 0x0
    DIRECTORY_FILE = 0x00000001
    WRITE_THROUGH = 0x00000002
    SEQUENTIAL_ONLY = 0x00000004
    NON_DIRECTORY_FILE = 0x00000040
    RANDOM_ACCESS = 0x00000800
    DELETE_ON_CLOSE = 0x00001000


class FileAttributes(enum.IntFlag):
    NONE = 0x0
    READONLY = 0x00000001
    HIDDEN = 0x00000002
    SYSTEM = 0x00000004
    DIRECTORY = 0x00000010
    ARCHIVE = 0x00000020
    NORMAL = 0x00000080
    TEMPORARY = 0x00000100
    SPARSE_FILE = 0x00000200
    REPARSE_POINT = 0x00000400
    COMPRESSED = 0x00000800
    OFFLINE = 0x00001000
    NOT_CONTENT_INDEXED = 0x00002000
    ENCRYPTED = 0x00004000


class FileInformationClass(enum.IntEnum):
    FILE_DIRECTORY_INFORMATION = 0x01
    FILE_FULL_DIRECTORY_INFORMATION = 0x02
    FILE_BOTH_DIRECTORY_INFORMATION = 0x03
    FILE_BASIC_INFORMATION = 0x04
    FILE_STANDARD_INFORMATION = 0x05
    FILE_NAMES_INFORMATION = 0x0C
    FILE_END_OF_FILE_INFORMATION = 0x14
    FILE_ID_FULL_DIRECTORY_INFORMATION = 0x26
