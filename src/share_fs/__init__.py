"""Uniform file and folder access for local paths and SMB network shares."""

from share_fs._backend import Backend
from share_fs._capabilities import Capability, CapabilitySet
from share_fs._client import ClientFactory, FileStore, SMBClient
from share_fs._config import ShareFSConfig, TransportType
from share_fs._connection import Connection, ConnectionManager, resolve_host
from share_fs._credentials import Credential, CredentialProvider, CredentialStore, resolve_credential
from share_fs._errors import (
    AlreadyExists,
    AuthenticationFailed,
    ConnectionFailed,
    CredentialNotFound,
    DirectoryNotEmpty,
    HostUnresolved,
    InvalidPath,
    NotFound,
    OperationNotSupported,
    PermissionDenied,
    ProtocolError,
    ResolutionError,
    RetryExhausted,
    ShareFSError,
    ShareUnavailable,
)
from share_fs._filesystem import ShareFileSystem
from share_fs._models import DirectoryEntry, FileBasicInfo, FileInfo, FileStandardInfo, FolderInfo
from share_fs._modes import FileAccess, FileMode, FileOptions, FileShare
from share_fs._path import LocalPath, SharePath, classify, is_share_path
from share_fs._protocol import FileAttributes
from share_fs._retry import DELETE_RETRY, OPEN_INFO_RETRY, OPEN_RETRY, RetryPolicy
from share_fs._status import NTStatus
from share_fs._stream import RemoteStream

__version__ = "0.1.0"

__all__ = [
    # Core
    "ShareFileSystem",
    "Backend",
    # Paths
    "SharePath",
    "LocalPath",
    "classify",
    "is_share_path",
    # Credentials
    "Credential",
    "CredentialProvider",
    "CredentialStore",
    "resolve_credential",
    # Connections and engine
    "Connection",
    "ConnectionManager",
    "resolve_host",
    "SMBClient",
    "FileStore",
    "ClientFactory",
    "RemoteStream",
    "NTStatus",
    # Retries
    "RetryPolicy",
    "OPEN_RETRY",
    "OPEN_INFO_RETRY",
    "DELETE_RETRY",
    # Modes & Models
    "FileMode",
    "FileAccess",
    "FileShare",
    "FileOptions",
    "FileAttributes",
    "FileInfo",
    "FolderInfo",
    "FileBasicInfo",
    "FileStandardInfo",
    "DirectoryEntry",
    # Capabilities
    "Capability",
    "CapabilitySet",
    # Config
    "ShareFSConfig",
    "TransportType",
    # Errors
    "ShareFSError",
    "NotFound",
    "AlreadyExists",
    "PermissionDenied",
    "InvalidPath",
    "DirectoryNotEmpty",
    "OperationNotSupported",
    "ResolutionError",
    "HostUnresolved",
    "CredentialNotFound",
    "ConnectionFailed",
    "AuthenticationFailed",
    "ShareUnavailable",
    "ProtocolError",
    "RetryExhausted",
    # Version
    "__version__",
]
