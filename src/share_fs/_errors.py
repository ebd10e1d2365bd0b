"""Normalized error hierarchy for share_fs."""

from __future__ import annotations

from typing import Optional


class ShareFSError(Exception):
    """Base class for all share_fs errors.

    :param message: Human-readable error description.
    :param path: The path involved in the error, if any.
    :param host: The remote host involved, if any.
    """

    def __init__(self, message: str = "", *, path: Optional[str] = None, host: Optional[str] = None) -> None:
        self.path = path
        self.host = host
        super().__init__(message)

    def _details(self) -> list[str]:
        parts = []
        if self.path is not None:
            parts.append(f"path={self.path!r}")
        if self.host is not None:
            parts.append(f"host={self.host!r}")
        return parts

    def __str__(self) -> str:
        parts = [super().__str__(), *self._details()]
        return " | ".join(p for p in parts if p)

    def __repr__(self) -> str:
        cls = type(self).__name__
        args = [repr(self.args[0] if self.args else ""), *self._details()]
        return f"{cls}({', '.join(args)})"


class NotFound(ShareFSError):
    """Raised when a file, folder or share path does not exist."""


class AlreadyExists(ShareFSError):
    """Raised when a target already exists and overwrite is not allowed."""


class PermissionDenied(ShareFSError):
    """Raised when access is denied, or the object is locked by another opener."""


class InvalidPath(ShareFSError):
    """Raised for malformed remote paths (missing host or share, ``..`` segments)."""


class DirectoryNotEmpty(ShareFSError):
    """Raised when a non-recursive folder delete hits a folder with contents."""


class OperationNotSupported(ShareFSError):
    """Raised when an operation has no equivalent for the routed backend.

    :param operation: The name of the unsupported operation.
    """

    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[str] = None,
        host: Optional[str] = None,
        operation: str = "",
    ) -> None:
        self.operation = operation
        super().__init__(message, path=path, host=host)

    def _details(self) -> list[str]:
        parts = super()._details()
        if self.operation:
            parts.append(f"operation={self.operation!r}")
        return parts


class ResolutionError(ShareFSError):
    """Raised when a remote path cannot be routed before any I/O happens."""


class HostUnresolved(ResolutionError):
    """Raised when a host name cannot be resolved to a network address."""


class CredentialNotFound(ResolutionError):
    """Raised when no registered credential covers a remote path."""


class ConnectionFailed(ShareFSError):
    """Raised when the SMB session cannot be established."""


class AuthenticationFailed(ConnectionFailed):
    """Raised when the server rejects the credential."""


class ShareUnavailable(ConnectionFailed):
    """Raised when the tree-connect to a share fails."""


class ProtocolError(ShareFSError):
    """Raised for a non-success SMB status with no more specific mapping.

    :param status: The NT status code returned by the server.
    """

    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[str] = None,
        host: Optional[str] = None,
        status: int = 0,
    ) -> None:
        self.status = status
        super().__init__(message, path=path, host=host)

    def _details(self) -> list[str]:
        parts = super()._details()
        if self.status:
            parts.append(f"status=0x{self.status:08X}")
        return parts


class RetryExhausted(ProtocolError):
    """Raised when a transient status persists past the retry budget.

    :param attempts: Number of attempts made before giving up.
    """

    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[str] = None,
        host: Optional[str] = None,
        status: int = 0,
        attempts: int = 0,
    ) -> None:
        self.attempts = attempts
        super().__init__(message, path=path, host=host, status=status)
