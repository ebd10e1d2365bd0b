"""Connection lifecycle — resolve, connect, authenticate, attach, and tear down exactly once."""

from __future__ import annotations

import logging
import socket
from contextlib import contextmanager
from typing import TYPE_CHECKING, Optional

from share_fs._errors import AuthenticationFailed, ConnectionFailed, HostUnresolved, ShareFSError, ShareUnavailable
from share_fs._status import NTStatus, error_for_status, is_success, status_name

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from types import TracebackType

    from share_fs._client import ClientFactory, FileStore, SMBClient
    from share_fs._config import ShareFSConfig
    from share_fs._credentials import Credential
    from share_fs._path import SharePath
    from share_fs._types import HostResolver

log = logging.getLogger(__name__)


def resolve_host(host: str) -> str:
    """Resolve ``host`` to a network address.

    :raises HostUnresolved: If the name does not resolve.
    """
    try:
        infos = socket.getaddrinfo(host, None, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise HostUnresolved(f"Unable to resolve {host!r}: {exc}", host=host) from None
    if not infos:
        raise HostUnresolved(f"Unable to resolve {host!r}", host=host)
    return str(infos[0][4][0])


def _release(step: str, host: str, fn: Callable[[], object]) -> None:
    try:
        fn()
    except Exception as exc:
        log.warning("%s on %s failed during cleanup: %s", step, host, exc)


class Connection:
    """An authenticated SMB session to one host and the shares attached through it.

    :param client: The logged-in engine client.
    :param host: Host name as written in the path.
    :param address: Resolved network address.
    """

    def __init__(self, client: SMBClient, host: str, address: str) -> None:
        self._client = client
        self.host = host
        self.address = address
        self._stores: list[FileStore] = []
        self._closed = False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Connection(host={self.host!r}, address={self.address!r}, {state})"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def max_read_size(self) -> int:
        return self._client.max_read_size

    @property
    def max_write_size(self) -> int:
        return self._client.max_write_size

    def attach(self, share: str) -> FileStore:
        """Tree-connect to ``share``.

        :raises ShareUnavailable: If the server refuses the share.
        """
        if self._closed:
            raise ConnectionFailed("Connection is closed", host=self.host)
        status, store = self._client.tree_connect(share)
        if not is_success(status) or store is None:
            raise ShareUnavailable(
                f"Unable to attach share {share!r} ({status_name(status)})",
                path=f"\\\\{self.host}\\{share}",
                host=self.host,
            )
        self._stores.append(store)
        log.debug("Attached \\\\%s\\%s", self.host, share)
        return store

    def list_shares(self) -> list[str]:
        status, names = self._client.list_shares()
        if not is_success(status):
            raise error_for_status(status, host=self.host)
        return list(names)

    def close(self) -> None:
        """Disconnect attached shares, log off and close the transport. Idempotent."""
        if self._closed:
            return
        self._closed = True
        for store in reversed(self._stores):
            _release("tree disconnect", self.host, store.disconnect)
        self._stores.clear()
        _release("logoff", self.host, self._client.logoff)
        _release("disconnect", self.host, self._client.disconnect)
        log.info("Closed SMB connection to %s", self.host)

    def __enter__(self) -> Connection:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class ConnectionManager:
    """Opens one dedicated :class:`Connection` per remote operation.

    :param client_factory: Builds engine clients.
    :param config: Transport and sizing options.
    :param resolver: Host name resolver.
    """

    def __init__(
        self,
        client_factory: ClientFactory,
        config: ShareFSConfig,
        resolver: Optional[HostResolver] = None,
    ) -> None:
        self._client_factory = client_factory
        self._config = config
        self._resolver = resolver or resolve_host

    @property
    def config(self) -> ShareFSConfig:
        return self._config

    def open(self, host: str, credential: Credential) -> Connection:
        """Resolve ``host``, connect and log in.

        :raises HostUnresolved: If the host name does not resolve.
        :raises ConnectionFailed: If the server is unreachable.
        :raises AuthenticationFailed: If the login is rejected.
        """
        address = self._resolver(host)
        client = self._client_factory(address, host, self._config)
        try:
            connected = client.connect()
        except ShareFSError:
            raise
        except Exception as exc:
            raise ConnectionFailed(f"Unable to connect to {host} ({address}): {exc}", host=host) from exc
        if not connected:
            raise ConnectionFailed(f"Unable to connect to {host} ({address})", host=host)

        try:
            status = client.login(credential.domain, credential.username, credential.password)
        except Exception:
            _release("disconnect", host, client.disconnect)
            raise
        if status != NTStatus.STATUS_SUCCESS:
            _release("disconnect", host, client.disconnect)
            raise AuthenticationFailed(
                f"Login as {credential.principal} failed ({status_name(status)})",
                host=host,
            )
        log.info("Connected to %s (%s) as %s", host, address, credential.principal)
        return Connection(client, host, address)

    @contextmanager
    def connect(self, path: SharePath, credential: Credential) -> Iterator[tuple[Connection, FileStore]]:
        """Open a connection and attach the share of ``path`` for the ``with`` block."""
        with self.open(path.host, credential) as connection:
            yield connection, connection.attach(path.share)
