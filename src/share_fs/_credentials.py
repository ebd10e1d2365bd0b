"""Credentials and their resolution against remote paths."""

from __future__ import annotations

import abc
import dataclasses
import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Optional

from share_fs._errors import CredentialNotFound, InvalidPath
from share_fs._path import SharePath, classify

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Credential:
    """An identity scoped to a share path.

    :param domain: Windows domain or Kerberos realm, may be empty.
    :param username: Account name.
    :param password: Secret; never rendered in ``repr``.
    :param path: Remote path (UNC or ``smb://``) the credential applies to,
        including everything below it.
    :raises InvalidPath: If ``path`` is not a remote path.
    """

    domain: str
    username: str
    password: str = dataclasses.field(repr=False)
    path: str

    def __post_init__(self) -> None:
        if not isinstance(classify(self.path), SharePath):
            raise InvalidPath("Credential scope must be a remote path", path=self.path)

    @property
    def scope(self) -> SharePath:
        return classify(self.path)  # type: ignore[return-value]

    @property
    def principal(self) -> str:
        """Logon name, ``DOMAIN\\user`` when a domain is set."""
        if self.domain and "\\" not in self.username:
            return f"{self.domain}\\{self.username}"
        return self.username


class CredentialProvider(abc.ABC):
    """Source of credentials for remote paths."""

    @abc.abstractmethod
    def resolve(self, path: SharePath) -> Optional[Credential]:
        """Return the credential for ``path``, or ``None`` if none applies."""

    @abc.abstractmethod
    def all_credentials(self) -> tuple[Credential, ...]:
        """Every credential this provider knows about."""


class CredentialStore(CredentialProvider):
    """In-memory credential provider; first registered match wins.

    :param credentials: Initial credentials, in priority order.
    """

    def __init__(self, credentials: tuple[Credential, ...] | list[Credential] = ()) -> None:
        self._lock = threading.Lock()
        self._credentials: list[Credential] = list(credentials)

    def __repr__(self) -> str:
        scopes = [c.path for c in self.all_credentials()]
        return f"CredentialStore(scopes={scopes!r})"

    def add(self, credential: Credential) -> None:
        with self._lock:
            self._credentials.append(credential)

    def remove(self, credential: Credential) -> None:
        """Remove ``credential``; unknown credentials are ignored."""
        with self._lock:
            if credential in self._credentials:
                self._credentials.remove(credential)

    @contextmanager
    def register(self, credential: Credential) -> Iterator[Credential]:
        """Make ``credential`` available for the duration of a ``with`` block."""
        self.add(credential)
        try:
            yield credential
        finally:
            self.remove(credential)

    def resolve(self, path: SharePath) -> Optional[Credential]:
        for credential in self.all_credentials():
            if credential.scope.contains(path):
                return credential
        return None

    def all_credentials(self) -> tuple[Credential, ...]:
        with self._lock:
            return tuple(self._credentials)


def resolve_credential(provider: CredentialProvider, path: SharePath) -> Credential:
    """Resolve the credential for ``path``.

    :raises CredentialNotFound: If the provider has no matching credential.
    """
    credential = provider.resolve(path)
    if credential is None:
        raise CredentialNotFound(f"No credential registered for {path.unc}", path=path.literal, host=path.host)
    log.debug("Using credential %s for %s", credential.principal, path.unc)
    return credential
