"""SharePath and path classification — decides whether a path lives on a remote share."""

from __future__ import annotations

from typing import Final, Optional, Union
from urllib.parse import unquote

from share_fs._errors import InvalidPath

SEPARATOR: Final = "\\"

# URI schemes accepted for the share-URI form
_SCHEMES: Final = frozenset({"smb"})


class LocalPath:
    """The local arm of :func:`classify` — a path handed to the host OS verbatim.

    :param path: The path string as given by the caller.
    """

    __slots__ = ("path",)
    path: Final[str]  # type: ignore[misc]

    def __init__(self, path: str) -> None:
        object.__setattr__(self, "path", path)

    def __repr__(self) -> str:
        return f"LocalPath({self.path!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LocalPath):
            return self.path == other.path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.path)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"LocalPath is immutable: cannot set '{name}'")


class SharePath:
    """An immutable, parsed path on a remote share.

    ``host`` and ``share`` compare case-insensitively. ``relative_path`` is
    backslash separated and never includes the share segment; it is empty for
    the share root.

    :param host: Server name or address.
    :param share: Share name.
    :param relative_path: Share-relative path (either separator accepted).
    :param scheme: URI scheme the path was written with, ``None`` for UNC.
    :raises InvalidPath: If host or share is empty, or a ``..`` segment is present.
    """

    __slots__ = ("host", "share", "_parts", "scheme", "_literal")
    host: Final[str]  # type: ignore[misc]
    share: Final[str]  # type: ignore[misc]
    scheme: Final[Optional[str]]  # type: ignore[misc]
    _parts: Final[tuple[str, ...]]  # type: ignore[misc]
    _literal: Final[Optional[str]]  # type: ignore[misc]

    def __init__(
        self,
        host: str,
        share: str,
        relative_path: str = "",
        *,
        scheme: Optional[str] = None,
        literal: Optional[str] = None,
    ) -> None:
        if not host or not share:
            raise InvalidPath("Remote path requires a host and a share", path=literal or f"\\\\{host}\\{share}")
        object.__setattr__(self, "host", host)
        object.__setattr__(self, "share", share)
        object.__setattr__(self, "scheme", scheme)
        object.__setattr__(self, "_parts", self._split(relative_path, literal))
        object.__setattr__(self, "_literal", literal)

    @staticmethod
    def _split(relative_path: str, literal: Optional[str]) -> tuple[str, ...]:
        if "\0" in relative_path:
            raise InvalidPath("Path contains null byte", path=literal or relative_path)
        parts: list[str] = []
        for segment in relative_path.replace("/", SEPARATOR).split(SEPARATOR):
            if segment == "" or segment == ".":
                continue
            if segment == "..":
                raise InvalidPath("Path contains '..' segment", path=literal or relative_path)
            parts.append(segment)
        return tuple(parts)

    @classmethod
    def _derive(cls, base: SharePath, parts: tuple[str, ...]) -> SharePath:
        p = object.__new__(cls)
        object.__setattr__(p, "host", base.host)
        object.__setattr__(p, "share", base.share)
        object.__setattr__(p, "scheme", base.scheme)
        object.__setattr__(p, "_parts", parts)
        object.__setattr__(p, "_literal", None)
        return p

    @property
    def relative_path(self) -> str:
        """Share-relative path using the remote separator."""
        return SEPARATOR.join(self._parts)

    @property
    def parts(self) -> tuple[str, ...]:
        """Tuple of share-relative components."""
        return self._parts

    @property
    def literal(self) -> str:
        """The path as the caller wrote it, or a rendered form for derived paths."""
        if self._literal is not None:
            return self._literal
        if self.scheme is not None:
            rest = "".join(f"/{p}" for p in self._parts)
            return f"{self.scheme}://{self.host}/{self.share}{rest}"
        return self.unc

    @property
    def unc(self) -> str:
        """UNC rendering, ``\\\\host\\share[\\rest]``."""
        rest = "".join(f"{SEPARATOR}{p}" for p in self._parts)
        return f"\\\\{self.host}\\{self.share}{rest}"

    @property
    def name(self) -> str:
        """Final component, or an empty string for the share root."""
        return self._parts[-1] if self._parts else ""

    @property
    def is_share_root(self) -> bool:
        return not self._parts

    @property
    def parent(self) -> Optional[SharePath]:
        """Parent path, or ``None`` for the share root."""
        if not self._parts:
            return None
        return self._derive(self, self._parts[:-1])

    @property
    def share_root(self) -> SharePath:
        return self._derive(self, ())

    def join(self, *names: str) -> SharePath:
        """Append components below this path."""
        extra = self._split(SEPARATOR.join(names), None)
        return self._derive(self, self._parts + extra)

    def contains(self, other: SharePath) -> bool:
        """``True`` if ``other`` is this path or lies below it (case-insensitive)."""
        if self.host.casefold() != other.host.casefold() or self.share.casefold() != other.share.casefold():
            return False
        if len(self._parts) > len(other._parts):
            return False
        return all(a.casefold() == b.casefold() for a, b in zip(self._parts, other._parts))

    def _key(self) -> tuple[str, str, tuple[str, ...]]:
        return self.host.casefold(), self.share.casefold(), self._parts

    def __str__(self) -> str:
        return self.literal

    def __repr__(self) -> str:
        return f"SharePath(host={self.host!r}, share={self.share!r}, relative_path={self.relative_path!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SharePath):
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"SharePath is immutable: cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"SharePath is immutable: cannot delete '{name}'")


Classified = Union[LocalPath, SharePath]


def _parse_unc(raw: str) -> SharePath:
    body = raw[2:].replace("/", SEPARATOR)
    host, _, rest = body.partition(SEPARATOR)
    share, _, relative = rest.partition(SEPARATOR)
    if not host:
        raise InvalidPath("UNC path is missing the host segment", path=raw)
    if not share:
        raise InvalidPath("UNC path is missing the share segment", path=raw)
    return SharePath(host, share, relative, literal=raw)


def _parse_uri(raw: str, scheme: str) -> SharePath:
    body = raw[len(scheme) + 3 :]
    host, _, rest = body.partition("/")
    share, _, relative = rest.partition("/")
    if not host:
        raise InvalidPath("Share URI is missing the host segment", path=raw)
    if not share:
        raise InvalidPath("Share URI is missing the share segment", path=raw)
    return SharePath(unquote(host), unquote(share), unquote(relative), scheme=scheme.lower(), literal=raw)


def _uri_scheme(raw: str) -> Optional[str]:
    head, sep, _ = raw.partition("://")
    if sep and head.lower() in _SCHEMES:
        return head
    return None


def classify(path: str) -> Classified:
    """Classify ``path`` as a local path or a parsed :class:`SharePath`.

    Accepts ``\\\\host\\share\\rest`` (either separator) and ``smb://host/share/rest``.
    Everything else is local.

    :raises InvalidPath: If the path looks remote but lacks a host or share.
    """
    if isinstance(path, SharePath):
        return path
    if path.startswith(("\\\\", "//")):
        return _parse_unc(path)
    scheme = _uri_scheme(path)
    if scheme is not None:
        return _parse_uri(path, scheme)
    return LocalPath(path)


def is_share_path(path: str) -> bool:
    """``True`` if ``path`` is written in a remote form (malformed or not)."""
    return path.startswith(("\\\\", "//")) or _uri_scheme(path) is not None
