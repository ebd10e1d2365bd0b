"""Configuration model — an immutable value threaded through every remote operation."""

from __future__ import annotations

import dataclasses
import enum
from typing import Optional

DEFAULT_MAX_TRANSFER_SIZE = 65536


class TransportType(enum.Enum):
    """How the SMB session reaches the server.

    :cvar DIRECT_TCP: SMB over TCP port 445.
    :cvar NETBIOS_OVER_TCP: Direct SMB framing on port 139. No NetBIOS session
        request is sent, so servers that insist on one will refuse the session.
    """

    DIRECT_TCP = "direct_tcp"
    NETBIOS_OVER_TCP = "netbios"

    @property
    def default_port(self) -> int:
        return 445 if self is TransportType.DIRECT_TCP else 139


@dataclasses.dataclass(frozen=True)
class ShareFSConfig:
    """Options recognized by :class:`~share_fs.ShareFileSystem`.

    :param transport: Transport used to reach SMB servers.
    :param max_transfer_size: Chunk size in bytes for reads, writes and copies.
    :param port: Explicit server port; defaults to the transport's port.
    :param timeout: Connection timeout in seconds.
    :param require_signing: Require SMB message signing.
    :param require_encryption: Require SMB3 encryption of the session.
    :param encoding: Default text encoding for the ``*_text``/``*_lines`` verbs.
    """

    transport: TransportType = TransportType.DIRECT_TCP
    max_transfer_size: int = DEFAULT_MAX_TRANSFER_SIZE
    port: Optional[int] = None
    timeout: int = 10
    require_signing: bool = True
    require_encryption: bool = False
    encoding: str = "utf-8"

    @property
    def effective_port(self) -> int:
        return self.port if self.port is not None else self.transport.default_port

    def validate(self) -> None:
        """Validate option ranges.

        :raises ValueError: If an option is out of range.
        """
        if self.max_transfer_size <= 0:
            raise ValueError(f"max_transfer_size must be positive, got {self.max_transfer_size}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.port is not None and not 0 < self.port < 65536:
            raise ValueError(f"port must be in 1..65535, got {self.port}")

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> ShareFSConfig:
        """Construct from a plain dict (e.g. parsed TOML/JSON).

        :param data: Dict whose keys are the field names of this class.
        :raises TypeError: If an unknown key is present.
        :raises ValueError: If a value is invalid.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"Unknown config keys: {unknown}. Known keys: {sorted(known)}"
            raise TypeError(msg)

        kwargs: dict[str, object] = dict(data)
        if "transport" in kwargs and not isinstance(kwargs["transport"], TransportType):
            kwargs["transport"] = TransportType(str(kwargs["transport"]))
        for key in ("max_transfer_size", "timeout"):
            if key in kwargs:
                kwargs[key] = int(kwargs[key])  # type: ignore[call-overload]
        if kwargs.get("port") is not None:
            kwargs["port"] = int(kwargs["port"])  # type: ignore[call-overload]

        config = cls(**kwargs)  # type: ignore[arg-type]
        config.validate()
        return config
