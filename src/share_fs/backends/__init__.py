"""Backend implementations."""

from share_fs.backends._local import LocalBackend
from share_fs.backends._smb import SMBBackend
from share_fs.backends._smbprotocol import SMBProtocolClient, SMBProtocolFileStore, smbprotocol_client

__all__ = ["LocalBackend", "SMBBackend", "SMBProtocolClient", "SMBProtocolFileStore", "smbprotocol_client"]
