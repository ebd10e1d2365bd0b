"""Tests for RemoteStream over an in-memory share."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from share_fs._config import ShareFSConfig
from share_fs._connection import ConnectionManager
from share_fs._credentials import Credential
from share_fs._errors import NotFound, PermissionDenied, ProtocolError
from share_fs._modes import FileAccess
from share_fs._protocol import AccessMask, CreateDisposition, CreateOptions, ShareAccess
from share_fs._status import NTStatus
from share_fs._stream import RemoteStream

if TYPE_CHECKING:
    from tests.fake_smb import FakeServer

CRED = Credential(domain="CORP", username="alice", password="secret", path=r"\\fileserver\data")


def _stream(
    server: FakeServer,
    name: str = "f.bin",
    *,
    access: FileAccess = FileAccess.READ_WRITE,
    chunk: int = 4,
) -> RemoteStream:
    connection = ConnectionManager(server.factory, ShareFSConfig(), resolver=lambda h: "10.0.0.5").open(
        "fileserver", CRED
    )
    store = connection.attach("data")
    status, handle = store.create_file(
        name,
        AccessMask.GENERIC_READ | AccessMask.GENERIC_WRITE,
        ShareAccess.READ,
        CreateDisposition.OPEN_IF,
        CreateOptions.NON_DIRECTORY_FILE,
    )
    assert status == NTStatus.STATUS_SUCCESS
    node = server.node("data", name)
    assert node is not None
    return RemoteStream(
        store, handle, connection, len(node.data), access=access, max_transfer_size=chunk, path=name
    )


class TestReading:
    def test_read_all_in_chunks(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"0123456789")
        with _stream(server) as stream:
            assert stream.read() == b"0123456789"
        assert server.calls["read_file"] == 3

    def test_partial_read_capped_by_transfer_size(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"0123456789")
        with _stream(server) as stream:
            assert stream.read(100) == b"0123"
            assert stream.tell() == 4

    def test_read_at_end(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"ab")
        with _stream(server) as stream:
            stream.seek(0, io.SEEK_END)
            assert stream.read(10) == b""
        assert server.calls["read_file"] == 0

    def test_buffered_reader(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"line one\nline two\n")
        with io.BufferedReader(_stream(server)) as reader:
            assert reader.readline() == b"line one\n"
            assert reader.read() == b"line two\n"

    def test_read_failure_mapped(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"abc")
        server.fail("read_file", NTStatus.STATUS_OBJECT_NAME_NOT_FOUND)
        with _stream(server) as stream:
            with pytest.raises(NotFound):
                stream.read(2)

    def test_end_of_file_status_is_empty_read(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"abc")
        server.fail("read_file", NTStatus.STATUS_END_OF_FILE)
        with _stream(server) as stream:
            assert stream.read(2) == b""

    def test_oversized_answer_rejected(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"abcdef")
        stream = _stream(server)
        original = stream._store.read_file

        def generous(handle: object, offset: int, length: int) -> tuple[int, bytes]:
            status, data = original(handle, offset, length)
            return status, data + b"extra"

        stream._store.read_file = generous  # type: ignore[method-assign]
        with stream, pytest.raises(ProtocolError):
            stream.read(2)

    def test_write_only_stream_not_readable(self, server: FakeServer) -> None:
        with _stream(server, access=FileAccess.WRITE) as stream:
            assert not stream.readable()
            with pytest.raises(io.UnsupportedOperation):
                stream.read(1)


class TestWriting:
    def test_write_in_chunks(self, server: FakeServer) -> None:
        with _stream(server) as stream:
            assert stream.write(b"0123456789") == 10
            assert stream.size == 10
        assert server.get("data", "f.bin") == b"0123456789"
        assert server.calls["write_file"] == 3

    def test_overwrite_in_place(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"aaaaaa")
        with _stream(server) as stream:
            stream.seek(2)
            stream.write(b"BB")
            assert stream.size == 6
        assert server.get("data", "f.bin") == b"aaBBaa"

    def test_write_past_end_grows(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"ab")
        with _stream(server) as stream:
            stream.seek(0, io.SEEK_END)
            stream.write(b"cd")
            assert stream.size == 4
        assert server.get("data", "f.bin") == b"abcd"

    def test_write_failure_mapped(self, server: FakeServer) -> None:
        server.fail("write_file", NTStatus.STATUS_ACCESS_DENIED)
        with _stream(server) as stream, pytest.raises(PermissionDenied):
            stream.write(b"x")

    def test_zero_byte_acceptance_rejected(self, server: FakeServer) -> None:
        stream = _stream(server)
        stream._store.write_file = lambda handle, offset, data: (NTStatus.STATUS_SUCCESS, 0)  # type: ignore[method-assign]
        with stream, pytest.raises(ProtocolError):
            stream.write(b"x")

    def test_read_only_stream_not_writable(self, server: FakeServer) -> None:
        with _stream(server, access=FileAccess.READ) as stream:
            assert not stream.writable()
            with pytest.raises(io.UnsupportedOperation):
                stream.write(b"x")


class TestSeeking:
    def test_seek_modes(self, server: FakeServer) -> None:
        server.put("data", "f.bin", b"0123456789")
        with _stream(server) as stream:
            assert stream.seek(3) == 3
            assert stream.seek(2, io.SEEK_CUR) == 5
            assert stream.seek(-1, io.SEEK_END) == 9
            assert stream.read(1) == b"9"

    def test_seek_past_end_allowed(self, server: FakeServer) -> None:
        with _stream(server) as stream:
            assert stream.seek(50) == 50
            assert stream.read(1) == b""

    def test_negative_position_rejected(self, server: FakeServer) -> None:
        with _stream(server) as stream:
            with pytest.raises(ValueError):
                stream.seek(-1)
            with pytest.raises(ValueError):
                stream.seek(-1, io.SEEK_END)

    def test_bad_whence(self, server: FakeServer) -> None:
        with _stream(server) as stream:
            with pytest.raises(ValueError):
                stream.seek(0, 7)

    def test_seekable(self, server: FakeServer) -> None:
        with _stream(server) as stream:
            assert stream.seekable()


class TestClose:
    def test_releases_handle_and_connection(self, server: FakeServer) -> None:
        stream = _stream(server)
        stream.close()
        assert stream.closed
        assert server.live_handles == []
        assert server.live_clients == []

    def test_close_twice(self, server: FakeServer) -> None:
        stream = _stream(server)
        stream.close()
        stream.close()
        assert server.calls["close_file"] == 1
        assert server.calls["disconnect"] == 1

    def test_operations_after_close(self, server: FakeServer) -> None:
        stream = _stream(server)
        stream.close()
        with pytest.raises(ValueError):
            stream.read(1)
        with pytest.raises(ValueError):
            stream.seek(0)

    def test_name_and_repr(self, server: FakeServer) -> None:
        with _stream(server) as stream:
            assert stream.name == "f.bin"
            assert "f.bin" in repr(stream)
