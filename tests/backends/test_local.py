"""Local backend specific tests."""

from __future__ import annotations

import os
import stat
from datetime import datetime, timezone
from typing import TYPE_CHECKING, BinaryIO

import pytest

from share_fs._capabilities import Capability
from share_fs._errors import OperationNotSupported
from share_fs._models import FileBasicInfo, FileInfo, FolderInfo
from share_fs._modes import FileAccess, FileMode, FileOptions, FileShare
from share_fs._protocol import FileAttributes
from share_fs.backends._local import LocalBackend

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def backend() -> LocalBackend:
    return LocalBackend()


def _open(backend: LocalBackend, path: Path, mode: FileMode, access: FileAccess = FileAccess.READ_WRITE) -> BinaryIO:
    return backend.open(str(path), mode, access, FileShare.NONE, FileOptions.NONE)


class TestLocalBackendIdentity:
    def test_name(self, backend: LocalBackend) -> None:
        assert backend.name == "local"

    def test_capabilities(self, backend: LocalBackend) -> None:
        assert backend.capabilities.supports(Capability.ACCESS_CONTROL)
        assert not backend.capabilities.supports(Capability.LIST_SHARES)


class TestLocalBackendErrors:
    """Host errors pass through untranslated."""

    def test_missing_file(self, backend: LocalBackend, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            _open(backend, tmp_path / "missing", FileMode.OPEN)

    def test_missing_delete(self, backend: LocalBackend, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            backend.delete(str(tmp_path / "missing"))

    def test_non_empty_folder(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "d").mkdir()
        (tmp_path / "d" / "f").write_bytes(b"")
        with pytest.raises(OSError):
            backend.delete_folder(str(tmp_path / "d"))

    def test_file_info_on_folder(self, backend: LocalBackend, tmp_path: Path) -> None:
        with pytest.raises(IsADirectoryError):
            backend.get_file_info(str(tmp_path))

    def test_folder_info_on_file(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "f").write_bytes(b"")
        with pytest.raises(NotADirectoryError):
            backend.get_folder_info(str(tmp_path / "f"))

    def test_list_shares(self, backend: LocalBackend, tmp_path: Path) -> None:
        with pytest.raises(OperationNotSupported):
            backend.list_shares(str(tmp_path))


class TestLocalBackendModes:
    def test_create_truncates(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"old content")
        with _open(backend, target, FileMode.CREATE) as stream:
            stream.write(b"new")
        assert target.read_bytes() == b"new"

    def test_create_new_refuses_existing(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"")
        with pytest.raises(FileExistsError):
            _open(backend, target, FileMode.CREATE_NEW)

    def test_open_or_create_keeps_content(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"abcdef")
        with _open(backend, target, FileMode.OPEN_OR_CREATE) as stream:
            stream.write(b"XY")
        assert target.read_bytes() == b"XYcdef"

    def test_truncate_requires_existing(self, backend: LocalBackend, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            _open(backend, tmp_path / "f", FileMode.TRUNCATE)

    def test_append_positions_at_end(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"abc")
        with _open(backend, target, FileMode.APPEND, FileAccess.WRITE) as stream:
            assert stream.tell() == 3
            stream.write(b"d")
        assert target.read_bytes() == b"abcd"

    def test_read_only_access(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"abc")
        with _open(backend, target, FileMode.OPEN, FileAccess.READ) as stream:
            assert stream.read() == b"abc"
            assert not stream.writable()

    def test_delete_on_close(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "scratch"
        stream = backend.open(
            str(target), FileMode.CREATE, FileAccess.READ_WRITE, FileShare.NONE, FileOptions.DELETE_ON_CLOSE
        )
        stream.write(b"temp")
        stream.close()
        assert not target.exists()

    def test_sequential_hint_accepted(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"abc")
        stream = backend.open(
            str(target), FileMode.OPEN, FileAccess.READ, FileShare.READ, FileOptions.SEQUENTIAL_SCAN
        )
        with stream:
            assert stream.read() == b"abc"


class TestLocalBackendFolders:
    def test_create_nested_and_idempotent(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b"
        backend.create_folder(str(target))
        backend.create_folder(str(target))
        assert target.is_dir()

    def test_recursive_delete(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / "b" / "f").write_bytes(b"x")
        backend.delete_folder(str(tmp_path / "a"), recursive=True)
        assert not (tmp_path / "a").exists()

    def test_listing(self, backend: LocalBackend, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_bytes(b"12")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.txt").write_bytes(b"3")
        top = list(backend.list_entries(str(tmp_path)))
        assert [type(e) for e in top] == [FileInfo, FolderInfo]
        nested = [e.name for e in backend.list_entries(str(tmp_path), "*.txt", recursive=True)]
        assert nested == ["a.txt", "b.txt"]


class TestLocalBackendMetadata:
    def test_basic_info(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"x")
        info = backend.get_basic_info(str(target))
        assert info.last_write_time is not None
        assert info.last_write_time.tzinfo is not None
        assert info.attributes == FileAttributes.NORMAL

    def test_hidden_and_directory(self, backend: LocalBackend, tmp_path: Path) -> None:
        hidden = tmp_path / ".hidden"
        hidden.mkdir()
        attributes = backend.get_basic_info(str(hidden)).attributes
        assert attributes & FileAttributes.DIRECTORY
        assert attributes & FileAttributes.HIDDEN

    def test_set_times(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"x")
        when = datetime(2020, 5, 17, 8, 0, tzinfo=timezone.utc)
        backend.set_basic_info(str(target), FileBasicInfo(last_write_time=when, last_access_time=when))
        assert os.stat(target).st_mtime == when.timestamp()
        assert backend.get_basic_info(str(target)).last_write_time == when

    def test_readonly_attribute_maps_to_mode(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"x")
        backend.set_basic_info(str(target), FileBasicInfo(attributes=FileAttributes.READONLY))
        assert not os.stat(target).st_mode & stat.S_IWUSR
        backend.set_basic_info(str(target), FileBasicInfo(attributes=FileAttributes.NORMAL))
        assert os.stat(target).st_mode & stat.S_IWUSR

    def test_access_control_is_mode_bits(self, backend: LocalBackend, tmp_path: Path) -> None:
        target = tmp_path / "f"
        target.write_bytes(b"x")
        backend.set_access_control(str(target), 0o600)
        assert backend.get_access_control(str(target)) == 0o600
