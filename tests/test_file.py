"""Unit tests for appstorage.storage.file — Open, delete, move & rename."""

import os

import pytest

from appstorage.engine.affinity import CancellationTokenSource, ThreadAffinity
from appstorage.engine.errors import (
    OperationCanceledError,
    StorageAlreadyExistsError,
    StorageArgumentError,
    StorageFileNotFoundError,
    StorageIOError,
)
from appstorage.storage.file import LocalFile
from appstorage.storage.options import (
    CreationCollisionOption,
    FileAccess,
    NameCollisionOption,
)


async def _make(folder, name, data=b""):
    created = await folder.create_file(name, CreationCollisionOption.FAIL_IF_EXISTS)
    if data:
        await created.write_bytes(data)
    return created


class TestLocalFile:
    def test_construction_has_no_side_effect(self, tmp_path):
        f = LocalFile(str(tmp_path / "later.txt"))
        assert f.name == "later.txt"
        assert f.path == str(tmp_path / "later.txt")
        assert not (tmp_path / "later.txt").exists()

    def test_empty_path_rejected(self):
        with pytest.raises(StorageArgumentError):
            LocalFile("")

    def test_not_hashable(self, tmp_path):
        with pytest.raises(TypeError):
            hash(LocalFile(str(tmp_path / "a")))


class TestOpen:
    @pytest.mark.asyncio
    async def test_read_mode(self, root):
        f = await _make(root, "a.bin", b"abc")
        with await f.open(FileAccess.READ) as stream:
            assert stream.tell() == 0
            assert stream.read() == b"abc"
            assert stream.writable() is False

    @pytest.mark.asyncio
    async def test_read_write_mode(self, root):
        f = await _make(root, "a.bin", b"abc")
        with await f.open(FileAccess.READ_WRITE) as stream:
            assert stream.tell() == 0
            stream.write(b"X")
        assert await f.read_bytes() == b"Xbc"

    @pytest.mark.asyncio
    async def test_mode_as_string(self, root):
        f = await _make(root, "a.bin", b"abc")
        with await f.open("read") as stream:
            assert stream.read() == b"abc"

    @pytest.mark.asyncio
    async def test_unknown_mode(self, root):
        f = await _make(root, "a.bin")
        with pytest.raises(StorageArgumentError) as exc:
            await f.open("append")
        assert exc.value.parameter == "mode"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(StorageFileNotFoundError):
            await LocalFile(str(tmp_path / "nope")).open(FileAccess.READ)

    @pytest.mark.asyncio
    async def test_write_bytes_truncates(self, root):
        f = await _make(root, "a.bin", b"a long payload")
        await f.write_bytes(b"short")
        assert await f.read_bytes() == b"short"

    @pytest.mark.asyncio
    async def test_offloaded_open(self, root):
        f = await _make(root, "a.bin", b"abc")
        offloaded = LocalFile(f.path, affinity=ThreadAffinity.capture())
        assert await offloaded.read_bytes() == b"abc"


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, root):
        f = await _make(root, "a.txt")
        await f.delete()
        assert not os.path.exists(f.path)

    @pytest.mark.asyncio
    async def test_delete_twice(self, root):
        f = await _make(root, "a.txt")
        await f.delete()
        with pytest.raises(StorageFileNotFoundError) as exc:
            await f.delete()
        assert exc.value.operation == "delete"


class TestMoveAndRename:
    @pytest.mark.asyncio
    async def test_rename_updates_entry(self, root):
        f = await _make(root, "a.txt", b"data")
        old_path = f.path
        await f.rename("b.txt")
        assert f.name == "b.txt"
        assert f.path == os.path.join(root.path, "b.txt")
        assert not os.path.exists(old_path)
        assert await f.read_bytes() == b"data"

    @pytest.mark.asyncio
    async def test_rename_defaults_to_fail_if_exists(self, root):
        f = await _make(root, "a.txt")
        await _make(root, "b.txt")
        with pytest.raises(StorageAlreadyExistsError):
            await f.rename("b.txt")
        assert f.name == "a.txt"
        assert os.path.isfile(f.path)

    @pytest.mark.asyncio
    async def test_move_defaults_to_replace_existing(self, root):
        f = await _make(root, "a.txt", b"new")
        await _make(root, "b.txt", b"old")
        await f.move(os.path.join(root.path, "b.txt"))
        assert f.name == "b.txt"
        assert await f.read_bytes() == b"new"
        assert [e.name for e in await root.list_files()] == ["b.txt"]

    @pytest.mark.asyncio
    async def test_move_generate_unique_name(self, root):
        f = await _make(root, "a.txt")
        await _make(root, "b.txt")
        await f.move(os.path.join(root.path, "b.txt"), NameCollisionOption.GENERATE_UNIQUE_NAME)
        assert f.name == "b (2).txt"
        assert os.path.isfile(os.path.join(root.path, "b (2).txt"))

    @pytest.mark.asyncio
    async def test_rename_generate_unique_name(self, root):
        f = await _make(root, "a.txt")
        await _make(root, "b.txt")
        await _make(root, "b (2).txt")
        await f.rename("b.txt", NameCollisionOption.GENERATE_UNIQUE_NAME)
        assert f.name == "b (3).txt"

    @pytest.mark.asyncio
    async def test_move_onto_itself_is_noop(self, root):
        f = await _make(root, "a.txt", b"keep")
        await f.move(f.path)
        assert os.path.isfile(f.path)
        assert await f.read_bytes() == b"keep"

    @pytest.mark.asyncio
    async def test_move_across_folders(self, root):
        sub = await root.create_folder("sub", CreationCollisionOption.FAIL_IF_EXISTS)
        f = await _make(root, "a.txt", b"x")
        await f.move(os.path.join(sub.path, "a.txt"))
        assert f.path == os.path.join(sub.path, "a.txt")
        assert [e.name for e in await sub.list_files()] == ["a.txt"]
        assert await root.list_files() == []

    @pytest.mark.asyncio
    async def test_move_missing_source(self, tmp_path):
        f = LocalFile(str(tmp_path / "ghost.txt"))
        with pytest.raises(StorageFileNotFoundError):
            await f.move(str(tmp_path / "other.txt"))

    @pytest.mark.asyncio
    async def test_empty_names_rejected(self, root):
        f = await _make(root, "a.txt")
        with pytest.raises(StorageArgumentError):
            await f.rename("")
        with pytest.raises(StorageArgumentError):
            await f.move(None)

    @pytest.mark.asyncio
    async def test_open_if_exists_not_a_move_option(self, root):
        f = await _make(root, "a.txt")
        with pytest.raises(StorageArgumentError):
            await f.rename("b.txt", "open_if_exists")

    @pytest.mark.asyncio
    async def test_canceled_token(self, root):
        f = await _make(root, "a.txt")
        cts = CancellationTokenSource()
        cts.cancel()
        with pytest.raises(OperationCanceledError) as exc:
            await f.rename("b.txt", cancellation_token=cts.token)
        assert exc.value.token is cts.token
        assert f.name == "a.txt"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("option", list(NameCollisionOption))
    async def test_move_onto_directory_fails(self, root, option):
        f = await _make(root, "a.txt", b"x")
        target = await root.create_folder("target", CreationCollisionOption.FAIL_IF_EXISTS)
        with pytest.raises(StorageIOError):
            await f.move(target.path, option)
        assert f.path == os.path.join(root.path, "a.txt")
        assert os.path.isfile(f.path)
        assert await target.list_files() == []

    @pytest.mark.asyncio
    async def test_rename_onto_directory_fails(self, root):
        f = await _make(root, "a.txt")
        await root.create_folder("sub", CreationCollisionOption.FAIL_IF_EXISTS)
        with pytest.raises(StorageIOError):
            await f.rename("sub")
        assert f.name == "a.txt"
