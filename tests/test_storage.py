# tests/test_storage.py
"""Tests for the local filesystem storage handles."""

import pytest


pytestmark = pytest.mark.anyio


class TestLocalDirectory:

    async def test_open_directory_creates_root(self, tmp_path):
        """Opening a missing root creates it."""
        from mapfolio.storage import DirectoryHandle, open_directory

        root = await open_directory(tmp_path / "new" / "root")
        assert (tmp_path / "new" / "root").is_dir()
        assert root.name == "root"
        assert isinstance(root, DirectoryHandle)

    async def test_open_directory_without_create(self, tmp_path):
        """A missing root is an error without create."""
        from mapfolio.storage import open_directory

        with pytest.raises(FileNotFoundError):
            await open_directory(tmp_path / "missing", create=False)

    async def test_open_directory_on_file(self, tmp_path):
        """A file cannot be opened as a directory."""
        from mapfolio.storage import open_directory

        (tmp_path / "file.txt").write_text("x")
        with pytest.raises(NotADirectoryError):
            await open_directory(tmp_path / "file.txt")

    async def test_get_directory(self, tmp_path):
        """Subdirectories are looked up or created."""
        from mapfolio.storage import LocalDirectory

        root = LocalDirectory(tmp_path)
        with pytest.raises(FileNotFoundError):
            await root.get_directory("Symbols")
        created = await root.get_directory("Symbols", create=True)
        assert (tmp_path / "Symbols").is_dir()
        again = await root.get_directory("Symbols")
        assert again.path == created.path

    async def test_get_file(self, tmp_path):
        """Files are looked up or created empty."""
        from mapfolio.storage import FileHandle, LocalDirectory

        root = LocalDirectory(tmp_path)
        with pytest.raises(FileNotFoundError):
            await root.get_file("a.json")
        handle = await root.get_file("a.json", create=True)
        assert isinstance(handle, FileHandle)
        assert handle.kind == "file"
        assert await handle.read_text() == ""

    async def test_kind_mismatch(self, tmp_path):
        """Asking for the wrong kind of entry fails."""
        from mapfolio.storage import LocalDirectory

        (tmp_path / "sub").mkdir()
        (tmp_path / "f.json").write_text("{}")
        root = LocalDirectory(tmp_path)
        with pytest.raises(IsADirectoryError):
            await root.get_file("sub")
        with pytest.raises(NotADirectoryError):
            await root.get_directory("f.json")

    async def test_entries(self, tmp_path):
        """Entries are listed with their kinds."""
        from mapfolio.storage import LocalDirectory

        (tmp_path / "sub").mkdir()
        (tmp_path / "a.json").write_text("{}")
        root = LocalDirectory(tmp_path)
        kinds = {entry.name: entry.kind async for entry in root.entries()}
        assert kinds == {"sub": "directory", "a.json": "file"}


class TestLocalFile:

    async def test_write_and_read(self, tmp_path):
        """Written text reads back unchanged."""
        from mapfolio.storage import LocalFile

        handle = LocalFile(tmp_path / "a.json")
        await handle.write_text('{"a": 1}')
        assert await handle.read_text() == '{"a": 1}'
        assert (tmp_path / "a.json").read_text() == '{"a": 1}'

    async def test_writer_replaces_content(self, tmp_path):
        """The writer replaces the whole file."""
        from mapfolio.storage import LocalFile

        path = tmp_path / "a.json"
        path.write_text("old content that is longer")
        handle = LocalFile(path)
        async with handle.open_writer() as writer:
            await writer.write("new")
        assert path.read_text() == "new"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.json"]

    async def test_writer_error_leaves_file_untouched(self, tmp_path):
        """An error inside the writer keeps the old content."""
        from mapfolio.storage import LocalFile

        path = tmp_path / "a.json"
        path.write_text("original")
        handle = LocalFile(path)
        with pytest.raises(RuntimeError):
            async with handle.open_writer() as writer:
                await writer.write("partial")
                raise RuntimeError("boom")
        assert path.read_text() == "original"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.json"]

    async def test_read_strips_byte_order_mark(self, tmp_path):
        """Text read from disk never starts with a UTF-8 byte order mark."""
        from mapfolio.storage import LocalFile

        path = tmp_path / "bom.json"
        path.write_bytes(b'\xef\xbb\xbf{"type": "esriSMS"}')
        assert await LocalFile(path).read_text() == '{"type": "esriSMS"}'

    async def test_read_missing_file(self, tmp_path):
        """Reading a missing file raises FileNotFoundError."""
        from mapfolio.storage import LocalFile

        with pytest.raises(FileNotFoundError):
            await LocalFile(tmp_path / "nope.json").read_text()
