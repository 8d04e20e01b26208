"""Local filesystem implementation of the project storage protocol.

All I/O goes through :class:`anyio.Path` so that every read, write and
directory listing is an await point on the running event loop.
"""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from os import PathLike
from pathlib import Path
from typing import AsyncIterator, Literal, Union

import anyio

from .base import TextWriter


class LocalFile:
    """A file on the local filesystem."""

    kind: Literal["file"] = "file"

    def __init__(self, path: Union[str, PathLike, anyio.Path]):
        self._path = anyio.Path(path)

    def __repr__(self) -> str:
        return f"LocalFile({str(self._path)!r})"

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def path(self) -> Path:
        return Path(str(self._path))

    async def read_text(self) -> str:
        # utf-8-sig drops a leading byte order mark
        return await self._path.read_text(encoding="utf-8-sig")

    @asynccontextmanager
    async def open_writer(self) -> AsyncIterator[TextWriter]:
        # Content goes to a hidden sibling that is renamed over the target;
        # the target is never half-written.
        tmp = self._path.with_name(f".{self.name}.{uuid.uuid4().hex[:8]}.tmp")
        try:
            async with await anyio.open_file(tmp, "w", encoding="utf-8") as stream:
                yield stream
            await tmp.replace(self._path)
        except Exception:
            await tmp.unlink(missing_ok=True)
            raise

    async def write_text(self, text: str) -> None:
        async with self.open_writer() as writer:
            await writer.write(text)


class LocalDirectory:
    """A directory on the local filesystem."""

    kind: Literal["directory"] = "directory"

    def __init__(self, path: Union[str, PathLike, anyio.Path]):
        self._path = anyio.Path(path)

    def __repr__(self) -> str:
        return f"LocalDirectory({str(self._path)!r})"

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def path(self) -> Path:
        return Path(str(self._path))

    async def get_directory(self, name: str, create: bool = False) -> "LocalDirectory":
        child = self._path / name
        if await child.is_dir():
            return LocalDirectory(child)
        if await child.exists():
            raise NotADirectoryError(f"Not a directory: {child}")
        if not create:
            raise FileNotFoundError(f"Directory not found: {child}")
        await child.mkdir(parents=True, exist_ok=True)
        return LocalDirectory(child)

    async def get_file(self, name: str, create: bool = False) -> LocalFile:
        child = self._path / name
        if await child.is_file():
            return LocalFile(child)
        if await child.exists():
            raise IsADirectoryError(f"Not a file: {child}")
        if not create:
            raise FileNotFoundError(f"File not found: {child}")
        await child.touch()
        return LocalFile(child)

    async def entries(self) -> AsyncIterator[Union[LocalFile, "LocalDirectory"]]:
        async for child in self._path.iterdir():
            if await child.is_dir():
                yield LocalDirectory(child)
            elif await child.is_file():
                yield LocalFile(child)


async def open_directory(path: Union[str, PathLike], create: bool = True) -> LocalDirectory:
    """Pick a root directory on the local filesystem."""
    root = anyio.Path(path)
    if not await root.is_dir():
        if await root.exists():
            raise NotADirectoryError(f"Not a directory: {root}")
        if not create:
            raise FileNotFoundError(f"Directory not found: {root}")
        await root.mkdir(parents=True, exist_ok=True)
    return LocalDirectory(root)
