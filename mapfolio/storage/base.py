"""Project storage protocol: an async, hierarchical, name-addressed store."""

from __future__ import annotations

from typing import AsyncContextManager, AsyncIterator, Literal, Protocol, Union, runtime_checkable


@runtime_checkable
class TextWriter(Protocol):
    """Writable stream returned by :meth:`FileHandle.open_writer`."""

    async def write(self, data: str) -> int:
        ...


@runtime_checkable
class FileHandle(Protocol):
    """Handle to a single file in project storage."""

    kind: Literal["file"]

    @property
    def name(self) -> str:
        ...

    async def read_text(self) -> str:
        """Return the full text content of the file."""
        ...

    def open_writer(self) -> AsyncContextManager[TextWriter]:
        """Open a scoped writer.

        Content written inside the ``async with`` block replaces the file's
        content when the block exits cleanly; on error the file is left
        untouched.
        """
        ...

    async def write_text(self, text: str) -> None:
        """Replace the file's content with ``text``."""
        ...


@runtime_checkable
class DirectoryHandle(Protocol):
    """Handle to a directory in project storage."""

    kind: Literal["directory"]

    @property
    def name(self) -> str:
        ...

    async def get_directory(self, name: str, create: bool = False) -> "DirectoryHandle":
        """Return the child directory ``name``, creating it when ``create``."""
        ...

    async def get_file(self, name: str, create: bool = False) -> FileHandle:
        """Return the child file ``name``, creating it empty when ``create``."""
        ...

    def entries(self) -> AsyncIterator[Union[FileHandle, "DirectoryHandle"]]:
        """Iterate over the direct children of this directory."""
        ...


StorageEntry = Union[FileHandle, DirectoryHandle]
