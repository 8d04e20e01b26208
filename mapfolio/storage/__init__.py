from .base import DirectoryHandle, FileHandle, StorageEntry, TextWriter
from .local import LocalDirectory, LocalFile, open_directory

__all__ = [
    "DirectoryHandle",
    "FileHandle",
    "StorageEntry",
    "TextWriter",
    "LocalDirectory",
    "LocalFile",
    "open_directory",
]
