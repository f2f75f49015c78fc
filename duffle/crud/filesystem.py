"""A simple key-to-blob store and an implementation backed by a directory."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path


class FileDoesNotExist(FileNotFoundError):
    """The file for the requested key is not in the store."""


class Store(ABC):
    """A key-to-blob store supporting create, read, update and delete."""

    @abstractmethod
    def list(self) -> list[str]:
        """Return the names of all stored items."""

    @abstractmethod
    def store(self, name: str, data: bytes) -> None:
        """Store data under a name, replacing anything already there."""

    @abstractmethod
    def read(self, name: str) -> bytes:
        """Return the data stored under a name."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove the data stored under a name."""


def _split_extension(filename: str) -> tuple[str, str]:
    index = filename.rfind(".")
    if index < 0:
        return filename, ""
    return filename[:index], filename[index:]


class FileSystemStore(Store):
    """A Store in which each key is a file ``<name>.<extension>`` in one directory."""

    def __init__(self, base_directory: str | os.PathLike[str], file_extension: str) -> None:
        self.base_directory = Path(base_directory)
        self.file_extension = file_extension

    def list(self) -> list[str]:
        self._ensure()
        suffix = "." + self.file_extension
        with os.scandir(self.base_directory) as entries:
            files = sorted(
                entry.name for entry in entries if not entry.is_dir(follow_symlinks=False)
            )
        names = []
        for filename in files:
            stem, extension = _split_extension(filename)
            if extension == suffix:
                names.append(stem)
        return names

    def store(self, name: str, data: bytes) -> None:
        path = self._qualified(name)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o777)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)

    def read(self, name: str) -> bytes:
        path = self._qualified(name)
        if not path.exists():
            raise FileDoesNotExist("File does not exist")
        return path.read_bytes()

    def delete(self, name: str) -> None:
        os.remove(self._qualified(name))

    def _qualified(self, name: str) -> Path:
        self._ensure()
        return self.base_directory / f"{name}.{self.file_extension}"

    def _ensure(self) -> None:
        if self.base_directory.exists():
            if self.base_directory.is_dir():
                return
            raise NotADirectoryError("Storage directory name exists, but is not a directory")
        self.base_directory.mkdir(parents=True, exist_ok=True)