"""
Shared test doubles for the promptloom test suite.
"""

from pathlib import Path
from typing import Optional, Union

import pytest


class FakeStorage:
    """In-memory stand-in for promptloom.util.storage.Storage.

    Files are keyed by POSIX path; directories exist implicitly when a file
    lives beneath them. Every ``exists`` call is recorded.
    """

    def __init__(self, files: Optional[dict[str, Union[str, bytes]]] = None):
        self.files: dict[str, Union[str, bytes]] = {
            self._key(path): content for path, content in (files or {}).items()
        }
        self.exists_calls: list[str] = []
        self.reads: list[str] = []

    @staticmethod
    def _key(path) -> str:
        return Path(path).as_posix()

    @staticmethod
    def _prefix(key: str) -> str:
        return "" if key == "." else key.rstrip("/") + "/"

    def _is_dir(self, key: str) -> bool:
        prefix = self._prefix(key)
        return any(name.startswith(prefix) for name in self.files)

    async def exists(self, path) -> bool:
        key = self._key(path)
        self.exists_calls.append(key)
        return key in self.files or self._is_dir(key)

    async def is_file(self, path) -> bool:
        return self._key(path) in self.files

    async def is_directory(self, path) -> bool:
        return self._is_dir(self._key(path))

    async def read_bytes(self, path) -> bytes:
        key = self._key(path)
        self.reads.append(key)
        if key not in self.files:
            raise FileNotFoundError(f"No such file: {key}")
        content = self.files[key]
        return content.encode("utf-8") if isinstance(content, str) else content

    async def read_file(self, path, encoding: str = "utf-8") -> str:
        return (await self.read_bytes(path)).decode(encoding, errors="replace")

    async def list_files(self, directory) -> list[str]:
        key = self._key(directory)
        if not self._is_dir(key):
            raise FileNotFoundError(f"No such directory: {key}")
        prefix = self._prefix(key)
        return sorted({
            name[len(prefix):].split("/")[0]
            for name in self.files
            if name.startswith(prefix)
        })


class RecordingLogger:
    """Logger that keeps every (level, message) pair."""

    def __init__(self):
        self.records: list[tuple[str, str]] = []

    def debug(self, message, *args):
        self.records.append(("debug", message))

    def info(self, message, *args):
        self.records.append(("info", message))

    def warning(self, message, *args):
        self.records.append(("warning", message))

    def error(self, message, *args):
        self.records.append(("error", message))

    def messages(self, level: str) -> list[str]:
        return [message for record_level, message in self.records if record_level == level]


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def make_storage():
    """Factory fixture building a FakeStorage from a path to content mapping."""
    return FakeStorage
