"""
Filesystem access for parsers, loaders and overrides.

The blocking pathlib calls run in a worker thread so callers can await them
alongside other work.
"""

import asyncio
from pathlib import Path
from typing import Callable, Optional, Union

from ..constants import DEFAULT_CHARACTER_ENCODING

PathLike = Union[str, Path]


class Storage:
    """Asynchronous view of the local filesystem.

    Example:
        storage = Storage()
        if await storage.exists("prompts/persona.md"):
            text = await storage.read_file("prompts/persona.md")
    """

    def __init__(self, log: Optional[Callable[..., None]] = None) -> None:
        """Initialize the Storage.

        Args:
            log: Optional callable receiving debug messages.
        """
        self._log = log or (lambda *args: None)

    async def exists(self, path: PathLike) -> bool:
        """Check whether a path exists."""
        result = await asyncio.to_thread(Path(path).exists)
        self._log(f"{path} exists: {result}")
        return result

    async def is_file(self, path: PathLike) -> bool:
        """Check whether a path is a regular file."""
        return await asyncio.to_thread(Path(path).is_file)

    async def is_directory(self, path: PathLike) -> bool:
        """Check whether a path is a directory."""
        return await asyncio.to_thread(Path(path).is_dir)

    async def read_file(self, path: PathLike, encoding: str = DEFAULT_CHARACTER_ENCODING) -> str:
        """Read a file as text.

        Bytes that are not valid in ``encoding`` are replaced with U+FFFD.

        Raises:
            OSError: If the file cannot be read.
        """
        data = await self.read_bytes(path)
        return data.decode(encoding, errors="replace")

    async def read_bytes(self, path: PathLike) -> bytes:
        """Read a file as raw bytes.

        Raises:
            OSError: If the file cannot be read.
        """
        self._log(f"Reading {path}")
        return await asyncio.to_thread(Path(path).read_bytes)

    async def list_files(self, directory: PathLike) -> list[str]:
        """List entry names in a directory, sorted by name.

        Raises:
            OSError: If the directory cannot be listed.
        """
        def _list() -> list[str]:
            return sorted(entry.name for entry in Path(directory).iterdir())

        return await asyncio.to_thread(_list)
