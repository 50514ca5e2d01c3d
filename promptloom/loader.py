"""
Loader - builds Sections from directories of context or content files.

Each directory becomes one Section. An optional ``context.md`` supplies the
title (from its leading heading) and introductory text; every other file
that is not ignored becomes a nested Section titled by its own leading
heading or, failing that, its file name.
"""

import re
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from .constants import CONTEXT_FILE_NAME, DEFAULT_IGNORE_PATTERNS
from .items.parameters import Parameters, merge
from .items.section import Section, SectionOptions
from .items.weighted import Weighted
from .logger import wrap_logger
from .util.storage import PathLike, Storage

HEADER_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*(?:\n|$)")


def extract_first_header(markdown_text: str) -> Optional[str]:
    """Return the text of the heading on the first non-blank line, if any.

    Example:
        >>> extract_first_header("\\n## Glossary\\nTerms used here")
        'Glossary'
    """
    match = HEADER_PATTERN.match(markdown_text.lstrip())
    if match:
        return match.group(2).strip()
    return None


def remove_first_header(markdown_text: str) -> str:
    """Strip the heading on the first non-blank line, if any, and trim the rest."""
    stripped = markdown_text.lstrip()
    match = HEADER_PATTERN.match(stripped)
    if match:
        return stripped[match.end():].strip()
    return markdown_text


class Loader:
    """Loads directories into Sections.

    Example:
        loader = Loader(parameters={"product": "Atlas"})
        sections = await loader.load(["./context/company", "./context/product"])
    """

    def __init__(
        self,
        ignore_patterns: Optional[Iterable[str]] = None,
        parameters: Optional[Parameters] = None,
        logger: Any = None,
        storage: Optional[Storage] = None,
    ) -> None:
        """Initialize the Loader.

        Args:
            ignore_patterns: Regular expressions matched case-insensitively
                against file names; matching files are skipped. Defaults to
                DEFAULT_IGNORE_PATTERNS (dotfiles, media, archives, documents
                and binaries).
            parameters: Placeholder values applied at every depth.
            logger: Optional logger.
            storage: Filesystem collaborator.
        """
        patterns = DEFAULT_IGNORE_PATTERNS if ignore_patterns is None else ignore_patterns
        self._ignore = [re.compile(pattern, re.IGNORECASE) for pattern in patterns]
        self._parameters: Parameters = dict(parameters or {})
        self._logger = wrap_logger(logger, "Loader")
        self._storage = storage or Storage(log=self._logger.debug)

    def _is_ignored(self, name: str) -> bool:
        return any(regex.search(name) for regex in self._ignore)

    async def load(
        self,
        directories: Optional[Sequence[PathLike]] = None,
        weight: Optional[float] = None,
        item_weight: Optional[float] = None,
        parameters: Optional[Parameters] = None,
        item_type: type = Weighted,
    ) -> list[Section]:
        """Load each directory into a Section.

        Directories that fail are logged and skipped; the output keeps the
        input order of the directories that succeed.

        Args:
            directories: Directories to load.
            weight, item_weight, parameters, item_type: Options for every
                created section and item.

        Returns:
            One Section per successfully loaded directory.
        """
        sections: list[Section] = []
        if not directories:
            self._logger.debug("No directories provided, returning no sections")
            return sections

        options = SectionOptions().with_overrides(
            weight=weight,
            item_weight=item_weight,
            parameters=merge(self._parameters, parameters),
        )

        for directory in directories:
            try:
                sections.append(await self._load_directory(directory, options, item_type))
            except Exception as e:
                self._logger.error(f"Error processing directory {directory}: {e}")

        return sections

    async def _load_directory(self, directory: PathLike, options: SectionOptions,
                              item_type: type) -> Section:
        dir_name = Path(directory).name
        self._logger.debug(f"Processing directory {dir_name}")

        context_file = Path(directory) / CONTEXT_FILE_NAME
        main_section = Section.from_options(options.with_overrides(title=dir_name), item_type=item_type)

        if await self._storage.exists(context_file):
            self._logger.debug(f"Found {CONTEXT_FILE_NAME} in {directory}")
            content = await self._storage.read_file(context_file)
            header = extract_first_header(content)
            body = content
            if header:
                main_section.title = header
                body = remove_first_header(content)
            if body.strip():
                main_section.append(body)

        for name in await self._storage.list_files(directory):
            if name == CONTEXT_FILE_NAME or self._is_ignored(name):
                continue

            file_path = Path(directory) / name
            if not await self._storage.is_file(file_path):
                continue

            self._logger.debug(f"Processing file {name} in {directory}")
            content = await self._storage.read_file(file_path)
            title = name
            body = content
            if name.endswith(".md"):
                header = extract_first_header(content)
                if header:
                    title = header
                    body = remove_first_header(content)

            file_section = Section.from_options(options.with_overrides(title=title), item_type=item_type)
            if body.strip():
                file_section.append(body)
            main_section.append(file_section)

        return main_section
