"""
Parser - turns text, bytes and files into Section trees.

Content is classified first: Markdown goes through the heading-aware
Markdown parser, anything else that looks like text is split into lines.
"""

from pathlib import Path
from typing import Any, Optional, Union

from .items.parameters import Parameters, merge
from .items.section import Section, SectionOptions
from .items.weighted import Weighted
from .logger import wrap_logger
from .parse.markdown import parse_markdown
from .parse.text import parse_text
from .util.markdown import is_markdown
from .util.storage import PathLike, Storage
from .util.text import is_text


class ParseError(Exception):
    """Base class for parsing failures."""


class UnsupportedContentError(ParseError):
    """Raised when content is neither Markdown nor text."""

    def __init__(self, path: Optional[PathLike] = None):
        self.path = path
        message = "Unsupported content supplied to parse; only Markdown and text are supported"
        if path is not None:
            message += f" (file: {path})"
        super().__init__(message)


class FileReadError(ParseError):
    """Raised when a file cannot be read for parsing."""

    def __init__(self, path: PathLike, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read {path}: {cause}")


class Parser:
    """Parses content into Sections.

    Parser-level parameters apply to every parse call; parameters given to a
    call are merged over them.

    Example:
        parser = Parser(parameters={"team": "platform"})
        section = parser.parse("# Rules\\n\\nAsk {{team}} first.")
        section.title           # 'Rules'
        section.items[0].text   # 'Ask platform first.'
    """

    def __init__(
        self,
        parameters: Optional[Parameters] = None,
        logger: Any = None,
        storage: Optional[Storage] = None,
    ) -> None:
        self._parameters: Parameters = dict(parameters or {})
        self._logger = wrap_logger(logger, "Parser")
        self._storage = storage or Storage(log=self._logger.debug)

    @property
    def parameters(self) -> Parameters:
        return self._parameters

    def _options(
        self,
        title: Optional[str],
        weight: Optional[float],
        item_weight: Optional[float],
        parameters: Optional[Parameters],
    ) -> SectionOptions:
        return SectionOptions().with_overrides(
            title=title,
            weight=weight,
            item_weight=item_weight,
            parameters=merge(self._parameters, parameters),
        )

    def parse(
        self,
        content: Union[str, bytes],
        title: Optional[str] = None,
        weight: Optional[float] = None,
        item_weight: Optional[float] = None,
        parameters: Optional[Parameters] = None,
        item_type: type = Weighted,
    ) -> Section:
        """Parse Markdown or plain text into a single Section.

        Args:
            content: Text or bytes to parse.
            title: Title of the returned section. A leading Markdown heading
                replaces it.
            weight: Weight of the returned section and nested sections.
            item_weight: Weight of created items.
            parameters: Placeholder values, merged over the parser's.
            item_type: Weighted subclass for created items.

        Returns:
            A Section containing all content in a hierarchical structure.

        Raises:
            UnsupportedContentError: If the content is neither Markdown nor text.
        """
        options = self._options(title, weight, item_weight, parameters)

        if is_markdown(content):
            return parse_markdown(content, options, item_type)
        if is_text(content):
            return parse_text(content, options, item_type)
        raise UnsupportedContentError()

    async def parse_file(
        self,
        path: PathLike,
        title: Optional[str] = None,
        weight: Optional[float] = None,
        item_weight: Optional[float] = None,
        parameters: Optional[Parameters] = None,
        item_type: type = Weighted,
    ) -> Section:
        """Read a file and parse it.

        The section title defaults to the file name without its extension.

        Raises:
            FileReadError: If the file cannot be read.
            UnsupportedContentError: If the file holds binary content.
        """
        try:
            content = await self._storage.read_bytes(path)
        except OSError as e:
            self._logger.error(f"Error reading {path}: {e}")
            raise FileReadError(path, e) from e

        try:
            return self.parse(
                content,
                title=title or Path(path).stem,
                weight=weight,
                item_weight=item_weight,
                parameters=parameters,
                item_type=item_type,
            )
        except UnsupportedContentError as e:
            self._logger.error(f"Error parsing {path}: {e}")
            raise UnsupportedContentError(path) from e
