"""
Formatter - renders Section trees into prompt text and chat requests.

Two mutually exclusive styles are supported:

Tag style::

    <Persona>
    <Traits>
    Curious

    Patient
    </Traits>
    </Persona>

Markdown style::

    # Persona

    ## Traits

    Curious

    Patient
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from .chat import ChatRequest, Message, create_request, get_persona_role
from .constants import (
    DEFAULT_SECTION_DEPTH,
    DEFAULT_SECTION_SEPARATOR,
    DEFAULT_SECTION_TAG,
    DEFAULT_SECTION_TITLE_SEPARATOR,
    SECTION_SEPARATORS,
)
from .items.section import Section
from .items.weighted import Weighted
from .logger import wrap_logger
from .prompt import Prompt


@dataclass
class FormatOptions:
    """Rendering options.

    Attributes:
        section_separator: "tag" or "markdown".
        section_title_prefix: Optional prefix written before Markdown titles.
        section_title_separator: Separator between prefix and title.
        section_depth: Base heading depth for Markdown; depth 0 renders "#".
    """
    section_separator: str = DEFAULT_SECTION_SEPARATOR
    section_title_prefix: Optional[str] = None
    section_title_separator: str = DEFAULT_SECTION_TITLE_SEPARATOR
    section_depth: int = DEFAULT_SECTION_DEPTH

    def to_dict(self) -> dict[str, Any]:
        return {
            "section_separator": self.section_separator,
            "section_title_prefix": self.section_title_prefix,
            "section_title_separator": self.section_title_separator,
            "section_depth": self.section_depth,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FormatOptions":
        """Create FormatOptions from a dictionary.

        Raises:
            ValueError: If validation fails.
        """
        is_valid, errors = validate_format_options(data)
        if not is_valid:
            raise ValueError(f"Invalid format options: {'; '.join(errors)}")
        return cls(
            section_separator=data.get("section_separator", DEFAULT_SECTION_SEPARATOR),
            section_title_prefix=data.get("section_title_prefix"),
            section_title_separator=data.get("section_title_separator", DEFAULT_SECTION_TITLE_SEPARATOR),
            section_depth=data.get("section_depth", DEFAULT_SECTION_DEPTH),
        )


def validate_format_options(data: Any) -> tuple[bool, list[str]]:
    """Validate a format options dictionary.

    Returns:
        A tuple of (is_valid, errors).
    """
    if not isinstance(data, dict):
        return False, ["Format options must be a dictionary"]

    errors: list[str] = []
    separator = data.get("section_separator", DEFAULT_SECTION_SEPARATOR)
    if separator not in SECTION_SEPARATORS:
        errors.append(
            f"Field 'section_separator' must be one of: {', '.join(SECTION_SEPARATORS)}"
        )

    prefix = data.get("section_title_prefix")
    if prefix is not None and not isinstance(prefix, str):
        errors.append("Field 'section_title_prefix' must be a string or null")

    if not isinstance(data.get("section_title_separator", DEFAULT_SECTION_TITLE_SEPARATOR), str):
        errors.append("Field 'section_title_separator' must be a string")

    depth = data.get("section_depth", DEFAULT_SECTION_DEPTH)
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        errors.append("Field 'section_depth' must be a non-negative integer")

    return len(errors) == 0, errors


class Formatter:
    """Renders sections, personas and whole prompts.

    Example:
        formatter = Formatter(FormatOptions(section_separator="markdown"))
        text = formatter.format(section)
        request = formatter.format_prompt("gpt-4o", prompt)
    """

    def __init__(self, options: Optional[FormatOptions] = None, logger: Any = None) -> None:
        self._options = options or FormatOptions()
        is_valid, errors = validate_format_options(self._options.to_dict())
        if not is_valid:
            raise ValueError(f"Invalid format options: {'; '.join(errors)}")
        self._logger = wrap_logger(logger, "Formatter")

    @property
    def options(self) -> FormatOptions:
        return self._options

    def _title(self, section: Section) -> str:
        title = section.title or ""
        prefix = self._options.section_title_prefix
        if prefix:
            return f"{prefix} {self._options.section_title_separator} {title}".rstrip()
        return title

    def format(self, item: Union[Weighted, Section], depth: Optional[int] = None) -> str:
        """Render an item or section.

        Args:
            item: A Weighted leaf or a Section.
            depth: Markdown heading depth; defaults to the configured base depth.

        Returns:
            The rendered text. A leaf renders as its text.
        """
        if depth is None:
            depth = self._options.section_depth

        if not isinstance(item, Section):
            return item.text

        if self._options.section_separator == "tag":
            tag = item.title or DEFAULT_SECTION_TAG
            body = "\n\n".join(self.format(child, depth + 1) for child in item.items)
            return f"<{tag}>\n{body}\n</{tag}>"

        parts = [self.format(child, depth + 1) for child in item.items]
        if item.title:
            parts.insert(0, f"{'#' * (depth + 1)} {self._title(item)}")
        return "\n\n".join(parts)

    def format_array(self, items: Sequence[Union[Weighted, Section]],
                     depth: Optional[int] = None) -> str:
        """Render several items separated by blank lines."""
        return "\n\n".join(self.format(item, depth) for item in items)

    def format_persona(self, model: str, persona: Section) -> Message:
        """Render a persona section as a single message for ``model``."""
        return Message(role=get_persona_role(model), content=self.format(persona))

    def format_prompt(self, model: str, prompt: Prompt) -> ChatRequest:
        """Render a prompt into a chat request.

        The persona becomes the first message. Instructions, contents and
        contexts, in that order, are joined into one user message; absent or
        empty areas are skipped.
        """
        request = create_request(model)

        if prompt.persona is not None and prompt.persona.items:
            request.add_message(self.format_persona(model, prompt.persona))

        areas = [
            self.format(area)
            for area in (prompt.instructions, prompt.contents, prompt.contexts)
            if area is not None and area.items
        ]
        request.add_message(Message(role="user", content="\n\n".join(areas)))

        self._logger.debug(f"Formatted prompt for {model} with {len(request.messages)} messages")
        return request
