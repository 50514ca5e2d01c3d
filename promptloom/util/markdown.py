"""
Markdown detection heuristics.

This is not a parser. It looks for common Markdown patterns to decide
whether input should go through the Markdown or the plain-text parser.
"""

import re
from typing import Union

from ..constants import (
    DEFAULT_CHARACTER_ENCODING,
    MARKDOWN_EARLY_EXIT_LINES,
    MARKDOWN_FEATURE_RATIO,
    MARKDOWN_SCAN_CHARS,
    MARKDOWN_SHORT_TEXT_LINES,
)

# Unambiguous syntax at the start of any line
MARKDOWN_SYNTAX = re.compile(
    r"^(#+\s|\*\s|-\s|\+\s|>\s|\[.*\]\(.*\)|```|~~~|(?:-{3,}|\*{3,}|_{3,})[ \t]*$)",
    re.MULTILINE,
)

# Per-line features, tested against the stripped line
FEATURE_PATTERNS = (
    re.compile(r"^#+\s+.+"),          # heading
    re.compile(r"^\s*[*+-]\s+.+"),    # list item
    re.compile(r"^\s*>\s+.+"),        # blockquote
    re.compile(r"\[.+\]\(.+\)"),      # link
    re.compile(r"!\[.+\]\(.+\)"),     # image
    re.compile(r"`{1,3}[^`]+`{1,3}"), # inline code or fenced code
    re.compile(r"^\s*_{3,}\s*$"),     # thematic breaks
    re.compile(r"^\s*-{3,}\s*$"),
    re.compile(r"^\s*\*{3,}\s*$"),
)

# Keeps an exact 5% ratio on the Markdown side despite float rounding
_RATIO_TOLERANCE = 1e-9


def _decode(content: Union[str, bytes]) -> str:
    if isinstance(content, (bytes, bytearray)):
        return bytes(content).decode(DEFAULT_CHARACTER_ENCODING, errors="replace")
    return content


def _is_feature(line: str) -> bool:
    stripped = line.strip()
    return any(pattern.search(stripped) for pattern in FEATURE_PATTERNS)


def is_markdown(content: Union[str, bytes, None]) -> bool:
    """Inspect content to see if it likely contains Markdown.

    A direct syntax marker anywhere decides immediately. Otherwise the first
    2000 characters are scanned line by line and the input is Markdown when
    at least 5% of its non-blank lines show a Markdown feature, when a short
    text (five lines or fewer) shows any feature, or when two or more
    features are found.

    Args:
        content: Text or UTF-8 bytes.

    Returns:
        True if Markdown syntax is suspected.

    Example:
        >>> is_markdown("# Hello\\nThis is a test.")
        True
        >>> is_markdown("This is a plain text string.")
        False
    """
    if content is None:
        return False
    text = _decode(content)
    if not text.strip():
        return False

    if MARKDOWN_SYNTAX.search(text):
        return True

    window = text[:MARKDOWN_SCAN_CHARS]
    lines = [line for line in window.split("\n") if line.strip()]
    features = 0

    for position, line in enumerate(lines, start=1):
        if _is_feature(line):
            features += 1
        # Shortcut only; two features already classify as Markdown below.
        if (
            features >= 2
            and position <= MARKDOWN_EARLY_EXIT_LINES
            and features / position > 0.1
        ):
            return True

    significant = len(lines)
    if significant == 0:
        return False

    if features / significant >= MARKDOWN_FEATURE_RATIO - _RATIO_TOLERANCE:
        return True

    if features >= 1 and significant <= MARKDOWN_SHORT_TEXT_LINES:
        return True

    return features >= 2
