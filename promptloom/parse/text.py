"""
Plain text to Section parsing.
"""

import re
from typing import Optional, Union

from ..constants import DEFAULT_CHARACTER_ENCODING
from ..items.section import Section, SectionOptions
from ..items.weighted import Weighted, create_weighted

LINE_BREAK = re.compile(r"\r?\n")


def parse_text(
    content: Union[str, bytes],
    options: Optional[SectionOptions] = None,
    item_type: type = Weighted,
) -> Section:
    """Parse plain text into a Section with one item per non-blank line.

    Args:
        content: Text or UTF-8 bytes.
        options: Title, weights and parameters for the section and its items.
        item_type: Weighted subclass for created items.

    Returns:
        A Section holding the lines in their original order.
    """
    if isinstance(content, (bytes, bytearray)):
        content = bytes(content).decode(DEFAULT_CHARACTER_ENCODING, errors="replace")
    options = options or SectionOptions()

    section = Section.from_options(options, item_type=item_type)
    for line in LINE_BREAK.split(content):
        if not line.strip():
            continue
        section.append(create_weighted(
            line,
            weight=options.item_weight,
            parameters=options.parameters,
            item_type=item_type,
        ))
    return section
