"""
Prompt aggregate handed to the formatter.
"""

from dataclasses import dataclass
from typing import Optional

from .items.section import Section


@dataclass
class Prompt:
    """The four areas of a prompt.

    Attributes:
        instructions: What the model should do. Required.
        persona: Identity and traits, rendered as the persona message.
        contents: Material to work on.
        contexts: Background information.
    """
    instructions: Section
    persona: Optional[Section] = None
    contents: Optional[Section] = None
    contexts: Optional[Section] = None
