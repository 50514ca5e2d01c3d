"""
Prompt items: weighted leaves, sections and template parameters.
"""

from .parameters import Parameters, apply, merge, validate_parameters
from .weighted import (
    Weighted,
    Instruction,
    Content,
    Context,
    Trait,
    create_weighted,
    create_instruction,
    create_content,
    create_context,
    create_trait,
)
from .section import (
    Section,
    SectionOptions,
    NotASectionError,
    IndexOutOfRangeError,
    is_section,
    convert_to_section,
    validate_section_options,
)

__all__ = [
    "Parameters",
    "apply",
    "merge",
    "validate_parameters",
    "Weighted",
    "Instruction",
    "Content",
    "Context",
    "Trait",
    "create_weighted",
    "create_instruction",
    "create_content",
    "create_context",
    "create_trait",
    "Section",
    "SectionOptions",
    "NotASectionError",
    "IndexOutOfRangeError",
    "is_section",
    "convert_to_section",
    "validate_section_options",
]
