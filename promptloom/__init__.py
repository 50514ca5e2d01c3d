"""
promptloom - assemble structured LLM chat prompts.

Parses Markdown and plain text into nested Sections, composes them with
deployment-time override files and directory loaders, and renders the result
as a chat request in tag or Markdown style.
"""

from .constants import LIBRARY_NAME, LIBRARY_VERSION, LIBRARY_DESCRIPTION
from .items import (
    Parameters,
    apply,
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
    Section,
    SectionOptions,
    NotASectionError,
    IndexOutOfRangeError,
    is_section,
    convert_to_section,
)
from .chat import ChatRequest, Message, get_persona_role
from .prompt import Prompt
from .logger import LoggerContractError, PrefixedLogger, wrap_logger
from .parser import Parser, ParseError, UnsupportedContentError, FileReadError
from .formatter import Formatter, FormatOptions
from .override import Override, OverrideResult, CoreOverrideDisabledError
from .loader import Loader
from .builder import Builder
from .config import BuilderConfig, ConfigError, import_config, export_config, load_config
from .util import Storage, is_markdown, is_text

__version__ = LIBRARY_VERSION

__all__ = [
    "LIBRARY_NAME",
    "LIBRARY_VERSION",
    "LIBRARY_DESCRIPTION",
    "Parameters",
    "apply",
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
    "ChatRequest",
    "Message",
    "get_persona_role",
    "Prompt",
    "LoggerContractError",
    "PrefixedLogger",
    "wrap_logger",
    "Parser",
    "ParseError",
    "UnsupportedContentError",
    "FileReadError",
    "Formatter",
    "FormatOptions",
    "Override",
    "OverrideResult",
    "CoreOverrideDisabledError",
    "Loader",
    "Builder",
    "BuilderConfig",
    "ConfigError",
    "import_config",
    "export_config",
    "load_config",
    "Storage",
    "is_markdown",
    "is_text",
]
