"""
Constants and defaults for promptloom.
"""
from typing import Final

LIBRARY_NAME: Final[str] = "promptloom"
LIBRARY_VERSION: Final[str] = "0.3.0"
LIBRARY_DESCRIPTION: Final[str] = "Assemble structured LLM chat prompts from text, files and directories"

DEFAULT_CHARACTER_ENCODING: Final[str] = "utf-8"

# Weights
DEFAULT_WEIGHT: Final[float] = 1.0
DEFAULT_ITEM_WEIGHT: Final[float] = 1.0

# Formatting
SECTION_SEPARATORS: Final[tuple[str, ...]] = ("tag", "markdown")
DEFAULT_SECTION_SEPARATOR: Final[str] = "tag"
DEFAULT_SECTION_TAG: Final[str] = "section"
DEFAULT_SECTION_TITLE_SEPARATOR: Final[str] = ":"
DEFAULT_SECTION_DEPTH: Final[int] = 0

# Chat
DEFAULT_MODEL: Final[str] = "gpt-4o"
DEFAULT_PERSONA_ROLE: Final[str] = "developer"
SYSTEM_ROLE_MODELS: Final[frozenset[str]] = frozenset({"gpt-4o", "gpt-4o-mini"})
ROLES: Final[tuple[str, ...]] = ("system", "developer", "user", "assistant")

# Builder areas
DEFAULT_PERSONA_AREA_TITLE: Final[str] = "Persona"
DEFAULT_INSTRUCTIONS_AREA_TITLE: Final[str] = "Instruction"
DEFAULT_CONTENTS_AREA_TITLE: Final[str] = "Content"
DEFAULT_CONTEXT_AREA_TITLE: Final[str] = "Context"

# Overrides
DEFAULT_OVERRIDE_DIR: Final[str] = "./overrides"
OVERRIDE_PRE_SUFFIX: Final[str] = "-pre"
OVERRIDE_POST_SUFFIX: Final[str] = "-post"

# Loader
CONTEXT_FILE_NAME: Final[str] = "context.md"
DEFAULT_IGNORE_PATTERNS: Final[tuple[str, ...]] = (
    r"^\.",
    r"\.(jpe?g|png|gif|bmp|tiff?|webp|ico|svg)$",
    r"\.(mp3|wav|ogg|flac|mp4|avi|mov|mkv|webm)$",
    r"\.(zip|tar|gz|tgz|bz2|xz|rar|7z)$",
    r"\.(pdf|docx?|xlsx?|pptx?|odt|ods)$",
    r"\.(exe|dll|so|dylib|bin|class|pyc)$",
)

# Classifiers
MARKDOWN_SCAN_CHARS: Final[int] = 2000
MARKDOWN_EARLY_EXIT_LINES: Final[int] = 20
MARKDOWN_SHORT_TEXT_LINES: Final[int] = 5
MARKDOWN_FEATURE_RATIO: Final[float] = 0.05
TEXT_SCAN_CHARS: Final[int] = 512
TEXT_BINARY_RATIO: Final[float] = 0.1

# Environment variables read by the configuration layer
ENV_OVERRIDES: Final[str] = "PROMPTLOOM_OVERRIDES"
ENV_OVERRIDE_PATH: Final[str] = "PROMPTLOOM_OVERRIDE_PATH"
ENV_MODEL: Final[str] = "PROMPTLOOM_MODEL"
