"""
Markdown and plain-text parsing into Section trees.
"""

from .markdown import Block, lex, parse_markdown
from .text import parse_text

__all__ = ["Block", "lex", "parse_markdown", "parse_text"]
