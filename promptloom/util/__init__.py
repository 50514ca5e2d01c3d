"""
Content classifiers and filesystem access.
"""

from .markdown import is_markdown
from .text import is_text
from .storage import Storage

__all__ = ["is_markdown", "is_text", "Storage"]
