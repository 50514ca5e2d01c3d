"""
Markdown to Section parsing.

markdown-it-py produces a flat token stream with open/close pairs. The
lexer below folds the top-level tokens into one Block per block construct
(heading, paragraph, list, code, ...). The tree builder then walks those
blocks keeping a stack of open sections indexed by heading depth.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from markdown_it import MarkdownIt
from markdown_it.token import Token

from ..constants import DEFAULT_CHARACTER_ENCODING
from ..items.section import Section, SectionOptions
from ..items.weighted import Weighted, create_weighted

LIST_MARKER = re.compile(r"^(\s*(?:[*+-]|\d{1,9}[.)]))(?:[ \t]+|$)")
QUOTE_MARKER = re.compile(r"^\s*>[ ]?")


@dataclass
class Block:
    """A top-level Markdown block.

    Attributes:
        kind: heading, paragraph, list, code, blockquote, html, hr or table.
        text: Text carried by the block, if any.
        depth: Heading depth (1-6) for headings.
        lang: Fence language for code blocks.
        items: Item texts for lists.
    """
    kind: str
    text: Optional[str] = None
    depth: int = 0
    lang: Optional[str] = None
    items: list[str] = field(default_factory=list)


def _markdown() -> MarkdownIt:
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


def _closing_index(tokens: list[Token], start: int) -> int:
    """Index of the token closing the one at ``start``."""
    if tokens[start].nesting != 1:
        return start
    level = 0
    for index in range(start, len(tokens)):
        level += tokens[index].nesting
        if level == 0:
            return index
    return len(tokens) - 1


def _source(lines: list[str], token: Token) -> list[str]:
    if not token.map:
        return []
    begin, end = token.map
    return lines[begin:end]


def _list_item_text(lines: list[str]) -> str:
    if not lines:
        return ""
    match = LIST_MARKER.match(lines[0])
    if not match:
        return "\n".join(lines).strip()
    width = len(match.group(0))
    body = [lines[0][width:]]
    for line in lines[1:]:
        indent = len(line) - len(line.lstrip(" "))
        body.append(line[min(indent, width):])
    return "\n".join(line.rstrip() for line in body).strip()


def _list_items(tokens: list[Token], start: int, end: int, lines: list[str]) -> list[str]:
    level = tokens[start].level + 1
    return [
        _list_item_text(_source(lines, token))
        for token in tokens[start + 1:end]
        if token.type == "list_item_open" and token.level == level
    ]


def _code(token: Token) -> Block:
    text = token.content[:-1] if token.content.endswith("\n") else token.content
    lang = token.info.strip().split()[0] if token.info and token.info.strip() else None
    return Block("code", text=text, lang=lang)


def lex(content: str) -> list[Block]:
    """Split Markdown into its top-level blocks, in document order."""
    content = content.replace("\r\n", "\n").replace("\r", "\n")
    lines = content.split("\n")
    tokens = _markdown().parse(content)

    blocks: list[Block] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        end = _closing_index(tokens, index)

        if token.type == "heading_open":
            inline = tokens[index + 1]
            blocks.append(Block("heading", text=inline.content, depth=int(token.tag[1:])))
        elif token.type == "paragraph_open":
            blocks.append(Block("paragraph", text=tokens[index + 1].content))
        elif token.type in ("bullet_list_open", "ordered_list_open"):
            blocks.append(Block("list", items=_list_items(tokens, index, end, lines)))
        elif token.type in ("fence", "code_block"):
            blocks.append(_code(token))
        elif token.type == "blockquote_open":
            quoted = [QUOTE_MARKER.sub("", line, count=1) for line in _source(lines, token)]
            blocks.append(Block("blockquote", text="\n".join(quoted).strip() or None))
        elif token.type == "html_block":
            blocks.append(Block("html", text=token.content.rstrip("\n") or None))
        elif token.type == "hr":
            blocks.append(Block("hr"))
        elif token.type == "table_open":
            blocks.append(Block("table"))

        index = end + 1

    return blocks


def parse_markdown(
    content: Union[str, bytes],
    options: Optional[SectionOptions] = None,
    item_type: type = Weighted,
) -> Section:
    """Parse Markdown into a single Section.

    - If the content starts with a heading, it becomes the returned Section's
      title rather than a nested section.
    - Later headings open nested sections according to their depth; a heading
      at the same depth as the open one closes it and opens a sibling.
    - Paragraphs, lists and code blocks become items of the innermost open
      section.

    Args:
        content: Markdown text or UTF-8 bytes.
        options: Title, weights and parameters for created sections and items.
        item_type: Weighted subclass for created items.

    Returns:
        The root Section.
    """
    if isinstance(content, (bytes, bytearray)):
        content = bytes(content).decode(DEFAULT_CHARACTER_ENCODING, errors="replace")
    options = options or SectionOptions()

    main_section = Section.from_options(options, item_type=item_type)
    stack: list[Section] = [main_section]
    first_block = True

    def add_item(text: str) -> None:
        item = create_weighted(
            text,
            weight=options.item_weight,
            parameters=options.parameters,
            item_type=item_type,
        )
        stack[-1].append(item)

    for block in lex(content):
        if block.kind == "heading":
            if first_block:
                main_section.title = block.text
                first_block = False
                continue

            while len(stack) > block.depth and len(stack) > 1:
                stack.pop()
            # Same depth as the open section: close it and open a sibling
            if len(stack) == block.depth and len(stack) > 1:
                stack.pop()

            child = Section.from_options(
                options.with_overrides(title=block.text), item_type=item_type
            )
            stack[-1].append(child)
            stack.append(child)
        elif block.kind == "paragraph":
            add_item(block.text or "")
        elif block.kind == "list":
            add_item("\n".join(f"- {text}" for text in block.items))
        elif block.kind == "code":
            add_item(f"```{block.lang or ''}\n{block.text}\n```")
        elif block.text:
            add_item(block.text)

        first_block = False

    return main_section
