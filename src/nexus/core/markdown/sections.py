"""
Section extraction for markdown planning documents.

Walks the block-level token stream produced by markdown-it once and groups
the document into sections keyed by header text. A section's body runs from
its header to the next header of equal or higher level, so a ``##`` section
also carries the text of any ``###`` subsections beneath it.

Body text is flattened from the token stream rather than sliced from the raw
source:
- inline code spans are re-wrapped in backticks
- list items keep a ``-``/``*``/``1.`` marker so list structure survives
- fenced and indented code blocks are kept verbatim

The extractor never fails on malformed markdown; anything markdown-it
accepts (which is everything) yields some, possibly empty, list of sections.

Example:
    >>> from nexus.core.markdown.sections import section_map
    >>> doc = "## Problem\\n\\nI lose track of `TODO.md` files.\\n"
    >>> section_map(doc)
    {'Problem': 'I lose track of `TODO.md` files.'}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from markdown_it import MarkdownIt
from markdown_it.token import Token

# Token types whose content counts as document text
_TEXT_BLOCK_TYPES = frozenset({"inline", "fence", "code_block", "html_block"})


@dataclass(frozen=True)
class Section:
    """A header and the flattened text beneath it."""

    header: str
    body: str
    level: int = 2

    @property
    def word_count(self) -> int:
        """Number of whitespace-delimited words in the body."""
        return len(self.body.split())


@dataclass
class _SectionBuilder:
    header: str
    level: int
    lines: list[str] = field(default_factory=list)

    def build(self) -> Section:
        return Section(header=self.header, body="\n".join(self.lines).strip(), level=self.level)


@dataclass
class _ListState:
    ordered: bool
    counter: int = 1


@lru_cache(maxsize=1)
def _parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


def tokenize(content: str) -> list[Token]:
    """
    Parse markdown into markdown-it's flat block token stream.

    Args:
        content: Raw markdown text.

    Returns:
        Block-level tokens in document order. Inline content is available
        on ``inline`` tokens via ``token.content`` and ``token.children``.
    """
    return _parser().parse(content)


def flatten_inline(token: Token) -> str:
    """
    Flatten an ``inline`` token into plain text.

    Code spans are wrapped in backticks so code references stay legible when
    the text is later embedded in a prompt. Soft and hard breaks become
    newlines. Emphasis and link markup are dropped, keeping their text.
    """
    parts: list[str] = []
    for child in token.children or []:
        if child.type == "text":
            parts.append(child.content)
        elif child.type == "code_inline":
            parts.append(f"`{child.content}`")
        elif child.type in ("softbreak", "hardbreak"):
            parts.append("\n")
        elif child.type == "image":
            parts.append(child.content)
        elif child.type == "html_inline":
            parts.append(child.content)
    return "".join(parts)


def _heading_level(token: Token) -> int:
    try:
        return int(token.tag.lstrip("h"))
    except ValueError:
        return 1


def extract_sections(content: str) -> list[Section]:
    """
    Extract sections from a markdown document.

    Text before the first header is not part of any section.

    Args:
        content: Raw markdown text.

    Returns:
        Sections in order of header appearance. Header text is taken
        verbatim (case preserved, surrounding whitespace stripped).
    """
    tokens = tokenize(content)

    ordered: list[_SectionBuilder] = []
    open_sections: list[_SectionBuilder] = []
    list_stack: list[_ListState] = []
    pending_marker: str | None = None

    def emit(line: str) -> None:
        for builder in open_sections:
            builder.lines.append(line)

    i = 0
    while i < len(tokens):
        token = tokens[i]

        if token.type == "heading_open":
            level = _heading_level(token)
            header = ""
            if i + 1 < len(tokens) and tokens[i + 1].type == "inline":
                header = flatten_inline(tokens[i + 1]).strip()

            # Close sections at the same or a deeper level
            open_sections = [b for b in open_sections if b.level < level]
            # Parent sections keep the subheading as a line of their body
            emit(header)

            builder = _SectionBuilder(header=header, level=level)
            ordered.append(builder)
            open_sections.append(builder)

            # Skip the heading's inline and close tokens
            while i < len(tokens) and tokens[i].type != "heading_close":
                i += 1
            i += 1
            continue

        if token.type in ("bullet_list_open", "ordered_list_open"):
            start = token.attrGet("start")
            list_stack.append(
                _ListState(
                    ordered=token.type == "ordered_list_open",
                    counter=int(start) if start is not None else 1,
                )
            )
        elif token.type in ("bullet_list_close", "ordered_list_close"):
            if list_stack:
                list_stack.pop()
        elif token.type == "list_item_open":
            indent = "  " * max(len(list_stack) - 1, 0)
            current = list_stack[-1] if list_stack else _ListState(ordered=False)
            if current.ordered:
                number = token.info or str(current.counter)
                pending_marker = f"{indent}{number}{token.markup or '.'} "
                current.counter += 1
            else:
                pending_marker = f"{indent}{token.markup or '-'} "
        elif token.type == "inline":
            text = flatten_inline(token)
            if pending_marker is not None:
                text = pending_marker + text
                pending_marker = None
            emit(text)
        elif token.type in ("fence", "code_block"):
            emit(token.content.rstrip("\n"))
        elif token.type == "html_block":
            emit(token.content.strip())

        i += 1

    return [builder.build() for builder in ordered]


def section_map(content: str) -> dict[str, str]:
    """
    Extract sections as an ordered ``header -> body`` mapping.

    When the same header text appears more than once, the bodies are joined
    with a newline in order of appearance.

    Args:
        content: Raw markdown text.

    Returns:
        Mapping of header text to body text, in order of first appearance.
    """
    result: dict[str, str] = {}
    for section in extract_sections(content):
        if section.header in result and section.body:
            existing = result[section.header]
            result[section.header] = f"{existing}\n{section.body}" if existing else section.body
        elif section.header not in result:
            result[section.header] = section.body
    return result


def count_words(content: str) -> int:
    """
    Count whitespace-delimited words across the whole document.

    Counts the text of headers, paragraphs, list items, tables and code
    blocks. Markdown block markers (``#``, ``-``, ``>``) are not words;
    inline markup stays attached to the word it wraps.

    Args:
        content: Raw markdown text.

    Returns:
        Total word count.
    """
    return sum(
        len(token.content.split())
        for token in tokenize(content)
        if token.type in _TEXT_BLOCK_TYPES
    )
