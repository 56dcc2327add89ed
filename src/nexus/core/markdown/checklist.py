"""
Checklist scanning for markdown task lists.

Finds list items that start with a task-list marker (``[ ]``, ``[x]`` or
``[X]``) under any list marker (``-``, ``*``, ``+``, ``1.``) and reports
whether every item is checked.

A document with no checklist items is "all checked": there is nothing left
to do. The dashboard gate relies on this, so a dashboard without any
checkboxes passes.

Example:
    >>> from nexus.core.markdown.checklist import scan_checklist
    >>> scan = scan_checklist("- [x] Vision written\\n- [ ] Scope agreed\\n")
    >>> scan.all_checked
    False
    >>> [item.preview for item in scan.unchecked]
    ['Scope agreed']
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from nexus.core.markdown.sections import tokenize

PREVIEW_LENGTH = 50

_TASK_MARKER_RE = re.compile(r"^\[([ xX])\](?:[ \t]+|$)")


@dataclass(frozen=True)
class ChecklistItem:
    """A single checkbox list item."""

    text: str
    checked: bool
    line: int | None = None

    @property
    def preview(self) -> str:
        """Item text truncated to at most 50 characters."""
        if not self.text:
            return "(no text)"
        return self.text[:PREVIEW_LENGTH]


@dataclass(frozen=True)
class ChecklistScan:
    """Result of scanning a document for checklist items."""

    items: list[ChecklistItem] = field(default_factory=list)

    @property
    def all_checked(self) -> bool:
        """True when no item is unchecked (vacuously true for no items)."""
        return all(item.checked for item in self.items)

    @property
    def unchecked(self) -> list[ChecklistItem]:
        """Unchecked items in document order."""
        return [item for item in self.items if not item.checked]

    @property
    def checked_count(self) -> int:
        return sum(1 for item in self.items if item.checked)


def scan_checklist(content: str) -> ChecklistScan:
    """
    Scan a markdown document for checklist items.

    Only the first paragraph of a list item is inspected for the marker,
    matching how task lists render. Nested items are scanned as items in
    their own right.

    Args:
        content: Raw markdown text.

    Returns:
        ChecklistScan with items in document order.
    """
    items: list[ChecklistItem] = []
    awaiting_line: int | None = None
    awaiting = False

    for token in tokenize(content):
        if token.type == "list_item_open":
            awaiting = True
            awaiting_line = token.map[0] + 1 if token.map else None
        elif token.type == "inline" and awaiting:
            awaiting = False
            first_line = token.content.split("\n", 1)[0]
            match = _TASK_MARKER_RE.match(first_line)
            if match is None:
                continue
            text = token.content[match.end() :].replace("\n", " ").strip()
            items.append(
                ChecklistItem(
                    text=text,
                    checked=match.group(1) in ("x", "X"),
                    line=awaiting_line,
                )
            )
        elif token.type in (
            "list_item_close",
            "bullet_list_open",
            "ordered_list_open",
            "fence",
            "code_block",
        ):
            # An item whose first block is not a paragraph has no marker
            awaiting = False

    return ChecklistScan(items=items)
