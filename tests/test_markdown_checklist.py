"""
Unit tests for checklist scanning.

Includes the vacuous case: a document without checkboxes is all checked.
"""

from nexus.core.markdown import scan_checklist
from nexus.core.markdown.checklist import PREVIEW_LENGTH, ChecklistItem


class TestScanChecklist:
    """Test scan_checklist."""

    def test_dashboard_with_one_unchecked(self):
        """Three checked and one unchecked item."""
        doc = (
            "# Dashboard\n\n"
            "- [x] Write the vision\n"
            "- [x] Agree the scope\n"
            "- [ ] Pick the stack\n"
            "- [x] Sketch the architecture\n"
        )
        scan = scan_checklist(doc)
        assert len(scan.items) == 4
        assert scan.all_checked is False
        assert scan.checked_count == 3
        assert [item.preview for item in scan.unchecked] == ["Pick the stack"]

    def test_no_items_is_all_checked(self):
        """A document with no checklist items is vacuously all checked."""
        scan = scan_checklist("# Notes\n\nNothing to tick here.\n\n- plain item\n")
        assert scan.items == []
        assert scan.all_checked is True

    def test_empty_document_is_all_checked(self):
        """An empty document is vacuously all checked."""
        assert scan_checklist("").all_checked is True

    def test_all_list_markers(self):
        """Dash, star, plus and numbered items are all recognized."""
        doc = "- [x] dash\n\n* [X] star\n\n+ [ ] plus\n\n1. [x] numbered\n"
        scan = scan_checklist(doc)
        assert [(item.text, item.checked) for item in scan.items] == [
            ("dash", True),
            ("star", True),
            ("plus", False),
            ("numbered", True),
        ]

    def test_uppercase_x_is_checked(self):
        """[X] counts as checked."""
        assert scan_checklist("- [X] Done\n").all_checked is True

    def test_code_block_items_ignored(self):
        """Checkboxes inside fenced code are not items."""
        scan = scan_checklist("```\n- [ ] not a real item\n```\n")
        assert scan.items == []

    def test_item_line_numbers(self):
        """Items record their 1-based source line."""
        scan = scan_checklist("# D\n\n- [ ] first\n- [ ] second\n")
        assert [item.line for item in scan.items] == [3, 4]

    def test_nested_items(self):
        """Nested checklist items are scanned too."""
        doc = "- [x] parent\n  - [ ] child\n"
        scan = scan_checklist(doc)
        assert [(item.text, item.checked) for item in scan.items] == [
            ("parent", True),
            ("child", False),
        ]

    def test_brackets_mid_text_not_a_checkbox(self):
        """A marker must start the item."""
        assert scan_checklist("- see [ ] later\n").items == []


class TestChecklistItemPreview:
    """Test ChecklistItem.preview."""

    def test_preview_truncated(self):
        """Previews are at most 50 characters."""
        item = ChecklistItem(text="x" * 80, checked=False)
        assert len(item.preview) == PREVIEW_LENGTH == 50

    def test_short_text_unchanged(self):
        """Short text is not truncated."""
        assert ChecklistItem(text="Ship it", checked=False).preview == "Ship it"

    def test_empty_text(self):
        """An item with no text gets a placeholder preview."""
        scan = scan_checklist("- [ ]\n")
        assert len(scan.items) == 1
        assert scan.items[0].preview == "(no text)"
