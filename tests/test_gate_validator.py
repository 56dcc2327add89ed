"""
Unit tests for the gate validator.

Tests each rule in isolation, issue collection across rules, and the
distinction between unreadable and incomplete documents.
"""

import pytest

from nexus.core.gate import validator
from nexus.core.gate.models import (
    BelowWordCount,
    ForbiddenString,
    MissingHeader,
    UncheckedItem,
)
from nexus.core.gate.validator import (
    DocumentEncodingError,
    DocumentNotFoundError,
    DocumentReadError,
    find_forbidden_strings,
    validate,
    validate_content,
    validate_dashboard,
)


def words(n: int) -> str:
    return " ".join(f"word{i}" for i in range(n))


# ==============================================================================
# Headers and Word Count
# ==============================================================================


class TestRequiredHeaders:
    """Test the required-header rule."""

    def test_missing_header_reported(self):
        """A document without the required header fails with MissingHeader."""
        content = f"## Vision\n\n{words(60)}\n"
        result = validate_content(content, ["Problem"], 50, [])
        assert result.passed is False
        assert result.issues == [MissingHeader(name="Problem")]

    def test_headers_are_case_sensitive(self):
        """'problem' does not satisfy 'Problem'."""
        content = f"## problem\n\n{words(60)}\n"
        result = validate_content(content, ["Problem"], 0, [])
        assert result.issues_of(MissingHeader) == [MissingHeader(name="Problem")]

    def test_any_header_level_matches(self):
        """A required header can appear at any level."""
        content = f"### Problem\n\n{words(60)}\n"
        assert validate_content(content, ["Problem"], 50, []).passed

    def test_headers_recorded_in_order(self):
        """Found headers are recorded on the result."""
        result = validate_content("# A\n\n## B\n", [], 0, [])
        assert result.headers == ["A", "B"]


class TestWordCount:
    """Test the minimum word count rule."""

    def test_below_minimum(self):
        """A header plus 48 words counts as 49 words."""
        content = f"## Problem\n\n{words(48)}\n"
        result = validate_content(content, ["Problem"], 50, [])
        assert result.issues == [BelowWordCount(actual=49, required=50)]
        assert result.word_count == 49

    def test_exactly_minimum_passes(self):
        """A document at the minimum passes."""
        content = f"## Problem\n\n{words(49)}\n"
        assert validate_content(content, ["Problem"], 50, []).passed

    def test_zero_minimum_accepts_empty(self):
        """An empty document passes when nothing is required."""
        assert validate_content("", [], 0, []).passed


# ==============================================================================
# Forbidden Strings
# ==============================================================================


class TestForbiddenStrings:
    """Test forbidden string detection."""

    def test_case_insensitive(self):
        """'todo' matches the forbidden string 'TODO'."""
        found = find_forbidden_strings("## Plan\n\nsomething todo later\n", ["TODO"])
        assert found == [ForbiddenString(match="TODO", header="Plan")]

    def test_reported_once_per_header(self):
        """Repeated matches under one header are reported once."""
        content = "## Plan\n\nTODO one\n\nTODO two\n\n## Other\n\nTODO three\n"
        found = find_forbidden_strings(content, ["TODO"])
        assert found == [
            ForbiddenString(match="TODO", header="Plan"),
            ForbiddenString(match="TODO", header="Other"),
        ]

    def test_match_before_first_header(self):
        """A match in the preamble has no header."""
        found = find_forbidden_strings("TBD\n\n## Plan\n\ndone\n", ["TBD"])
        assert found == [ForbiddenString(match="TBD", header=None)]

    def test_match_in_header_text(self):
        """A forbidden string in a header is attributed to that header."""
        found = find_forbidden_strings("## Plan TBD\n\nclean\n", ["TBD"])
        assert found == [ForbiddenString(match="TBD", header="Plan TBD")]

    def test_code_blocks_flagged_by_default(self):
        """Placeholders in code blocks are flagged unless exempted."""
        content = "## Folder structure:\n\n```\nsrc/  # TODO\n```\n"
        found = find_forbidden_strings(content, ["TODO"])
        assert found == [ForbiddenString(match="TODO", header="Folder structure:")]

    def test_code_blocks_exempted(self):
        """exempt_code_blocks skips fenced code."""
        content = "## Folder structure:\n\n```\nsrc/  # TODO\n```\n"
        assert find_forbidden_strings(content, ["TODO"], exempt_code_blocks=True) == []

    def test_bracket_placeholder(self):
        """Literal bracket strings match as text."""
        found = find_forbidden_strings("## Stack\n\nUse [fill] here\n", ["[fill]"])
        assert found == [ForbiddenString(match="[fill]", header="Stack")]

    def test_empty_forbidden_list(self):
        """No forbidden strings means nothing is found."""
        assert find_forbidden_strings("TODO TBD", []) == []

    def test_issue_description_names_location(self):
        """The description names the header or the preamble."""
        assert "under 'Plan'" in ForbiddenString(match="TODO", header="Plan").describe()
        assert "before the first header" in ForbiddenString(match="TODO").describe()


# ==============================================================================
# Checklist Rule and Rule Interaction
# ==============================================================================


class TestChecklistRule:
    """Test the require_all_checked rule."""

    def test_unchecked_items_reported(self):
        """Unchecked items become issues when required."""
        content = "# D\n\n- [x] done\n- [ ] open item\n"
        result = validate_content(content, [], 0, [], require_all_checked=True)
        assert result.issues == [UncheckedItem(preview="open item", line=4)]

    def test_not_checked_when_not_required(self):
        """Checkboxes are ignored by default."""
        content = "# D\n\n- [ ] open item\n"
        assert validate_content(content, [], 0, []).passed


class TestRuleCollection:
    """Test that rules are independent and collected."""

    def test_all_violations_collected(self):
        """Every violation is reported in one pass."""
        content = "## Vision\n\nTODO\n\n- [ ] pending\n"
        result = validate_content(
            content,
            ["Problem", "Vision"],
            50,
            ["TODO"],
            require_all_checked=True,
        )
        kinds = [issue.kind for issue in result.issues]
        assert kinds == [
            "missing_header",
            "below_word_count",
            "forbidden_string",
            "unchecked_item",
        ]

    def test_idempotent(self):
        """Validating the same content twice gives the same result."""
        content = f"## Problem\n\nTBD {words(10)}\n"
        first = validate_content(content, ["Problem", "Vision"], 50, ["TBD"])
        second = validate_content(content, ["Problem", "Vision"], 50, ["TBD"])
        assert first.issues == second.issues
        assert first.word_count == second.word_count

    def test_summary_joins_issues(self):
        """summary() describes every issue."""
        result = validate_content("", ["Problem"], 5, [])
        summary = result.summary()
        assert "Missing required header: 'Problem'" in summary
        assert "0 words (minimum 5)" in summary


# ==============================================================================
# Reading Documents
# ==============================================================================


class TestValidateFile:
    """Test validate() against files on disk."""

    def test_valid_file(self, tmp_path, documents):
        """The sample vision passes with its own headers."""
        path = tmp_path / "vision.md"
        path.write_text(documents["vision"])
        result = validate(path, ["My problem (personal):"], 50, ["TODO"])
        assert result.passed
        assert result.path == path

    def test_missing_file(self, tmp_path):
        """A missing file raises instead of failing validation."""
        with pytest.raises(DocumentNotFoundError) as exc_info:
            validate(tmp_path / "nope.md", [], 0, [])
        assert exc_info.value.reason == "File not found"

    def test_invalid_utf8(self, tmp_path):
        """Binary content raises an encoding error."""
        path = tmp_path / "binary.md"
        path.write_bytes(b"## Problem\n\xff\xfe\x00")
        with pytest.raises(DocumentEncodingError) as exc_info:
            validate(path, [], 0, [])
        assert "UTF-8" in exc_info.value.reason

    def test_directory_path(self, tmp_path):
        """A directory is a read error, not an empty document."""
        with pytest.raises(DocumentReadError):
            validate(tmp_path, [], 0, [])

    def test_large_file_warns(self, tmp_path, monkeypatch):
        """Files over the size threshold are processed with a warning."""
        monkeypatch.setattr(validator, "LARGE_FILE_BYTES", 10)
        path = tmp_path / "big.md"
        path.write_text(f"## Problem\n\n{words(60)}\n")
        result = validate(path, ["Problem"], 50, [])
        assert result.passed
        assert len(result.warnings) == 1
        assert "very large" in result.warnings[0]


class TestValidateDashboard:
    """Test validate_dashboard()."""

    def test_all_checked(self, tmp_path, documents):
        """A fully checked dashboard passes."""
        path = tmp_path / "00-START-HERE.md"
        path.write_text(documents["dashboard"])
        assert validate_dashboard(path).passed

    def test_unchecked_item(self, tmp_path):
        """An unchecked item fails the dashboard."""
        path = tmp_path / "00-START-HERE.md"
        path.write_text("- [x] one\n- [x] two\n- [x] three\n- [ ] four\n")
        result = validate_dashboard(path)
        assert result.issues == [UncheckedItem(preview="four", line=4)]

    def test_no_checkboxes_passes(self, tmp_path):
        """A dashboard without checkboxes passes."""
        path = tmp_path / "00-START-HERE.md"
        path.write_text("# Start Here\n\nRead the planning docs.\n")
        assert validate_dashboard(path).passed

    def test_missing_dashboard(self, tmp_path):
        """A missing dashboard raises."""
        with pytest.raises(DocumentNotFoundError):
            validate_dashboard(tmp_path / "00-START-HERE.md")
