"""
Validation result models for the gate.

A ValidationResult holds every issue found in one document. Issues are
values, not exceptions: a document that fails validation is a normal
outcome the caller reports and the user fixes.

Issue variants:
- MissingHeader: a required header is absent
- BelowWordCount: the whole document is shorter than the minimum
- ForbiddenString: a placeholder token appears under a header
- UncheckedItem: a checklist item is not ticked
- IoFailure: the document could not be read (recorded by multi-file scans)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Union


@dataclass(frozen=True)
class MissingHeader:
    """A required header does not appear in the document."""

    kind: ClassVar[str] = "missing_header"

    name: str

    def describe(self) -> str:
        return f"Missing required header: '{self.name}'"


@dataclass(frozen=True)
class BelowWordCount:
    """The document has fewer words than required."""

    kind: ClassVar[str] = "below_word_count"

    actual: int
    required: int

    def describe(self) -> str:
        return f"Document too short: {self.actual} words (minimum {self.required})"


@dataclass(frozen=True)
class ForbiddenString:
    """A forbidden placeholder string was found under a header."""

    kind: ClassVar[str] = "forbidden_string"

    match: str
    header: str | None = None

    def describe(self) -> str:
        location = f"under '{self.header}'" if self.header else "before the first header"
        return f"Forbidden string '{self.match}' found {location}"


@dataclass(frozen=True)
class UncheckedItem:
    """A checklist item is not checked."""

    kind: ClassVar[str] = "unchecked_item"

    preview: str
    line: int | None = None

    def describe(self) -> str:
        if self.line is not None:
            return f"Unchecked item at line {self.line}: {self.preview}"
        return f"Unchecked item: {self.preview}"


@dataclass(frozen=True)
class IoFailure:
    """The document could not be read."""

    kind: ClassVar[str] = "io_failure"

    reason: str

    def describe(self) -> str:
        return f"Cannot read document: {self.reason}"


ValidationIssue = Union[MissingHeader, BelowWordCount, ForbiddenString, UncheckedItem, IoFailure]


@dataclass
class ValidationResult:
    """
    Outcome of validating one document.

    ``passed`` is derived from ``issues`` so the two can never disagree.

    Attributes:
        path: The validated file, if validation ran against a file.
        issues: All issues found, in rule order.
        word_count: Words counted across the whole document.
        headers: Headers found, in order of appearance.
        warnings: Non-fatal notes (e.g. very large file).
    """

    path: Path | None = None
    issues: list[ValidationIssue] = field(default_factory=list)
    word_count: int = 0
    headers: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """Whether the document passed every rule."""
        return not self.issues

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def issues_of(self, issue_type: type) -> list[ValidationIssue]:
        """Get all issues of one variant."""
        return [issue for issue in self.issues if isinstance(issue, issue_type)]

    def summary(self) -> str:
        """One line per issue, suitable for reports and error messages."""
        return "; ".join(issue.describe() for issue in self.issues)
