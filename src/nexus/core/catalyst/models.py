"""
Result types and errors for document generation.

Each generated document moves through a small lifecycle:

    PENDING -> GENERATING -> VALIDATING -> COMMITTED (passed)
                                       -> DRAFTED   (failed)

A COMMITTED document was written to its canonical filename. A DRAFTED one
failed validation and was written to ``<filename>.draft.md`` instead; it
never replaces the canonical file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from nexus.core.catalyst.documents import DocumentType
from nexus.core.gate.models import ValidationIssue


class CatalystError(Exception):
    """Base exception for document generation."""

    pass


class CatalystInputError(CatalystError):
    """Raised when generation inputs (vision or a predecessor) are missing or incomplete."""

    pass


class GenerationFailedError(CatalystError):
    """Raised when a generated document fails validation and is left as a draft."""

    def __init__(
        self,
        doc_type: DocumentType,
        issues: list[ValidationIssue],
        draft_path: Path | None = None,
    ) -> None:
        self.doc_type = doc_type
        self.issues = issues
        self.draft_path = draft_path
        message = (
            f"{doc_type.display_name} failed validation with {len(issues)} issue(s)"
        )
        if draft_path is not None:
            message += f"; draft saved to {draft_path}"
        super().__init__(message)


class DocumentState(str, Enum):
    """Lifecycle state of a document during one generation run."""

    PENDING = "pending"
    GENERATING = "generating"
    VALIDATING = "validating"
    COMMITTED = "committed"
    DRAFTED = "drafted"


class DocumentStatus(str, Enum):
    """On-disk status of a generated document, as reported by ``status``."""

    COMPLETE = "complete"
    NEEDS_REFINEMENT = "needs_refinement"
    DRAFT_ONLY = "draft_only"
    MISSING = "missing"

    @property
    def label(self) -> str:
        return {
            DocumentStatus.COMPLETE: "Complete",
            DocumentStatus.NEEDS_REFINEMENT: "Needs refinement",
            DocumentStatus.DRAFT_ONLY: "Draft only",
            DocumentStatus.MISSING: "Missing",
        }[self]


@dataclass
class GenerationOutcome:
    """Result of generating (or refining) one document."""

    doc_type: DocumentType
    state: DocumentState
    path: Path
    issues: list[ValidationIssue] = field(default_factory=list)
    reasoning: str | None = None

    @property
    def committed(self) -> bool:
        return self.state == DocumentState.COMMITTED


@dataclass
class GenerationFailure:
    """A document that did not make it to its canonical file."""

    doc_type: DocumentType
    message: str
    draft_path: Path | None = None
    issues: list[ValidationIssue] = field(default_factory=list)


@dataclass
class GenerationReport:
    """Summary of a ``generate_all`` run."""

    successes: list[DocumentType] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)
    skipped: list[DocumentType] = field(default_factory=list)

    def mark_success(self, doc_type: DocumentType) -> None:
        self.successes.append(doc_type)

    def mark_failure(
        self,
        doc_type: DocumentType,
        message: str,
        draft_path: Path | None = None,
        issues: list[ValidationIssue] | None = None,
    ) -> None:
        self.failures.append(
            GenerationFailure(
                doc_type=doc_type,
                message=message,
                draft_path=draft_path,
                issues=list(issues or []),
            )
        )

    def mark_skipped(self, doc_type: DocumentType) -> None:
        self.skipped.append(doc_type)

    @property
    def is_complete_success(self) -> bool:
        """True when no document failed."""
        return not self.failures

    @property
    def not_attempted(self) -> list[DocumentType]:
        """Documents never reached because an earlier one failed."""
        done = {*self.successes, *self.skipped, *(f.doc_type for f in self.failures)}
        return [d for d in DocumentType.ordered() if d not in done]


@dataclass
class GenerationStatus:
    """On-disk status of every generated document."""

    documents: dict[DocumentType, DocumentStatus] = field(default_factory=dict)

    def _with(self, status: DocumentStatus) -> list[DocumentType]:
        return [d for d in DocumentType.ordered() if self.documents.get(d) == status]

    @property
    def complete(self) -> list[DocumentType]:
        return self._with(DocumentStatus.COMPLETE)

    @property
    def drafts(self) -> list[DocumentType]:
        return self._with(DocumentStatus.DRAFT_ONLY)

    @property
    def missing(self) -> list[DocumentType]:
        return self._with(DocumentStatus.MISSING)

    @property
    def progress(self) -> tuple[int, int]:
        """Tuple of (complete, total)."""
        return len(self.complete), len(DocumentType.ordered())

    def next_step(self) -> str | None:
        """
        Suggest the next command to run, or None when everything is complete.

        Refinement of a broken document comes before generating anything
        after it, since later documents are generated from earlier ones.
        """
        for doc_type in DocumentType.ordered():
            status = self.documents.get(doc_type, DocumentStatus.MISSING)
            if status == DocumentStatus.COMPLETE:
                continue
            if status == DocumentStatus.NEEDS_REFINEMENT:
                return f'nexus catalyst refine {doc_type.value} "<feedback>"'
            if status == DocumentStatus.DRAFT_ONLY:
                return (
                    f"Review {doc_type.draft_filename}, fix it and rename it to "
                    f"{doc_type.filename}, or run: nexus catalyst generate {doc_type.value}"
                )
            return f"nexus catalyst generate {doc_type.value}"
        return None
