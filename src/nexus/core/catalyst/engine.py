"""
Catalyst engine: sequential generation of planning documents.

Runs the generation state machine for each document:

    Pending -> Generating -> Validating -> Committed | Drafted

1. Rebuild context from the vision and every predecessor on disk, each of
   which must pass validation
2. Build the prompt from the registry and call the completion capability once
3. Strip the reasoning block and any wrapping code fence
4. Validate with the same rule engine the manual gate uses
5. Commit to the canonical file on pass, or write ``<filename>.draft.md`` on fail

A draft never replaces a canonical file. ``generate_all`` stops at the first
document that does not commit, so no document is ever generated from an
unvalidated predecessor.

Example:
    >>> from nexus.core.catalyst.engine import CatalystEngine
    >>> from nexus.core.config import load_config
    >>> from nexus.core.llm import ChatCompletionClient
    >>>
    >>> config = load_config()
    >>> engine = CatalystEngine(
    ...     Path("01-PLANNING"),
    ...     ChatCompletionClient.from_config(config.llm),
    ...     config.catalyst,
    ... )
    >>> report = engine.generate_all()
    >>> report.is_complete_success
    True
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from nexus.core.catalyst.context import ContextLoader, GenerationContext
from nexus.core.catalyst.documents import DocumentType
from nexus.core.catalyst.models import (
    CatalystInputError,
    DocumentState,
    DocumentStatus,
    GenerationFailedError,
    GenerationOutcome,
    GenerationReport,
    GenerationStatus,
)
from nexus.core.catalyst.prompts import PromptTemplate, build_refinement_prompt
from nexus.core.catalyst.registry import get_entry
from nexus.core.catalyst.response import clean_llm_response, extract_reasoning_and_answer
from nexus.core.config.models import CatalystConfig
from nexus.core.gate.models import ValidationResult
from nexus.core.gate.validator import DocumentReadError, read_document, validate_content
from nexus.core.llm.client import CompletionClient, CompletionError
from nexus.utils.files import atomic_write_text

logger = logging.getLogger(__name__)


class ProgressCallback(Protocol):
    """Protocol for generation progress callbacks."""

    def __call__(
        self,
        doc_type: DocumentType,
        status: str,
        message: str,
    ) -> None:
        """
        Called at each step of generating a document.

        Args:
            doc_type: The document being worked on.
            status: One of 'generating', 'validating', 'committed', 'drafted',
                'skipped', 'reasoning' or 'error'.
            message: Human-readable detail (the reasoning text for 'reasoning').
        """
        ...


def _default_progress_callback(
    doc_type: DocumentType,
    status: str,
    message: str,
) -> None:
    """Default no-op progress callback."""
    pass


class CatalystEngine:
    """Generates, refines and reports on planning documents in one directory."""

    def __init__(
        self,
        planning_dir: Path,
        client: CompletionClient,
        settings: CatalystConfig | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.planning_dir = planning_dir
        self.client = client
        self.settings = settings or CatalystConfig()
        self.progress = progress or _default_progress_callback
        self.loader = ContextLoader(planning_dir, validate=self.validate_text)

    def canonical_path(self, doc_type: DocumentType) -> Path:
        return self.planning_dir / doc_type.filename

    def draft_path(self, doc_type: DocumentType) -> Path:
        return self.planning_dir / doc_type.draft_filename

    def validate_text(self, doc_type: DocumentType, content: str) -> ValidationResult:
        """Validate document text with the generation thresholds."""
        return validate_content(
            content,
            doc_type.required_headers,
            self.settings.min_word_count,
            self.settings.illegal_strings,
            exempt_code_blocks=self.settings.exempt_code_blocks,
            path=self.canonical_path(doc_type),
        )

    # ------------------------------------------------------------------
    # Generation

    def generate_document(self, doc_type: DocumentType) -> GenerationOutcome:
        """
        Generate one document from the vision and its committed predecessors.

        Context is always reloaded from disk, so this is correct after an
        interrupted or partial run.

        Returns:
            Outcome with state COMMITTED.

        Raises:
            CatalystInputError: If the vision or a predecessor is missing or incomplete.
            CompletionError: If the completion capability fails.
            GenerationFailedError: If the output fails validation (a draft is written).
        """
        context = self.loader.build_for(doc_type)
        outcome = self._run(doc_type, get_entry(doc_type).build_prompt(context))
        if not outcome.committed:
            raise GenerationFailedError(doc_type, outcome.issues, outcome.path)
        return outcome

    def generate_all(self, force: bool = False) -> GenerationReport:
        """
        Generate every document in order, stopping at the first failure.

        Documents already on disk that pass validation are folded into the
        context and skipped, so re-running after an interruption resumes
        where it stopped. One on disk that fails validation stops the run,
        since nothing may be generated from it. With ``force`` every document
        is regenerated.

        A completion failure is recorded like a validation failure (without
        a draft, since there is no output) and also stops the run.

        Raises:
            CatalystInputError: If the vision is missing or incomplete.
        """
        report = GenerationReport()
        context = GenerationContext(vision=self.loader.load_vision())

        for doc_type in DocumentType.ordered():
            entry = get_entry(doc_type)
            canonical = self.canonical_path(doc_type)

            if not force and canonical.exists():
                try:
                    content, _ = read_document(canonical)
                except DocumentReadError as e:
                    report.mark_failure(doc_type, str(e))
                    self.progress(doc_type, "error", str(e))
                    break
                result = self.validate_text(doc_type, content)
                if not result.passed:
                    message = f"{doc_type.filename} needs refinement: {result.summary()}"
                    report.mark_failure(doc_type, message, issues=result.issues)
                    self.progress(doc_type, "error", message)
                    break
                context.fold(doc_type, entry.parse_content(content))
                report.mark_skipped(doc_type)
                self.progress(doc_type, "skipped", f"{doc_type.filename} already exists")
                continue

            try:
                outcome = self._run(doc_type, entry.build_prompt(context))
            except CompletionError as e:
                logger.warning("Completion failed for %s: %s", doc_type.value, e)
                report.mark_failure(doc_type, f"Completion failed: {e}")
                self.progress(doc_type, "error", str(e))
                break

            if not outcome.committed:
                report.mark_failure(
                    doc_type,
                    f"Failed validation with {len(outcome.issues)} issue(s)",
                    draft_path=outcome.path,
                    issues=outcome.issues,
                )
                break

            context.fold(doc_type, entry.parse_content(self._read_committed(outcome.path)))
            report.mark_success(doc_type)

        return report

    def refine_document(self, doc_type: DocumentType, feedback: str) -> GenerationOutcome:
        """
        Regenerate a committed document with user feedback.

        The canonical file is only replaced when the new content passes
        validation. On failure the attempt goes to the draft path and the
        canonical file is left byte-for-byte unchanged.

        Raises:
            CatalystInputError: If the document has not been committed, or its
                inputs are missing.
            CompletionError: If the completion capability fails.
            GenerationFailedError: If the refined output fails validation.
        """
        canonical = self.canonical_path(doc_type)
        if not canonical.exists():
            raise CatalystInputError(
                f"Cannot refine {doc_type.display_name}: {canonical} does not exist. "
                f"Generate it first with 'nexus catalyst generate {doc_type.value}'."
            )
        existing, _ = read_document(canonical)

        context = self.loader.build_for(doc_type)
        base = get_entry(doc_type).build_prompt(context)
        outcome = self._run(doc_type, build_refinement_prompt(base, existing, feedback))
        if not outcome.committed:
            raise GenerationFailedError(doc_type, outcome.issues, outcome.path)
        return outcome

    def _run(self, doc_type: DocumentType, prompt: PromptTemplate) -> GenerationOutcome:
        """Generate, validate and persist one document. The single-step primitive."""
        self.progress(
            doc_type, DocumentState.GENERATING.value, f"Generating {doc_type.display_name}"
        )
        logger.debug("Generating %s", doc_type.value)
        response = self.client.complete(prompt.system_prompt, prompt.user_prompt)

        reasoning, answer = extract_reasoning_and_answer(response)
        if reasoning and self.settings.show_reasoning:
            self.progress(doc_type, "reasoning", reasoning)
        content = clean_llm_response(answer)

        self.progress(doc_type, DocumentState.VALIDATING.value, "Validating output")
        result = self.validate_text(doc_type, content)

        if result.passed:
            path = self.canonical_path(doc_type)
            atomic_write_text(path, content)
            logger.debug("Committed %s to %s", doc_type.value, path)
            self.progress(doc_type, DocumentState.COMMITTED.value, f"Saved {path.name}")
            return GenerationOutcome(
                doc_type=doc_type,
                state=DocumentState.COMMITTED,
                path=path,
                reasoning=reasoning,
            )

        path = self.draft_path(doc_type)
        atomic_write_text(path, content)
        logger.warning(
            "%s failed validation (%d issue(s)); draft written to %s",
            doc_type.value,
            len(result.issues),
            path,
        )
        self.progress(
            doc_type,
            DocumentState.DRAFTED.value,
            f"{result.summary()}; draft saved to {path.name}",
        )
        return GenerationOutcome(
            doc_type=doc_type,
            state=DocumentState.DRAFTED,
            path=path,
            issues=list(result.issues),
            reasoning=reasoning,
        )

    def _read_committed(self, path: Path) -> str:
        content, _ = read_document(path)
        return content

    # ------------------------------------------------------------------
    # Status

    def document_status(self, doc_type: DocumentType) -> DocumentStatus:
        """On-disk status of one document. Never writes anything."""
        canonical = self.canonical_path(doc_type)
        if canonical.exists():
            try:
                content, _ = read_document(canonical)
            except DocumentReadError as e:
                logger.warning("Cannot read %s: %s", canonical, e.reason)
                return DocumentStatus.NEEDS_REFINEMENT
            if self.validate_text(doc_type, content).passed:
                return DocumentStatus.COMPLETE
            return DocumentStatus.NEEDS_REFINEMENT
        if self.draft_path(doc_type).exists():
            return DocumentStatus.DRAFT_ONLY
        return DocumentStatus.MISSING

    def status(self) -> GenerationStatus:
        """On-disk status of every generated document."""
        return GenerationStatus(
            documents={
                doc_type: self.document_status(doc_type) for doc_type in DocumentType.ordered()
            }
        )
