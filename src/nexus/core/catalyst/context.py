"""
Generation context: the structured data later documents are generated from.

A GenerationContext starts from the vision and grows as each document is
committed. It only ever gains fields; nothing is removed or overwritten
within a run.

ContextLoader rebuilds a context from the files already on disk, so a
single document can be (re)generated without running the whole sequence.
With a validator, a predecessor that does not pass validation is refused
rather than folded in.

Example:
    >>> loader = ContextLoader(Path("01-PLANNING"))
    >>> context = loader.build_for(DocumentType.ARCHITECTURE)
    >>> context.has(DocumentType.TECH_STACK)
    True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from nexus.core.catalyst.documents import VISION_SCHEMA, DocumentType
from nexus.core.catalyst.models import CatalystInputError
from nexus.core.catalyst.parsers import (
    ArchitectureData,
    ScopeData,
    TechStackData,
    VisionData,
    parse_vision_content,
)
from nexus.core.catalyst.registry import get_entry
from nexus.core.gate.models import ValidationResult
from nexus.core.gate.validator import read_document

logger = logging.getLogger(__name__)

DocumentValidator = Callable[[DocumentType, str], ValidationResult]


@dataclass
class GenerationContext:
    """Vision plus every document committed so far."""

    vision: VisionData
    scope: ScopeData | None = None
    tech_stack: TechStackData | None = None
    architecture: ArchitectureData | None = None

    def fold(self, doc_type: DocumentType, data: Any) -> None:
        """
        Add a committed document's parsed data.

        Documents that nothing is generated from (the MVP breakdown) are
        accepted and ignored.
        """
        field_name = get_entry(doc_type).context_field
        if field_name is not None:
            setattr(self, field_name, data)

    def has(self, doc_type: DocumentType) -> bool:
        field_name = get_entry(doc_type).context_field
        return field_name is not None and getattr(self, field_name) is not None


class ContextLoader:
    """Loads vision and predecessor documents from a planning directory."""

    def __init__(
        self,
        planning_dir: Path,
        validate: DocumentValidator | None = None,
    ) -> None:
        self.planning_dir = planning_dir
        self.validate = validate

    @property
    def vision_path(self) -> Path:
        return self.planning_dir / VISION_SCHEMA.filename

    def load_vision(self, require_complete: bool = True) -> VisionData:
        """
        Load and parse the vision document.

        Args:
            require_complete: Require problem, solution, success criteria and
                anti-vision to be filled in.

        Returns:
            Parsed VisionData.

        Raises:
            CatalystInputError: If the vision is missing or incomplete.
            DocumentReadError: If the file exists but cannot be read.
        """
        if not self.vision_path.exists():
            raise CatalystInputError(
                f"Vision document not found: {self.vision_path}. "
                f"Write {VISION_SCHEMA.filename} before generating documents."
            )
        content, _ = read_document(self.vision_path)
        vision = parse_vision_content(content)
        if require_complete and not vision.is_complete():
            missing = ", ".join(vision.missing_fields())
            raise CatalystInputError(
                f"Vision document is incomplete (missing: {missing}). "
                f"Fill in every section of {VISION_SCHEMA.filename} first."
            )
        return vision

    def load(self, doc_type: DocumentType) -> Any:
        """
        Load and parse a generated document from its canonical file.

        Raises:
            CatalystInputError: If the document has not been committed yet, or
                fails validation.
            DocumentReadError: If the file exists but cannot be read.
        """
        path = self.planning_dir / doc_type.filename
        if not path.exists():
            raise CatalystInputError(
                f"{doc_type.display_name} document not found: {path}. "
                f"Generate it first with 'nexus catalyst generate {doc_type.value}'."
            )
        content, _ = read_document(path)
        if self.validate is not None:
            result = self.validate(doc_type, content)
            if not result.passed:
                raise CatalystInputError(
                    f"{doc_type.display_name} ({path.name}) does not pass validation: "
                    f"{result.summary()}. Fix it or run "
                    f"'nexus catalyst refine {doc_type.value} \"<feedback>\"'."
                )
        logger.debug("Loaded %s from %s", doc_type.value, path)
        return get_entry(doc_type).parse_content(content)

    def build_for(self, doc_type: DocumentType) -> GenerationContext:
        """
        Build the context needed to generate a document.

        Loads the vision and every predecessor of ``doc_type`` in order.

        Raises:
            CatalystInputError: If the vision or any predecessor is missing, or
                a predecessor fails validation.
        """
        context = GenerationContext(vision=self.load_vision())
        for predecessor in doc_type.predecessors:
            context.fold(predecessor, self.load(predecessor))
        return context
