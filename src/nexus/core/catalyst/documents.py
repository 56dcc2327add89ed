"""
Planning document kinds and their schemas.

The planning workflow has five documents in ``01-PLANNING``. The vision
(stage 0) is always written by hand; the four that follow can be generated:

    01-Problem-and-Vision.md   (manual, read-only to the generator)
    02-Scope-and-Boundaries.md DocumentType.SCOPE          ordinal 1
    03-Tech-Stack.md           DocumentType.TECH_STACK     ordinal 2
    04-Architecture.md         DocumentType.ARCHITECTURE   ordinal 3
    05-MVP-Breakdown.md        DocumentType.MVP_BREAKDOWN  ordinal 4

Each schema lists the exact headers a document must contain to pass the
gate. Header text includes trailing punctuation exactly as the templates
write it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DRAFT_SUFFIX = ".draft.md"


@dataclass(frozen=True)
class DocumentSchema:
    """Static description of one planning document."""

    filename: str
    display_name: str
    required_headers: tuple[str, ...]
    guidance: str

    @property
    def draft_filename(self) -> str:
        """Filename used for a generated attempt that failed validation."""
        return f"{self.filename}{DRAFT_SUFFIX}"


# Vision headers
PROBLEM_HEADER = "My problem (personal):"
AUDIENCE_HEADER = "Who else has this problem?"
SOLUTION_HEADER = "Solution in ONE SENTENCE:"
SUCCESS_HEADER = "Success criteria (3 months):"
ANTI_VISION_HEADER = "Anti-vision (what this project is NOT):"

# Scope headers
MVP_HEADER = "MVP (Minimum Viable Product):"
VERSION2_HEADER = "Version 2 (NOT NOW - just document):"
NEVER_HEADER = "Never (things I will NOT build):"
CONSTRAINTS_HEADER = "Tech constraints:"

# Tech stack headers
STACK_HEADER = "Stack (force yourself to choose NOW):"
JUSTIFICATION_HEADER = "Why these choices?"
NOT_USING_HEADER = "What I will NOT use:"
DEPENDENCIES_HEADER = "Dependencies (important ones):"
DEV_ENVIRONMENT_HEADER = "Development environment:"

# Architecture headers
FOLDER_STRUCTURE_HEADER = "Folder structure:"
DATA_MODEL_HEADER = "Data model (main entities):"
USER_FLOW_HEADER = "Flow (user journey):"
DECISIONS_HEADER = "Critical technical decisions:"

# MVP breakdown headers
SPRINT_1_HEADER = "Sprint 1:"
SPRINT_2_HEADER = "Sprint 2:"
DEFINITION_OF_DONE_HEADER = "Definition of Done (each sprint):"


VISION_SCHEMA = DocumentSchema(
    filename="01-Problem-and-Vision.md",
    display_name="Problem and Vision",
    required_headers=(
        PROBLEM_HEADER,
        AUDIENCE_HEADER,
        SOLUTION_HEADER,
        SUCCESS_HEADER,
        ANTI_VISION_HEADER,
    ),
    guidance=(
        "Define the personal problem, identify who shares it, provide a one-sentence "
        "solution, set 3-month success criteria, and clarify what this project is NOT"
    ),
)


class DocumentType(str, Enum):
    """Generated planning documents, in generation order.

    Stages must be generated in order: scope -> tech_stack -> architecture
    -> mvp_breakdown. Each one is generated from the vision plus every
    document before it.
    """

    SCOPE = "scope"
    TECH_STACK = "tech_stack"
    ARCHITECTURE = "architecture"
    MVP_BREAKDOWN = "mvp_breakdown"

    @classmethod
    def ordered(cls) -> list[DocumentType]:
        """All document types in generation order."""
        return sorted(cls, key=lambda doc_type: doc_type.ordinal)

    @classmethod
    def from_alias(cls, alias: str) -> DocumentType:
        """
        Resolve a user-supplied name (``scope``, ``stack``, ``arch``, ``mvp``...).

        Raises:
            ValueError: If the alias names no document.
        """
        key = alias.strip().lower().replace("-", "_")
        if key in _ALIASES:
            return _ALIASES[key]
        for doc_type in cls:
            if key == doc_type.value or alias.strip() == doc_type.filename:
                return doc_type
        valid = ", ".join(sorted({*_ALIASES, *(d.value for d in cls)}))
        raise ValueError(f"Unknown document '{alias}'. Valid names: {valid}")

    @property
    def schema(self) -> DocumentSchema:
        return _SCHEMAS[self]

    @property
    def ordinal(self) -> int:
        """Position in the generation sequence (scope=1 ... mvp_breakdown=4)."""
        return _ORDINALS[self]

    @property
    def filename(self) -> str:
        return self.schema.filename

    @property
    def draft_filename(self) -> str:
        return self.schema.draft_filename

    @property
    def display_name(self) -> str:
        return self.schema.display_name

    @property
    def required_headers(self) -> tuple[str, ...]:
        return self.schema.required_headers

    @property
    def predecessors(self) -> list[DocumentType]:
        """Documents strictly earlier in the sequence."""
        return [d for d in DocumentType.ordered() if d.ordinal < self.ordinal]


_ORDINALS: dict[DocumentType, int] = {
    DocumentType.SCOPE: 1,
    DocumentType.TECH_STACK: 2,
    DocumentType.ARCHITECTURE: 3,
    DocumentType.MVP_BREAKDOWN: 4,
}

_SCHEMAS: dict[DocumentType, DocumentSchema] = {
    DocumentType.SCOPE: DocumentSchema(
        filename="02-Scope-and-Boundaries.md",
        display_name="Scope and Boundaries",
        required_headers=(MVP_HEADER, VERSION2_HEADER, NEVER_HEADER, CONSTRAINTS_HEADER),
        guidance=(
            "Define MVP features (3-5 max), document future Version 2 features, list what "
            "will NEVER be built to prevent scope creep, and specify technical constraints"
        ),
    ),
    DocumentType.TECH_STACK: DocumentSchema(
        filename="03-Tech-Stack.md",
        display_name="Tech Stack",
        required_headers=(
            STACK_HEADER,
            JUSTIFICATION_HEADER,
            NOT_USING_HEADER,
            DEPENDENCIES_HEADER,
            DEV_ENVIRONMENT_HEADER,
        ),
        guidance=(
            "Choose specific technologies now, justify each choice, list technologies to "
            "avoid, specify key dependencies, and document the development environment"
        ),
    ),
    DocumentType.ARCHITECTURE: DocumentSchema(
        filename="04-Architecture.md",
        display_name="Architecture",
        required_headers=(
            FOLDER_STRUCTURE_HEADER,
            DATA_MODEL_HEADER,
            USER_FLOW_HEADER,
            DECISIONS_HEADER,
        ),
        guidance=(
            "Define the folder structure, describe data entities with their fields, map "
            "the user journey step by step, and record critical technical decisions"
        ),
    ),
    DocumentType.MVP_BREAKDOWN: DocumentSchema(
        filename="05-MVP-Breakdown.md",
        display_name="MVP Breakdown",
        required_headers=(SPRINT_1_HEADER, SPRINT_2_HEADER, DEFINITION_OF_DONE_HEADER),
        guidance=(
            "Break the MVP into 3-5 sprints with concrete tasks and exit criteria, plus a "
            "universal Definition of Done checklist"
        ),
    ),
}

_ALIASES: dict[str, DocumentType] = {
    "scope": DocumentType.SCOPE,
    "boundaries": DocumentType.SCOPE,
    "stack": DocumentType.TECH_STACK,
    "tech": DocumentType.TECH_STACK,
    "arch": DocumentType.ARCHITECTURE,
    "mvp": DocumentType.MVP_BREAKDOWN,
    "breakdown": DocumentType.MVP_BREAKDOWN,
}

# Documents checked by the manual gate before sprints unlock
GATED_SCHEMAS: tuple[DocumentSchema, ...] = (
    VISION_SCHEMA,
    _SCHEMAS[DocumentType.SCOPE],
    _SCHEMAS[DocumentType.TECH_STACK],
    _SCHEMAS[DocumentType.ARCHITECTURE],
)
