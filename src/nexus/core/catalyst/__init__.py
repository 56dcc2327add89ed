"""
Catalyst: AI-assisted generation of planning documents.

Generates Scope, Tech Stack, Architecture and MVP Breakdown in order from
the hand-written vision, validating each output with the gate's rule
engine before it is committed.
"""

from nexus.core.catalyst.context import ContextLoader, GenerationContext
from nexus.core.catalyst.documents import VISION_SCHEMA, DocumentSchema, DocumentType
from nexus.core.catalyst.engine import CatalystEngine, ProgressCallback
from nexus.core.catalyst.models import (
    CatalystError,
    CatalystInputError,
    DocumentState,
    DocumentStatus,
    GenerationFailedError,
    GenerationOutcome,
    GenerationReport,
    GenerationStatus,
)

__all__ = [
    "VISION_SCHEMA",
    "CatalystEngine",
    "CatalystError",
    "CatalystInputError",
    "ContextLoader",
    "DocumentSchema",
    "DocumentState",
    "DocumentStatus",
    "DocumentType",
    "GenerationContext",
    "GenerationFailedError",
    "GenerationOutcome",
    "GenerationReport",
    "GenerationStatus",
    "ProgressCallback",
]
