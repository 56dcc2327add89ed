"""
Gate: heuristic validation of planning documents.

The validator here is shared by the manual ``nexus gate`` check and by
document generation, so a generated document passes exactly when a
hand-written one would.
"""

from nexus.core.gate.heuristics import (
    GateHeuristics,
    HeuristicsError,
    ManagementFiles,
    load_heuristics,
    load_heuristics_or_default,
)
from nexus.core.gate.models import (
    BelowWordCount,
    ForbiddenString,
    IoFailure,
    MissingHeader,
    UncheckedItem,
    ValidationIssue,
    ValidationResult,
)
from nexus.core.gate.validator import (
    DocumentEncodingError,
    DocumentNotFoundError,
    DocumentPermissionError,
    DocumentReadError,
    validate,
    validate_content,
    validate_dashboard,
)

__all__ = [
    "BelowWordCount",
    "DocumentEncodingError",
    "DocumentNotFoundError",
    "DocumentPermissionError",
    "DocumentReadError",
    "ForbiddenString",
    "GateHeuristics",
    "HeuristicsError",
    "IoFailure",
    "ManagementFiles",
    "MissingHeader",
    "UncheckedItem",
    "ValidationIssue",
    "ValidationResult",
    "load_heuristics",
    "load_heuristics_or_default",
    "validate",
    "validate_content",
    "validate_dashboard",
]
