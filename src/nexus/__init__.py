"""
Nexus - Staged planning workflow for software projects.

Validates markdown planning documents against completeness heuristics and
generates later-stage documents from earlier ones with an LLM.
"""

__version__ = "0.4.0"

from nexus.core.catalyst.documents import DocumentType
from nexus.core.gate.models import ValidationResult

__all__ = ["DocumentType", "ValidationResult", "__version__"]
