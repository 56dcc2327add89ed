"""
Registry of per-document behavior.

One static table, indexed by DocumentType, holds everything that varies by
document kind: how to parse it into structured data, how to build its
generation prompt, and which GenerationContext field it fills. Filename,
ordinal and required headers live on the DocumentType itself.

Example:
    >>> from nexus.core.catalyst.registry import get_entry
    >>> entry = get_entry(DocumentType.SCOPE)
    >>> entry.context_field
    'scope'
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from nexus.core.catalyst.documents import DocumentType
from nexus.core.catalyst.parsers import (
    SectionMap,
    parse_architecture,
    parse_mvp_breakdown,
    parse_scope,
    parse_tech_stack,
)
from nexus.core.catalyst.prompts import (
    PromptTemplate,
    build_architecture_prompt,
    build_mvp_breakdown_prompt,
    build_scope_prompt,
    build_tech_stack_prompt,
)
from nexus.core.markdown.sections import section_map

if TYPE_CHECKING:
    from nexus.core.catalyst.context import GenerationContext


@dataclass(frozen=True)
class RegistryEntry:
    """Behavior for one document kind."""

    doc_type: DocumentType
    parse: Callable[[SectionMap], Any]
    build_prompt: Callable[[GenerationContext], PromptTemplate]
    context_field: str | None

    def parse_content(self, content: str) -> Any:
        """Parse raw document text into this kind's structured data."""
        return self.parse(section_map(content))


_REGISTRY: dict[DocumentType, RegistryEntry] = {
    DocumentType.SCOPE: RegistryEntry(
        doc_type=DocumentType.SCOPE,
        parse=parse_scope,
        build_prompt=build_scope_prompt,
        context_field="scope",
    ),
    DocumentType.TECH_STACK: RegistryEntry(
        doc_type=DocumentType.TECH_STACK,
        parse=parse_tech_stack,
        build_prompt=build_tech_stack_prompt,
        context_field="tech_stack",
    ),
    DocumentType.ARCHITECTURE: RegistryEntry(
        doc_type=DocumentType.ARCHITECTURE,
        parse=parse_architecture,
        build_prompt=build_architecture_prompt,
        context_field="architecture",
    ),
    DocumentType.MVP_BREAKDOWN: RegistryEntry(
        doc_type=DocumentType.MVP_BREAKDOWN,
        parse=parse_mvp_breakdown,
        build_prompt=build_mvp_breakdown_prompt,
        # Last in the sequence: nothing is generated from it
        context_field=None,
    ),
}


def get_entry(doc_type: DocumentType) -> RegistryEntry:
    """Get the registry entry for a document kind."""
    return _REGISTRY[doc_type]
