"""
Tests for prompt construction.
"""

import pytest

from nexus.core.catalyst.context import GenerationContext
from nexus.core.catalyst.documents import DocumentType
from nexus.core.catalyst.parsers import (
    parse_architecture,
    parse_scope,
    parse_tech_stack,
    parse_vision_content,
)
from nexus.core.catalyst.prompts import PromptTemplate, build_refinement_prompt
from nexus.core.catalyst.registry import get_entry
from nexus.core.markdown.sections import section_map


@pytest.fixture
def full_context(documents):
    """Context with the vision and every generated predecessor."""
    return GenerationContext(
        vision=parse_vision_content(documents["vision"]),
        scope=parse_scope(section_map(documents["scope"])),
        tech_stack=parse_tech_stack(section_map(documents["tech_stack"])),
        architecture=parse_architecture(section_map(documents["architecture"])),
    )


class TestDocumentPrompts:
    """Test the per-document prompt builders."""

    @pytest.mark.parametrize("doc_type", DocumentType.ordered())
    def test_system_prompt_lists_required_headers(self, doc_type, full_context):
        """Every required header appears as a ## line in the system prompt."""
        prompt = get_entry(doc_type).build_prompt(full_context)
        for header in doc_type.required_headers:
            assert f"## {header}" in prompt.system_prompt
        assert "<think>" in prompt.system_prompt

    def test_scope_prompt_uses_vision(self, full_context):
        """The scope prompt carries the vision fields."""
        prompt = get_entry(DocumentType.SCOPE).build_prompt(full_context)
        assert full_context.vision.problem in prompt.user_prompt
        assert full_context.vision.anti_vision in prompt.user_prompt

    def test_tech_stack_prompt_uses_scope(self, full_context):
        """The tech stack prompt lists the MVP and deferred features."""
        prompt = get_entry(DocumentType.TECH_STACK).build_prompt(full_context)
        assert "- Show the next open step" in prompt.user_prompt
        assert "- Weekly summary email" in prompt.user_prompt
        assert "- A web dashboard" in prompt.user_prompt

    def test_architecture_prompt_uses_tech_stack(self, full_context):
        prompt = get_entry(DocumentType.ARCHITECTURE).build_prompt(full_context)
        assert full_context.tech_stack.stack in prompt.user_prompt
        assert "Weekly summary email" not in prompt.user_prompt

    def test_mvp_prompt_uses_architecture(self, full_context):
        prompt = get_entry(DocumentType.MVP_BREAKDOWN).build_prompt(full_context)
        assert full_context.architecture.data_model in prompt.user_prompt
        assert "Definition of Done" in prompt.system_prompt

    def test_empty_feature_list(self, full_context):
        """An empty list is rendered explicitly."""
        full_context.scope.version2_features = []
        prompt = get_entry(DocumentType.TECH_STACK).build_prompt(full_context)
        assert "- (none listed)" in prompt.user_prompt


class TestRefinementPrompt:
    """Test build_refinement_prompt."""

    def test_wraps_base_prompt(self):
        """The refinement keeps the system prompt and extends the user prompt."""
        base = PromptTemplate(system_prompt="system", user_prompt="generate it")
        prompt = build_refinement_prompt(base, "## Old\n\ncontent\n", "  add mobile  ")
        assert prompt.system_prompt == "system"
        assert prompt.user_prompt.startswith("generate it")
        assert "REFINEMENT CONTEXT:" in prompt.user_prompt
        assert "## Old\n\ncontent" in prompt.user_prompt
        assert "USER FEEDBACK:\nadd mobile" in prompt.user_prompt
