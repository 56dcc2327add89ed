"""
Prompt templates for planning document generation.

Each document kind has a system prompt (role, required headers, output
rules) and a user prompt built from the accumulated GenerationContext. The
system prompt tells reasoning models they may think inside ``<think>`` tags
before the document; the engine strips that block before validation.

The required headers are rendered from the document schema, so the prompt
and the validator can never disagree about what a document must contain.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from nexus.core.catalyst.documents import DocumentType

if TYPE_CHECKING:
    from nexus.core.catalyst.context import GenerationContext


@dataclass(frozen=True)
class PromptTemplate:
    """A system/user prompt pair for one completion call."""

    system_prompt: str
    user_prompt: str


_OUTPUT_RULES = """REASONING:
If you are a reasoning model, think step by step first. Put that reasoning
inside <think></think> tags at the very start of your reply; it will be
removed. Everything after </think> is treated as the document.

OUTPUT RULES:
1. Output ONLY the markdown document. No preamble, no commentary, no code fences around it.
2. Use EXACTLY these section headers, each on its own line with a ## prefix:
{headers}
3. Every section must have substantial, specific content.
4. No placeholders of any kind: no TODO, TBD, [fill], [describe], [your ...], [add ...]."""


def _system_prompt(role: str, doc_type: DocumentType, guidance: str) -> str:
    headers = "\n".join(f"   ## {header}" for header in doc_type.required_headers)
    return (
        f"{role}\n\n"
        f'Your task is to write the "{doc_type.display_name}" planning document.\n\n'
        f"{_OUTPUT_RULES.format(headers=headers)}\n\n"
        f"THINK ABOUT:\n{guidance}"
    )


def _bullets(items: list[str]) -> str:
    if not items:
        return "- (none listed)"
    return "\n".join(f"- {item}" for item in items)


def _vision_block(context: GenerationContext, *, full: bool = True) -> str:
    vision = context.vision
    lines = [
        "# Vision",
        "",
        f"**Problem**: {vision.problem}",
        "",
        f"**Solution**: {vision.solution}",
        "",
        f"**Success Criteria (3 months)**: {vision.success_criteria}",
    ]
    if full:
        lines += ["", f"**Anti-Vision (what this is NOT)**: {vision.anti_vision}"]
        if vision.audience:
            lines += ["", f"**Who else has this problem**: {vision.audience}"]
    return "\n".join(lines)


def _scope_block(context: GenerationContext, *, include_deferred: bool = True) -> str:
    scope = context.scope
    if scope is None:
        return ""
    lines = ["# Scope", "", "**MVP Features**:", _bullets(scope.mvp_features)]
    if include_deferred:
        lines += [
            "",
            "**Version 2 Features**:",
            _bullets(scope.version2_features),
            "",
            "**Never Features**:",
            _bullets(scope.never_features),
        ]
    lines += ["", f"**Constraints**: {scope.constraints}"]
    return "\n".join(lines)


def _tech_stack_block(context: GenerationContext, *, full: bool = True) -> str:
    tech = context.tech_stack
    if tech is None:
        return ""
    lines = [
        "# Tech Stack",
        "",
        f"**Stack Choices**: {tech.stack}",
        f"**Justification**: {tech.justification}",
    ]
    if full:
        lines += [
            f"**Not Using**: {tech.not_using}",
            f"**Dependencies**: {tech.dependencies}",
            f"**Dev Environment**: {tech.dev_environment}",
        ]
    return "\n".join(lines)


def _architecture_block(context: GenerationContext) -> str:
    arch = context.architecture
    if arch is None:
        return ""
    return "\n".join(
        [
            "# Architecture",
            "",
            "**Folder Structure**:",
            arch.folder_structure,
            "",
            "**Data Model**:",
            arch.data_model,
            "",
            "**User Flow**:",
            arch.user_flow,
        ]
    )


def _user_prompt(intro: str, blocks: list[str], reminders: list[str]) -> str:
    body = "\n\n".join(block for block in blocks if block)
    checklist = "\n".join(f"- {reminder}" for reminder in reminders)
    return f"{intro}\n\n{body}\n\n---\n\nWrite the document now. Remember:\n{checklist}"


def build_scope_prompt(context: GenerationContext) -> PromptTemplate:
    doc_type = DocumentType.SCOPE
    system = _system_prompt(
        "You are an expert product strategist helping to define project scope and boundaries.",
        doc_type,
        "- What is the absolute minimum that validates the core value proposition?\n"
        "- What is nice to have but not essential for the first version?\n"
        "- What looks related but would dilute focus? Be ruthless in 'Never'.\n"
        "- What constraints exist (time, budget, skills, platform)?",
    )
    user = _user_prompt(
        "Based on this vision, write the Scope and Boundaries document:",
        [_vision_block(context)],
        [
            "Use the exact section headers specified",
            "List MVP, Version 2 and Never features as bullet lists",
            "Keep the MVP to 3-5 features",
            "No placeholders",
        ],
    )
    return PromptTemplate(system_prompt=system, user_prompt=user)


def build_tech_stack_prompt(context: GenerationContext) -> PromptTemplate:
    doc_type = DocumentType.TECH_STACK
    system = _system_prompt(
        "You are an expert software architect helping to choose a tech stack.",
        doc_type,
        "- Which frontend, backend, database and hosting fit the MVP and its constraints?\n"
        "- Why is each choice right for this MVP (two sentences each)?\n"
        "- Which technologies should be explicitly avoided?\n"
        "- Which dependencies matter most (ten at most)?\n"
        "- Which IDE, OS and devices will be used for development?",
    )
    user = _user_prompt(
        "Based on this vision and scope, write the Tech Stack document:",
        [_vision_block(context, full=False), _scope_block(context)],
        [
            "Use the exact section headers specified",
            "Name specific technologies, not categories",
            "Justify every choice against the MVP and constraints",
            "No placeholders",
        ],
    )
    return PromptTemplate(system_prompt=system, user_prompt=user)


def build_architecture_prompt(context: GenerationContext) -> PromptTemplate:
    doc_type = DocumentType.ARCHITECTURE
    system = _system_prompt(
        "You are an expert software architect helping to design system architecture.",
        doc_type,
        "- Which folder structure fits the chosen stack? Show it in a code block.\n"
        "- Which core entities does the MVP need, and with which fields?\n"
        "- What is the primary user journey, step by step?\n"
        "- Which decisions (state, navigation, persistence) must be made up front?",
    )
    user = _user_prompt(
        "Based on this vision, scope and tech stack, write the Architecture document:",
        [
            _vision_block(context, full=False),
            _scope_block(context, include_deferred=False),
            _tech_stack_block(context),
        ],
        [
            "Use the exact section headers specified",
            "Put the folder structure in a code block",
            "List actual entities with their fields",
            "Describe the user flow step by step",
        ],
    )
    return PromptTemplate(system_prompt=system, user_prompt=user)


def build_mvp_breakdown_prompt(context: GenerationContext) -> PromptTemplate:
    doc_type = DocumentType.MVP_BREAKDOWN
    system = _system_prompt(
        "You are an expert project manager helping to break an MVP into sprints.",
        doc_type,
        "- Plan 3-5 sprints. Use the headers '## Sprint 1:', '## Sprint 2:' and so on, "
        "with the sprint name as the first line of the section.\n"
        "- Each sprint has 3-7 concrete tasks as checkboxes (- [ ] Task) and a line "
        "'**Exit criteria:**' with a measurable goal.\n"
        "- Order sprints from foundation to features to polish.\n"
        "- End with '## Definition of Done (each sprint):' listing: builds without errors, "
        "tested on device or browser, committed to git, session log updated.",
    )
    user = _user_prompt(
        "Based on this vision, scope, tech stack and architecture, write the MVP Breakdown:",
        [
            _vision_block(context, full=False),
            _scope_block(context, include_deferred=False),
            _tech_stack_block(context, full=False),
            _architecture_block(context),
        ],
        [
            "3-5 sprints in total",
            "Each sprint has concrete tasks and measurable exit criteria",
            "Use the exact section headers specified",
            "No placeholders",
        ],
    )
    return PromptTemplate(system_prompt=system, user_prompt=user)


def build_refinement_prompt(
    base: PromptTemplate,
    existing_content: str,
    feedback: str,
) -> PromptTemplate:
    """
    Wrap a document's generation prompt with its current content and user feedback.

    Args:
        base: The prompt that would generate the document from scratch.
        existing_content: The document as it is on disk now.
        feedback: Free-text description of the changes the user wants.

    Returns:
        PromptTemplate with the same system prompt and an extended user prompt.
    """
    user = (
        f"{base.user_prompt}\n\n"
        "REFINEMENT CONTEXT:\n"
        "You previously generated this document:\n\n"
        f"---\n{existing_content.strip()}\n---\n\n"
        f"USER FEEDBACK:\n{feedback.strip()}\n\n"
        "Regenerate the complete document, applying the feedback while keeping the "
        "required structure and section headers."
    )
    return PromptTemplate(system_prompt=base.system_prompt, user_prompt=user)
