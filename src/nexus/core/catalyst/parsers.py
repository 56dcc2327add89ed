"""
Parsers from planning documents into structured data.

Each parser maps a fixed set of headers onto the fields of a small struct.
Parsers are total: a missing header leaves its field empty and no parser
ever raises. Parsing only feeds context into later prompts; whether a
document is good enough is decided by the validator, not here.

Example:
    >>> from nexus.core.catalyst.parsers import parse_scope
    >>> from nexus.core.markdown.sections import section_map
    >>> doc = "## MVP (Minimum Viable Product):\\n\\n- Capture ideas\\n- Tag them\\n"
    >>> scope = parse_scope(section_map(doc))
    >>> scope.mvp_features
    ['Capture ideas', 'Tag them']
    >>> scope.constraints
    ''
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from nexus.core.catalyst.documents import (
    ANTI_VISION_HEADER,
    AUDIENCE_HEADER,
    CONSTRAINTS_HEADER,
    DATA_MODEL_HEADER,
    DECISIONS_HEADER,
    DEFINITION_OF_DONE_HEADER,
    DEPENDENCIES_HEADER,
    DEV_ENVIRONMENT_HEADER,
    FOLDER_STRUCTURE_HEADER,
    JUSTIFICATION_HEADER,
    MVP_HEADER,
    NEVER_HEADER,
    NOT_USING_HEADER,
    PROBLEM_HEADER,
    SOLUTION_HEADER,
    STACK_HEADER,
    SUCCESS_HEADER,
    USER_FLOW_HEADER,
    VERSION2_HEADER,
)
from nexus.core.markdown.sections import section_map

SectionMap = Mapping[str, str]

# "- item", "* item", "+ item", "1. item", "1) item"
_LIST_ITEM_RE = re.compile(r"^(\s*)(?:[-*+]|\d+[.)])\s+(.*\S)\s*$")
_SPRINT_HEADER_RE = re.compile(r"^Sprint\s+\d+\b")


@dataclass
class VisionData:
    """Structured data from 01-Problem-and-Vision.md."""

    problem: str = ""
    audience: str = ""
    solution: str = ""
    success_criteria: str = ""
    anti_vision: str = ""

    def is_complete(self) -> bool:
        """Whether the fields the generator depends on are all filled in."""
        return all([self.problem, self.solution, self.success_criteria, self.anti_vision])

    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("problem", "solution", "success_criteria", "anti_vision")
            if not getattr(self, name)
        ]


@dataclass
class ScopeData:
    """Structured data from 02-Scope-and-Boundaries.md."""

    mvp_features: list[str] = field(default_factory=list)
    version2_features: list[str] = field(default_factory=list)
    never_features: list[str] = field(default_factory=list)
    constraints: str = ""


@dataclass
class TechStackData:
    """Structured data from 03-Tech-Stack.md."""

    stack: str = ""
    justification: str = ""
    not_using: str = ""
    dependencies: str = ""
    dev_environment: str = ""


@dataclass
class ArchitectureData:
    """Structured data from 04-Architecture.md."""

    folder_structure: str = ""
    data_model: str = ""
    user_flow: str = ""
    decisions: str = ""


@dataclass
class MvpBreakdownData:
    """Structured data from 05-MVP-Breakdown.md."""

    sprints: dict[str, str] = field(default_factory=dict)
    definition_of_done: str = ""


def extract_list_items(text: str) -> list[str]:
    """
    Explode a list body into its items.

    Accepts ``-``, ``*``, ``+`` and numbered (``1.``/``1)``) markers
    uniformly. Lines without a marker are ignored; a checkbox prefix is kept
    as part of the item text. Indented items belong to the item above them
    and are folded into it as ``parent (sub; sub)``.

    Args:
        text: Section body text.

    Returns:
        Item texts in order, without markers.
    """
    items: list[tuple[str, list[str]]] = []
    for line in text.splitlines():
        match = _LIST_ITEM_RE.match(line)
        if not match:
            continue
        indent, item = match.groups()
        if indent and items:
            items[-1][1].append(item)
        else:
            items.append((item, []))
    return [f"{item} ({'; '.join(subs)})" if subs else item for item, subs in items]


def parse_vision(sections: SectionMap) -> VisionData:
    return VisionData(
        problem=sections.get(PROBLEM_HEADER, ""),
        audience=sections.get(AUDIENCE_HEADER, ""),
        solution=sections.get(SOLUTION_HEADER, ""),
        success_criteria=sections.get(SUCCESS_HEADER, ""),
        anti_vision=sections.get(ANTI_VISION_HEADER, ""),
    )


def parse_scope(sections: SectionMap) -> ScopeData:
    return ScopeData(
        mvp_features=extract_list_items(sections.get(MVP_HEADER, "")),
        version2_features=extract_list_items(sections.get(VERSION2_HEADER, "")),
        never_features=extract_list_items(sections.get(NEVER_HEADER, "")),
        constraints=sections.get(CONSTRAINTS_HEADER, ""),
    )


def parse_tech_stack(sections: SectionMap) -> TechStackData:
    return TechStackData(
        stack=sections.get(STACK_HEADER, ""),
        justification=sections.get(JUSTIFICATION_HEADER, ""),
        not_using=sections.get(NOT_USING_HEADER, ""),
        dependencies=sections.get(DEPENDENCIES_HEADER, ""),
        dev_environment=sections.get(DEV_ENVIRONMENT_HEADER, ""),
    )


def parse_architecture(sections: SectionMap) -> ArchitectureData:
    return ArchitectureData(
        folder_structure=sections.get(FOLDER_STRUCTURE_HEADER, ""),
        data_model=sections.get(DATA_MODEL_HEADER, ""),
        user_flow=sections.get(USER_FLOW_HEADER, ""),
        decisions=sections.get(DECISIONS_HEADER, ""),
    )


def parse_mvp_breakdown(sections: SectionMap) -> MvpBreakdownData:
    return MvpBreakdownData(
        sprints={
            header: body for header, body in sections.items() if _SPRINT_HEADER_RE.match(header)
        },
        definition_of_done=sections.get(DEFINITION_OF_DONE_HEADER, ""),
    )


def parse_vision_content(content: str) -> VisionData:
    """Parse raw vision document text."""
    return parse_vision(section_map(content))
