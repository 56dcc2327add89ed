"""
Manual gate check over a project.

The gate decides whether planning is finished:

1. The management dashboard has every checkbox checked (when the
   heuristics require it).
2. Each gated planning document (vision, scope, tech stack, architecture)
   has its required headers, enough words and no placeholder strings.

If none of the numbered planning documents exist, the gate falls back to
validating every ``*.md`` in the planning directory against the
heuristics' generic header list.

A file that cannot be read fails the gate with an IoFailure issue for that
file; the remaining files are still checked so the user sees everything at
once.

Example:
    >>> from nexus.core.gate.service import run_gate
    >>> report = run_gate(Path("."), StructureConfig(), GateHeuristics())
    >>> report.passed
    False
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from nexus.core.catalyst.documents import DRAFT_SUFFIX, GATED_SCHEMAS
from nexus.core.config.models import StructureConfig
from nexus.core.gate.heuristics import GateHeuristics
from nexus.core.gate.models import IoFailure, ValidationResult
from nexus.core.gate.validator import DocumentReadError, validate, validate_dashboard

logger = logging.getLogger(__name__)


@dataclass
class FileCheck:
    """Outcome of checking one file."""

    name: str
    path: Path
    result: ValidationResult

    @property
    def passed(self) -> bool:
        return self.result.passed


@dataclass
class GateReport:
    """Everything the gate checked, in order."""

    dashboard: FileCheck | None = None
    documents: list[FileCheck] = field(default_factory=list)
    fallback: bool = False

    @property
    def checks(self) -> list[FileCheck]:
        checks = [self.dashboard] if self.dashboard is not None else []
        return checks + self.documents

    @property
    def passed(self) -> bool:
        """The gate verdict: every check passed and at least one document was checked."""
        return bool(self.documents) and all(check.passed for check in self.checks)

    @property
    def failed(self) -> list[FileCheck]:
        return [check for check in self.checks if not check.passed]


def _io_failure(name: str, path: Path, reason: str) -> FileCheck:
    result = ValidationResult(path=path)
    result.add_issue(IoFailure(reason=reason))
    return FileCheck(name=name, path=path, result=result)


def _check_file(
    name: str,
    path: Path,
    required_headers: Sequence[str],
    heuristics: GateHeuristics,
) -> FileCheck:
    try:
        result = validate(
            path,
            required_headers,
            heuristics.min_section_length,
            heuristics.illegal_strings,
        )
    except DocumentReadError as e:
        logger.debug("Gate could not read %s: %s", path, e.reason)
        return _io_failure(name, path, e.reason)
    return FileCheck(name=name, path=path, result=result)


def check_dashboard(management_dir: Path, heuristics: GateHeuristics) -> FileCheck | None:
    """
    Check the dashboard checklist.

    Returns:
        The check, or None when the heuristics do not require a fully
        checked dashboard.
    """
    if not heuristics.management_files.require_all_checked:
        return None

    path = management_dir / heuristics.management_files.dashboard
    name = heuristics.management_files.dashboard
    try:
        return FileCheck(name=name, path=path, result=validate_dashboard(path))
    except DocumentReadError as e:
        return _io_failure(name, path, e.reason)


def check_planning_documents(
    planning_dir: Path,
    heuristics: GateHeuristics,
) -> tuple[list[FileCheck], bool]:
    """
    Check the planning documents.

    Returns:
        Tuple of (checks, fallback) where ``fallback`` is True when no
        numbered document existed and every markdown file was checked
        against the generic header list instead.
    """
    if not planning_dir.is_dir():
        missing = _io_failure(planning_dir.name, planning_dir, "Planning directory not found")
        return [missing], False

    if any((planning_dir / schema.filename).exists() for schema in GATED_SCHEMAS):
        checks = [
            _check_file(
                schema.filename,
                planning_dir / schema.filename,
                schema.required_headers,
                heuristics,
            )
            for schema in GATED_SCHEMAS
        ]
        return checks, False

    logger.debug("No numbered planning documents in %s; checking all markdown", planning_dir)
    paths = sorted(
        path
        for path in planning_dir.glob("*.md")
        if path.is_file() and not path.name.endswith(DRAFT_SUFFIX)
    )
    if not paths:
        return [_io_failure(planning_dir.name, planning_dir, "No planning documents found")], True

    checks = [
        _check_file(path.name, path, heuristics.required_headers, heuristics) for path in paths
    ]
    return checks, True


def run_gate(
    project_root: Path,
    structure: StructureConfig,
    heuristics: GateHeuristics,
) -> GateReport:
    """
    Run the full gate over a project.

    Args:
        project_root: Project root directory.
        structure: Directory layout.
        heuristics: Completeness rules.

    Returns:
        GateReport; ``report.passed`` is the verdict.
    """
    report = GateReport()
    report.dashboard = check_dashboard(project_root / structure.management_dir, heuristics)
    report.documents, report.fallback = check_planning_documents(
        project_root / structure.planning_dir, heuristics
    )
    logger.debug(
        "Gate %s: %d check(s), %d failed",
        "passed" if report.passed else "closed",
        len(report.checks),
        len(report.failed),
    )
    return report
