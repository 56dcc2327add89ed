"""
Standardized error handling and exit codes for the nexus CLI.

Consistent error messages with actionable guidance, and standardized exit
codes across all commands.
"""

from enum import IntEnum

from rich.console import Console

from nexus.core.catalyst.models import GenerationFailedError
from nexus.core.gate.models import ValidationIssue

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for nexus CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic error, or the gate is closed."""

    USER_ERROR = 2
    """User configuration or input error (actionable by user)."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Vision document not found",
        ...     reason="Generation starts from 01-Problem-and-Vision.md",
        ...     solution="Write the vision document, then re-run",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_issues(issues: list[ValidationIssue], indent: str = "    ") -> None:
    """Print every validation issue, one per line."""
    for issue in issues:
        console.print(f"{indent}[red]•[/red] {issue.describe()}")


def print_generation_failed(error: GenerationFailedError) -> None:
    """Print a failed generation with its issues and draft location."""
    print_error(
        f"{error.doc_type.display_name} did not pass validation",
        reason=f"Draft saved to {error.draft_path}" if error.draft_path else None,
        solution=(
            f"Fix the draft and rename it to {error.doc_type.filename}, or run "
            f"'nexus catalyst generate {error.doc_type.value}' again"
        ),
    )
    print_issues(error.issues)
