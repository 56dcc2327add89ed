"""
Nexus CLI - Gate command.

Checks whether planning is complete: the dashboard checklist is fully
checked and every planning document passes the heuristics. Exits non-zero
when the gate is closed.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from nexus.cli.errors import ExitCode, print_error, print_issues
from nexus.core.config import load_config, load_layered_env
from nexus.core.gate.heuristics import HeuristicsError, load_heuristics_or_default
from nexus.core.gate.service import FileCheck, run_gate

console = Console()


def _print_check(check: FileCheck) -> None:
    if check.passed:
        console.print(f"  [green]✓[/green] {check.name}")
    else:
        console.print(f"  [red]✗[/red] {check.name}")
        print_issues(check.result.issues)
    for warning in check.result.warnings:
        console.print(f"    [yellow]⚠[/yellow] {warning}")


def gate(
    project_root: Path = typer.Option(
        Path("."),
        "--project-root",
        "-p",
        help="Project root directory",
        file_okay=False,
    ),
) -> None:
    """
    Check planning documents and the dashboard against the gate heuristics.

    Examples:
        nexus gate
        nexus gate --project-root ../my-app
    """
    project_root = project_root.resolve()
    load_layered_env(project_dir=project_root)
    config = load_config(project_root)

    heuristics_path = project_root / config.gate.heuristics_file
    try:
        heuristics = load_heuristics_or_default(heuristics_path)
    except HeuristicsError as e:
        print_error(
            "Cannot load gate heuristics",
            reason=str(e),
            solution=f"Fix or remove {heuristics_path.name}",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    report = run_gate(project_root, config.structure, heuristics)

    if report.dashboard is not None:
        console.print("[bold]Dashboard[/bold]")
        _print_check(report.dashboard)
        console.print()

    console.print("[bold]Planning documents[/bold]")
    if report.fallback:
        console.print("[dim]No numbered documents found; checking every markdown file[/dim]")
    for check in report.documents:
        _print_check(check)
    console.print()

    if report.passed:
        console.print("[green bold]Gate open.[/green bold] All checks passed.")
        raise typer.Exit(ExitCode.SUCCESS)

    console.print(
        f"[red bold]Gate closed.[/red bold] {len(report.failed)} file(s) need work; "
        "fix the issues above and re-run."
    )
    raise typer.Exit(ExitCode.GENERAL_ERROR)
