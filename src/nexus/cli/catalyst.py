"""
Nexus CLI - Catalyst commands.

Generate planning documents from the vision with an LLM:
- generate: one document, or all remaining ones in order
- refine: regenerate a committed document with feedback
- status: where each generated document stands
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nexus.cli.errors import ExitCode, print_error, print_generation_failed, print_issues
from nexus.core.catalyst.documents import DocumentType
from nexus.core.catalyst.engine import CatalystEngine
from nexus.core.catalyst.models import (
    CatalystInputError,
    DocumentStatus,
    GenerationFailedError,
)
from nexus.core.config import NexusConfig, load_config, load_layered_env
from nexus.core.gate.validator import DocumentReadError
from nexus.core.llm.client import ChatCompletionClient, CompletionClient, CompletionError

app = typer.Typer(
    name="catalyst",
    help="Generate planning documents from your vision",
    no_args_is_help=True,
)

console = Console()
logger = logging.getLogger(__name__)

# (style, mark) per status
_STATUS_STYLES = {
    DocumentStatus.COMPLETE: ("green", "✓"),
    DocumentStatus.NEEDS_REFINEMENT: ("yellow", "!"),
    DocumentStatus.DRAFT_ONLY: ("yellow", "~"),
    DocumentStatus.MISSING: ("dim", "·"),
}

_PROJECT_ROOT_OPTION = typer.Option(
    Path("."),
    "--project-root",
    "-p",
    help="Project root directory",
    file_okay=False,
)


class _NoCompletion:
    def complete(self, system_prompt: str, user_prompt: str) -> str:
        raise CompletionError("status does not generate documents")

    def close(self) -> None:
        pass


def _status_cell(doc_status: DocumentStatus) -> str:
    style, mark = _STATUS_STYLES[doc_status]
    return f"[{style}]{mark} {doc_status.label}[/{style}]"


def build_client(config: NexusConfig) -> CompletionClient:
    """Create the completion client for a command."""
    return ChatCompletionClient.from_config(config.llm)


def _progress(doc_type: DocumentType, status: str, message: str) -> None:
    name = doc_type.display_name
    if status == "generating":
        console.print(f"[bold]{name}[/bold]: generating...")
    elif status == "reasoning":
        console.print(Panel(message, title=f"{name} reasoning", border_style="dim"))
    elif status == "committed":
        console.print(f"  [green]✓[/green] {message}")
    elif status == "drafted":
        console.print(f"  [red]✗[/red] {message}")
    elif status == "skipped":
        console.print(f"[dim]{name}: {message}, skipping[/dim]")
    elif status == "error":
        console.print(f"  [red]✗[/red] {message}")


def _resolve_doc_type(name: str) -> DocumentType:
    try:
        return DocumentType.from_alias(name)
    except ValueError as e:
        print_error("Unknown document", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)


def _build_engine(project_root: Path, show_reasoning: bool | None) -> CatalystEngine:
    project_root = project_root.resolve()
    env = load_layered_env(project_dir=project_root)
    config = load_config(project_root)
    settings = config.catalyst
    if show_reasoning is not None:
        settings = settings.model_copy(update={"show_reasoning": show_reasoning})

    try:
        client = build_client(config)
    except CompletionError as e:
        print_error(
            "No completion provider configured",
            reason=str(e),
            solution=(
                f"Add {config.llm.key_env} to {project_root / '.env'}, "
                "or set llm.api_key_env in .nexus.json"
            ),
        )
        raise typer.Exit(ExitCode.USER_ERROR)
    logger.debug("%s read from %s", config.llm.key_env, env.key_source(config.llm))

    return CatalystEngine(
        project_root / config.structure.planning_dir,
        client,
        settings,
        progress=_progress,
    )


@app.command()
def generate(
    document: str | None = typer.Argument(
        None,
        help="Document to generate (scope, stack, arch, mvp). Omit to generate all.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Regenerate documents that already exist",
    ),
    show_reasoning: bool | None = typer.Option(
        None,
        "--show-reasoning/--hide-reasoning",
        help="Show the model's reasoning block",
    ),
    project_root: Path = _PROJECT_ROOT_OPTION,
) -> None:
    """
    Generate planning documents from 01-Problem-and-Vision.md.

    Without a document name, generates every document not yet on disk in
    order, stopping at the first one that fails validation.

    Examples:
        nexus catalyst generate
        nexus catalyst generate --force
        nexus catalyst generate scope
    """
    doc_type = _resolve_doc_type(document) if document else None
    engine = _build_engine(project_root, show_reasoning)

    try:
        if doc_type is not None:
            outcome = engine.generate_document(doc_type)
        else:
            report = engine.generate_all(force=force)
    except CatalystInputError as e:
        print_error("Cannot start generation", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    except DocumentReadError as e:
        print_error(f"Cannot read {e.path.name}", reason=e.reason)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except CompletionError as e:
        print_error("Completion request failed", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except GenerationFailedError as e:
        print_generation_failed(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    finally:
        engine.client.close()

    if doc_type is not None:
        console.print(f"[green]{doc_type.display_name} saved to {outcome.path}[/green]")
        return

    console.print()
    if report.successes:
        names = ", ".join(d.display_name for d in report.successes)
        console.print(f"[green]Generated:[/green] {names}")
    if report.skipped:
        names = ", ".join(d.display_name for d in report.skipped)
        console.print(f"[dim]Already present:[/dim] {names}")

    if report.is_complete_success:
        raise typer.Exit(ExitCode.SUCCESS)

    for failure in report.failures:
        print_error(f"{failure.doc_type.display_name}: {failure.message}")
        print_issues(failure.issues)
        if failure.draft_path is not None:
            console.print(f"    [dim]Draft: {failure.draft_path}[/dim]")
    if report.not_attempted:
        names = ", ".join(d.display_name for d in report.not_attempted)
        console.print(f"[yellow]Not attempted:[/yellow] {names}")
    raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.command()
def refine(
    document: str = typer.Argument(..., help="Document to refine (scope, stack, arch, mvp)"),
    feedback: str = typer.Argument(..., help="What to change"),
    show_reasoning: bool | None = typer.Option(
        None,
        "--show-reasoning/--hide-reasoning",
        help="Show the model's reasoning block",
    ),
    project_root: Path = _PROJECT_ROOT_OPTION,
) -> None:
    """
    Regenerate a document with your feedback.

    The existing file is only replaced if the new version passes
    validation; otherwise the attempt is saved as a draft.

    Examples:
        nexus catalyst refine scope "add a mobile app to Version 2"
    """
    doc_type = _resolve_doc_type(document)
    engine = _build_engine(project_root, show_reasoning)

    try:
        engine.refine_document(doc_type, feedback)
    except CatalystInputError as e:
        print_error("Cannot refine", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    except DocumentReadError as e:
        print_error(f"Cannot read {e.path.name}", reason=e.reason)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except CompletionError as e:
        print_error("Completion request failed", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except GenerationFailedError as e:
        print_generation_failed(e)
        console.print(f"[dim]{doc_type.filename} was not changed.[/dim]")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    finally:
        engine.client.close()

    console.print(f"[green]{doc_type.display_name} refined.[/green]")


@app.command()
def status(
    project_root: Path = _PROJECT_ROOT_OPTION,
) -> None:
    """
    Show where each generated document stands.

    Examples:
        nexus catalyst status
    """
    project_root = project_root.resolve()
    load_layered_env(project_dir=project_root)
    config = load_config(project_root)

    # Status never calls the model, so no client is needed
    engine = CatalystEngine(
        project_root / config.structure.planning_dir,
        client=_NoCompletion(),
        settings=config.catalyst,
    )
    generation_status = engine.status()

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim")
    table.add_column("Document")
    table.add_column("File", style="dim")
    table.add_column("Status")
    for doc_type in DocumentType.ordered():
        doc_status = generation_status.documents[doc_type]
        table.add_row(
            str(doc_type.ordinal),
            doc_type.display_name,
            doc_type.filename,
            _status_cell(doc_status),
        )
    console.print(table)

    if generation_status.drafts:
        names = ", ".join(d.draft_filename for d in generation_status.drafts)
        console.print(f"[yellow]Drafts to review:[/yellow] {names}")

    complete, total = generation_status.progress
    console.print(f"\nProgress: {complete}/{total} complete")
    next_step = generation_status.next_step()
    if next_step:
        console.print(f"[cyan]→ Next:[/cyan] {next_step}")
