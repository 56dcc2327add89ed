"""
Nexus CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from nexus import __version__
from nexus.cli import catalyst, gate

app = typer.Typer(
    name="nexus",
    help="Validate planning documents and generate the next ones with an LLM",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def configure_logging(debug: bool) -> None:
    """
    Configure logging for all commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    Nexus - planning gate and document generator.

    Quick Start:
        1. Write 01-PLANNING/01-Problem-and-Vision.md
        2. nexus catalyst generate    # Scope, tech stack, architecture, MVP
        3. nexus catalyst status      # See what is complete
        4. nexus gate                 # Check planning is done
    """
    configure_logging(debug)

    ctx.obj = {"debug": debug}


app.command(name="gate")(gate.gate)
app.add_typer(catalyst.app, name="catalyst")


@app.command()
def version() -> None:
    """Show nexus version and exit."""
    console.print(f"nexus version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
