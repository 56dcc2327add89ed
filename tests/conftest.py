"""
Pytest configuration and shared fixtures.

Provides sample planning documents, temporary project layouts and a
scripted completion client used across the test suite.
"""

import os
from pathlib import Path

import pytest

from nexus.core.config import clear_cache

# ==============================================================================
# Sample Documents
# ==============================================================================

VISION_DOC = """# Problem and Vision

## My problem (personal):

I keep losing track of small side projects because my notes are spread across
three apps and I never know what to work on next.

## Who else has this problem?

Hobby developers and students who juggle several small projects in their spare time.

## Solution in ONE SENTENCE:

A local command line tool that keeps one plain-text plan per project and tells me the next step.

## Success criteria (3 months):

I use it every week for at least two projects and finish one of them.

## Anti-vision (what this project is NOT):

It is not a team project manager, not a cloud service and not a time tracker.
"""

SCOPE_DOC = """# Scope and Boundaries

## MVP (Minimum Viable Product):

- Create a plan file for a project
- Add and complete steps from the command line
- Show the next open step

## Version 2 (NOT NOW - just document):

- Sync plans between two machines
- Weekly summary email

## Never (things I will NOT build):

- User accounts
- A web dashboard

## Tech constraints:

Must run offline on Linux and macOS, with no server and no database beyond
plain files in the project folder.
"""

TECH_STACK_DOC = """# Tech Stack

## Stack (force yourself to choose NOW):

Python 3.12 with Typer for the command line and plain Markdown files for storage.

## Why these choices?

I already know Python well, Typer gives help text for free, and Markdown files
stay readable without the tool.

## What I will NOT use:

No database server, no JavaScript frontend and no cloud hosting.

## Dependencies (important ones):

Typer, Rich and pytest.

## Development environment:

VS Code on Ubuntu with a virtual environment per project.
"""

ARCHITECTURE_DOC = """# Architecture

## Folder structure:

```text
planner/
  cli.py
  store.py
tests/
```

## Data model (main entities):

A Plan has a project name and an ordered list of Steps. A Step has a title, a
done flag and an optional note.

## Flow (user journey):

1. The user runs plan init in a project folder.
2. The user adds steps with plan add.
3. The user runs plan next to see the first open step and marks it done.

## Critical technical decisions:

Plans are stored as Markdown files so they can be edited by hand, and every
write goes through a temporary file first.
"""

MVP_BREAKDOWN_DOC = """# MVP Breakdown

## Sprint 1:

Foundation

- [ ] Create the project skeleton and command entry point
- [ ] Store and load a plan file

**Exit criteria:** a plan file can be created and read back.

## Sprint 2:

Core commands

- [ ] Add the add, done and next commands
- [ ] Cover every command with tests

**Exit criteria:** a full plan can be managed from the command line.

## Definition of Done (each sprint):

- [ ] Builds without errors
- [ ] Tested on my laptop
- [ ] Committed to git
"""

DASHBOARD_DOC = """# Start Here

- [x] Write the vision
- [x] Agree the scope
- [x] Pick the stack
- [x] Sketch the architecture
"""


# ==============================================================================
# Completion Fakes
# ==============================================================================


class ScriptedClient:
    """
    Completion client that replays a fixed list of responses.

    An Exception in the list is raised instead of returned. Every call is
    recorded as a (system_prompt, user_prompt) tuple, and ``closed`` is set
    once the CLI closes the client.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if not self.responses:
            raise AssertionError("Unexpected completion call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def scripted_client():
    """Factory for ScriptedClient instances."""
    return ScriptedClient


@pytest.fixture
def documents():
    """Sample documents keyed by the name used in the CLI."""
    return {
        "vision": VISION_DOC,
        "scope": SCOPE_DOC,
        "tech_stack": TECH_STACK_DOC,
        "architecture": ARCHITECTURE_DOC,
        "mvp_breakdown": MVP_BREAKDOWN_DOC,
        "dashboard": DASHBOARD_DOC,
    }


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def project_root(tmp_path):
    """
    Provide a project with a vision and a fully checked dashboard.

    Creates:
    - 00-MANAGEMENT/00-START-HERE.md
    - 01-PLANNING/01-Problem-and-Vision.md
    """
    root = tmp_path / "project"
    (root / "00-MANAGEMENT").mkdir(parents=True)
    (root / "01-PLANNING").mkdir()
    (root / "00-MANAGEMENT" / "00-START-HERE.md").write_text(DASHBOARD_DOC)
    (root / "01-PLANNING" / "01-Problem-and-Vision.md").write_text(VISION_DOC)
    return root


@pytest.fixture
def planning_dir(project_root) -> Path:
    """The planning directory of ``project_root``."""
    return project_root / "01-PLANNING"


# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """
    Isolate every test from the user's configuration.

    Removes NEXUS_* variables, points XDG_CONFIG_HOME at an empty
    directory and clears the config cache before and after the test.
    """
    for key in list(os.environ.keys()):
        if key.startswith("NEXUS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))

    clear_cache()
    yield monkeypatch
    clear_cache()
