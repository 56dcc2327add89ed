"""
Gate heuristics configuration.

Heuristics are the configurable completeness rules the gate applies to
planning documents. They live in a JSON file in the project (by default
``Gate-Heuristics.json``) and are injected into the validator per call.

Example file:
    {
      "min_section_length": 50,
      "required_headers": ["Problem", "Vision"],
      "illegal_strings": ["TODO", "TBD"],
      "management_files": {
        "dashboard": "00-START-HERE.md",
        "require_all_checked": true
      }
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_HEURISTICS_FILE = "Gate-Heuristics.json"


class HeuristicsError(Exception):
    """Raised when a heuristics file cannot be loaded."""

    pass


class ManagementFiles(BaseModel):
    """Rules for the management dashboard."""

    dashboard: str = Field(
        default="00-START-HERE.md",
        description="Dashboard file name inside the management directory",
    )
    require_all_checked: bool = Field(
        default=True,
        description="Whether every dashboard checkbox must be checked",
    )


class GateHeuristics(BaseModel):
    """Completeness rules applied by the gate."""

    min_section_length: int = Field(
        default=50,
        ge=0,
        description="Minimum word count for a planning document",
    )
    required_headers: list[str] = Field(
        default_factory=lambda: [
            "Problem",
            "Vision",
            "Scope",
            "Boundaries",
            "Tech Stack",
            "Architecture",
        ],
        description="Headers required when validating unstructured planning documents",
    )
    illegal_strings: list[str] = Field(
        default_factory=lambda: [
            "TODO",
            "FIXME",
            "TBD",
            "...",
            "insert here",
            "fill me in",
            "[ ]",
        ],
        description="Placeholder strings that mark a document as incomplete",
    )
    management_files: ManagementFiles = Field(
        default_factory=ManagementFiles,
        description="Dashboard validation rules",
    )


def load_heuristics(path: Path) -> GateHeuristics:
    """
    Load heuristics from a JSON file.

    Args:
        path: Path to the heuristics JSON file.

    Returns:
        Parsed GateHeuristics.

    Raises:
        HeuristicsError: If the file is missing, unreadable, not valid JSON,
            or does not match the heuristics schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise HeuristicsError(f"Heuristics file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise HeuristicsError(f"Failed to open heuristics file: {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HeuristicsError(f"Failed to parse heuristics JSON: {path}: {e}") from e

    try:
        heuristics = GateHeuristics.model_validate(data)
    except ValidationError as e:
        raise HeuristicsError(f"Invalid heuristics in {path}: {e}") from e

    logger.debug("Loaded heuristics from %s", path)
    return heuristics


def load_heuristics_or_default(path: Path) -> GateHeuristics:
    """
    Load heuristics, falling back to the built-in defaults if the file is absent.

    A file that exists but is malformed still raises, so a typo in the
    project's rules is never silently replaced by defaults.

    Raises:
        HeuristicsError: If the file exists but cannot be loaded.
    """
    if not path.exists():
        logger.debug("No heuristics file at %s, using defaults", path)
        return GateHeuristics()
    return load_heuristics(path)
