"""
Provider credentials from .env files.

The completion provider's API key usually lives in a .env file rather than
the shell. Files are applied highest precedence first, and a variable that
is already set is never replaced:

    process environment > project .env.local > project .env > user .env

The user file is ``$XDG_CONFIG_HOME/nexus/.env``. Every variable loaded is
recorded with the file it came from, so a missing or wrong key can be traced
to its source.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home
from .models import LlmConfig

logger = logging.getLogger(__name__)

PROJECT_ENV_FILES = (".env.local", ".env")


@dataclass
class EnvSources:
    """Variables loaded from .env files, keyed by name, with their file."""

    files: dict[str, Path] = field(default_factory=dict)

    @property
    def loaded(self) -> list[str]:
        """Names of the variables that were set, in load order."""
        return list(self.files)

    def key_source(self, llm: LlmConfig) -> str | None:
        """
        Describe where the provider API key comes from.

        Returns:
            The .env file path, "environment" if it was already exported,
            or None if the key is not set at all.
        """
        key_env = llm.key_env
        if key_env in self.files:
            return str(self.files[key_env])
        if os.environ.get(key_env):
            return "environment"
        return None


def get_user_env_path() -> Path:
    return get_xdg_config_home() / "nexus" / ".env"


def env_file_candidates(
    project_dir: Path,
    user_env_paths: Iterable[Path] | None = None,
) -> list[Path]:
    """.env files to consider, highest precedence first."""
    if user_env_paths is None:
        user_env_paths = [get_user_env_path()]
    return [project_dir / name for name in PROJECT_ENV_FILES] + [
        Path(p) for p in user_env_paths
    ]


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
) -> EnvSources:
    """
    Load project and user .env files into the process environment.

    Args:
        project_dir: Project root holding .env and .env.local (defaults to cwd)
        user_env_paths: User-level files (defaults to the XDG nexus .env)

    Returns:
        EnvSources recording which file set each variable.
    """
    sources = EnvSources()
    for path in env_file_candidates(project_dir or Path.cwd(), user_env_paths):
        if not path.is_file():
            continue
        for key, value in dotenv_values(path).items():
            if value is None or key in os.environ:
                continue
            os.environ[key] = value
            sources.files[key] = path
        logger.debug("Read %s", path)
    return sources
