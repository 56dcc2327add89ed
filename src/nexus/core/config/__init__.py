"""
Configuration models and loading.

Pydantic models for nexus configuration with multi-layer merging:
defaults < user < project < env vars.
"""

from .env import EnvSources, load_layered_env
from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import (
    CatalystConfig,
    GateConfig,
    LlmConfig,
    NexusConfig,
    StructureConfig,
)

__all__ = [
    # Models
    "CatalystConfig",
    "GateConfig",
    "LlmConfig",
    "NexusConfig",
    "StructureConfig",
    "EnvSources",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_layered_env",
]
