"""
Configuration data models for nexus.

These models define the structure of .nexus.json and
~/.config/nexus/config.json files, with validation and type safety via
Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Env var holding the API key for each provider, unless overridden
PROVIDER_KEY_ENV: dict[str, str] = {
    "openrouter": "OPENROUTER_API_KEY",
    "openai": "OPENAI_API_KEY",
}


class StructureConfig(BaseModel):
    """
    Project directory layout.

    Paths are relative to the project root.
    """
    planning_dir: str = Field(
        default="01-PLANNING",
        description="Directory holding the numbered planning documents"
    )
    management_dir: str = Field(
        default="00-MANAGEMENT",
        description="Directory holding the project dashboard"
    )


class GateConfig(BaseModel):
    """Settings for the manual planning gate."""
    heuristics_file: str = Field(
        default="Gate-Heuristics.json",
        description="Heuristics JSON, relative to the project root (built-in defaults if absent)"
    )


class CatalystConfig(BaseModel):
    """
    Settings for document generation.

    These thresholds apply to generated documents only; the manual gate
    uses the heuristics file.
    """
    show_reasoning: bool = Field(
        default=False,
        description="Report the model's reasoning block through the progress callback"
    )
    illegal_strings: list[str] = Field(
        default_factory=lambda: ["TODO", "TBD", "[fill]", "[describe]", "[your", "[add"],
        description="Placeholder markers that fail a generated document"
    )
    min_word_count: int = Field(
        default=50,
        ge=0,
        description="Minimum whole-document word count for generated documents"
    )
    exempt_code_blocks: bool = Field(
        default=False,
        description="Ignore illegal strings inside code blocks"
    )


class LlmConfig(BaseModel):
    """
    Completion provider settings.

    Both providers speak the OpenAI chat-completions protocol; ``base_url``
    overrides the provider default.
    """
    provider: str = Field(
        default="openrouter",
        pattern="^(openrouter|openai)$",
        description="Completion provider: 'openrouter' or 'openai'"
    )
    model: str = Field(
        default="anthropic/claude-3.5-sonnet",
        description="Model identifier passed to the provider"
    )
    base_url: Optional[str] = Field(
        default=None,
        description="API base URL (defaults to the provider's public endpoint)"
    )
    api_key_env: Optional[str] = Field(
        default=None,
        description="Env var holding the API key (defaults per provider)"
    )
    timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Request timeout in seconds"
    )
    max_tokens: int = Field(
        default=4096,
        ge=1,
        description="Maximum tokens in a completion"
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries on transient HTTP failures"
    )

    @property
    def key_env(self) -> str:
        """Name of the env var the API key is read from."""
        return self.api_key_env or PROVIDER_KEY_ENV[self.provider]


class NexusConfig(BaseModel):
    """
    Top-level nexus configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = NexusConfig(llm=LlmConfig(model="openai/gpt-4o"))
        >>> config.structure.planning_dir
        '01-PLANNING'
    """
    structure: StructureConfig = Field(
        default_factory=StructureConfig,
        description="Project directory layout"
    )
    gate: GateConfig = Field(
        default_factory=GateConfig,
        description="Manual gate settings"
    )
    catalyst: CatalystConfig = Field(
        default_factory=CatalystConfig,
        description="Document generation settings"
    )
    llm: LlmConfig = Field(
        default_factory=LlmConfig,
        description="Completion provider settings"
    )

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,
    )
