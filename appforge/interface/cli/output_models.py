from typing import Literal
from pydantic import BaseModel, Field


class BaseOutput(BaseModel):
    schema_version: int = 1
    command: Literal["extract", "generate", "fix", "providers"]
    exit_code: int
    error: str | None = None


class FileSummary(BaseModel):
    """One extracted file in command output."""
    path: str
    size: int


class ExtractOutput(BaseOutput):
    command: Literal["extract"] = "extract"
    status: str | None = None
    strategy: str | None = None
    files: list[FileSummary] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)
    written_paths: list[str] = Field(default_factory=list)


class GenerateOutput(BaseOutput):
    command: Literal["generate"] = "generate"
    status: str | None = None
    workspace_dir: str | None = None
    files: list[FileSummary] = Field(default_factory=list)
    # Manual provider only: where the prompt went and where the reply is expected.
    prompt_path: str | None = None
    response_path: str | None = None


class FixOutput(GenerateOutput):
    command: Literal["fix"] = "fix"


class ProviderSummary(BaseModel):
    """Summary of a provider for list output."""
    name: str
    description: str
    requires_config: bool = False


class ProviderDetail(BaseModel):
    """Detailed provider info for single provider view."""
    name: str
    description: str
    requires_config: bool = False
    config_keys: list[str] = Field(default_factory=list)
    supports_system_prompt: bool = False


class ProvidersOutput(BaseOutput):
    command: Literal["providers"] = "providers"
    providers: list[ProviderSummary] | None = None
    provider: ProviderDetail | None = None
