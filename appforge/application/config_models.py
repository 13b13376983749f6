"""Application configuration model.

Config structure (.appforge/config.yml):
    provider: anthropic
    providers:
      anthropic:
        model: claude-sonnet-4-20250514
        max_tokens: 32000
    duplicate_policy: last
    workspace_dir: project
    log_level: INFO

Precedence: CLI flags > project file > user file > defaults.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from appforge.application.config_loader import ConfigLoadError, load_config
from appforge.domain.duplicates import DuplicatePolicy


class AppConfig(BaseModel):
    """Validated application configuration."""

    model_config = ConfigDict(extra="forbid")

    provider: str = "manual"
    providers: dict[str, dict[str, Any]] = Field(default_factory=dict)
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.LAST
    workspace_dir: Path = Path("project")
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    def provider_config(self, provider_key: str | None = None) -> dict[str, Any]:
        """Constructor config for a provider (defaults to the selected one)."""
        return dict(self.providers.get(provider_key or self.provider, {}))


def load_app_config(*, project_root: Path | None = None, user_home: Path | None = None) -> AppConfig:
    """Load, merge, and validate configuration.

    Raises:
        ConfigLoadError: If a file is malformed or the merged config is invalid
    """
    raw = load_config(project_root=project_root, user_home=user_home)
    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid configuration: {e}", cause=e) from e
