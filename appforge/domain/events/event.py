from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from appforge.domain.events.event_types import GenerationEventType


class GenerationEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: GenerationEventType
    timestamp: datetime
    path: str | None = None  # Workspace-relative file path, for file events
    metadata: dict[str, Any] = Field(default_factory=dict)

    def describe(self) -> str:
        """``<type> [path=<path>] [key=value ...]`` with metadata keys sorted."""
        parts = [self.event_type.value]
        if self.path:
            parts.append(f"path={self.path}")
        parts.extend(f"{key}={value}" for key, value in sorted(self.metadata.items()))
        return " ".join(parts)
