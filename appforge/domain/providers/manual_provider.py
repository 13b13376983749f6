from typing import Any

from .ai_provider import AIProvider


class ManualProvider(AIProvider):
    """No model call: the prompt goes to a file and the user pastes the reply back."""

    NAME = "manual"
    DESCRIPTION = "Write the prompt to disk; paste the reply into the response file"
    SUPPORTS_SYSTEM_PROMPT = True

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = config or {}

    def generate(self, prompt: str, **_: Any) -> None:
        return None
