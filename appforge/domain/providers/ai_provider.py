from abc import ABC, abstractmethod
from typing import Any, ClassVar


class AIProvider(ABC):
    """Turns a prompt into the text of one model reply.

    Subclasses describe themselves through the class attributes below;
    ``get_metadata`` reports them to the ``providers`` command.
    """

    NAME: ClassVar[str] = "unknown"
    DESCRIPTION: ClassVar[str] = ""
    CONFIG_KEYS: ClassVar[tuple[str, ...]] = ()
    REQUIRES_CONFIG: ClassVar[bool] = False
    SUPPORTS_SYSTEM_PROMPT: ClassVar[bool] = False

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        return {
            "name": cls.NAME,
            "description": cls.DESCRIPTION,
            "requires_config": cls.REQUIRES_CONFIG,
            "config_keys": list(cls.CONFIG_KEYS),
            "supports_system_prompt": cls.SUPPORTS_SYSTEM_PROMPT,
        }

    def validate(self) -> None:
        """Raise ProviderError if a turn cannot start. Nothing to check by default."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        connection_timeout: float | None = None,
        response_timeout: float | None = None,
    ) -> str | None:
        """Return the full reply, or None when the user will paste it in.

        Timeouts of None leave the provider's own defaults in place.

        Raises:
            ProviderError: If the call fails
        """
        ...
