from typing import Any

from .ai_provider import AIProvider


class ProviderFactory:
    """Registry of provider classes keyed by ``NAME``.

    The key is what ``provider:`` in config and ``--provider`` on the CLI
    refer to. Each provider is built from its own ``providers.<name>`` block.
    """

    _registry: dict[str, type[AIProvider]] = {}

    @classmethod
    def register(cls, provider_class: type[AIProvider]) -> None:
        cls._registry[provider_class.NAME] = provider_class

    @classmethod
    def create(cls, name: str, config: dict[str, Any] | None = None) -> AIProvider:
        """Instantiate the provider registered as ``name``.

        Raises:
            KeyError: If no provider has that name
        """
        try:
            provider_class = cls._registry[name]
        except KeyError:
            raise KeyError(
                f"Provider '{name}' not found. Available: {', '.join(cls.names())}"
            ) from None
        return provider_class(config or {})

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._registry)

    @classmethod
    def get_metadata(cls, name: str) -> dict[str, Any] | None:
        provider_class = cls._registry.get(name)
        return provider_class.get_metadata() if provider_class else None

    @classmethod
    def get_all_metadata(cls) -> list[dict[str, Any]]:
        return [cls._registry[name].get_metadata() for name in cls.names()]
