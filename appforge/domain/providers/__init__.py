from .ai_provider import AIProvider
from .provider_factory import ProviderFactory
from .manual_provider import ManualProvider
from .anthropic_provider import AnthropicProvider

# Register built-in providers
ProviderFactory.register(ManualProvider)
ProviderFactory.register(AnthropicProvider)

__all__ = ["AIProvider", "ProviderFactory", "ManualProvider", "AnthropicProvider"]
