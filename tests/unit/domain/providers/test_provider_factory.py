"""Unit tests for ProviderFactory."""

import pytest
from typing import Any

from appforge.domain.providers import AnthropicProvider, ManualProvider
from appforge.domain.providers.provider_factory import ProviderFactory
from appforge.domain.providers.ai_provider import AIProvider


class MockAIProvider(AIProvider):
    """Mock AI provider for testing."""

    NAME = "mock"
    DESCRIPTION = "Mock AI provider for testing"

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config or {}

    def generate(self, prompt: str, **_: Any) -> str | None:
        return "mock response"


class TestProviderFactory:
    """Tests for ProviderFactory."""

    def setup_method(self):
        """Save and clear the registry before each test."""
        self._original_registry = dict(ProviderFactory._registry)
        ProviderFactory._registry.clear()

    def teardown_method(self):
        """Restore the registry after each test."""
        ProviderFactory._registry.clear()
        ProviderFactory._registry.update(self._original_registry)

    def test_register_under_class_name(self):
        ProviderFactory.register(MockAIProvider)

        provider = ProviderFactory.create("mock")

        assert isinstance(provider, MockAIProvider)
        assert provider.config == {}

    def test_create_with_config(self):
        """The provider gets its own config block as the constructor argument."""
        ProviderFactory.register(MockAIProvider)

        provider = ProviderFactory.create("mock", {"model": "m"})

        assert provider.config == {"model": "m"}

    def test_create_unknown_raises_keyerror(self):
        """Creating unknown provider raises KeyError listing what is available."""
        ProviderFactory.register(MockAIProvider)

        with pytest.raises(KeyError) as exc_info:
            ProviderFactory.create("unknown")

        assert exc_info.value.args[0] == "Provider 'unknown' not found. Available: mock"

    def test_names_and_metadata_are_sorted(self):
        ProviderFactory.register(MockAIProvider)
        ProviderFactory.register(ManualProvider)

        assert ProviderFactory.names() == ["manual", "mock"]
        assert ProviderFactory.get_metadata("mock")["name"] == "mock"
        assert ProviderFactory.get_metadata("missing") is None
        assert [m["name"] for m in ProviderFactory.get_all_metadata()] == ["manual", "mock"]


def test_builtin_providers_registered():
    """Importing the providers package registers manual and anthropic."""
    assert ProviderFactory._registry["manual"] is ManualProvider
    assert ProviderFactory._registry["anthropic"] is AnthropicProvider


def test_manual_provider_returns_none():
    provider = ProviderFactory.create("manual")

    provider.validate()
    assert provider.generate("Build a todo app") is None
    assert ManualProvider.get_metadata()["requires_config"] is False


def test_metadata_comes_from_class_attributes():
    assert MockAIProvider.get_metadata() == {
        "name": "mock",
        "description": "Mock AI provider for testing",
        "requires_config": False,
        "config_keys": [],
        "supports_system_prompt": False,
    }


def test_validate_is_a_no_op_by_default():
    MockAIProvider().validate()
