"""Unit tests for AnthropicProvider.

Tests inject a mocked client; no request leaves the process.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import anthropic
import httpx
import pytest

from appforge.domain.errors import ProviderError
from appforge.domain.providers.anthropic_provider import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    AnthropicProvider,
)

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _message(*texts: str, stop_reason: str = "end_turn") -> SimpleNamespace:
    content = [SimpleNamespace(type="text", text=t) for t in texts]
    return SimpleNamespace(content=content, stop_reason=stop_reason)


def _provider(config: dict | None = None) -> tuple[AnthropicProvider, MagicMock]:
    client = MagicMock()
    client.messages.create.return_value = _message("ok")
    return AnthropicProvider(config, client=client), client


class TestAnthropicProviderMetadata:
    def test_metadata(self):
        metadata = AnthropicProvider.get_metadata()

        assert metadata["name"] == "anthropic"
        assert metadata["requires_config"] is True
        assert metadata["supports_system_prompt"] is True
        assert "api_key" in metadata["config_keys"]
        assert "model" in metadata["config_keys"]


class TestAnthropicProviderConfig:
    def test_defaults(self):
        provider, _ = _provider()

        assert provider._model == DEFAULT_MODEL
        assert provider._max_tokens == DEFAULT_MAX_TOKENS

    def test_unknown_config_keys_emit_warning(self):
        with pytest.warns(UserWarning, match="unknown_key"):
            _provider({"unknown_key": 1})

    @pytest.mark.parametrize(
        "config,message",
        [
            ({"max_tokens": 0}, "max_tokens"),
            ({"temperature": 1.5}, "temperature"),
            ({"max_retries": -1}, "max_retries"),
            ({"connection_timeout": 0}, "connection_timeout"),
            ({"response_timeout": -5}, "response_timeout"),
        ],
    )
    def test_invalid_values_rejected(self, config, message):
        with pytest.raises(ValueError, match=message):
            _provider(config)

    def test_no_api_key_means_no_client(self):
        provider = AnthropicProvider()

        with pytest.raises(ProviderError, match="ANTHROPIC_API_KEY"):
            provider.validate()

    def test_client_built_from_env_key(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")

        with patch("anthropic.Anthropic") as mock_cls:
            provider = AnthropicProvider({"base_url": " http://localhost:9000 ", "max_retries": 0})

        provider.validate()
        kwargs = mock_cls.call_args.kwargs
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["base_url"] == "http://localhost:9000"
        assert kwargs["max_retries"] == 0
        assert isinstance(kwargs["timeout"], httpx.Timeout)

    def test_config_key_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "from-env")

        with patch("anthropic.Anthropic") as mock_cls:
            AnthropicProvider({"api_key": "from-config"})

        assert mock_cls.call_args.kwargs["api_key"] == "from-config"


class TestAnthropicProviderGenerate:
    def test_sends_prompt_and_system(self):
        provider, client = _provider({"model": "claude-test", "max_tokens": 100, "temperature": 0.2})

        provider.generate("Build a todo app", system_prompt="You are a developer.")

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 100
        assert kwargs["temperature"] == 0.2
        assert kwargs["messages"] == [{"role": "user", "content": "Build a todo app"}]
        assert kwargs["system"] == "You are a developer."

    def test_system_omitted_when_not_given(self):
        provider, client = _provider()

        provider.generate("prompt")

        assert "system" not in client.messages.create.call_args.kwargs

    def test_timeouts_passed_per_request(self):
        provider, client = _provider()

        provider.generate("prompt", connection_timeout=5, response_timeout=30)

        timeout = client.messages.create.call_args.kwargs["timeout"]
        assert timeout.connect == 5
        assert timeout.read == 30

    def test_configured_timeouts_are_the_default(self):
        provider, client = _provider({"connection_timeout": 3, "response_timeout": 90})

        provider.generate("prompt")

        timeout = client.messages.create.call_args.kwargs["timeout"]
        assert timeout.connect == 3
        assert timeout.read == 90

    def test_joins_text_blocks_only(self):
        provider, client = _provider()
        message = _message("```src/a.js\n", "x\n```")
        message.content.insert(1, SimpleNamespace(type="tool_use", id="t1"))
        client.messages.create.return_value = message

        assert provider.generate("prompt") == "```src/a.js\nx\n```"

    def test_max_tokens_stop_logs_warning(self, caplog):
        provider, client = _provider()
        client.messages.create.return_value = _message("partial", stop_reason="max_tokens")

        with caplog.at_level("WARNING"):
            assert provider.generate("prompt") == "partial"

        assert "max_tokens" in caplog.text


class TestAnthropicProviderErrors:
    @pytest.mark.parametrize(
        "error,message",
        [
            (anthropic.APITimeoutError(request=_REQUEST), "timed out"),
            (anthropic.APIConnectionError(request=_REQUEST), "Could not reach"),
            (
                anthropic.AuthenticationError(
                    "bad key", response=httpx.Response(401, request=_REQUEST), body=None
                ),
                "rejected the API key",
            ),
            (
                anthropic.InternalServerError(
                    "overloaded", response=httpx.Response(500, request=_REQUEST), body=None
                ),
                "status 500",
            ),
        ],
    )
    def test_api_errors_become_provider_errors(self, error, message):
        provider, client = _provider()
        client.messages.create.side_effect = error

        with pytest.raises(ProviderError, match=message) as exc_info:
            provider.generate("prompt")

        assert exc_info.value.__cause__ is error
