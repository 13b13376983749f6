"""Anthropic Messages API provider.

The ``anthropic.Anthropic`` client is built once, when the provider is
constructed, from explicit configuration; callers that already hold a
client pass it in instead. No module-level client exists.
"""

import logging
import os
import warnings
from typing import Any

import anthropic
import httpx

from appforge.domain.errors import ProviderError
from appforge.domain.providers.ai_provider import AIProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 32000
DEFAULT_TEMPERATURE = 0.7
DEFAULT_CONNECTION_TIMEOUT = 10
DEFAULT_RESPONSE_TIMEOUT = 600

API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"


class AnthropicProvider(AIProvider):
    """Provider calling the Anthropic Messages API.

    Configuration:
        - api_key: API key (falls back to ANTHROPIC_API_KEY)
        - model: Model identifier
        - max_tokens: Output token limit (default: 32000)
        - temperature: Sampling temperature (default: 0.7)
        - base_url: Alternate API endpoint (mock servers, proxies)
        - max_retries: Client-level retries on transient errors
        - connection_timeout: Connect timeout in seconds (default: 10)
        - response_timeout: Read timeout in seconds (default: 600)

    Example:
        provider = AnthropicProvider({"model": "claude-sonnet-4-20250514"})
        reply = provider.generate("Build a todo app", system_prompt=system)
    """

    NAME = "anthropic"
    DESCRIPTION = "Anthropic Messages API"
    CONFIG_KEYS = (
        "api_key",
        "model",
        "max_tokens",
        "temperature",
        "base_url",
        "max_retries",
        "connection_timeout",
        "response_timeout",
    )
    REQUIRES_CONFIG = True
    SUPPORTS_SYSTEM_PROMPT = True

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        client: anthropic.Anthropic | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            config: Optional configuration dictionary (see class docstring)
            client: Pre-built client; when given, api_key/base_url/max_retries
                are not used
        """
        self.config = config or {}
        self._validate_config()

        self._model: str = self.config.get("model", DEFAULT_MODEL)
        self._max_tokens: int = self.config.get("max_tokens", DEFAULT_MAX_TOKENS)
        self._temperature: float = self.config.get("temperature", DEFAULT_TEMPERATURE)
        self._connection_timeout: float = self.config.get(
            "connection_timeout", DEFAULT_CONNECTION_TIMEOUT
        )
        self._response_timeout: float = self.config.get(
            "response_timeout", DEFAULT_RESPONSE_TIMEOUT
        )
        self._client = client if client is not None else self._build_client()

    def _validate_config(self) -> None:
        """Validate configuration and warn on unknown keys.

        Raises:
            ValueError: If config values are invalid (e.g., max_tokens < 1)
        """
        if not self.config:
            return

        known_keys = set(self.CONFIG_KEYS)
        unknown_keys = set(self.config.keys()) - known_keys
        if unknown_keys:
            warnings.warn(
                f"Unknown AnthropicProvider config keys ignored: {sorted(unknown_keys)}",
                UserWarning,
                stacklevel=3,
            )

        max_tokens = self.config.get("max_tokens")
        if max_tokens is not None and max_tokens < 1:
            raise ValueError("max_tokens must be >= 1")

        temperature = self.config.get("temperature")
        if temperature is not None and not 0.0 <= temperature <= 1.0:
            raise ValueError("temperature must be between 0.0 and 1.0")

        max_retries = self.config.get("max_retries")
        if max_retries is not None and max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        for key in ("connection_timeout", "response_timeout"):
            value = self.config.get(key)
            if value is not None and value <= 0:
                raise ValueError(f"{key} must be > 0")

    def _build_client(self) -> anthropic.Anthropic | None:
        api_key = self.config.get("api_key") or os.environ.get(API_KEY_ENV_VAR)
        if not api_key:
            return None

        client_kwargs: dict[str, Any] = {
            "api_key": api_key,
            "timeout": httpx.Timeout(self._response_timeout, connect=self._connection_timeout),
        }
        base_url = self.config.get("base_url")
        if base_url and base_url.strip():
            client_kwargs["base_url"] = base_url.strip()
            logger.info(f"Using custom Anthropic API base URL: {base_url}")
        if self.config.get("max_retries") is not None:
            client_kwargs["max_retries"] = self.config["max_retries"]

        return anthropic.Anthropic(**client_kwargs)

    def validate(self) -> None:
        """Verify a client could be built.

        Raises:
            ProviderError: If no API key was configured
        """
        if self._client is None:
            raise ProviderError(
                f"Anthropic API key is required. Set {API_KEY_ENV_VAR} "
                "or providers.anthropic.api_key in .appforge/config.yml"
            )

    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        connection_timeout: float | None = None,
        response_timeout: float | None = None,
    ) -> str:
        """Send one user turn and return the concatenated text of the reply.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt
            connection_timeout: Connect timeout in seconds (None = configured value)
            response_timeout: Read timeout in seconds (None = configured value)

        Returns:
            Reply text (may be empty if the model returned no text blocks)

        Raises:
            ProviderError: On missing key, timeout, connection, or API errors
        """
        self.validate()

        connect = connection_timeout or self._connection_timeout
        read = response_timeout or self._response_timeout

        request: dict[str, Any] = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "messages": [{"role": "user", "content": prompt}],
            "timeout": httpx.Timeout(read, connect=connect),
        }
        if system_prompt:
            request["system"] = system_prompt

        logger.info(
            f"Anthropic API: model={self._model}, max_tokens={self._max_tokens}, "
            f"prompt_len={len(prompt)}"
        )

        try:
            message = self._client.messages.create(**request)
        except anthropic.APITimeoutError as e:
            raise ProviderError(
                f"Anthropic API timed out after {read}s. "
                "Consider increasing response_timeout."
            ) from e
        except anthropic.APIConnectionError as e:
            raise ProviderError(f"Could not reach the Anthropic API: {e}") from e
        except anthropic.AuthenticationError as e:
            raise ProviderError(
                f"Anthropic API rejected the API key. Check {API_KEY_ENV_VAR}."
            ) from e
        except anthropic.APIStatusError as e:
            raise ProviderError(
                f"Anthropic API error (status {e.status_code}): {e.message}"
            ) from e

        text = "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )

        if getattr(message, "stop_reason", None) == "max_tokens":
            logger.warning(
                f"Reply hit max_tokens={self._max_tokens}; the last file may be cut off"
            )
        logger.debug(f"Anthropic reply: {len(text)} characters")

        return text
