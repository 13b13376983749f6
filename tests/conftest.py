from pathlib import Path
from typing import Any
import pytest

from appforge.domain.providers.ai_provider import AIProvider
from appforge.domain.providers.provider_factory import ProviderFactory


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    """Isolated project directory for tests.

    Tests should not write into the real repo's project directory.
    """
    return tmp_path / "project"


@pytest.fixture
def utf8() -> str:
    """Canonical encoding used throughout tests."""
    return "utf-8"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent unit tests from accidentally using developer machine env vars.

    If a test needs an env var, it should set it explicitly via monkeypatch.
    """
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_BASE_URL", raising=False)


class FakeProvider(AIProvider):
    """Fake provider for testing - returns a canned reply (or None, like manual)."""

    NAME = "fake"
    DESCRIPTION = "Fake provider for testing"
    SUPPORTS_SYSTEM_PROMPT = True

    reply: str | None = None

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = config or {}
        self.calls: list[dict[str, Any]] = []

    def generate(self, prompt: str, *, system_prompt: str | None = None, **_: Any) -> str | None:
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt})
        return self.config.get("reply", self.reply)


@pytest.fixture(autouse=True)
def _register_test_providers():
    """Register the fake provider with proper cleanup.

    Restores the registry afterward to prevent test pollution.
    """
    # Import providers to ensure the built-ins are registered first
    import appforge.domain.providers  # noqa: F401

    original_registry = dict(ProviderFactory._registry)
    ProviderFactory.register(FakeProvider)

    yield

    ProviderFactory._registry.clear()
    ProviderFactory._registry.update(original_registry)


@pytest.fixture
def fake_provider():
    """Factory for FakeProvider instances with a canned reply."""

    def _make(reply: str | None = None) -> FakeProvider:
        return FakeProvider({"reply": reply})

    return _make
