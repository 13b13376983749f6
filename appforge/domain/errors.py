"""Domain-level exceptions for appforge."""


class ProviderError(Exception):
    """Raised when a provider fails (network, auth, timeout, etc.)."""

    pass


class DuplicatePathError(ValueError):
    """Raised when a file set repeats a path under the ``reject`` policy."""

    def __init__(self, paths: list[str]) -> None:
        super().__init__(f"Duplicate file paths in response: {', '.join(paths)}")
        self.paths = paths
