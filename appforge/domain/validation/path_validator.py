"""
Path validation utilities for appforge.

Provides shared security validation for:
- Relative project paths taken from model replies
- Path traversal prevention when writing into a workspace
- Workspace directory validation

Model replies are untrusted input; every path they name goes through here
before anything touches the filesystem.
"""

import re
from pathlib import Path, PurePosixPath


class PathValidationError(Exception):
    """Raised when path validation fails."""
    pass


class PathValidator:
    """Validates project-relative paths and workspace directories."""

    # Windows drive prefix such as "C:" or "c:/"
    DRIVE_PATTERN = re.compile(r'^[A-Za-z]:')

    # Control characters never belong in a file name
    CONTROL_CHAR_PATTERN = re.compile(r'[\x00-\x1f\x7f]')

    @classmethod
    def sanitize_relative_path(cls, path: str) -> str:
        """
        Validate a slash-separated path relative to a project root.

        Args:
            path: Raw path from a model reply (e.g., "src/app.js")

        Returns:
            The path, unchanged if valid

        Raises:
            PathValidationError: If the path is empty, absolute, uses
                backslashes, has empty/'.'/'..' segments, a drive prefix,
                or control characters

        Examples:
            >>> PathValidator.sanitize_relative_path("src/components/Nav.jsx")
            'src/components/Nav.jsx'

            >>> PathValidator.sanitize_relative_path("../etc/passwd")
            PathValidationError: Invalid path
        """
        if not path:
            raise PathValidationError("Path cannot be empty")

        if '\\' in path:
            raise PathValidationError(f"Invalid path: '{path}'. Backslashes not allowed.")

        if path.startswith('/'):
            raise PathValidationError(f"Invalid path: '{path}'. Absolute paths not allowed.")

        if cls.DRIVE_PATTERN.match(path):
            raise PathValidationError(f"Invalid path: '{path}'. Drive prefixes not allowed.")

        if cls.CONTROL_CHAR_PATTERN.search(path):
            raise PathValidationError(f"Invalid path: '{path}'. Control characters not allowed.")

        for segment in path.split('/'):
            if segment in ('', '.', '..'):
                raise PathValidationError(
                    f"Invalid path: '{path}'. Empty, '.' and '..' segments not allowed."
                )

        return path

    @classmethod
    def validate_within_root(cls, file_path: Path, root: Path) -> Path:
        """
        Validate that file_path is within root directory (no path traversal).

        Symlinks are resolved, so a link inside the workspace pointing
        elsewhere is rejected too.

        Args:
            file_path: File path to validate
            root: Root directory that must contain file_path

        Returns:
            Resolved file path

        Raises:
            PathValidationError: If file_path escapes root directory
        """
        try:
            file_resolved = file_path.resolve()
            root_resolved = root.resolve()
            file_resolved.relative_to(root_resolved)
            return file_resolved
        except ValueError:
            raise PathValidationError(
                f"Path traversal detected: {file_path} is not within {root}"
            )

    @classmethod
    def resolve_in_workspace(cls, workspace: Path, path: str) -> Path:
        """
        Map a project-relative path onto a workspace directory.

        Args:
            workspace: Workspace root directory
            path: Project-relative path

        Returns:
            Absolute path inside the workspace

        Raises:
            PathValidationError: If the path is invalid or escapes the workspace
        """
        relative = PurePosixPath(cls.sanitize_relative_path(path))
        return cls.validate_within_root(workspace.joinpath(*relative.parts), workspace)

    @classmethod
    def validate_workspace_dir(cls, path: str | Path) -> Path:
        """
        Validate a workspace directory (may not exist yet).

        Args:
            path: Workspace directory

        Returns:
            Resolved absolute path

        Raises:
            PathValidationError: If the path exists and is not a directory
        """
        path_obj = Path(path).expanduser().resolve()
        if path_obj.exists() and not path_obj.is_dir():
            raise PathValidationError(f"Workspace is not a directory: {path_obj}")
        return path_obj
