import logging
import shutil
from pathlib import Path

from appforge.domain.models.extracted_file import FileSet
from appforge.domain.validation.path_validator import PathValidator, PathValidationError

logger = logging.getLogger(__name__)

# Directories never read back into a prompt
IGNORED_DIRS = frozenset({"node_modules", "dist", "build", "coverage", "__pycache__"})


def clear_workspace(workspace_dir: Path) -> None:
    """Remove everything inside ``workspace_dir``, keeping the directory itself."""
    if not workspace_dir.exists():
        return
    for entry in workspace_dir.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
    logger.info(f"Cleared workspace {workspace_dir}")


def write_files(workspace_dir: Path, files: FileSet, *, clean: bool = False) -> list[Path]:
    """
    Write an ordered file set into a workspace directory.

    Args:
        workspace_dir: The project directory. Created if missing.
        files: Extracted files; paths are relative to workspace_dir.
        clean: Empty the workspace before writing.

    Returns:
        The written paths, in file-set order. A path repeated in the file
        set appears once per occurrence; its last content is what remains
        on disk.

    Raises:
        ValueError:
            - If the workspace cannot be created (message contains "Cannot create directory").
            - If any path is invalid (message contains "Invalid path").
            - If any file cannot be written (message contains "Failed to write file").
    """
    if not isinstance(workspace_dir, Path):
        workspace_dir = Path(workspace_dir)

    try:
        workspace_dir = PathValidator.validate_workspace_dir(workspace_dir)
        workspace_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, PathValidationError) as e:
        raise ValueError(f"Cannot create directory '{workspace_dir}'") from e

    # First pass: validate every path before touching the disk
    targets: list[Path] = []
    for f in files:
        try:
            targets.append(PathValidator.resolve_in_workspace(workspace_dir, f.path))
        except PathValidationError as e:
            # Do not leak internal PathValidator messages; expose a stable surface
            raise ValueError(f"Invalid path '{f.path}'") from e

    if clean:
        clear_workspace(workspace_dir)

    written_paths: list[Path] = []
    for f, target in zip(files, targets):
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # newline="" keeps \r\n in generated sources exactly as extracted
            with target.open("w", encoding="utf-8", newline="") as handle:
                handle.write(f.content)
        except OSError as e:
            raise ValueError(f"Failed to write file '{f.path}'") from e

        logger.debug(f"Wrote {f.path} ({len(f.content)} chars)")
        written_paths.append(target)

    return written_paths


def read_workspace_file(workspace_dir: Path, path: str) -> str | None:
    """Return a workspace file's text, or None if it is missing, unsafe or not UTF-8."""
    try:
        target = PathValidator.resolve_in_workspace(workspace_dir, path)
    except PathValidationError:
        return None
    if not target.is_file():
        return None
    try:
        return target.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.debug(f"Skipping non-text workspace file {path}")
        return None


def _is_ignored(relative: Path) -> bool:
    return any(part in IGNORED_DIRS or part.startswith(".") for part in relative.parts[:-1])


def list_workspace_files(workspace_dir: Path) -> list[str]:
    """Relative POSIX paths of the project's own files, sorted.

    Dependency, build and dot-directories are skipped.
    """
    if not workspace_dir.is_dir():
        return []
    files = []
    for p in workspace_dir.rglob("*"):
        relative = p.relative_to(workspace_dir)
        if p.is_file() and not _is_ignored(relative):
            files.append(relative.as_posix())
    return sorted(files)
