"""Locate the file behind an error message and gather code for a fix prompt."""

import logging
import re
from pathlib import Path

from appforge.application.workspace_writer import list_workspace_files, read_workspace_file
from appforge.domain.models.extracted_file import ExtractedFile

logger = logging.getLogger(__name__)

# Tried in order; the first match wins.
_PATH_PATTERNS = [
    # Quoted source path: "src/components/Button.jsx"
    re.compile(r"[\"']([^\"'\s]+\.(?:jsx|tsx|js|ts|css))[\"']"),
    # Bare path, optionally with line/column: src/components/Button.jsx:10:5
    re.compile(r"(?:^|\s)([\w\-/.]+\.(?:jsx|tsx|js|ts|css))(?::\d+:\d+)?", re.MULTILINE),
    # Module resolution errors
    re.compile(
        r"(?:Cannot find module|Failed to resolve module|Module not found)[^'\"]+'([^']+)'",
        re.IGNORECASE,
    ),
    # Import/export statements quoted in the error
    re.compile(r"(?:import|export)[^'\"]+'([^']+)'"),
]
_COMPONENT_RE = re.compile(r"(?:component|Component|element)\s+([A-Z][a-zA-Z0-9]+)")

KEY_FILES = [
    "package.json",
    "index.html",
    "src/main.jsx",
    "src/main.tsx",
    "src/App.jsx",
    "src/App.tsx",
    "src/index.js",
    "src/index.tsx",
]
FALLBACK_FILE_COUNT = 3


def _normalize(path: str) -> str:
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def find_affected_path(error_message: str) -> str | None:
    """Guess which project file an error message points at.

    Returns:
        A slash-separated path, or None if nothing file-like was found.
    """
    for pattern in _PATH_PATTERNS:
        match = pattern.search(error_message)
        if match and match.group(1):
            return _normalize(match.group(1))

    component = _COMPONENT_RE.search(error_message)
    if component:
        return f"src/components/{component.group(1)}.jsx"

    return None


def _locate(workspace_dir: Path, candidate: str) -> str | None:
    """Map a candidate path onto a workspace file.

    Error messages often carry absolute paths; the longest workspace file
    the candidate ends with is taken.
    """
    files = list_workspace_files(workspace_dir)
    if candidate in files:
        return candidate
    suffixes = [f for f in files if candidate.endswith("/" + f)]
    return max(suffixes, key=len) if suffixes else None


def collect_code_context(
    workspace_dir: Path, affected_path: str | None
) -> tuple[str | None, list[ExtractedFile]]:
    """Gather the files to show the model for a fix.

    The affected file alone when it exists; otherwise the key project files;
    otherwise the first few files of the workspace.

    Returns:
        (resolved affected path or None, files)
    """
    if affected_path:
        located = _locate(workspace_dir, affected_path)
        if located:
            content = read_workspace_file(workspace_dir, located)
            if content is not None:
                return located, [ExtractedFile(path=located, content=content)]
        logger.debug(f"Affected file {affected_path!r} not found in {workspace_dir}")

    context: list[ExtractedFile] = []
    for path in KEY_FILES:
        content = read_workspace_file(workspace_dir, path)
        if content is not None:
            context.append(ExtractedFile(path=path, content=content))

    if not context:
        for path in list_workspace_files(workspace_dir)[:FALLBACK_FILE_COUNT]:
            content = read_workspace_file(workspace_dir, path)
            if content is not None:
                context.append(ExtractedFile(path=path, content=content))

    return None, context
