"""Caller-side handling of repeated paths in a file set.

The extraction engine keeps every occurrence of a path. Whoever persists the
files picks one of these policies.
"""

from enum import Enum

from appforge.domain.errors import DuplicatePathError
from appforge.domain.models.extracted_file import ExtractedFile, FileSet


class DuplicatePolicy(str, Enum):
    KEEP_ALL = "keep_all"  # Unchanged; on disk the last write wins
    FIRST = "first"        # First occurrence wins, at its position
    LAST = "last"          # Last occurrence wins, at its position
    REJECT = "reject"      # Raise DuplicatePathError


def find_duplicate_paths(files: FileSet) -> list[str]:
    """Paths that occur more than once, in order of first appearance."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for f in files:
        if f.path in seen and f.path not in duplicates:
            duplicates.append(f.path)
        seen.add(f.path)
    return duplicates


def resolve_duplicates(files: FileSet, policy: DuplicatePolicy) -> FileSet:
    """Apply ``policy`` to a file set.

    Args:
        files: Ordered file set, possibly repeating paths.
        policy: How repeated paths are resolved.

    Returns:
        A new ordered file set.

    Raises:
        DuplicatePathError: If policy is REJECT and a path repeats.
    """
    if policy == DuplicatePolicy.KEEP_ALL:
        return list(files)

    if policy == DuplicatePolicy.REJECT:
        duplicates = find_duplicate_paths(files)
        if duplicates:
            raise DuplicatePathError(duplicates)
        return list(files)

    if policy == DuplicatePolicy.FIRST:
        seen: set[str] = set()
        kept: list[ExtractedFile] = []
        for f in files:
            if f.path not in seen:
                seen.add(f.path)
                kept.append(f)
        return kept

    last_index = {f.path: i for i, f in enumerate(files)}
    return [f for i, f in enumerate(files) if last_index[f.path] == i]
