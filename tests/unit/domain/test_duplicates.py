"""Tests for duplicate path resolution."""

import pytest

from appforge.domain.duplicates import DuplicatePolicy, find_duplicate_paths, resolve_duplicates
from appforge.domain.errors import DuplicatePathError
from appforge.domain.models.extracted_file import ExtractedFile


def _files(*pairs: tuple[str, str]) -> list[ExtractedFile]:
    return [ExtractedFile(path=p, content=c) for p, c in pairs]


FILES = _files(
    ("src/a.js", "a1"),
    ("src/b.js", "b"),
    ("src/a.js", "a2"),
    ("src/c.js", "c"),
)


class TestResolveDuplicates:
    def test_keep_all_is_unchanged(self) -> None:
        assert resolve_duplicates(FILES, DuplicatePolicy.KEEP_ALL) == FILES

    def test_first_keeps_first_occurrence(self) -> None:
        result = resolve_duplicates(FILES, DuplicatePolicy.FIRST)

        assert [(f.path, f.content) for f in result] == [
            ("src/a.js", "a1"),
            ("src/b.js", "b"),
            ("src/c.js", "c"),
        ]

    def test_last_keeps_last_occurrence_at_its_position(self) -> None:
        result = resolve_duplicates(FILES, DuplicatePolicy.LAST)

        assert [(f.path, f.content) for f in result] == [
            ("src/b.js", "b"),
            ("src/a.js", "a2"),
            ("src/c.js", "c"),
        ]

    def test_reject_raises_with_paths(self) -> None:
        with pytest.raises(DuplicatePathError) as exc_info:
            resolve_duplicates(FILES, DuplicatePolicy.REJECT)

        assert exc_info.value.paths == ["src/a.js"]
        assert "src/a.js" in str(exc_info.value)
        assert isinstance(exc_info.value, ValueError)

    @pytest.mark.parametrize("policy", list(DuplicatePolicy))
    def test_no_duplicates_is_unchanged_under_every_policy(self, policy: DuplicatePolicy) -> None:
        files = _files(("a.js", "1"), ("b.js", "2"))

        assert resolve_duplicates(files, policy) == files

    def test_input_not_mutated(self) -> None:
        files = list(FILES)

        resolve_duplicates(files, DuplicatePolicy.LAST)

        assert files == FILES


def test_find_duplicate_paths_in_first_appearance_order() -> None:
    files = _files(("b", "1"), ("a", "1"), ("a", "2"), ("b", "2"), ("a", "3"))

    assert find_duplicate_paths(files) == ["b", "a"]


def test_policy_values_match_config_strings() -> None:
    assert DuplicatePolicy("last") is DuplicatePolicy.LAST
    assert DuplicatePolicy("keep_all") is DuplicatePolicy.KEEP_ALL
