"""Prompt builder for constructing prompts from structured sections.

Implements the Builder pattern for assembling the system and user prompts
of a generation turn.
"""
from typing import Self

from appforge.domain.models.extracted_file import ExtractedFile


def render_file_block(path: str, content: str) -> str:
    """Render a file in the notation the extraction engine reads first.

    The fence is made longer than any backtick run inside the content so
    nested code blocks do not close it early.
    """
    longest = 0
    run = 0
    for char in content:
        run = run + 1 if char == "`" else 0
        longest = max(longest, run)
    fence = "`" * max(3, longest + 1)
    return f"{fence}{path}\n{content}\n{fence}"


class PromptBuilder:
    """Builds prompt content from structured sections.

    Supports fluent interface for setting sections and builds
    user_prompt and system_prompt based on provider capabilities.
    """

    def __init__(self) -> None:
        self._role: str | None = None
        self._context: str | None = None
        self._current_files: list[ExtractedFile] = []
        self._task: str | None = None
        self._constraints: str | None = None
        self._output_format: str | None = None

    def with_role(self, role: str | None) -> Self:
        """Set the role section."""
        self._role = role
        return self

    def with_context(self, context: str | None) -> Self:
        """Set the context section."""
        self._context = context
        return self

    def with_current_files(self, files: list[ExtractedFile] | None) -> Self:
        """Set files already in the workspace, rendered as file blocks."""
        self._current_files = list(files) if files else []
        return self

    def with_task(self, task: str | None) -> Self:
        """Set the task section (required)."""
        self._task = task
        return self

    def with_constraints(self, constraints: str | None) -> Self:
        """Set the constraints section."""
        self._constraints = constraints
        return self

    def with_output_format(self, output_format: str | None) -> Self:
        """Set the output format section."""
        self._output_format = output_format
        return self

    def build(self, supports_system_prompt: bool = False) -> dict[str, str]:
        """Build the final prompt.

        Args:
            supports_system_prompt: Whether to separate role/constraints/output
                format into system_prompt

        Returns:
            dict with keys:
            - "user_prompt": The main prompt content
            - "system_prompt": System instructions (empty if not supported)

        Raises:
            ValueError: If no task was set
        """
        if not self._task:
            raise ValueError("Prompt task is required")

        system_sections = self._system_sections()
        user_sections = self._user_sections()

        if supports_system_prompt:
            return {
                "system_prompt": "\n\n".join(system_sections),
                "user_prompt": "\n\n".join(user_sections),
            }
        return {
            "system_prompt": "",
            "user_prompt": "\n\n".join(system_sections + user_sections),
        }

    def _system_sections(self) -> list[str]:
        sections = []
        if self._role:
            sections.append(f"## Role\n\n{self._role}")
        if self._constraints:
            sections.append(f"## Constraints\n\n{self._constraints}")
        if self._output_format:
            sections.append(f"## Output Format\n\n{self._output_format}")
        return sections

    def _user_sections(self) -> list[str]:
        sections = []
        if self._context:
            sections.append(f"## Context\n\n{self._context}")
        if self._current_files:
            sections.append(self._render_current_files())
        sections.append(f"## Task\n\n{self._task}")
        return sections

    def _render_current_files(self) -> str:
        lines = ["## Current Files", ""]
        for f in self._current_files:
            lines.append(render_file_block(f.path, f.content))
            lines.append("")
        return "\n".join(lines).rstrip("\n")
