"""Tagged extraction result."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from appforge.domain.models.extracted_file import ExtractedFile


class ExtractionStatus(str, Enum):
    OK = "ok"                # Files found, nothing skipped
    EMPTY = "empty"          # No files, nothing skipped
    MALFORMED = "malformed"  # Something was skipped; files are the partial result


class ExtractionStrategy(str, Enum):
    """Which pass produced the files."""

    FENCED_BLOCK = "fenced_block"
    HEADING_SECTION = "heading_section"


class ExtractionIssue(BaseModel):
    """A candidate the engine skipped.

    ``line`` is 1-based, or None when the issue is not tied to a line.
    """

    model_config = ConfigDict(frozen=True)

    line: int | None = None
    message: str


class ExtractionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: ExtractionStatus
    files: list[ExtractedFile] = Field(default_factory=list)
    strategy: ExtractionStrategy | None = None
    issues: list[ExtractionIssue] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        files: list[ExtractedFile],
        strategy: ExtractionStrategy | None,
        issues: list[ExtractionIssue],
    ) -> "ExtractionResult":
        """Derive the status from what was found and what was skipped."""
        if issues:
            status = ExtractionStatus.MALFORMED
        elif files:
            status = ExtractionStatus.OK
        else:
            status = ExtractionStatus.EMPTY
        return cls(
            status=status,
            files=list(files),
            strategy=strategy if files else None,
            issues=list(issues),
        )

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]
