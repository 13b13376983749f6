"""Domain models for appforge."""

from .extracted_file import ExtractedFile, FileSet
from .extraction_result import (
    ExtractionIssue,
    ExtractionResult,
    ExtractionStatus,
    ExtractionStrategy,
)
from .generation_outcome import GenerationOutcome, GenerationStatus


__all__ = [
    "ExtractedFile",
    "FileSet",
    "ExtractionIssue",
    "ExtractionResult",
    "ExtractionStatus",
    "ExtractionStrategy",
    "GenerationOutcome",
    "GenerationStatus",
]
