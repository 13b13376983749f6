"""Outcome of one generation turn."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from appforge.domain.models.extracted_file import ExtractedFile
from appforge.domain.models.extraction_result import ExtractionResult


class GenerationStatus(str, Enum):
    COMPLETED = "completed"                  # Files extracted and written
    NO_FILES = "no_files"                    # Reply held no recognizable files
    AWAITING_RESPONSE = "awaiting_response"  # Manual provider: prompt written, reply pending


class GenerationOutcome(BaseModel):
    status: GenerationStatus
    extraction: ExtractionResult | None = None
    files: list[ExtractedFile] = Field(default_factory=list)
    written_paths: list[Path] = Field(default_factory=list)
    prompt_path: Path | None = None
    response_path: Path | None = None
