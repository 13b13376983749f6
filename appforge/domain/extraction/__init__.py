"""Response-to-file extraction engine."""

from appforge.domain.extraction.extractor import extract, extract_result

__all__ = ["extract", "extract_result"]
