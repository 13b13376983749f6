"""Response-to-file extraction.

Turns the free text of one model reply into an ordered list of files. Two
strategies run in priority order over the same scan of the text:

1. fenced blocks tagged with a path (``fenced_block_strategy``);
2. only when 1 finds nothing, heading-delimited sections
   (``section_strategy``).

Results of the two strategies are never merged. Files come back in the
order their opening delimiters appear; repeated paths are all kept.

Both entry points are pure functions and never raise.
"""

import logging

from appforge.domain.extraction.fenced_block_strategy import (
    embedded_file_openers,
    extract_fenced_files,
)
from appforge.domain.extraction.fences import scan_fenced_blocks
from appforge.domain.extraction.section_strategy import extract_section_files
from appforge.domain.models.extracted_file import FileSet
from appforge.domain.models.extraction_result import (
    ExtractionIssue,
    ExtractionResult,
    ExtractionStatus,
    ExtractionStrategy,
)

logger = logging.getLogger(__name__)


def extract_result(raw: str) -> ExtractionResult:
    """Extract files from a model reply as a tagged result.

    Args:
        raw: The complete text of one model reply.

    Returns:
        ExtractionResult whose status is ``ok``, ``empty``, or ``malformed``
        (something was skipped; ``files`` holds whatever was recovered).
    """
    try:
        scan = scan_fenced_blocks(raw)
        issues = [
            ExtractionIssue(
                line=line.number,
                message=f"Unterminated fence: {line.text.strip()!r}",
            )
            for line in scan.unterminated
        ]
        issues.extend(
            ExtractionIssue(
                line=line.number,
                message=f"File block {line.text.strip()!r} is inside the body of {path!r}",
            )
            for path, line in embedded_file_openers(scan)
        )
        issues.sort(key=lambda issue: issue.line)

        files = extract_fenced_files(scan)
        strategy = ExtractionStrategy.FENCED_BLOCK
        if not files:
            files = extract_section_files(raw, scan)
            strategy = ExtractionStrategy.HEADING_SECTION

        result = ExtractionResult.build(files, strategy, issues)
    except Exception as e:
        logger.exception("Extraction failed, returning no files")
        return ExtractionResult(
            status=ExtractionStatus.MALFORMED,
            issues=[ExtractionIssue(message=f"Extraction failed: {e}")],
        )

    logger.debug(
        "Extracted %d file(s), status=%s, strategy=%s, issues=%d",
        len(result.files),
        result.status.value,
        result.strategy.value if result.strategy else None,
        len(result.issues),
    )
    return result


def extract(raw: str) -> FileSet:
    """Extract the ordered file set from a model reply.

    Same extraction as ``extract_result``, without the diagnostics.
    """
    return extract_result(raw).files
