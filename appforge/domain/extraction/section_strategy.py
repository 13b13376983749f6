"""Strategy 2: heading-delimited sections naming a file.

    ## File: src/index.ts
    Some prose.
    ```ts
    export const x = 1;
    ```

A heading line is a markdown heading marker, the word ``File`` or ``Path``,
a colon, and a path. The path is the first whitespace-free token after the
colon; one pair of wrapping backticks or quotes is removed. A section runs
to the next heading line or the end of the text. Heading-shaped lines inside
a terminated fenced block are body text, not headings.

The first terminated fenced block inside a section supplies the content. A
section without one contributes its whole body, blank lines trimmed from
both ends.
"""

import logging
import re

from appforge.domain.extraction.fences import FenceScan, is_path_like, trim_blank_lines
from appforge.domain.models.extracted_file import ExtractedFile

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^ {0,3}#{1,6}[ \t]+(?:File|Path)[ \t]*:[ \t]*(?P<rest>.*)$")
_WRAPPERS = ("`", '"', "'")


def _heading_path(rest: str) -> str | None:
    tokens = rest.split()
    if not tokens:
        return None
    path = tokens[0]
    if len(path) > 2 and path[0] == path[-1] and path[0] in _WRAPPERS:
        path = path[1:-1]
    return path


def extract_section_files(text: str, scan: FenceScan) -> list[ExtractedFile]:
    """Return one file per heading-delimited section, in order of appearance."""
    headings: list[tuple[int, str | None]] = []
    for index, line in enumerate(scan.lines):
        match = _HEADING_RE.match(line.text)
        if match is None or scan.enclosing_block(index) is not None:
            continue
        headings.append((index, _heading_path(match.group("rest"))))

    files: list[ExtractedFile] = []
    for position, (heading_index, path) in enumerate(headings):
        if not is_path_like(path):
            logger.debug(
                "Skipping section heading on line %d: no path-like token",
                scan.lines[heading_index].number,
            )
            continue

        if position + 1 < len(headings):
            end_index = headings[position + 1][0]
        else:
            end_index = len(scan.lines)

        inner = next(
            (
                block
                for block in scan.blocks
                if heading_index < block.opener_index < end_index
            ),
            None,
        )
        if inner is not None:
            content = inner.body
        else:
            body_start = scan.lines[heading_index].next_start
            body_end = scan.lines[end_index].start if end_index < len(scan.lines) else len(text)
            content = trim_blank_lines(text[body_start:body_end])

        files.append(ExtractedFile(path=path, content=content))

    return files
