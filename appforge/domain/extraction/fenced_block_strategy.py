"""Strategy 1: fenced blocks whose info token is a file path.

    ```src/app.js
    console.log('hi');
    ```

The token must carry a ``/`` or a ``.``; ```` ```javascript ```` and bare
```` ``` ```` blocks are ordinary code samples and are dropped.
"""

from appforge.domain.extraction.fences import (
    FenceScan,
    SourceLine,
    is_path_like,
    parse_opener,
)
from appforge.domain.models.extracted_file import ExtractedFile


def extract_fenced_files(scan: FenceScan) -> list[ExtractedFile]:
    """Return one file per path-tagged block, in order of appearance."""
    return [
        ExtractedFile(path=block.token, content=block.body)
        for block in scan.blocks
        if is_path_like(block.token)
    ]


def embedded_file_openers(scan: FenceScan) -> list[tuple[str, SourceLine]]:
    """Path-tagged opener lines that ended up inside another file's body.

    Returns (enclosing path, opener line) pairs. A file block that lost its
    closer runs on into the next file and shows up here. Openers with a
    shorter fence than the enclosing one are nested samples and not counted.
    """
    found = []
    for block in scan.blocks:
        if not is_path_like(block.token):
            continue
        outer_fence, _ = parse_opener(scan.lines[block.opener_index].text)
        for line in scan.lines[block.opener_index + 1:block.closer_index]:
            inner = parse_opener(line.text)
            if inner is not None and inner[0] >= outer_fence and is_path_like(inner[1]):
                found.append((block.token, line))
    return found
