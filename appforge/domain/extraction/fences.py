"""Fenced code block scanning shared by the extraction strategies.

Grammar (one line per production, matched against a single source line):

    opener := INDENT "```"... [TOKEN] BLANKS
    closer := INDENT "```"... BLANKS
    INDENT := zero to three spaces
    TOKEN  := one or more characters, none of them whitespace or a backtick
    BLANKS := zero or more spaces or tabs

A closer must carry at least as many backticks as its opener. A line that
matches neither production is body text. An opener with a TOKEN is never a
closer, so a ```` ```json ```` line inside a block body stays in the body.

The body of a block is the text between the end of the opener line and the
start of the closer line. Exactly one leading and one trailing line break
(``\\n`` or ``\\r\\n``) are trimmed from it; nothing else is touched.

Scanning is a single left-to-right pass. Every terminated block is consumed
whole, whatever its token, and scanning resumes on the line after its
closer. An opener without a closer is recorded as unterminated and scanning
resumes on the line right after it.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass

_OPENER_RE = re.compile(r"^ {0,3}(?P<fence>`{3,})(?P<token>[^\s`]+)?[ \t]*$")
_CLOSER_RE = re.compile(r"^ {0,3}(?P<fence>`{3,})[ \t]*$")


@dataclass(frozen=True)
class SourceLine:
    """A single line of the scanned text.

    ``start``/``end`` delimit the line text without its terminator;
    ``next_start`` is the offset of the following line.
    """

    number: int
    start: int
    end: int
    next_start: int
    text: str


@dataclass(frozen=True)
class FencedBlock:
    """A terminated fenced block."""

    token: str | None
    opener_index: int
    closer_index: int
    body: str


@dataclass(frozen=True)
class FenceScan:
    """Result of scanning a text for fenced blocks."""

    lines: tuple[SourceLine, ...]
    blocks: tuple[FencedBlock, ...]
    unterminated: tuple[SourceLine, ...]

    def enclosing_block(self, line_index: int) -> FencedBlock | None:
        """Return the block whose opener..closer range covers ``line_index``."""
        for block in self.blocks:
            if block.opener_index <= line_index <= block.closer_index:
                return block
        return None


def split_lines(text: str) -> tuple[SourceLine, ...]:
    """Split ``text`` on ``\\n`` keeping offsets into the original string.

    A trailing ``\\r`` is dropped from ``SourceLine.text`` but stays part of
    the line's span, so slicing the original text by offsets is lossless.
    """
    lines: list[SourceLine] = []
    offset = 0
    number = 1
    length = len(text)
    while offset < length:
        newline = text.find("\n", offset)
        if newline == -1:
            end = next_start = length
        else:
            end = newline
            next_start = newline + 1
        if end > offset and text[end - 1] == "\r":
            end -= 1
        lines.append(
            SourceLine(
                number=number,
                start=offset,
                end=end,
                next_start=next_start,
                text=text[offset:end],
            )
        )
        offset = next_start
        number += 1
    return tuple(lines)


def trim_fence_body(body: str) -> str:
    """Trim exactly one leading and one trailing line break from ``body``."""
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]
    if body.endswith("\r\n"):
        body = body[:-2]
    elif body.endswith("\n"):
        body = body[:-1]
    return body


def trim_blank_lines(text: str) -> str:
    """Drop whitespace-only lines from both ends of ``text``."""
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if lines and lines[-1].endswith("\r"):
        lines[-1] = lines[-1][:-1]
    return "\n".join(lines)


class _Closers:
    """Lines that can close a block, searchable by position and fence length.

    ``_spans[k][i]`` is the longest fence among candidates ``i .. i + 2**k - 1``,
    so the first long-enough closer is found in logarithmic time.
    """

    def __init__(self, lines: tuple[SourceLine, ...]) -> None:
        self._indices: list[int] = []
        lengths: list[int] = []
        for index, line in enumerate(lines):
            match = _CLOSER_RE.match(line.text)
            if match is not None:
                self._indices.append(index)
                lengths.append(len(match.group("fence")))
        self._spans = [lengths]
        width = 1
        while width * 2 <= len(lengths):
            previous = self._spans[-1]
            self._spans.append(
                [max(previous[i], previous[i + width]) for i in range(len(previous) - width)]
            )
            width *= 2

    def find(self, start: int, min_fence: int) -> int | None:
        """Line index of the first closer at or after ``start`` with ``min_fence`` backticks."""
        count = len(self._indices)
        position = bisect.bisect_left(self._indices, start)
        for level in range(len(self._spans) - 1, -1, -1):
            if position + (1 << level) <= count and self._spans[level][position] < min_fence:
                position += 1 << level
        if position < count and self._spans[0][position] >= min_fence:
            return self._indices[position]
        return None


def scan_fenced_blocks(text: str) -> FenceScan:
    """Scan ``text`` for fenced blocks.

    Args:
        text: Any string.

    Returns:
        FenceScan with the terminated blocks and the unterminated openers,
        both in order of appearance.
    """
    lines = split_lines(text)
    closers = _Closers(lines)
    blocks: list[FencedBlock] = []
    unterminated: list[SourceLine] = []

    index = 0
    while index < len(lines):
        opener = _OPENER_RE.match(lines[index].text)
        if opener is None:
            index += 1
            continue

        closer_index = closers.find(index + 1, len(opener.group("fence")))
        if closer_index is None:
            unterminated.append(lines[index])
            index += 1
            continue

        body = text[lines[index].end:lines[closer_index].start]
        blocks.append(
            FencedBlock(
                token=opener.group("token"),
                opener_index=index,
                closer_index=closer_index,
                body=trim_fence_body(body),
            )
        )
        index = closer_index + 1

    return FenceScan(lines=lines, blocks=tuple(blocks), unterminated=tuple(unterminated))


def is_path_like(token: str | None) -> bool:
    """A token names a file when it carries a ``/`` or a ``.``."""
    return bool(token) and ("/" in token or "." in token)


def parse_opener(text: str) -> tuple[int, str | None] | None:
    """(fence length, info token) of an opener line, or None for any other line."""
    match = _OPENER_RE.match(text)
    if match is None:
        return None
    return len(match.group("fence")), match.group("token")
