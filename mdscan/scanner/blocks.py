"""Fenced code block scanning for Markdown documents."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple, Union

from ..models import CodeBlock, MalformedBlock

FENCE_CHAR = "`"
MIN_FENCE_LENGTH = 3

ScanItem = Union[CodeBlock, MalformedBlock]


def iter_blocks(text: str, path: str = "") -> Iterator[ScanItem]:
    """Yield code blocks in source order, plus a record for an unterminated fence.

    An opening fence is closed by the next line made only of backticks whose
    run is at least as long as the opener. Anything else inside the block,
    including shorter fences or fences carrying an info string, is content.
    An unterminated fence yields a single ``MalformedBlock`` and the rest of
    the document is treated as plain text.
    """
    lines = _split_lines(text)
    index = 0
    while index < len(lines):
        opening = parse_opening_fence(lines[index])
        if opening is None:
            index += 1
            continue

        length, tag = opening
        start = index
        closing = _find_closing(lines, start + 1, length)
        if closing is None:
            yield MalformedBlock(path=path, line=start + 1)
            return

        yield CodeBlock(
            path=path,
            tag=tag,
            start_line=start + 1,
            end_line=closing + 1,
            content="\n".join(lines[start + 1 : closing]),
            fence_length=length,
        )
        index = closing + 1


def parse_opening_fence(line: str) -> Optional[Tuple[int, str]]:
    """Return ``(backtick_count, info_string)`` when the line opens a fence."""
    stripped = line.strip()
    length = _fence_run(stripped)
    if length < MIN_FENCE_LENGTH:
        return None
    info = stripped[length:].strip()
    if FENCE_CHAR in info:
        return None
    return length, info


def is_closing_fence(line: str, opening_length: int) -> bool:
    stripped = line.strip()
    length = _fence_run(stripped)
    return length >= max(opening_length, MIN_FENCE_LENGTH) and length == len(stripped)


def _find_closing(lines: List[str], start: int, opening_length: int) -> Optional[int]:
    for index in range(start, len(lines)):
        if is_closing_fence(lines[index], opening_length):
            return index
    return None


def _fence_run(stripped: str) -> int:
    count = 0
    for char in stripped:
        if char != FENCE_CHAR:
            break
        count += 1
    return count


def _split_lines(text: str) -> List[str]:
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return normalized.split("\n")


__all__ = ["ScanItem", "is_closing_fence", "iter_blocks", "parse_opening_fence"]
