from __future__ import annotations

import bisect
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Pos:
    line: int
    ch: int


@dataclass(frozen=True)
class DiffRangeRaw:
    """A range [start, start + length) of absolute character offsets."""

    start: int
    length: int
    source: Any = None

    @property
    def end(self) -> int:
        return self.start + self.length

    def offset(self, delta: int) -> "DiffRangeRaw":
        return DiffRangeRaw(start=self.start + delta, length=self.length, source=self.source)


@dataclass(frozen=True)
class DiffRangePos:
    """
    A range as line/column positions. The column of `end` is exclusive.

    `chunk_start_line` tells a renderer that the edit must open a fresh display
    line; `ends_on_newline` that the last character of the range is a newline.
    """

    start: Pos
    end: Pos
    chunk_start_line: bool = False
    ends_on_newline: bool = False
    source: Any = None


def newline_offsets(text: str) -> list[int]:
    offsets: list[int] = []
    index = text.find("\n")
    while index != -1:
        offsets.append(index)
        index = text.find("\n", index + 1)
    return offsets


def find_line_number(newlines: Sequence[int], offset: int) -> int:
    """Index of the first newline at or after `offset`, or the newline count if none."""
    return bisect.bisect_left(newlines, offset)


def _line_start(newlines: Sequence[int], line: int) -> int:
    return newlines[line - 1] + 1 if line > 0 else 0


def raw_to_pos(ranges: Iterable[DiffRangeRaw], text: str) -> list[DiffRangePos]:
    newlines = newline_offsets(text)
    newline_set = set(newlines)

    positions: list[DiffRangePos] = []
    for raw in ranges:
        line = find_line_number(newlines, raw.start)
        start = Pos(line, raw.start - _line_start(newlines, line))

        # `end` is exclusive, so its line is the line of the last character.
        line = find_line_number(newlines, raw.end - 1)
        end = Pos(line, raw.end - _line_start(newlines, line))

        starts_on_newline = raw.start in newline_set
        ends_on_newline = (raw.end - 1) in newline_set
        first_line_new = start.ch == 0 and (
            start.line != end.line or ends_on_newline or raw.end == len(text)
        )
        chunk_start_line = (
            first_line_new
            or not starts_on_newline
            or ((raw.start - 1) not in newline_set and raw.end not in newline_set)
        )
        positions.append(
            DiffRangePos(
                start=start,
                end=end,
                chunk_start_line=chunk_start_line,
                ends_on_newline=ends_on_newline,
                source=raw.source,
            )
        )
    return positions
