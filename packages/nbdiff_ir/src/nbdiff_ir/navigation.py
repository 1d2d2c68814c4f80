from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from .models import AddRangeOp, DiffEntry, DiffKey, PatchOp, RemoveRangeOp
from .validation import validate_sequence_op

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def get_sub_diff_by_key(diff: Sequence[DiffEntry] | None, key: DiffKey) -> list[DiffEntry] | None:
    """
    Return the nested diff of the first entry targeting `key`, if any.
    Diffs are short, so a linear scan is used.
    """
    if not diff:
        return None
    for entry in diff:
        if entry.key == key:
            if isinstance(entry, PatchOp) and entry.diff is not None:
                return list(entry.diff)
            return None
    return None


def get_diff_entry_by_key(diff: Sequence[DiffEntry] | None, key: DiffKey) -> DiffEntry | None:
    if not diff:
        return None
    for entry in diff:
        if entry.key == key:
            return entry
    return None


def strip_source(diff: Sequence[DiffEntry] | None) -> list[DiffEntry] | None:
    """Return a deep copy of `diff` with the provenance field removed from every op."""
    if diff is None:
        return None
    stripped: list[DiffEntry] = []
    for entry in diff:
        if isinstance(entry, PatchOp):
            stripped.append(PatchOp(key=entry.key, diff=strip_source(entry.diff)))
        else:
            stripped.append(entry.model_copy(update={"source": None}, deep=True))
    return stripped


def split_lines(text: str) -> list[str]:
    """Split `text` into lines, keeping line terminators. Never returns an empty list."""
    lines: list[str] = []
    start = 0
    for match in _LINE_BREAK_RE.finditer(text):
        lines.append(text[start : match.end()])
        start = match.end()
    lines.append(text[start:])
    return lines


def accumulate_lengths(items: Sequence[Any]) -> list[int]:
    totals: list[int] = []
    running = 0
    for item in items:
        running += len(item)
        totals.append(running)
    return totals


def _validate_string_entry(lines: Sequence[str], entry: DiffEntry) -> None:
    validate_sequence_op(lines, entry)
    if isinstance(entry, PatchOp) and entry.diff is not None:
        line = lines[entry.key]
        for nested in entry.diff:
            validate_sequence_op(line, nested)


def flatten_string_diff(value: str | Sequence[str], diff: Sequence[DiffEntry]) -> list[DiffEntry]:
    """
    Translate a diff over the lines of a multi-line string into a diff over
    absolute character offsets of the joined string.
    """
    lines = split_lines(value) if isinstance(value, str) else list(value)
    line_to_char = [0] + accumulate_lengths(lines)

    flattened: list[DiffEntry] = []
    for entry in diff:
        _validate_string_entry(lines, entry)
        line_offset = line_to_char[entry.key]
        if isinstance(entry, PatchOp):
            for nested in entry.diff or []:
                source = nested.source if nested.source is not None else entry.source
                flattened.append(
                    nested.model_copy(
                        update={"key": nested.key + line_offset, "source": source},
                        deep=True,
                    )
                )
        elif isinstance(entry, AddRangeOp):
            flattened.append(
                AddRangeOp(
                    key=line_offset,
                    valuelist="".join(entry.valuelist),
                    source=entry.source,
                )
            )
        elif isinstance(entry, RemoveRangeOp):
            end_offset = line_to_char[entry.key + entry.length]
            flattened.append(
                RemoveRangeOp(
                    key=line_offset,
                    length=end_offset - line_offset,
                    source=entry.source,
                )
            )

    # Nested entries were only ordered within their own line.
    return sorted(flattened, key=lambda item: item.key)
