from __future__ import annotations

import copy
from collections.abc import Callable, Sequence
from typing import Any

from .errors import ContractViolation
from .models import AddOp, AddRangeOp, DiffEntry, PatchOp, RemoveOp, RemoveRangeOp, ReplaceOp
from .navigation import split_lines
from .validation import validate_object_op, validate_sequence_op


def _patch_sequence(
    base: Sequence[Any],
    diff: Sequence[DiffEntry],
    patch_item: Callable[[Any, list[DiffEntry] | None], Any],
) -> list[Any]:
    patched: list[Any] = []
    take = 0
    for entry in diff:
        validate_sequence_op(base, entry)
        index = entry.key
        patched.extend(copy.deepcopy(list(base[take:index])))

        if isinstance(entry, AddRangeOp):
            patched.extend(copy.deepcopy(list(entry.valuelist)))
            skip = 0
        elif isinstance(entry, RemoveRangeOp):
            skip = entry.length
        else:
            patched.append(patch_item(base[index], entry.diff))
            skip = 1

        # Never step back: a remove/add pair may share one index.
        take = max(take, index + skip)

    patched.extend(copy.deepcopy(list(base[take:])))
    return patched


def _patch_dict(base: dict[str, Any], diff: Sequence[DiffEntry]) -> dict[str, Any]:
    patched = copy.deepcopy(base)
    for entry in diff:
        validate_object_op(base, entry, patched.keys())
        if isinstance(entry, (AddOp, ReplaceOp)):
            patched[entry.key] = copy.deepcopy(entry.value)
        elif isinstance(entry, RemoveOp):
            del patched[entry.key]
        elif isinstance(entry, PatchOp):
            patched[entry.key] = patch(base[entry.key], entry.diff)
    return patched


def _patch_line(line: str, diff: list[DiffEntry] | None) -> str:
    if not diff:
        return line
    return "".join(_patch_sequence(line, diff, _reject_char_patch))


def _reject_char_patch(value: Any, diff: list[DiffEntry] | None) -> Any:
    raise ContractViolation(
        f"cannot patch inside a single character: {value!r}",
        code="PATCH_TARGET_INVALID",
        op="patch",
    )


def _patch_string(base: str, diff: Sequence[DiffEntry]) -> str:
    lines = split_lines(base)
    return "".join(_patch_sequence(lines, diff, _patch_line))


def patch(base: Any, diff: Sequence[DiffEntry] | None) -> Any:
    """
    Apply `diff` to `base` and return the patched value. `base` is not modified.

    Strings are patched line-wise; a patch entry on a line carries a
    character-level diff of that line.
    """
    if not diff:
        return copy.deepcopy(base)
    if isinstance(base, dict):
        return _patch_dict(base, diff)
    if isinstance(base, str):
        return _patch_string(base, diff)
    if isinstance(base, (list, tuple)):
        return _patch_sequence(base, diff, patch)
    raise ContractViolation(
        f"cannot patch value of type {type(base).__name__}",
        code="PATCH_TARGET_INVALID",
    )
