from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Any

from .errors import StructuralValidationError
from .models import AddOp, AddRangeOp, DiffEntry, PatchOp, RemoveOp, RemoveRangeOp, ReplaceOp


def _is_index(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def validate_sequence_op(base: Sequence[Any], entry: DiffEntry) -> None:
    """Check that `entry` can be applied to the sequence `base`."""
    if not _is_index(entry.key):
        raise StructuralValidationError(
            f"invalid sequence op {entry.op!r}: key is not an integer: {entry.key!r}",
            code="DIFF_KEY_TYPE_INVALID",
            key=entry.key,
            op=entry.op,
        )
    index = entry.key
    size = len(base)

    if isinstance(entry, AddRangeOp):
        if index < 0 or index > size:
            raise StructuralValidationError(
                f"invalid addrange op: key out of range: {index} (length {size})",
                code="DIFF_KEY_OUT_OF_RANGE",
                key=index,
                op=entry.op,
            )
        return

    if isinstance(entry, RemoveRangeOp):
        if index < 0 or index >= size:
            raise StructuralValidationError(
                f"invalid removerange op: key out of range: {index} (length {size})",
                code="DIFF_KEY_OUT_OF_RANGE",
                key=index,
                op=entry.op,
            )
        if entry.length < 0 or index + entry.length > size:
            raise StructuralValidationError(
                f"invalid removerange op: range too long: key {index} + length "
                f"{entry.length} exceeds length {size}",
                code="DIFF_RANGE_TOO_LONG",
                key=index,
                op=entry.op,
            )
        return

    if isinstance(entry, PatchOp):
        if index < 0 or index >= size:
            raise StructuralValidationError(
                f"invalid patch op: key out of range: {index} (length {size})",
                code="DIFF_KEY_OUT_OF_RANGE",
                key=index,
                op=entry.op,
            )
        return

    raise StructuralValidationError(
        f"invalid op on sequence: {entry.op!r} (key {index})",
        code="DIFF_OP_UNSUPPORTED",
        key=index,
        op=entry.op,
    )


def validate_object_op(base: Any, entry: DiffEntry, keys: Collection[str]) -> None:
    """Check that `entry` can be applied to an object whose member names are `keys`."""
    if not isinstance(entry.key, str):
        raise StructuralValidationError(
            f"invalid object op {entry.op!r}: key is not a string: {entry.key!r}",
            code="DIFF_KEY_TYPE_INVALID",
            key=entry.key,
            op=entry.op,
        )
    key = entry.key

    if isinstance(entry, AddOp):
        if key in keys:
            raise StructuralValidationError(
                f"invalid add op: key already present: {key!r}",
                code="DIFF_KEY_PRESENT",
                key=key,
                op=entry.op,
            )
        return

    if isinstance(entry, (RemoveOp, ReplaceOp, PatchOp)):
        if key not in keys:
            raise StructuralValidationError(
                f"invalid {entry.op} op: missing key: {key!r}",
                code="DIFF_KEY_MISSING",
                key=key,
                op=entry.op,
            )
        return

    raise StructuralValidationError(
        f"invalid op on object: {entry.op!r} (key {key!r})",
        code="DIFF_OP_UNSUPPORTED",
        key=key,
        op=entry.op,
    )
