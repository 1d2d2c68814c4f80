from __future__ import annotations

from typing import Any

from nbdiff_ir import AddOp, ContractViolation, DiffEntry, RemoveOp, ReplaceOp


class _Absent:
    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


# Marks a missing value; distinct from None, which is a valid JSON value.
ABSENT: Any = _Absent()


class ImmutableDiffModel:
    """Diff model for an atomic value such as a cell's execution count."""

    def __init__(self, base: Any = ABSENT, remote: Any = ABSENT) -> None:
        self._base = base
        self._remote = remote

    @property
    def base(self) -> Any:
        return self._base

    @property
    def remote(self) -> Any:
        return self._remote

    @property
    def unchanged(self) -> bool:
        return self._base == self._remote

    @property
    def added(self) -> bool:
        return self._base is ABSENT

    @property
    def deleted(self) -> bool:
        return self._remote is ABSENT

    def __repr__(self) -> str:
        return f"ImmutableDiffModel(base={self._base!r}, remote={self._remote!r})"


def _invalid(entry: DiffEntry, reason: str) -> ContractViolation:
    return ContractViolation(
        f"invalid diff op {entry.op!r} on immutable value {entry.key!r}: {reason}",
        code="IMMUTABLE_OP_INVALID",
        key=entry.key,
        op=entry.op,
    )


def create_immutable_model(
    base: Any,
    remote: Any = ABSENT,
    entry: DiffEntry | None = None,
) -> ImmutableDiffModel:
    """
    Build a model from a base value and at most one diff entry.

    Without an entry the model pairs `base` with `remote` as given. An add
    followed by a remove on the same key must already have been merged into a
    replace by the diff producer.
    """
    if entry is None:
        return ImmutableDiffModel(base, remote)
    if isinstance(entry, AddOp):
        if base is not ABSENT:
            raise _invalid(entry, "value already present")
        return ImmutableDiffModel(base, entry.value)
    if isinstance(entry, RemoveOp):
        if base is ABSENT:
            raise _invalid(entry, "value is absent")
        return ImmutableDiffModel(base, ABSENT)
    if isinstance(entry, ReplaceOp):
        if base is ABSENT:
            raise _invalid(entry, "value is absent")
        return ImmutableDiffModel(base, entry.value)
    raise _invalid(entry, "only add, remove and replace apply to atomic values")
