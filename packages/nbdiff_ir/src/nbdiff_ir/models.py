from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import StructuralValidationError

SchemaVersion = Literal["nbdiff.diff.v0"]

# Sequence containers are keyed by index, objects by member name.
DiffKey = Union[int, str]


class AddRangeOp(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    op: Literal["addrange"] = "addrange"
    key: DiffKey
    valuelist: Union[list[Any], str]
    source: Optional[Any] = None


class RemoveRangeOp(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    op: Literal["removerange"] = "removerange"
    key: DiffKey
    length: int
    source: Optional[Any] = None


class ReplaceOp(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    op: Literal["replace"] = "replace"
    key: DiffKey
    value: Any
    source: Optional[Any] = None


class AddOp(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    op: Literal["add"] = "add"
    key: DiffKey
    value: Any
    source: Optional[Any] = None


class RemoveOp(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    op: Literal["remove"] = "remove"
    key: DiffKey
    source: Optional[Any] = None


class PatchOp(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    op: Literal["patch"] = "patch"
    key: DiffKey
    diff: Optional[list[DiffEntry]] = None
    source: Optional[Any] = None


DiffEntry = Annotated[
    Union[AddRangeOp, RemoveRangeOp, ReplaceOp, AddOp, RemoveOp, PatchOp],
    Field(discriminator="op"),
]
Diff = list[DiffEntry]

PatchOp.model_rebuild()

DIFF_ENTRY_TYPES = (AddRangeOp, RemoveRangeOp, ReplaceOp, AddOp, RemoveOp, PatchOp)
SEQUENCE_OPS = frozenset({"addrange", "removerange", "patch"})
OBJECT_OPS = frozenset({"add", "remove", "replace", "patch"})

_DIFF_ENTRY_ADAPTER = TypeAdapter(DiffEntry)
_DIFF_ADAPTER = TypeAdapter(Diff)


def op_add_range(key: DiffKey, valuelist: list[Any] | str, *, source: Any = None) -> AddRangeOp:
    return AddRangeOp(key=key, valuelist=valuelist, source=source)


def op_remove_range(key: DiffKey, length: int, *, source: Any = None) -> RemoveRangeOp:
    return RemoveRangeOp(key=key, length=length, source=source)


def op_replace(key: DiffKey, value: Any, *, source: Any = None) -> ReplaceOp:
    return ReplaceOp(key=key, value=value, source=source)


def op_add(key: DiffKey, value: Any, *, source: Any = None) -> AddOp:
    return AddOp(key=key, value=value, source=source)


def op_remove(key: DiffKey, *, source: Any = None) -> RemoveOp:
    return RemoveOp(key=key, source=source)


def op_patch(key: DiffKey, diff: list[DiffEntry] | None, *, source: Any = None) -> PatchOp:
    return PatchOp(key=key, diff=diff, source=source)


def _error_location(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "/"
    loc = errors[0].get("loc", ())
    return "/" + "/".join(str(part) for part in loc) if loc else "/"


def parse_diff(payload: Iterable[Any] | None) -> list[DiffEntry]:
    """
    Coerce a wire payload (JSON dicts and/or entry models) into a typed diff.
    Entry order is preserved; ordering preconditions are the caller's concern.
    """
    if payload is None:
        return []
    entries: list[DiffEntry] = []
    for index, item in enumerate(payload):
        if isinstance(item, DIFF_ENTRY_TYPES):
            entries.append(item)
            continue
        try:
            entries.append(_DIFF_ENTRY_ADAPTER.validate_python(item))
        except ValidationError as exc:
            raise StructuralValidationError(
                f"invalid diff entry at index {index}: {_error_location(exc)}",
                code="DIFF_PAYLOAD_INVALID",
                key=index,
            ) from exc
    return entries


def _dump_entry(entry: DiffEntry) -> dict[str, Any]:
    payload = entry.model_dump(mode="json", exclude={"source", "diff"})
    if entry.source is not None:
        payload["source"] = entry.source
    if isinstance(entry, PatchOp):
        payload["diff"] = None if entry.diff is None else dump_diff(entry.diff)
    return payload


def dump_diff(diff: Iterable[DiffEntry] | None) -> list[dict[str, Any]]:
    if diff is None:
        return []
    return [_dump_entry(entry) for entry in diff]


def diff_json_schema() -> dict[str, Any]:
    return _DIFF_ADAPTER.json_schema()
