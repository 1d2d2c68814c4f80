from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from nbdiff_ir import (
    AddRangeOp,
    ContractViolation,
    DiffEntry,
    RemoveRangeOp,
    flatten_string_diff,
    patch,
)

from .config import DEFAULT_JSON_INDENT
from .range import DiffRangePos, DiffRangeRaw, raw_to_pos

DEFAULT_STRING_MIMETYPE = "text/plain"


@dataclass(frozen=True)
class StringDiffModel:
    """
    Text-level diff of one slot. `additions` are offsets into `remote`,
    `deletions` offsets into `base`.
    """

    base: str | None
    remote: str | None
    additions: tuple[DiffRangeRaw, ...] = ()
    deletions: tuple[DiffRangeRaw, ...] = ()
    mimetype: str = DEFAULT_STRING_MIMETYPE
    collapsible: bool = False
    collapsible_header: str = ""
    start_collapsed: bool = False

    @property
    def unchanged(self) -> bool:
        return self.base == self.remote

    @property
    def added(self) -> bool:
        return self.base is None

    @property
    def deleted(self) -> bool:
        return self.remote is None

    def addition_positions(self) -> list[DiffRangePos]:
        return raw_to_pos(self.additions, self.remote or "")

    def deletion_positions(self) -> list[DiffRangePos]:
        return raw_to_pos(self.deletions, self.base or "")


def stringify_value(value: Any, *, indent: int = DEFAULT_JSON_INDENT) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=indent, sort_keys=True, ensure_ascii=False)


def _whole(text: str | None) -> tuple[DiffRangeRaw, ...]:
    if not text:
        return ()
    return (DiffRangeRaw(start=0, length=len(text)),)


def create_direct_string_diff_model(
    base: Any,
    remote: Any,
    *,
    mimetype: str = DEFAULT_STRING_MIMETYPE,
    collapsible: bool = False,
    collapsible_header: str = "",
    start_collapsed: bool = False,
    indent: int = DEFAULT_JSON_INDENT,
) -> StringDiffModel:
    """Model two known values; a changed value is shown as a whole replacement."""
    if base is None and remote is None:
        raise ContractViolation(
            "either base or remote must be given", code="MODEL_ARGUMENTS_INVALID"
        )
    base_text = None if base is None else stringify_value(base, indent=indent)
    remote_text = None if remote is None else stringify_value(remote, indent=indent)

    additions: tuple[DiffRangeRaw, ...] = ()
    deletions: tuple[DiffRangeRaw, ...] = ()
    if base_text != remote_text:
        additions = _whole(remote_text)
        deletions = _whole(base_text)

    return StringDiffModel(
        base=base_text,
        remote=remote_text,
        additions=additions,
        deletions=deletions,
        mimetype=mimetype,
        collapsible=collapsible,
        collapsible_header=collapsible_header,
        start_collapsed=start_collapsed,
    )


def _ranges_from_flattened(
    flattened: Sequence[DiffEntry],
) -> tuple[tuple[DiffRangeRaw, ...], tuple[DiffRangeRaw, ...]]:
    additions: list[DiffRangeRaw] = []
    deletions: list[DiffRangeRaw] = []
    shift = 0
    pending_removal = 0
    current_key: int | None = None
    for entry in flattened:
        if entry.key != current_key:
            # A removal only shifts insertions at later offsets.
            shift -= pending_removal
            pending_removal = 0
            current_key = entry.key
        if isinstance(entry, AddRangeOp):
            length = len(entry.valuelist)
            additions.append(
                DiffRangeRaw(start=entry.key + shift, length=length, source=entry.source)
            )
            shift += length
        elif isinstance(entry, RemoveRangeOp):
            deletions.append(
                DiffRangeRaw(start=entry.key, length=entry.length, source=entry.source)
            )
            pending_removal += entry.length
    return tuple(additions), tuple(deletions)


def create_patch_string_diff_model(
    base: Any,
    diff: Sequence[DiffEntry],
    *,
    mimetype: str = DEFAULT_STRING_MIMETYPE,
    collapsible: bool = False,
    collapsible_header: str = "",
    start_collapsed: bool = False,
    indent: int = DEFAULT_JSON_INDENT,
) -> StringDiffModel:
    """
    Model `base` together with the diff that turns it into the remote value.

    Text is diffed line-wise, so the ranges are computed from the flattened
    character-level diff. Structured values are compared as stringified JSON
    without range information.
    """
    if base is None:
        raise ContractViolation(
            "a patched string model requires a base value", code="MODEL_ARGUMENTS_INVALID"
        )
    remote = patch(base, diff)

    additions: tuple[DiffRangeRaw, ...] = ()
    deletions: tuple[DiffRangeRaw, ...] = ()
    if isinstance(base, str):
        additions, deletions = _ranges_from_flattened(flatten_string_diff(base, diff))

    return StringDiffModel(
        base=stringify_value(base, indent=indent),
        remote=stringify_value(remote, indent=indent),
        additions=additions,
        deletions=deletions,
        mimetype=mimetype,
        collapsible=collapsible,
        collapsible_header=collapsible_header,
        start_collapsed=start_collapsed,
    )


def mimetype_for_cell(cell: Mapping[str, Any], notebook_mimetype: str) -> str:
    cell_type = cell.get("cell_type")
    if cell_type == "code":
        return notebook_mimetype
    if cell_type == "markdown":
        return "text/markdown"
    metadata = cell.get("metadata") or {}
    return metadata.get("format") or DEFAULT_STRING_MIMETYPE
