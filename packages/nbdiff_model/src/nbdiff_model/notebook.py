from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from nbdiff_ir import (
    AddOp,
    AddRangeOp,
    DiffEntry,
    PatchOp,
    RemoveOp,
    RemoveRangeOp,
    ReplaceOp,
    get_diff_entry_by_key,
    op_add_range,
    op_remove_range,
    parse_diff,
    validate_object_op,
    validate_sequence_op,
)

from .cell import (
    CellDiffModel,
    create_added_cell_diff_model,
    create_deleted_cell_diff_model,
    create_patched_cell_diff_model,
    create_unchanged_cell_diff_model,
)
from .config import ModelBuildConfig
from .text import (
    StringDiffModel,
    create_direct_string_diff_model,
    create_patch_string_diff_model,
)

logger = logging.getLogger(__name__)

NOTEBOOK_METADATA_HEADER = "Notebook metadata changed"


@dataclass(frozen=True)
class NotebookDiffModel:
    metadata: StringDiffModel | None
    mimetype: str
    cells: tuple[CellDiffModel, ...]
    chunked_cells: tuple[tuple[CellDiffModel, ...], ...]


def language_mimetype(metadata: Any) -> str | None:
    """Return metadata.language_info.mimetype, or None when any part is missing."""
    if not isinstance(metadata, Mapping):
        return None
    language_info = metadata.get("language_info")
    if not isinstance(language_info, Mapping):
        return None
    mimetype = language_info.get("mimetype")
    return mimetype if isinstance(mimetype, str) and mimetype else None


def _notebook_metadata_model(
    base_metadata: Any, entry: DiffEntry | None, config: ModelBuildConfig
) -> StringDiffModel | None:
    display = {
        "collapsible": True,
        "collapsible_header": NOTEBOOK_METADATA_HEADER,
        "start_collapsed": True,
        "indent": config.json_indent,
    }
    if isinstance(entry, PatchOp):
        # An empty dict is still a base to patch.
        if base_metadata is None or not entry.diff:
            return None
        return create_patch_string_diff_model(base_metadata, entry.diff, **display)
    if isinstance(entry, (AddOp, ReplaceOp)):
        return create_direct_string_diff_model(base_metadata, entry.value, **display)
    if isinstance(entry, RemoveOp):
        return create_direct_string_diff_model(base_metadata, None, **display)
    return None


def _cells_diff(base_cells: list[Any], entry: DiffEntry | None) -> list[DiffEntry]:
    """Return the cell-level diff, spelling a whole-list change as remove all then add all."""
    if entry is None:
        return []
    if isinstance(entry, PatchOp):
        return list(entry.diff or [])
    cells_diff: list[DiffEntry] = []
    if base_cells:
        cells_diff.append(op_remove_range(0, len(base_cells), source=entry.source))
    if isinstance(entry, (AddOp, ReplaceOp)) and entry.value:
        cells_diff.append(op_add_range(0, list(entry.value), source=entry.source))
    return cells_diff


def build_notebook_diff_model(
    base: Mapping[str, Any],
    diff: Iterable[Any] | None,
    *,
    config: ModelBuildConfig | None = None,
) -> NotebookDiffModel:
    """
    Build the comparison model of notebook `base` and `diff`, a diff over the
    notebook's members whose `cells` entry is sorted ascending by cell index.
    """
    config = config or ModelBuildConfig.from_env()
    entries = parse_diff(diff)
    keys = list(base.keys())
    for entry in entries:
        validate_object_op(base, entry, keys)

    base_metadata = base.get("metadata")
    metadata = _notebook_metadata_model(
        base_metadata, get_diff_entry_by_key(entries, "metadata"), config
    )

    mimetype = language_mimetype(base_metadata)
    if mimetype is None:
        logger.debug("notebook has no language_info mimetype, using %s", config.fallback_mimetype)
        mimetype = config.fallback_mimetype

    base_cells = list(base.get("cells") or [])
    cells: list[CellDiffModel] = []
    chunks: list[list[CellDiffModel]] = []
    current: list[CellDiffModel] = []
    take = 0
    previous_chunk_index = -1

    def _take_unchanged(stop: int) -> None:
        for i in range(take, stop):
            cell = create_unchanged_cell_diff_model(base_cells[i], mimetype, config=config)
            cells.append(cell)
            chunks.append([cell])

    for entry in _cells_diff(base_cells, get_diff_entry_by_key(entries, "cells")):
        validate_sequence_op(base_cells, entry)
        index = entry.key
        # The diff is sorted on index, so preceding cells are unchanged.
        _take_unchanged(index)

        if index != previous_chunk_index:
            current = []
            chunks.append(current)
            previous_chunk_index = index

        if isinstance(entry, AddRangeOp):
            for value in entry.valuelist:
                cell = create_added_cell_diff_model(value, mimetype, config=config)
                cells.append(cell)
                current.append(cell)
            skip = 0
        elif isinstance(entry, RemoveRangeOp):
            for i in range(index, index + entry.length):
                cell = create_deleted_cell_diff_model(base_cells[i], mimetype, config=config)
                cells.append(cell)
                current.append(cell)
            skip = entry.length
        elif isinstance(entry, PatchOp):
            # A patched cell always gets a chunk of its own, even at a shared index.
            if current:
                current = []
                chunks.append(current)
            cell = create_patched_cell_diff_model(
                base_cells[index], entry.diff, mimetype, config=config
            )
            cells.append(cell)
            current.append(cell)
            skip = 1

        # take may pass index when a remove and an add share one index.
        take = max(take, index + skip)

    _take_unchanged(len(base_cells))

    # An empty add range opens a chunk it never fills; every kept chunk holds a cell.
    chunked = tuple(tuple(chunk) for chunk in chunks if chunk)
    logger.debug("built notebook model: %d cells in %d chunks", len(cells), len(chunked))
    return NotebookDiffModel(
        metadata=metadata,
        mimetype=mimetype,
        cells=tuple(cells),
        chunked_cells=chunked,
    )
