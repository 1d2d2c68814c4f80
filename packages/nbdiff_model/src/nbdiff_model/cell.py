from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from nbdiff_ir import (
    AddOp,
    ContractViolation,
    DiffEntry,
    PatchOp,
    RemoveOp,
    ReplaceOp,
    get_diff_entry_by_key,
    validate_object_op,
)

from .config import ModelBuildConfig
from .immutable import ABSENT, ImmutableDiffModel, create_immutable_model
from .output import OutputDiffModel, make_output_models
from .text import (
    StringDiffModel,
    create_direct_string_diff_model,
    create_patch_string_diff_model,
    mimetype_for_cell,
)

CELL_METADATA_HEADER = "Metadata changed"

_DEFAULT_CONFIG = ModelBuildConfig()


def _is_code(cell: Mapping[str, Any]) -> bool:
    return cell.get("cell_type") == "code"


def _joined(source: Any) -> str:
    return "".join(source) if isinstance(source, list) else source


def _source_text(cell: Mapping[str, Any]) -> str:
    return _joined(cell.get("source", ""))


@dataclass(frozen=True)
class CellDiffModel:
    source: StringDiffModel
    metadata: StringDiffModel
    outputs: tuple[OutputDiffModel, ...] | None
    execution_count: ImmutableDiffModel | None
    cell_type: str

    def __post_init__(self) -> None:
        if self.outputs is None and self.cell_type == "code":
            raise ContractViolation(
                "invalid code cell, missing outputs", code="CELL_OUTPUTS_MISSING", key="outputs"
            )

    @property
    def unchanged(self) -> bool:
        unchanged = self.source.unchanged and self.metadata.unchanged
        if self.outputs is not None:
            unchanged = unchanged and all(output.unchanged for output in self.outputs)
        if self.execution_count is not None:
            unchanged = unchanged and self.execution_count.unchanged
        return unchanged

    @property
    def added(self) -> bool:
        return self.source.added

    @property
    def deleted(self) -> bool:
        return self.source.deleted

    def get_chunked_outputs(self) -> list[list[OutputDiffModel]] | None:
        """
        Group outputs into runs of consecutive added/deleted entries, each
        unchanged or patched output in its own chunk. Outputs of a wholly added
        or deleted cell are never grouped.
        """
        if self.outputs is None:
            return None
        if self.added or self.deleted:
            return [[output] for output in self.outputs]

        chunks: list[list[OutputDiffModel]] = []
        current: list[OutputDiffModel] = []
        for output in self.outputs:
            if output.added or output.deleted:
                current.append(output)
                continue
            if current:
                chunks.append(current)
                current = []
            chunks.append([output])
        if current:
            chunks.append(current)
        return chunks


def _metadata_display(config: ModelBuildConfig) -> dict[str, Any]:
    return {
        "collapsible": True,
        "collapsible_header": CELL_METADATA_HEADER,
        "start_collapsed": True,
        "indent": config.json_indent,
    }


def create_unchanged_cell_diff_model(
    base: Mapping[str, Any],
    notebook_mimetype: str,
    *,
    config: ModelBuildConfig = _DEFAULT_CONFIG,
) -> CellDiffModel:
    source_text = _source_text(base)
    source = create_direct_string_diff_model(
        source_text, source_text, mimetype=mimetype_for_cell(base, notebook_mimetype)
    )
    metadata = create_direct_string_diff_model(
        base.get("metadata", {}), base.get("metadata", {}), **_metadata_display(config)
    )
    outputs = None
    execution_count = None
    if _is_code(base):
        base_outputs = base.get("outputs")
        if base_outputs is not None:
            models = make_output_models(base_outputs, base_outputs, indent=config.json_indent)
            outputs = tuple(models)
        count = base.get("execution_count")
        execution_count = create_immutable_model(count, count)
    return CellDiffModel(source, metadata, outputs, execution_count, base.get("cell_type", ""))


def create_added_cell_diff_model(
    remote: Mapping[str, Any],
    notebook_mimetype: str,
    *,
    config: ModelBuildConfig = _DEFAULT_CONFIG,
) -> CellDiffModel:
    source = create_direct_string_diff_model(
        None, _source_text(remote), mimetype=mimetype_for_cell(remote, notebook_mimetype)
    )
    metadata = create_direct_string_diff_model(
        None, remote.get("metadata", {}), **_metadata_display(config)
    )
    outputs = None
    execution_count = None
    if _is_code(remote):
        remote_outputs = remote.get("outputs")
        if remote_outputs is not None:
            outputs = tuple(make_output_models(None, remote_outputs, indent=config.json_indent))
        execution_count = create_immutable_model(ABSENT, remote.get("execution_count"))
    return CellDiffModel(source, metadata, outputs, execution_count, remote.get("cell_type", ""))


def create_deleted_cell_diff_model(
    base: Mapping[str, Any],
    notebook_mimetype: str,
    *,
    config: ModelBuildConfig = _DEFAULT_CONFIG,
) -> CellDiffModel:
    source = create_direct_string_diff_model(
        _source_text(base), None, mimetype=mimetype_for_cell(base, notebook_mimetype)
    )
    metadata = create_direct_string_diff_model(
        base.get("metadata", {}), None, **_metadata_display(config)
    )
    outputs = None
    execution_count = None
    if _is_code(base):
        base_outputs = base.get("outputs")
        if base_outputs is not None:
            outputs = tuple(make_output_models(base_outputs, None, indent=config.json_indent))
        execution_count = create_immutable_model(base.get("execution_count"), ABSENT)
    return CellDiffModel(source, metadata, outputs, execution_count, base.get("cell_type", ""))


def _member_replacement(entry: DiffEntry | None) -> Any:
    """Return the new value an add or replace entry gives a cell member, else ABSENT."""
    if isinstance(entry, RemoveOp):
        raise ContractViolation(
            f"invalid remove op on cell member {entry.key!r}: the member is required",
            code="CELL_MEMBER_OP_INVALID",
            key=entry.key,
            op=entry.op,
        )
    if isinstance(entry, (AddOp, ReplaceOp)):
        return entry.value
    return ABSENT


def _patched_outputs(
    base_outputs: Sequence[Any] | None,
    entry: DiffEntry | None,
    config: ModelBuildConfig,
) -> tuple[OutputDiffModel, ...] | None:
    indent = config.json_indent
    replacement = _member_replacement(entry)
    if replacement is not ABSENT:
        if base_outputs is not None and list(replacement) == list(base_outputs):
            return tuple(make_output_models(base_outputs, base_outputs, indent=indent))
        # Old outputs read as removed, new ones as added.
        models = [] if base_outputs is None else make_output_models(base_outputs, indent=indent)
        models.extend(make_output_models(None, replacement, indent=indent))
        return tuple(models)
    if base_outputs is None:
        return None
    if isinstance(entry, PatchOp):
        return tuple(
            make_output_models(base_outputs, None, list(entry.diff or []), indent=indent)
        )
    return tuple(make_output_models(base_outputs, base_outputs, indent=indent))


def create_patched_cell_diff_model(
    base: Mapping[str, Any],
    diff: Sequence[DiffEntry] | None,
    notebook_mimetype: str,
    *,
    config: ModelBuildConfig = _DEFAULT_CONFIG,
) -> CellDiffModel:
    """
    Build a model for a cell changed by `diff`, a diff over the cell's members.
    Members without an entry in the diff are unchanged. An add or replace of a
    whole member is shown as a replacement of the old value.
    """
    diff = list(diff or [])
    keys = list(base.keys())
    for entry in diff:
        validate_object_op(base, entry, keys)

    source_text = _source_text(base)
    source_mimetype = mimetype_for_cell(base, notebook_mimetype)
    source_entry = get_diff_entry_by_key(diff, "source")
    new_source = _member_replacement(source_entry)
    if isinstance(source_entry, PatchOp):
        source = create_patch_string_diff_model(
            source_text,
            list(source_entry.diff or []),
            mimetype=source_mimetype,
            indent=config.json_indent,
        )
    elif new_source is not ABSENT:
        source = create_direct_string_diff_model(
            source_text, _joined(new_source), mimetype=source_mimetype
        )
    else:
        source = create_direct_string_diff_model(source_text, source_text, mimetype=source_mimetype)

    base_metadata = base.get("metadata", {})
    metadata_entry = get_diff_entry_by_key(diff, "metadata")
    new_metadata = _member_replacement(metadata_entry)
    if isinstance(metadata_entry, PatchOp):
        metadata = create_patch_string_diff_model(
            base_metadata, list(metadata_entry.diff or []), **_metadata_display(config)
        )
    elif new_metadata is not ABSENT:
        metadata = create_direct_string_diff_model(
            base_metadata, new_metadata, **_metadata_display(config)
        )
    else:
        metadata = create_direct_string_diff_model(
            base_metadata, base_metadata, **_metadata_display(config)
        )

    outputs = None
    execution_count = None
    if _is_code(base):
        outputs = _patched_outputs(
            base.get("outputs"), get_diff_entry_by_key(diff, "outputs"), config
        )
        count = base.get("execution_count", ABSENT)
        # Base doubles as remote, so a missing entry means unchanged.
        execution_count = create_immutable_model(
            count, count, get_diff_entry_by_key(diff, "execution_count")
        )
    return CellDiffModel(source, metadata, outputs, execution_count, base.get("cell_type", ""))
