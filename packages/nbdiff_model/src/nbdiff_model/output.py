from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from nbdiff_ir import (
    AddRangeOp,
    ContractViolation,
    DiffEntry,
    PatchOp,
    RemoveRangeOp,
    validate_sequence_op,
)

from .config import DEFAULT_JSON_INDENT
from .renderable import RenderableDiffModel, SubPath

TEXT_MIMETYPES = (
    "text/plain",
    "application/vnd.jupyter.stdout",
    "application/vnd.jupyter.stderr",
)

_BUNDLE_OUTPUT_TYPES = frozenset({"execute_result", "display_data"})


class OutputDiffModel(RenderableDiffModel):
    """Diff model for a single cell output (stream, error, execute_result or display_data)."""

    @property
    def _record(self) -> dict[str, Any]:
        return self.base if self.base is not None else self.remote

    @property
    def output_type(self) -> str | None:
        return self._record.get("output_type")

    def has_mime_type(self, mimetype: str) -> SubPath | None:
        """
        Return the sub-path holding content for `mimetype`, or None when this
        output has no such representation. See also: inner_mime_type.
        """
        output_type = self.output_type
        if output_type == "stream" and mimetype in TEXT_MIMETYPES:
            return "text"
        if output_type == "error":
            return "traceback"
        if output_type in _BUNDLE_OUTPUT_TYPES:
            data = self._record.get("data") or {}
            if mimetype in data:
                return ["data", mimetype]
        return None

    def inner_mime_type(self, key: SubPath) -> str:
        output_type = self.output_type
        if (output_type == "stream" and key == "text") or (
            output_type == "error" and key == "traceback"
        ):
            return "text/plain"
        if output_type in _BUNDLE_OUTPUT_TYPES and not isinstance(key, str) and len(key) == 2:
            return key[1]
        raise ContractViolation(
            f"unknown MIME type for key {key!r} on {output_type!r} output",
            code="MIMETYPE_PATH_UNKNOWN",
            key=key,
        )


def make_output_models(
    base: Sequence[dict[str, Any]] | None,
    remote: Sequence[dict[str, Any]] | None = None,
    diff: Sequence[DiffEntry] | None = None,
    *,
    indent: int = DEFAULT_JSON_INDENT,
) -> list[OutputDiffModel]:
    """
    Build one model per output entry.

    - base only: every entry deleted
    - remote only: every entry added
    - remote identical to base: every entry unchanged
    - base and a diff over output indices: the diff is walked, remote is ignored
    """

    def _model(
        base_value: Any, remote_value: Any, sub_diff: list[DiffEntry] | None = None
    ) -> OutputDiffModel:
        return OutputDiffModel(base_value, remote_value, sub_diff, indent=indent)

    if remote is None and diff is None:
        if base is None:
            raise ContractViolation(
                "either base or remote outputs must be given", code="MODEL_ARGUMENTS_INVALID"
            )
        return [_model(output, None) for output in base]

    if base is None:
        if remote is None:
            raise ContractViolation(
                "either base or remote outputs must be given", code="MODEL_ARGUMENTS_INVALID"
            )
        return [_model(None, output) for output in remote]

    if remote is base or (remote is not None and diff is None and list(remote) == list(base)):
        return [_model(output, output) for output in base]

    if diff is None:
        raise ContractViolation(
            "invalid arguments: remote outputs differ from base and no diff was given",
            code="MODEL_ARGUMENTS_INVALID",
        )

    models: list[OutputDiffModel] = []
    consumed = 0
    for entry in diff:
        validate_sequence_op(base, entry)
        index = entry.key
        models.extend(_model(output, output) for output in base[consumed:index])
        if isinstance(entry, AddRangeOp):
            models.extend(_model(None, output) for output in entry.valuelist)
            skip = 0
        elif isinstance(entry, RemoveRangeOp):
            models.extend(_model(base[i], None) for i in range(index, index + entry.length))
            skip = entry.length
        elif isinstance(entry, PatchOp):
            models.append(_model(base[index], None, list(entry.diff or [])))
            skip = 1
        consumed = max(consumed, index + skip)

    models.extend(_model(output, output) for output in base[consumed:])
    return models
