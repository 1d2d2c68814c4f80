from .cell import (
    CellDiffModel,
    create_added_cell_diff_model,
    create_deleted_cell_diff_model,
    create_patched_cell_diff_model,
    create_unchanged_cell_diff_model,
)
from .config import DEFAULT_FALLBACK_MIMETYPE, DEFAULT_JSON_INDENT, ModelBuildConfig
from .immutable import ABSENT, ImmutableDiffModel, create_immutable_model
from .notebook import NotebookDiffModel, build_notebook_diff_model, language_mimetype
from .output import TEXT_MIMETYPES, OutputDiffModel, make_output_models
from .range import DiffRangePos, DiffRangeRaw, Pos, find_line_number, raw_to_pos
from .renderable import RenderableDiffModel
from .signals import Signal
from .text import (
    StringDiffModel,
    create_direct_string_diff_model,
    create_patch_string_diff_model,
    mimetype_for_cell,
    stringify_value,
)

__all__ = [
    "ABSENT",
    "CellDiffModel",
    "DEFAULT_FALLBACK_MIMETYPE",
    "DEFAULT_JSON_INDENT",
    "DiffRangePos",
    "DiffRangeRaw",
    "ImmutableDiffModel",
    "ModelBuildConfig",
    "NotebookDiffModel",
    "OutputDiffModel",
    "Pos",
    "RenderableDiffModel",
    "Signal",
    "StringDiffModel",
    "TEXT_MIMETYPES",
    "build_notebook_diff_model",
    "create_added_cell_diff_model",
    "create_deleted_cell_diff_model",
    "create_direct_string_diff_model",
    "create_immutable_model",
    "create_patch_string_diff_model",
    "create_patched_cell_diff_model",
    "create_unchanged_cell_diff_model",
    "find_line_number",
    "language_mimetype",
    "make_output_models",
    "mimetype_for_cell",
    "raw_to_pos",
    "stringify_value",
]

__version__ = "0.0.0"
