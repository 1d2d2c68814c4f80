from .errors import ContractViolation, DiffModelError, StructuralValidationError
from .models import (
    AddOp,
    AddRangeOp,
    Diff,
    DiffEntry,
    DiffKey,
    PatchOp,
    RemoveOp,
    RemoveRangeOp,
    ReplaceOp,
    dump_diff,
    op_add,
    op_add_range,
    op_patch,
    op_remove,
    op_remove_range,
    op_replace,
    parse_diff,
)
from .navigation import (
    accumulate_lengths,
    flatten_string_diff,
    get_diff_entry_by_key,
    get_sub_diff_by_key,
    split_lines,
    strip_source,
)
from .patching import patch
from .validation import validate_object_op, validate_sequence_op

__all__ = [
    "AddOp",
    "AddRangeOp",
    "ContractViolation",
    "Diff",
    "DiffEntry",
    "DiffKey",
    "DiffModelError",
    "PatchOp",
    "RemoveOp",
    "RemoveRangeOp",
    "ReplaceOp",
    "StructuralValidationError",
    "accumulate_lengths",
    "dump_diff",
    "flatten_string_diff",
    "get_diff_entry_by_key",
    "get_sub_diff_by_key",
    "op_add",
    "op_add_range",
    "op_patch",
    "op_remove",
    "op_remove_range",
    "op_replace",
    "parse_diff",
    "patch",
    "split_lines",
    "strip_source",
    "validate_object_op",
    "validate_sequence_op",
]

__version__ = "0.0.0"
