from __future__ import annotations

import pytest
from nbdiff_ir import (
    StructuralValidationError,
    op_add,
    op_add_range,
    op_patch,
    op_remove,
    op_remove_range,
    op_replace,
    validate_object_op,
    validate_sequence_op,
)

BASE = ["a", "b", "c"]


def test_sequence_ops_within_bounds_are_accepted() -> None:
    validate_sequence_op(BASE, op_add_range(0, ["x"]))
    validate_sequence_op(BASE, op_add_range(3, ["x"]))
    validate_sequence_op(BASE, op_remove_range(1, 2))
    validate_sequence_op(BASE, op_patch(2, []))


def test_add_range_past_end_is_rejected() -> None:
    with pytest.raises(StructuralValidationError, match="key out of range: 4") as excinfo:
        validate_sequence_op(BASE, op_add_range(4, ["x"]))
    assert excinfo.value.code == "DIFF_KEY_OUT_OF_RANGE"
    assert excinfo.value.op == "addrange"


def test_remove_range_too_long_is_rejected() -> None:
    with pytest.raises(StructuralValidationError, match="range too long") as excinfo:
        validate_sequence_op(BASE, op_remove_range(2, 2))
    assert excinfo.value.code == "DIFF_RANGE_TOO_LONG"
    assert excinfo.value.key == 2


def test_remove_range_at_length_is_rejected() -> None:
    with pytest.raises(StructuralValidationError) as excinfo:
        validate_sequence_op(BASE, op_remove_range(3, 1))
    assert excinfo.value.code == "DIFF_KEY_OUT_OF_RANGE"


def test_patch_at_length_is_rejected() -> None:
    with pytest.raises(StructuralValidationError, match="invalid patch op"):
        validate_sequence_op(BASE, op_patch(3, []))


def test_negative_sequence_key_is_rejected() -> None:
    with pytest.raises(StructuralValidationError):
        validate_sequence_op(BASE, op_patch(-1, []))


def test_sequence_key_must_be_integer() -> None:
    with pytest.raises(StructuralValidationError) as excinfo:
        validate_sequence_op(BASE, op_patch("0", []))
    assert excinfo.value.code == "DIFF_KEY_TYPE_INVALID"


@pytest.mark.parametrize("entry", [op_add(0, "x"), op_remove(0), op_replace(0, "x")])
def test_object_ops_are_invalid_on_sequences(entry) -> None:
    with pytest.raises(StructuralValidationError) as excinfo:
        validate_sequence_op(BASE, entry)
    assert excinfo.value.code == "DIFF_OP_UNSUPPORTED"


def test_object_ops_check_key_presence() -> None:
    base = {"source": "", "metadata": {}}
    keys = list(base)

    validate_object_op(base, op_add("outputs", []), keys)
    validate_object_op(base, op_replace("source", "x"), keys)
    validate_object_op(base, op_remove("metadata"), keys)
    validate_object_op(base, op_patch("source", []), keys)

    with pytest.raises(StructuralValidationError, match="already present: 'source'") as excinfo:
        validate_object_op(base, op_add("source", "x"), keys)
    assert excinfo.value.code == "DIFF_KEY_PRESENT"

    with pytest.raises(StructuralValidationError, match="missing key: 'outputs'") as excinfo:
        validate_object_op(base, op_patch("outputs", []), keys)
    assert excinfo.value.code == "DIFF_KEY_MISSING"


def test_range_ops_are_invalid_on_objects() -> None:
    with pytest.raises(StructuralValidationError) as excinfo:
        validate_object_op({"a": 1}, op_remove_range("a", 1), ["a"])
    assert excinfo.value.code == "DIFF_OP_UNSUPPORTED"


def test_object_key_must_be_string() -> None:
    with pytest.raises(StructuralValidationError) as excinfo:
        validate_object_op({"a": 1}, op_remove(0), ["a"])
    assert excinfo.value.code == "DIFF_KEY_TYPE_INVALID"
