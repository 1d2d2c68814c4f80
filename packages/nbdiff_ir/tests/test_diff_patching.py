from __future__ import annotations

import copy

import pytest
from nbdiff_ir import (
    ContractViolation,
    StructuralValidationError,
    op_add,
    op_add_range,
    op_patch,
    op_remove,
    op_remove_range,
    op_replace,
    patch,
)


def _base_doc() -> dict:
    return {
        "cells": [
            {"cell_type": "markdown", "source": "# Title\n", "metadata": {}},
            {"cell_type": "code", "source": "x = 1\n", "metadata": {}, "outputs": []},
        ],
        "metadata": {"kernelspec": {"name": "python3"}},
    }


def test_patch_object_ops() -> None:
    base = {"a": 1, "b": 2, "c": {"d": 3}}
    diff = [
        op_add("e", 5),
        op_remove("a"),
        op_replace("b", 20),
        op_patch("c", [op_replace("d", 30)]),
    ]

    assert patch(base, diff) == {"b": 20, "c": {"d": 30}, "e": 5}


def test_patch_does_not_mutate_base() -> None:
    base = _base_doc()
    original = copy.deepcopy(base)
    diff = [
        op_patch("cells", [op_patch(1, [op_replace("source", "y = 2\n")])]),
        op_patch("metadata", [op_remove("kernelspec")]),
    ]

    patched = patch(base, diff)

    assert patched["cells"][1]["source"] == "y = 2\n"
    assert patched["metadata"] == {}
    assert base == original


def test_patch_sequence_tolerates_remove_then_add_on_one_index() -> None:
    base = ["a", "b", "c"]
    diff = [op_remove_range(1, 1), op_add_range(1, ["B"])]

    assert patch(base, diff) == ["a", "B", "c"]


def test_patch_string_applies_line_and_character_ops() -> None:
    base = "one\ntwo\nthree\n"
    diff = [
        op_patch(0, [op_add_range(3, "!")]),
        op_remove_range(1, 1),
        op_add_range(3, ["four\n"]),
    ]

    assert patch(base, diff) == "one!\nthree\nfour\n"


def test_patch_without_diff_returns_copy() -> None:
    base = {"a": [1, 2]}
    patched = patch(base, None)
    assert patched == base
    assert patched is not base


def test_patch_validates_entries() -> None:
    with pytest.raises(StructuralValidationError):
        patch(["a"], [op_remove_range(0, 2)])
    with pytest.raises(StructuralValidationError):
        patch({"a": 1}, [op_add("a", 2)])


def test_patch_rejects_atomic_base() -> None:
    with pytest.raises(ContractViolation) as excinfo:
        patch(5, [op_replace("a", 1)])
    assert excinfo.value.code == "PATCH_TARGET_INVALID"
