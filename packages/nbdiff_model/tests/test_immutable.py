from __future__ import annotations

import pytest
from nbdiff_ir import ContractViolation, op_add, op_patch, op_remove, op_replace
from nbdiff_model import ABSENT, create_immutable_model


def test_replace_changes_remote() -> None:
    model = create_immutable_model(5, 5, op_replace("execution_count", 9))

    assert (model.base, model.remote) == (5, 9)
    assert model.unchanged is False
    assert model.added is False
    assert model.deleted is False


def test_no_entry_pairs_base_with_remote() -> None:
    model = create_immutable_model(3, 3)
    assert model.unchanged is True


def test_null_is_a_value_not_an_absence() -> None:
    model = create_immutable_model(None, None)
    assert model.unchanged is True
    assert model.added is False
    assert model.deleted is False


def test_add_requires_absent_base() -> None:
    model = create_immutable_model(ABSENT, entry=op_add("execution_count", 1))
    assert model.added is True
    assert model.remote == 1

    with pytest.raises(ContractViolation) as excinfo:
        create_immutable_model(4, 4, op_add("execution_count", 1))
    assert excinfo.value.code == "IMMUTABLE_OP_INVALID"
    assert excinfo.value.key == "execution_count"


def test_remove_requires_present_base() -> None:
    model = create_immutable_model(4, 4, op_remove("execution_count"))
    assert model.deleted is True
    assert model.remote is ABSENT

    with pytest.raises(ContractViolation):
        create_immutable_model(ABSENT, entry=op_remove("execution_count"))


def test_replace_requires_present_base() -> None:
    with pytest.raises(ContractViolation):
        create_immutable_model(ABSENT, entry=op_replace("execution_count", 2))


def test_patch_is_not_an_atomic_op() -> None:
    with pytest.raises(ContractViolation, match="only add, remove and replace"):
        create_immutable_model(1, 1, op_patch("execution_count", []))
