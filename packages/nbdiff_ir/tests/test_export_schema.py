from __future__ import annotations

import json
from pathlib import Path

import pytest
from jsonschema import Draft202012Validator
from nbdiff_ir import (
    dump_diff,
    op_add,
    op_add_range,
    op_patch,
    op_remove,
    op_remove_range,
    op_replace,
)
from nbdiff_ir.export_schema import (
    DIFF_SCHEMA_FILENAME,
    default_schema_dir,
    main,
    write_diff_schema,
)


def test_write_diff_schema_describes_all_ops(tmp_path: Path) -> None:
    path = write_diff_schema(tmp_path / "schema")

    assert path.name == DIFF_SCHEMA_FILENAME
    schema = json.loads(path.read_text(encoding="utf-8"))
    assert schema["type"] == "array"
    assert set(schema["$defs"]) >= {
        "AddOp",
        "AddRangeOp",
        "PatchOp",
        "RemoveOp",
        "RemoveRangeOp",
        "ReplaceOp",
    }


def test_schema_dir_defaults_to_package_schema_folder(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NBDIFF_SCHEMA_DIR", raising=False)

    schema_dir = default_schema_dir()

    assert schema_dir.name == "schema"
    assert schema_dir.parent.name == "nbdiff_ir"
    assert (schema_dir.parent / "src" / "nbdiff_ir").is_dir()


def test_schema_dir_honours_env_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("NBDIFF_SCHEMA_DIR", str(tmp_path))
    assert default_schema_dir() == tmp_path


def test_schema_dir_rejects_relative_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NBDIFF_SCHEMA_DIR", "relative/path")
    with pytest.raises(RuntimeError, match="must be an absolute path"):
        default_schema_dir()


def test_main_writes_into_out_dir(tmp_path: Path) -> None:
    assert main(["--out-dir", str(tmp_path / "out")]) == 0
    assert (tmp_path / "out" / DIFF_SCHEMA_FILENAME).is_file()


def test_dumped_diff_matches_exported_schema(tmp_path: Path) -> None:
    path = write_diff_schema(tmp_path)
    validator = Draft202012Validator(json.loads(path.read_text(encoding="utf-8")))
    payload = dump_diff(
        [
            op_patch(
                "cells",
                [
                    op_remove_range(0, 1, source="left"),
                    op_add_range(0, [{"cell_type": "raw", "source": "", "metadata": {}}]),
                    op_patch(2, [op_replace("execution_count", None), op_remove("id")]),
                ],
            ),
            op_add("nbformat_minor", 5),
            op_patch("metadata", None),
        ]
    )

    errors = sorted(validator.iter_errors(payload), key=lambda err: str(err.path))
    assert errors == []


def test_exported_schema_rejects_unknown_op(tmp_path: Path) -> None:
    path = write_diff_schema(tmp_path)
    validator = Draft202012Validator(json.loads(path.read_text(encoding="utf-8")))

    assert list(validator.iter_errors([{"op": "bogus", "key": "cells"}]))
    assert list(validator.iter_errors([{"op": "removerange", "key": 0}]))
