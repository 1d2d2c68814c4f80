from __future__ import annotations

import argparse
import json
import os
from pathlib import Path

from .models import diff_json_schema

DIFF_SCHEMA_FILENAME = "nbdiff.diff.v0.json"
SCHEMA_DIR_ENV = "NBDIFF_SCHEMA_DIR"

# src/nbdiff_ir/export_schema.py -> packages/nbdiff_ir/schema
_PACKAGE_SCHEMA_DIR = Path(__file__).resolve().parents[2] / "schema"


def default_schema_dir() -> Path:
    raw = os.environ.get(SCHEMA_DIR_ENV, "").strip()
    if not raw:
        return _PACKAGE_SCHEMA_DIR
    path = Path(raw).expanduser()
    if not path.is_absolute():
        raise RuntimeError(f"{SCHEMA_DIR_ENV} must be an absolute path, but got {raw!r}")
    return path


def write_diff_schema(schema_dir: Path) -> Path:
    """Write the diff wire-format schema into `schema_dir` and return its path."""
    schema_dir.mkdir(parents=True, exist_ok=True)
    path = schema_dir / DIFF_SCHEMA_FILENAME
    payload = json.dumps(diff_json_schema(), indent=2, sort_keys=True)
    path.write_text(payload + "\n", encoding="utf-8")
    return path


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export the notebook diff JSON schema.")
    parser.add_argument("--out-dir", dest="out_dir", type=Path, required=False)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    write_diff_schema(args.out_dir or default_schema_dir())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
