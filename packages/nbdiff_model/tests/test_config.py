from __future__ import annotations

import pytest
from nbdiff_model import (
    DEFAULT_FALLBACK_MIMETYPE,
    DEFAULT_JSON_INDENT,
    ModelBuildConfig,
    build_notebook_diff_model,
)


def test_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NBDIFF_FALLBACK_MIMETYPE", raising=False)
    monkeypatch.delenv("NBDIFF_JSON_INDENT", raising=False)

    config = ModelBuildConfig.from_env()

    assert config.fallback_mimetype == DEFAULT_FALLBACK_MIMETYPE
    assert config.json_indent == DEFAULT_JSON_INDENT


def test_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NBDIFF_FALLBACK_MIMETYPE", "text/x-r")
    monkeypatch.setenv("NBDIFF_JSON_INDENT", "4")

    config = ModelBuildConfig.from_env()

    assert config.fallback_mimetype == "text/x-r"
    assert config.json_indent == 4


def test_blank_fallback_mimetype_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NBDIFF_FALLBACK_MIMETYPE", "   ")
    assert ModelBuildConfig.from_env().fallback_mimetype == DEFAULT_FALLBACK_MIMETYPE


def test_json_indent_must_be_an_integer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NBDIFF_JSON_INDENT", "wide")
    with pytest.raises(RuntimeError, match="must be an integer"):
        ModelBuildConfig.from_env()


def test_json_indent_must_be_in_range(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NBDIFF_JSON_INDENT", "12")
    with pytest.raises(RuntimeError, match="must be between 0 and 8"):
        ModelBuildConfig.from_env()


def test_builder_reads_environment_without_explicit_config(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("NBDIFF_FALLBACK_MIMETYPE", "text/x-julia")
    monkeypatch.setenv("NBDIFF_JSON_INDENT", "0")
    notebook = {"cells": [{"cell_type": "markdown", "source": "", "metadata": {"a": 1}}]}

    model = build_notebook_diff_model(notebook, [])

    assert model.mimetype == "text/x-julia"
    assert model.cells[0].metadata.base == '{\n"a": 1\n}'
