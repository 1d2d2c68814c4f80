from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_FALLBACK_MIMETYPE = "text/python"
DEFAULT_JSON_INDENT = 2
MIN_JSON_INDENT = 0
MAX_JSON_INDENT = 8


def _env_int(name: str, default: int, *, minimum: int, maximum: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, but got {raw!r}") from exc
    if value < minimum or value > maximum:
        raise RuntimeError(f"{name} must be between {minimum} and {maximum}, but got {value}")
    return value


def fallback_mimetype() -> str:
    return (
        os.environ.get("NBDIFF_FALLBACK_MIMETYPE", DEFAULT_FALLBACK_MIMETYPE).strip()
        or DEFAULT_FALLBACK_MIMETYPE
    )


def json_indent() -> int:
    return _env_int(
        "NBDIFF_JSON_INDENT",
        DEFAULT_JSON_INDENT,
        minimum=MIN_JSON_INDENT,
        maximum=MAX_JSON_INDENT,
    )


@dataclass(frozen=True)
class ModelBuildConfig:
    fallback_mimetype: str = DEFAULT_FALLBACK_MIMETYPE
    json_indent: int = DEFAULT_JSON_INDENT

    @classmethod
    def from_env(cls) -> "ModelBuildConfig":
        return cls(
            fallback_mimetype=fallback_mimetype(),
            json_indent=json_indent(),
        )
