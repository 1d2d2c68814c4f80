from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Union

from nbdiff_ir import ContractViolation, DiffEntry, get_sub_diff_by_key, patch

from .config import DEFAULT_JSON_INDENT
from .signals import Signal
from .text import StringDiffModel, create_direct_string_diff_model, create_patch_string_diff_model

logger = logging.getLogger(__name__)

# A member name, or a path of member names into nested content.
SubPath = Union[str, Sequence[str]]

_UNRESOLVED = object()


def _member_at_path(value: Any, path: SubPath) -> Any:
    if value is None:
        return None
    if isinstance(path, str):
        return value.get(path) if isinstance(value, dict) else None
    for part in path:
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _sub_diff_at_path(diff: Sequence[DiffEntry] | None, path: SubPath) -> list[DiffEntry] | None:
    if isinstance(path, str):
        return get_sub_diff_by_key(diff, path)
    current: list[DiffEntry] | None = list(diff) if diff is not None else None
    for part in path:
        current = get_sub_diff_by_key(current, part)
        if current is None:
            return None
    return current


class RenderableDiffModel:
    """
    Diff model for content with an internal mimebundle. Converted to a
    StringDiffModel for display with `stringify`.
    """

    def __init__(
        self,
        base: Any = None,
        remote: Any = None,
        diff: Sequence[DiffEntry] | None = None,
        *,
        indent: int = DEFAULT_JSON_INDENT,
    ) -> None:
        if base is None and remote is None:
            raise ContractViolation(
                "either remote or base value need to be given",
                code="MODEL_ARGUMENTS_INVALID",
            )
        self.base = base
        self.diff: list[DiffEntry] | None = list(diff) if diff is not None else None
        self._remote = _UNRESOLVED if remote is None and self.diff is not None else remote
        self._indent = indent
        self._trusted: bool | None = None
        self.trusted_changed: Signal[bool] = Signal(self)
        self.collapsible = False
        self.collapsible_header = ""
        self.start_collapsed = False

    @property
    def remote(self) -> Any:
        if self._remote is _UNRESOLVED:
            logger.debug("materializing remote from %d diff entries", len(self.diff or ()))
            self._remote = patch(self.base, self.diff)
        return self._remote

    @property
    def unchanged(self) -> bool:
        return self.base == self.remote

    @property
    def added(self) -> bool:
        return self.base is None

    @property
    def deleted(self) -> bool:
        return self.remote is None

    @property
    def trusted(self) -> bool | None:
        return self._trusted

    @trusted.setter
    def trusted(self, value: bool) -> None:
        if self._trusted != value:
            self._trusted = value
            self.trusted_changed.emit(value)

    @property
    def contents(self) -> list[Any]:
        """The values present on either side, base first."""
        values = []
        if self.base is not None:
            values.append(self.base)
        remote = self.remote
        if remote is not None and remote is not self.base:
            values.append(remote)
        return values

    def inner_mime_type(self, key: SubPath) -> str:
        raise ContractViolation(
            f"unknown MIME type for key: {key!r}",
            code="MIMETYPE_PATH_UNKNOWN",
            key=key,
        )

    def stringify(self, key: SubPath | None = None) -> StringDiffModel:
        base = _member_at_path(self.base, key) if key else self.base
        remote = _member_at_path(self.remote, key) if key else self.remote
        diff = _sub_diff_at_path(self.diff, key) if key and self.diff else self.diff
        mimetype = self.inner_mime_type(key) if key else "application/json"
        display = {
            "mimetype": mimetype,
            "collapsible": self.collapsible,
            "collapsible_header": self.collapsible_header,
            "start_collapsed": self.start_collapsed,
            "indent": self._indent,
        }
        if self.unchanged or self.added or self.deleted or not diff:
            return create_direct_string_diff_model(base, remote, **display)
        return create_patch_string_diff_model(base, diff, **display)
