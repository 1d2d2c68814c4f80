from __future__ import annotations

from typing import Any

STRUCTURAL_INVALID_CODE = "DIFF_OP_INVALID"
CONTRACT_VIOLATION_CODE = "MODEL_CONTRACT_VIOLATION"


class DiffModelError(ValueError):
    """Base class for diff validation and model construction errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        key: Any = None,
        op: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.key = key
        self.op = op


class StructuralValidationError(DiffModelError):
    """A diff entry does not fit the shape of the container it targets."""

    def __init__(
        self,
        message: str,
        *,
        code: str = STRUCTURAL_INVALID_CODE,
        key: Any = None,
        op: str | None = None,
    ) -> None:
        super().__init__(message, code=code, key=key, op=op)


class ContractViolation(DiffModelError):
    """A model builder was called with arguments it does not accept."""

    def __init__(
        self,
        message: str,
        *,
        code: str = CONTRACT_VIOLATION_CODE,
        key: Any = None,
        op: str | None = None,
    ) -> None:
        super().__init__(message, code=code, key=key, op=op)
