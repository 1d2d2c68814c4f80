"""Synchronous change notification for model state."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")

SignalHandler = Callable[[Any, T], Any]


class Signal(Generic[T]):
    """
    Handler list owned by a single model.

    emit(value) calls every connected handler in-line, in connection order,
    as handler(sender, value).
    """

    def __init__(self, sender: Any) -> None:
        self.sender = sender
        self._handlers: list[SignalHandler[T]] = []

    def connect(self, handler: SignalHandler[T]) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def disconnect(self, handler: SignalHandler[T]) -> bool:
        try:
            self._handlers.remove(handler)
        except ValueError:
            return False
        return True

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def emit(self, value: T) -> None:
        # Snapshot so handlers may disconnect themselves while being notified.
        for handler in list(self._handlers):
            handler(self.sender, value)
