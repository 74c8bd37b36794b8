"""Cell — a mutable external value that announces its changes.

A Cell stands in for a form control outside of any UI toolkit: the owner
calls .set(), and anything subscribed (usually a CellSource) hears about it.
Writing a value identical or equal to the current one is silent.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from formx.channel import Disposer, EventChannel

T = TypeVar("T")


class Cell(Generic[T]):
    """A single mutable value with change notification."""

    __slots__ = ("_value", "_changes")

    def __init__(self, value: T) -> None:
        self._value = value
        self._changes = EventChannel()

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Write a new value. Subscribers run only if it actually changed."""
        old = self._value
        if old is not value and old != value:
            self._value = value
            self._changes.publish(value)

    def subscribe(self, callback: Callable[[T], None]) -> Disposer:
        return self._changes.subscribe(callback)

    def unsubscribe(self, callback: Callable[[T], None]) -> None:
        self._changes.unsubscribe(callback)

    def __repr__(self) -> str:
        return f"Cell({self._value!r})"
