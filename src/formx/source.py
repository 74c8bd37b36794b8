"""Sources — leaf nodes that announce external values on demand.

A Source publishes raw values through its `changes` channel. Nothing is
published until reset() is called; reset() re-announces the current value
exactly once, synchronously, which is how dependents get (re)primed.
Interpretation of the value (parsing, comparison) is left to predicates.
"""

from __future__ import annotations

from typing import Any, Callable

from formx.cell import Cell
from formx.channel import EventChannel


class Source:
    """Base class for all sources.

    Subclasses implement reset() and destroy(). After destroy() a source
    must publish nothing and hold no external references.
    """

    def __init__(self) -> None:
        self.changes = EventChannel()
        self._destroyed = False

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def reset(self) -> None:
        """Publish the current value once."""
        raise NotImplementedError(f"{type(self).__name__} does not implement reset()")

    def destroy(self) -> None:
        """Detach from the observed value. The source becomes inert."""
        raise NotImplementedError(f"{type(self).__name__} does not implement destroy()")

    def _publish(self, value: Any) -> None:
        if not self._destroyed:
            self.changes.publish(value)


class ConstantSource(Source):
    """Announces a fixed value."""

    def __init__(self, value: Any) -> None:
        super().__init__()
        self.value = value

    def reset(self) -> None:
        self._publish(self.value)

    def destroy(self) -> None:
        self._destroyed = True

    def __repr__(self) -> str:
        return f"ConstantSource({self.value!r})"


class CustomSource(Source):
    """Announces whatever getter() returns.

    The owner calls notify() when the underlying value changes.

    Usage:
        name = {"value": ""}
        src = CustomSource(lambda: name["value"])
        src.reset()          # publishes ""
        name["value"] = "x"
        src.notify()         # publishes "x"
    """

    def __init__(self, getter: Callable[[], Any]) -> None:
        super().__init__()
        self._getter: Callable[[], Any] | None = getter

    def reset(self) -> None:
        self.notify()

    def notify(self) -> None:
        if self._getter is not None:
            self._publish(self._getter())

    def destroy(self) -> None:
        self._destroyed = True
        self._getter = None


class CellSource(Source):
    """Bound source over a Cell. Forwards every change of the cell."""

    def __init__(self, cell: Cell) -> None:
        super().__init__()
        self._cell: Cell | None = cell
        cell.subscribe(self._publish)

    def reset(self) -> None:
        if self._cell is not None:
            self._publish(self._cell.get())

    def destroy(self) -> None:
        if self._cell is not None:
            self._cell.unsubscribe(self._publish)
            self._cell = None
        self._destroyed = True

    def __repr__(self) -> str:
        return f"CellSource({self._cell!r})"


def constant(value: Any) -> ConstantSource:
    return ConstantSource(value)


def custom(getter: Callable[[], Any]) -> CustomSource:
    return CustomSource(getter)


def bound(cell: Cell) -> CellSource:
    return CellSource(cell)
