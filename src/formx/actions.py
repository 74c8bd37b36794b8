"""Actions — consumers of predicate state.

An action is any callable taking one boolean. The helpers here compose
actions; none of them return anything useful. Actions holding deferred work
expose cancel(), and cancel() below reaches through the wrappers so a
connector can drop pending deliveries on teardown.
"""

from __future__ import annotations

from typing import Any, Callable

from formx.debounce import Debouncer
from formx.errors import ConfigurationError
from formx.predicate import _flatten

Action = Callable[[bool], Any]


def _require_callable(action: Any) -> Action:
    if not callable(action):
        raise ConfigurationError(f"Action must be callable, got {action!r}")
    return action


class AllAction:
    """Invokes every wrapped action, in order, with the same state."""

    __slots__ = ("actions",)

    def __init__(self, *actions: Action) -> None:
        self.actions: list[Action] = [_require_callable(a) for a in _flatten(actions)]

    def __call__(self, state: bool) -> None:
        for action in self.actions:
            action(state)

    def cancel(self) -> None:
        for action in self.actions:
            cancel(action)

    def __repr__(self) -> str:
        return f"AllAction({self.actions!r})"


class AltAction:
    """Invokes the wrapped action with the inverted state."""

    __slots__ = ("action",)

    def __init__(self, action: Action) -> None:
        self.action = _require_callable(action)

    def __call__(self, state: bool) -> None:
        self.action(not state)

    def cancel(self) -> None:
        cancel(self.action)

    def __repr__(self) -> str:
        return f"AltAction({self.action!r})"


def all_(*actions: Action) -> AllAction:
    return AllAction(*actions)


def alt(action: Action) -> AltAction:
    return AltAction(action)


def func(fn: Callable[[bool], Any]) -> Action:
    """Call fn with the state, discarding its result."""
    _require_callable(fn)

    def _action(state: bool) -> None:
        fn(state)

    return _action


def debounce(delay: float, action: Action) -> Debouncer:
    """Deliver to action only after `delay` seconds without a newer state."""
    return Debouncer(delay, action)


def cancel(action: Any) -> None:
    """Cancel any pending deferred delivery inside an action tree."""
    canceller = getattr(action, "cancel", None)
    if callable(canceller):
        canceller()
