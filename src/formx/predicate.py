"""Predicates — tri-state boolean nodes derived from sources.

Every predicate holds a cached state: None (unset), True or False. State only
ever moves through _set_state(), which publishes on `state_changes` when, and
only when, the new value differs from the cached one. That single gate is
what keeps downstream combinators and connectors free of duplicate
notifications.

A DependentPredicate subscribes to its dependencies, caches the last value
seen from each one, and runs its evaluation rule (check) whenever a
dependency announces a value different from the cached one.

Usage:
    age = CellSource(Cell("42"))
    adult = range_(18, None, age)
    adult.reset()
    adult.get_state()  # True
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Iterable, Sequence

from formx.channel import EventChannel
from formx.errors import ConfigurationError
from formx.source import Source


class _Unset:
    """Marker for a cache slot that has not received a value yet."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _differs(old: Any, new: Any) -> bool:
    return old is not new and old != new


def _flatten(items: Iterable[Any]) -> list[Any]:
    """Accept dependencies passed flat or as lists: f(a, b) == f([a, b])."""
    result: list[Any] = []
    for item in items:
        if isinstance(item, (list, tuple)):
            result.extend(item)
        else:
            result.append(item)
    return result


# A few simple (imperfect) patterns for common fields.
PATTERNS: dict[str, re.Pattern] = {
    "email": re.compile(r"^[\w.%+-]+@[\w.-]+\.[\w]{2,}$"),
    "web_url": re.compile(
        r"^(?:https?://)?[\w.-]+\.[A-Za-z.]{2,13}(?:/[\w.+#%@~-]*)*/?(?:\?[\w.+#%@~=&-]*)?$"
    ),
    "web_url_full": re.compile(
        r"^https?://[\w.-]+\.[A-Za-z.]{2,13}(?:/[\w.+#%@~-]*)*/?(?:\?[\w.+#%@~=&-]*)?$"
    ),
    "integer": re.compile(r"^[0-9]+$"),
}


class Predicate:
    """Base boolean node.

    Subclasses implement reset() and destroy(). Listeners on `state_changes`
    receive (state, predicate).
    """

    def __init__(self) -> None:
        self.state_changes = EventChannel()
        self._state: bool | None = None

    def get_state(self) -> bool | None:
        return self._state

    @property
    def state(self) -> bool | None:
        return self._state

    def _set_state(self, state: bool) -> None:
        if _differs(self._state, state):
            self._state = state
            self.state_changes.publish(state, self)

    def reset(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not implement reset()")

    def destroy(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not implement destroy()")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self._state!r})"


class ConstantPredicate(Predicate):
    """Takes a fixed state on reset."""

    def __init__(self, value: bool) -> None:
        super().__init__()
        self.value = bool(value)

    def reset(self) -> None:
        self._set_state(self.value)

    def destroy(self) -> None:
        pass


class DependentPredicate(Predicate):
    """Predicate whose state is derived from a list of dependencies.

    Subclasses choose the dependency kind (`dependency_type`), the channel
    to listen on (`_channel_of`), and the evaluation rule (`check`).
    """

    dependency_type: type = object

    def __init__(self, *dependencies: Any) -> None:
        super().__init__()
        self.dependencies: list[Any] = _flatten(dependencies)
        for dep in self.dependencies:
            if not isinstance(dep, self.dependency_type):
                raise ConfigurationError(
                    f"{type(self).__name__} expects {self.dependency_type.__name__} "
                    f"dependencies, got {dep!r}"
                )
        self.values: list[Any] = [UNSET] * len(self.dependencies)
        self._resetting = False
        self._listeners: list[Callable] = []
        for index, dep in enumerate(self.dependencies):
            listener = self._listener_for(index)
            self._channel_of(dep).subscribe(listener)
            self._listeners.append(listener)

    def _channel_of(self, dependency: Any) -> EventChannel:
        raise NotImplementedError(f"{type(self).__name__} does not implement _channel_of()")

    def _listener_for(self, index: int) -> Callable:
        def _on_value(value: Any, *_: Any) -> None:
            if _differs(self.values[index], value):
                self.values[index] = value
                if not self._resetting:
                    self.check()

        return _on_value

    def check(self) -> None:
        """Evaluate the rule over the cached values and update state."""
        raise NotImplementedError(f"{type(self).__name__} does not implement check()")

    def reset(self) -> None:
        """Reset every dependency, then evaluate once.

        Dependencies republish while the reset is in progress; their values
        are cached but the rule only runs after all of them have reported,
        so a reset never emits a transient state.
        """
        self._resetting = True
        try:
            for dep in self.dependencies:
                dep.reset()
        finally:
            self._resetting = False
        self._after_reset()

    def _after_reset(self) -> None:
        self.check()

    def destroy(self) -> None:
        """Unsubscribe from every dependency, then destroy them."""
        for dep, listener in zip(self.dependencies, self._listeners):
            self._channel_of(dep).unsubscribe(listener)
        for dep in self.dependencies:
            dep.destroy()
        self.dependencies = []
        self._listeners = []


class SourcePredicate(DependentPredicate):
    """Dependent predicate over sources."""

    dependency_type = Source

    def _channel_of(self, dependency: Source) -> EventChannel:
        return dependency.changes


class FunctionPredicate(SourcePredicate):
    """State is fn(values) where values is the list of cached source values.

    Slots that have not been announced yet hold UNSET.
    """

    def __init__(self, fn: Callable[[list[Any]], Any], *sources: Source) -> None:
        self.fn = fn
        super().__init__(*sources)

    def check(self) -> None:
        self._set_state(bool(self.fn(list(self.values))))

    def __repr__(self) -> str:
        name = getattr(self.fn, "__name__", type(self.fn).__name__)
        return f"FunctionPredicate({name}, state={self._state!r})"


class ChangedPredicate(SourcePredicate):
    """True once any source has diverged from its value at the last reset.

    Right after reset() the state is False. The first divergence latches
    True until the next reset(), even if the value later returns. Until the
    first reset there is nothing to compare against, so announcements only
    fill the cache (a shared source may be republished by a sibling first).
    """

    def __init__(self, *sources: Source) -> None:
        super().__init__(*sources)
        self._snapshot: list[Any] | None = None

    def _after_reset(self) -> None:
        self._snapshot = list(self.values)
        self._set_state(False)

    def check(self) -> None:
        if self._snapshot is None or self._state:
            return
        self._set_state(any(_differs(old, new) for old, new in zip(self._snapshot, self.values)))


def _to_number(value: Any) -> float | None:
    if value is UNSET or value is None or isinstance(value, bool):
        return None
    try:
        number = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def true() -> ConstantPredicate:
    return ConstantPredicate(True)


def false() -> ConstantPredicate:
    return ConstantPredicate(False)


def function(fn: Callable[[list[Any]], Any], *sources: Source) -> FunctionPredicate:
    return FunctionPredicate(fn, *sources)


def changed(*sources: Source) -> ChangedPredicate:
    return ChangedPredicate(*sources)


def equal(*sources: Source) -> FunctionPredicate:
    """True if every source holds the same value as the first one.

    Handy for "confirm password" fields.
    """

    def _equal(values: list[Any]) -> bool:
        return all(not _differs(values[0], v) for v in values)

    return FunctionPredicate(_equal, *sources)


def pattern(expression: str | re.Pattern, *sources: Source) -> FunctionPredicate:
    """True if every source value, as a string, contains a match of expression.

    Anchor the expression (^...$) to match the whole value.
    """
    if isinstance(expression, str):
        compiled = re.compile(expression)
    elif isinstance(expression, re.Pattern):
        compiled = expression
    else:
        raise ConfigurationError(
            f"pattern() expects a string or compiled pattern, got {expression!r}"
        )

    def _matches(values: list[Any]) -> bool:
        return all(v is not UNSET and compiled.search(str(v)) is not None for v in values)

    return FunctionPredicate(_matches, *sources)


def range_(minimum: Any, maximum: Any, *sources: Source) -> FunctionPredicate:
    """True if every source value parses as a number within [minimum, maximum].

    A bound of None (or anything non-numeric) is no constraint.
    """
    low, high = _to_number(minimum), _to_number(maximum)

    def _in_range(values: list[Any]) -> bool:
        for value in values:
            number = _to_number(value)
            if number is None:
                return False
            if low is not None and number < low:
                return False
            if high is not None and number > high:
                return False
        return True

    return FunctionPredicate(_in_range, *sources)


def exclude(blacklist: str | Sequence[Any], *sources: Source) -> FunctionPredicate:
    """True if no source value case-insensitively equals a blacklisted entry."""
    if isinstance(blacklist, str):
        blacklist = [blacklist]
    banned = {str(entry).casefold() for entry in blacklist}

    def _allowed(values: list[Any]) -> bool:
        return all(v is UNSET or str(v).casefold() not in banned for v in values)

    return FunctionPredicate(_allowed, *sources)
