"""Logical combinators — AND / OR / NOT over other predicates.

A LogicPredicate listens to the state of its child predicates and combines
them with a rule. An unset child never counts as true.

Usage:
    ok = and_(pattern(PATTERNS["email"], email), not_(changed(email)))
    ok.reset()
"""

from __future__ import annotations

from typing import Callable, Sequence

from formx.channel import EventChannel
from formx.errors import ConfigurationError
from formx.predicate import DependentPredicate, Predicate, _flatten


class LogicPredicate(DependentPredicate):
    """State is fn(predicates), re-evaluated whenever a child changes state."""

    dependency_type = Predicate

    def __init__(self, fn: Callable[[Sequence[Predicate]], bool], *predicates: Predicate) -> None:
        self.fn = fn
        super().__init__(*predicates)

    def _channel_of(self, dependency: Predicate) -> EventChannel:
        return dependency.state_changes

    def check(self) -> None:
        self._set_state(bool(self.fn(self.dependencies)))


def _all_true(predicates: Sequence[Predicate]) -> bool:
    return all(p.get_state() is True for p in predicates)


def _any_true(predicates: Sequence[Predicate]) -> bool:
    return any(p.get_state() is True for p in predicates)


def _negate(predicates: Sequence[Predicate]) -> bool:
    return predicates[0].get_state() is not True


def and_(*predicates: Predicate) -> LogicPredicate:
    """True if every child is true. With no children, True on reset."""
    return LogicPredicate(_all_true, *predicates)


def or_(*predicates: Predicate) -> LogicPredicate:
    """True if at least one child is true. With no children, False on reset."""
    return LogicPredicate(_any_true, *predicates)


def not_(*predicate: Predicate) -> LogicPredicate:
    """Inverse of exactly one child."""
    children = _flatten(predicate)
    if len(children) != 1:
        raise ConfigurationError(f"not_() takes exactly one predicate, got {len(children)}")
    return LogicPredicate(_negate, *children)
