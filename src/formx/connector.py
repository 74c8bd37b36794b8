"""Connector — joins predicates to actions.

A Connector is an AND over its child predicates that also delivers each of
its own state transitions (the first one included) to an action. Because it
is a predicate itself, a connector can be a child of another connector:
groups of independent validators nest structurally.

Usage:
    form = validator(
        [pattern(PATTERNS["email"], email), equal(password, confirm)],
        [submit_enabled, debounce(0.2, show_hint)],
    )
    form.reset()    # cascades, delivers the initial state synchronously
    ...
    form.destroy()  # unwinds every subscription in the tree
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from formx import actions as _actions
from formx.logic import LogicPredicate, _all_true
from formx.predicate import Predicate

logger = logging.getLogger("formx.connector")


class Connector(LogicPredicate):
    """AND of predicates, with state transitions delivered to an action."""

    def __init__(
        self,
        predicates: Predicate | Sequence[Predicate],
        action: _actions.Action | Sequence[_actions.Action],
    ) -> None:
        # Reject bad actions before subscribing to any predicate.
        self.action = _actions.all_(action)
        super().__init__(_all_true, predicates)
        self.state_changes.subscribe(self._deliver)

    def _deliver(self, state: bool, _node: Any = None) -> None:
        logger.debug("%r delivering %r", self, state)
        self.action(state)

    def destroy(self) -> None:
        """Stop delivering, drop pending deferred deliveries, then tear down."""
        self.state_changes.unsubscribe(self._deliver)
        _actions.cancel(self.action)
        super().destroy()

    def __repr__(self) -> str:
        return f"Connector({len(self.dependencies)} predicates, state={self._state!r})"


def validator(
    predicates: Predicate | Sequence[Predicate],
    action: _actions.Action | Sequence[_actions.Action],
) -> Connector:
    return Connector(predicates, action)
