"""Event channel — the publish/subscribe primitive every node owns.

One channel per node, no event names. Subscribers run synchronously in
subscription order; exceptions propagate to whoever published.
"""

from __future__ import annotations

from typing import Callable

Disposer = Callable[[], None]


class EventChannel:
    """Ordered list of callbacks with synchronous fan-out."""

    __slots__ = ("_subscribers",)

    def __init__(self) -> None:
        self._subscribers: list[Callable] = []

    def subscribe(self, callback: Callable) -> Disposer:
        """Register a callback. Returns a function that removes it.

        Subscribing the same callback twice registers it twice.
        """
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def unsubscribe(self, callback: Callable) -> None:
        """Remove every registration of callback, keeping the others in order.

        Bound methods match by equality, so `unsubscribe(obj.method)` works.
        """
        self._subscribers = [cb for cb in self._subscribers if cb != callback]

    def publish(self, *args) -> None:
        """Invoke every subscriber with args, in subscription order."""
        # Snapshot: subscribers may unsubscribe during fan-out.
        for cb in list(self._subscribers):
            cb(*args)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __bool__(self) -> bool:
        return bool(self._subscribers)

    def __repr__(self) -> str:
        return f"EventChannel({len(self._subscribers)} subscribers)"
