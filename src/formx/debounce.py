"""Debounce scheduler — coalesce a burst of deliveries into one.

Each call cancels the pending timer and starts a new one, so only the last
value of a burst is delivered, `delay` seconds after the last call. Timers
are threading.Timer (daemon=True); the consumer runs on the timer thread.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from formx.errors import ConfigurationError

logger = logging.getLogger("formx.debounce")


class Debouncer:
    """Stateful wrapper around a consumer. At most one delivery is pending.

    Usage:
        save = Debouncer(0.25, lambda ok: button.set_enabled(ok))
        save(True)
        save(False)   # supersedes True
        # ~0.25s later: consumer(False)
        save.cancel() # on teardown
    """

    __slots__ = ("delay", "consumer", "_lock", "_timer", "_value", "_generation")

    def __init__(self, delay: float, consumer: Callable[[Any], None]) -> None:
        if delay < 0:
            raise ValueError(f"debounce delay must be >= 0, got {delay!r}")
        if not callable(consumer):
            raise ConfigurationError(f"debounce consumer must be callable, got {consumer!r}")
        self.delay = delay
        self.consumer = consumer
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._value: Any = None
        # Bumped by cancel(); a delivery already off the lock checks it last.
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def __call__(self, value: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                logger.debug("Superseded pending delivery of %r", self._value)
            # The timer hands itself to _expire so a superseded one can tell it lost.
            timer = threading.Timer(self.delay, lambda: self._expire(timer))
            timer.daemon = True
            self._timer = timer
            self._value = value
            timer.start()

    def _expire(self, timer: threading.Timer) -> None:
        with self._lock:
            if self._timer is not timer:
                return
            value = self._value
            generation = self._generation
            self._timer = None
            self._value = None
        self._deliver(value, generation)

    def _deliver(self, value: Any, generation: int) -> None:
        if generation != self._generation:
            logger.debug("Dropped delivery of %r cancelled while in flight", value)
            return
        self.consumer(value)

    def cancel(self) -> None:
        """Drop the pending delivery, if any."""
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                logger.debug("Cancelled pending delivery of %r", self._value)
            self._timer = None
            self._value = None

    def flush(self) -> None:
        """Deliver the pending value now instead of waiting."""
        with self._lock:
            timer = self._timer
            if timer is None:
                return
            timer.cancel()
            value = self._value
            self._timer = None
            self._value = None
        self.consumer(value)

    def __repr__(self) -> str:
        state = "pending" if self._timer is not None else "idle"
        return f"Debouncer({self.delay}s, {state})"


def wrap(delay: float, consumer: Callable[[Any], None]) -> Debouncer:
    return Debouncer(delay, consumer)
