"""Textual integration for formx. Opt-in — requires textual.

Binds sources to widget values and actions to widget state. Widget coupling
stays in this module; the core graph knows nothing about Textual.

Actions resolve their target at delivery time, skip delivery while the app
is not running or paused, swallow NoMatches from widget queries, and marshal
calls coming from other threads (debounce timers) via call_from_thread.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterable

from textual.css.query import NoMatches

from formx.errors import ConfigurationError
from formx.registry import Registry, default_registry
from formx.source import Source

# Hold depth per app, keyed by id(app). An app is held while its depth is > 0.
_holds: dict[int, int] = {}


@contextmanager
def pause(app):
    """Drop enable/style deliveries for `app` inside the block.

    Use it while a form screen is torn down and rebuilt. Deliveries made
    inside the block are dropped, not queued; reset the graph afterwards to
    push the current state. Blocks nest.
    """
    key = id(app)
    _holds[key] = _holds.get(key, 0) + 1
    try:
        yield
    finally:
        depth = _holds.pop(key) - 1
        if depth:
            _holds[key] = depth


def is_safe(app) -> bool:
    """True when widget actions bound to `app` may touch its widgets."""
    return bool(app.is_running) and id(app) not in _holds


def _resolve(host, target):
    if isinstance(target, str):
        if not target.strip():
            raise ConfigurationError("Empty widget selector")
        return host.query_one(target)
    if target is None:
        raise ConfigurationError("Empty widget selector")
    return target


def _classes(names: str | Iterable[str] | None) -> list[str]:
    if names is None:
        return []
    if isinstance(names, str):
        return names.split()
    return list(names)


class WidgetSource(Source):
    """Publishes a widget's `value` (Input, Checkbox, Switch, Select, ...).

    Changes are observed through host.watch(widget, "value", ...), so the
    host should be the app or screen that owns the widget.

    Textual offers no way to remove a watch, so the watcher entry stays on
    the host until the host itself is removed. After destroy() it publishes
    nothing and the source no longer references the widget. Graphs that are
    rebuilt often should watch through a screen with the same lifetime, so
    the stale entries go away with it.
    """

    def __init__(self, host, target) -> None:
        super().__init__()
        self.widget = _resolve(host, target)
        host.watch(self.widget, "value", self._on_value, init=False)

    def _on_value(self, value: Any) -> None:
        self._publish(value)

    def reset(self) -> None:
        if self.widget is not None:
            self._publish(self.widget.value)

    def destroy(self) -> None:
        self._destroyed = True
        self.widget = None

    def __repr__(self) -> str:
        return f"WidgetSource({self.widget!r})"


def _guarded(app, effect: Callable[[Any, bool], None], target) -> Callable[[bool], None]:
    _main = threading.get_ident()

    def _action(state: bool) -> None:
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, state)
        else:
            _safe(state)

    def _safe(state: bool) -> None:
        try:
            widget = _resolve(app, target)
        except NoMatches:
            return
        effect(widget, state)

    return _action


def enable(app, target) -> Callable[[bool], None]:
    """Enable the widget while the state is true, disable it otherwise."""

    def _effect(widget, state: bool) -> None:
        widget.disabled = not state

    return _guarded(app, _effect, target)


def style(app, target, true_classes=None, false_classes=None) -> Callable[[bool], None]:
    """Swap CSS classes on the widget according to the state.

    True adds `true_classes` and removes `false_classes`; False does the
    opposite. Most themes mark bad input with a class, so the usual call is
    style(app, "#email", None, "-invalid").
    """
    on, off = _classes(true_classes), _classes(false_classes)

    def _effect(widget, state: bool) -> None:
        add, remove = (on, off) if state else (off, on)
        if remove:
            widget.remove_class(*remove)
        if add:
            widget.add_class(*add)

    return _guarded(app, _effect, target)


def registry(app, base: Registry | None = None) -> Registry:
    """The default registry plus `element`, `enable` and `style` bound to app."""
    if base is None:
        base = default_registry()
    return base.extend(
        element=lambda target: WidgetSource(app, target),
        enable=lambda target: enable(app, target),
        style=lambda target, true_classes=None, false_classes=None: style(
            app, target, true_classes, false_classes
        ),
    )
