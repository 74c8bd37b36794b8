"""Registry and builder — from declarative expressions to live graphs.

A Registry is an explicit mapping of names to constructors and values. It
is passed to build(); nothing is looked up in module globals. Registries are
layered with extend(), so an application adds its own sources and actions
(or a Textual app adds widget bindings) without touching the defaults.

Usage:
    age = Cell("")
    reg = default_registry().extend(age=bound(age), show=print)
    form = build('validator(range(18, 120, age), show)', reg)
    form.reset()  # prints False
    age.set("30") # prints True
"""

from __future__ import annotations

import logging
from collections import ChainMap
from collections.abc import Iterator, Mapping
from typing import Any

from formx import actions, connector, logic, predicate, source
from formx.errors import ConfigurationError
from formx.expression import Call, ListExpr, Literal, Name, Node, parse

logger = logging.getLogger("formx.registry")


def _debounce_ms(delay_ms: float, action: actions.Action) -> Any:
    """Expressions give debounce delays in milliseconds."""
    return actions.debounce(float(delay_ms) / 1000.0, action)


class Registry(Mapping[str, Any]):
    """Name -> constructor/value lookup used by build()."""

    def __init__(self, entries: Mapping[str, Any] | None = None) -> None:
        self._entries: Mapping[str, Any] = entries if entries is not None else {}

    def __getitem__(self, name: str) -> Any:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def extend(self, mapping: Mapping[str, Any] | None = None, **entries: Any) -> Registry:
        """Return a new registry whose entries shadow this one's."""
        layer = dict(mapping or {})
        layer.update(entries)
        return Registry(ChainMap(layer, self._entries))

    def resolve(self, path: str | tuple[str, ...]) -> Any:
        """Look up a dotted name, descending through nested mappings."""
        parts = tuple(path.split(".")) if isinstance(path, str) else path
        value: Any = self._entries
        for depth, part in enumerate(parts):
            if not isinstance(value, Mapping) or part not in value:
                dotted = ".".join(parts[: depth + 1])
                raise ConfigurationError(f"Unknown name {dotted!r}")
            value = value[part]
        return value

    def __repr__(self) -> str:
        return f"Registry({len(self)} names)"


def default_registry() -> Registry:
    """Registry holding every built-in predicate, source and action."""
    predicates = {
        "and": logic.and_,
        "or": logic.or_,
        "not": logic.not_,
        "TRUE": predicate.true,
        "FALSE": predicate.false,
        "changed": predicate.changed,
        "equal": predicate.equal,
        "exclude": predicate.exclude,
        "pattern": predicate.pattern,
        "range": predicate.range_,
        "function": predicate.function,
    }
    sources = {
        "constant": source.constant,
        "custom": source.custom,
        "bound": source.bound,
    }
    action_entries = {
        "all": actions.all_,
        "alt": actions.alt,
        "debounce": _debounce_ms,
        "func": actions.func,
    }
    entries: dict[str, Any] = {}
    entries.update(predicates)
    entries.update(sources)
    entries.update(action_entries)
    entries.update(
        validator=connector.validator,
        predicate=predicates,
        source=sources,
        action=action_entries,
        regex=dict(predicate.PATTERNS),
    )
    return Registry(entries)


class _Builder:
    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def evaluate(self, node: Node) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Name):
            return self.registry.resolve(node.path)
        if isinstance(node, ListExpr):
            return [self.evaluate(item) for item in node.items]
        if isinstance(node, Call):
            target = self.registry.resolve(node.name.path)
            if not callable(target):
                raise ConfigurationError(f"{node.name.dotted!r} is not callable")
            args = [self.evaluate(arg) for arg in node.args]
            try:
                return target(*args)
            except TypeError as exc:
                raise ConfigurationError(f"{node.name.dotted}(): {exc}") from exc
        raise ConfigurationError(f"Unsupported expression node {node!r}")


def build(expression: str | Node, registry: Registry | None = None) -> Any:
    """Parse (if needed) and evaluate an expression against a registry."""
    if registry is None:
        registry = default_registry()
    node = parse(expression) if isinstance(expression, str) else expression
    result = _Builder(registry).evaluate(node)
    logger.debug("Built %r", result)
    return result


def from_string(text: str, registry: Registry | None = None, **scope: Any) -> Any:
    """build() with extra names layered over the registry."""
    if registry is None:
        registry = default_registry()
    if scope:
        registry = registry.extend(scope)
    return build(text, registry)
