"""formx error hierarchy.

All formx-specific errors inherit from FormxError for easy catching.
Values that fail a predicate are not errors; they are ordinary False states.
"""

from __future__ import annotations


class FormxError(Exception):
    """Base error for all formx operations."""


class ConfigurationError(FormxError, ValueError):
    """Structurally invalid graph: wrong arity, wrong dependency kind, unknown name."""


class ParseError(FormxError, ValueError):
    """Malformed declarative expression."""

    def __init__(self, message: str, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)
        self.position = position
