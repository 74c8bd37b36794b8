"""formx: reactive validity signals for forms and other mutable data."""

from importlib.metadata import version as _version

__version__ = _version("formx")

from formx.errors import FormxError, ConfigurationError, ParseError
from formx.channel import EventChannel
from formx.cell import Cell
from formx.source import Source, ConstantSource, CustomSource, CellSource, constant, custom, bound
from formx.predicate import (
    UNSET,
    PATTERNS,
    Predicate,
    ConstantPredicate,
    DependentPredicate,
    SourcePredicate,
    FunctionPredicate,
    ChangedPredicate,
    true,
    false,
    function,
    changed,
    equal,
    pattern,
    range_,
    exclude,
)
from formx.logic import LogicPredicate, and_, or_, not_
from formx.connector import Connector, validator
from formx.actions import all_, alt, func, debounce
from formx.debounce import Debouncer
from formx.expression import parse
from formx.registry import Registry, default_registry, build, from_string
# textual NOT auto-imported — opt-in only

__all__ = [
    "FormxError",
    "ConfigurationError",
    "ParseError",
    "EventChannel",
    "Cell",
    "Source",
    "ConstantSource",
    "CustomSource",
    "CellSource",
    "constant",
    "custom",
    "bound",
    "UNSET",
    "PATTERNS",
    "Predicate",
    "ConstantPredicate",
    "DependentPredicate",
    "SourcePredicate",
    "FunctionPredicate",
    "ChangedPredicate",
    "true",
    "false",
    "function",
    "changed",
    "equal",
    "pattern",
    "range_",
    "exclude",
    "LogicPredicate",
    "and_",
    "or_",
    "not_",
    "Connector",
    "validator",
    "all_",
    "alt",
    "func",
    "debounce",
    "Debouncer",
    "parse",
    "Registry",
    "default_registry",
    "build",
    "from_string",
]
