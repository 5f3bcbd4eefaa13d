"""
Core type definitions for the HTML DSL framework.

This module contains the typed results of interpolation parsing (text
segments, constraints, filters) and of directive parsing (iterations), shared
by the schema compiler and the template renderer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

LiteralValue = str | int | float | bool

JsonSchema = dict[str, Any]


class DataType(Enum):
    """Declared data type of an interpolation."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


class ConstraintKind(Enum):
    """Kind of a parsed constraint; values are the authoring keywords."""

    ENUM = "enum"
    MIN = "min"
    MAX = "max"
    EX_MIN = "exMin"
    EX_MAX = "exMax"
    STEP = "step"
    PATTERN = "pattern"
    FIXED = "fixed"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"


@dataclass(frozen=True)
class Constraint:
    """
    A single constraint attached to an interpolation.

    Params:
        kind: Constraint kind
        value: Coerced value; a tuple of literals for ENUM
    """

    kind: ConstraintKind
    value: LiteralValue | tuple[LiteralValue, ...]


@dataclass(frozen=True)
class Filter:
    """A named format filter with its raw string arguments."""

    name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class LiteralSegment:
    """Plain text between interpolations."""

    value: str

    @property
    def kind(self) -> str:
        return "literal"


@dataclass(frozen=True)
class InterpolationSegment:
    """
    A parsed `{{ path:type[?] (constraints) | filters }}` expression.

    Params:
        path: Dot-separated data path as written (before alias resolution)
        data_type: Declared data type
        nullable: True when the type carried a trailing `?`
        constraints: Constraints in authoring order
        filters: Filters in application order
    """

    path: str
    data_type: DataType
    nullable: bool = False
    constraints: tuple[Constraint, ...] = ()
    filters: tuple[Filter, ...] = ()

    @property
    def kind(self) -> str:
        return "interpolation"


TextSegment = LiteralSegment | InterpolationSegment


class IterationKind(Enum):
    """Iteration construct type, named after its control attribute."""

    PAGE = "data-page"
    REPEAT = "data-repeat"

    @property
    def default_alias(self) -> str:
        return "page" if self is IterationKind.PAGE else "item"


@dataclass(frozen=True)
class IterationDirective:
    """
    Parsed iteration attribute of an element.

    Params:
        kind: Page-level or repeat-level iteration
        source_path: Path of the array being iterated (before alias resolution)
        alias: Name bound to the current item inside the element subtree
        fixed_rows: Minimum number of rendered instances (padding), if set
        max_rows: Maximum number of source items rendered, if set
    """

    kind: IterationKind
    source_path: str
    alias: str
    fixed_rows: int | None = None
    max_rows: int | None = None
