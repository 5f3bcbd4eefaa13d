"""
Mapping from DSL data types and constraints to JSON Schema keywords.

Every DataType and every ConstraintKind has an entry in the tables below.
"""

from collections.abc import Iterable
from typing import Any

from htmldsl.core.types import Constraint, ConstraintKind, DataType

JSON_TYPES: dict[DataType, str] = {
    DataType.STRING: "string",
    DataType.INTEGER: "integer",
    DataType.NUMBER: "number",
    DataType.BOOLEAN: "boolean",
    DataType.DATE: "string",
    DataType.TIME: "string",
    DataType.DATETIME: "string",
}

JSON_FORMATS: dict[DataType, str | None] = {
    DataType.STRING: None,
    DataType.INTEGER: None,
    DataType.NUMBER: None,
    DataType.BOOLEAN: None,
    DataType.DATE: "date",
    DataType.TIME: "time",
    DataType.DATETIME: "date-time",
}

CONSTRAINT_KEYWORDS: dict[ConstraintKind, str] = {
    ConstraintKind.ENUM: "enum",
    ConstraintKind.MIN: "minimum",
    ConstraintKind.MAX: "maximum",
    ConstraintKind.EX_MIN: "exclusiveMinimum",
    ConstraintKind.EX_MAX: "exclusiveMaximum",
    ConstraintKind.STEP: "multipleOf",
    ConstraintKind.PATTERN: "pattern",
    ConstraintKind.FIXED: "const",
    ConstraintKind.MIN_LENGTH: "minLength",
    ConstraintKind.MAX_LENGTH: "maxLength",
}


def type_keywords(data_type: DataType, nullable: bool) -> dict[str, Any]:
    """
    Build the `type` (and `format`) keywords for a leaf.

    Examples:
        (INTEGER, False) -> {"type": "integer"}
        (DATE, True) -> {"type": ["string", "null"], "format": "date"}
    """
    base = JSON_TYPES[data_type]
    keywords: dict[str, Any] = {"type": [base, "null"] if nullable else base}
    fmt = JSON_FORMATS[data_type]
    if fmt is not None:
        keywords["format"] = fmt
    return keywords


def constraint_keywords(constraints: Iterable[Constraint]) -> dict[str, Any]:
    """Translate constraints into schema keywords; a repeated kind keeps its last value."""
    keywords: dict[str, Any] = {}
    for constraint in constraints:
        value = constraint.value
        if constraint.kind is ConstraintKind.ENUM:
            value = list(value)
        keywords[CONSTRAINT_KEYWORDS[constraint.kind]] = value
    return keywords
