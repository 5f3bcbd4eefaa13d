"""
Parser for HTML DSL interpolation expressions.

This module turns the body of a `{{ ... }}` expression into a typed
InterpolationSegment and splits template text into literal and interpolation
segments. It also parses the `path as alias` iteration expressions carried by
`data-page` and `data-repeat` attributes.

Grammar:
    {{ path:type[?] [(kw:value, kw:value, ...)] [| filter[:arg,arg] | ...] }}
"""

import logging
import re
from collections.abc import Mapping

from htmldsl.core.path_utils import (
    IDENTIFIER_PATTERN,
    is_valid_path,
    validate_path_format,
)
from htmldsl.core.types import (
    Constraint,
    ConstraintKind,
    DataType,
    Filter,
    InterpolationSegment,
    IterationDirective,
    IterationKind,
    LiteralSegment,
    LiteralValue,
    TextSegment,
)
from htmldsl.exceptions import GrammarError
from htmldsl.parsing.scanner import (
    find_matching_paren,
    find_unquoted,
    split_constraint_entries,
    split_unquoted,
    unquote,
)
from htmldsl.templates.filters import get_filter_spec, is_known_filter

logger = logging.getLogger(__name__)

INTERPOLATION_PATTERN = re.compile(r"\{\{(.*?)\}\}")

ITERATION_PATTERN = re.compile(
    rf"^(?P<path>{IDENTIFIER_PATTERN}(?:\.{IDENTIFIER_PATTERN})*)"
    rf"(?:\s+as\s+(?P<alias>{IDENTIFIER_PATTERN}))?$"
)

NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

CONSTRAINT_KEYWORDS = tuple(kind.value for kind in ConstraintKind)

_STRING_CONSTRAINTS = {
    "enum": ConstraintKind.ENUM,
    "min": ConstraintKind.MIN_LENGTH,
    "max": ConstraintKind.MAX_LENGTH,
    "minLength": ConstraintKind.MIN_LENGTH,
    "maxLength": ConstraintKind.MAX_LENGTH,
    "pattern": ConstraintKind.PATTERN,
    "fixed": ConstraintKind.FIXED,
}

_NUMERIC_CONSTRAINTS = {
    "enum": ConstraintKind.ENUM,
    "min": ConstraintKind.MIN,
    "max": ConstraintKind.MAX,
    "exMin": ConstraintKind.EX_MIN,
    "exMax": ConstraintKind.EX_MAX,
    "step": ConstraintKind.STEP,
    "fixed": ConstraintKind.FIXED,
}

# Authoring keyword -> resolved constraint kind, per declared type
CONSTRAINT_RULES: dict[DataType, dict[str, ConstraintKind]] = {
    DataType.STRING: _STRING_CONSTRAINTS,
    DataType.INTEGER: _NUMERIC_CONSTRAINTS,
    DataType.NUMBER: _NUMERIC_CONSTRAINTS,
    DataType.BOOLEAN: {"fixed": ConstraintKind.FIXED},
    DataType.DATE: {},
    DataType.TIME: {},
    DataType.DATETIME: {},
}

_LENGTH_KINDS = {ConstraintKind.MIN_LENGTH, ConstraintKind.MAX_LENGTH}


class ExpressionParser:
    """Parser for the body of a single `{{ ... }}` interpolation."""

    def parse(self, raw: str) -> InterpolationSegment:
        """
        Parse an interpolation body into a typed segment.

        Params:
            raw: Expression text between the braces (surrounding whitespace allowed)

        Returns:
            Parsed InterpolationSegment

        Raises:
            GrammarError: If the expression is malformed in any way
        """
        try:
            return self._parse(raw.strip())
        except GrammarError as e:
            if e.expression is not None:
                raise
            raise GrammarError(e.reason, raw.strip()) from e

    def _parse(self, body: str) -> InterpolationSegment:
        pieces = split_unquoted(body, "|")
        main = pieces[0].strip() if pieces else ""
        filter_specs = pieces[1:]

        path_type, constraint_body = self._split_constraint_clause(main)
        path, data_type, nullable = self._parse_path_type(path_type)

        constraints = (
            self._parse_constraints(constraint_body, data_type)
            if constraint_body
            else ()
        )
        filters = tuple(
            self._parse_filter(spec.strip(), data_type) for spec in filter_specs
        )

        return InterpolationSegment(
            path=path,
            data_type=data_type,
            nullable=nullable,
            constraints=constraints,
            filters=filters,
        )

    def _split_constraint_clause(self, main: str) -> tuple[str, str | None]:
        """Separate `path:type[?]` from the parenthesised constraint body."""
        open_index = find_unquoted(main, "(")
        if open_index < 0:
            if find_unquoted(main, ")") >= 0:
                raise GrammarError("Unmatched constraint parentheses")
            return main, None

        close_index = find_matching_paren(main, open_index)
        if close_index < 0:
            raise GrammarError("Unclosed constraint parentheses")
        if main[close_index + 1 :].strip():
            raise GrammarError("Unmatched constraint parentheses")

        return main[:open_index].strip(), main[open_index + 1 : close_index].strip()

    def _parse_path_type(self, text: str) -> tuple[str, DataType, bool]:
        path, colon, type_text = text.partition(":")
        if not colon:
            raise GrammarError("Type is required. Use {{ path:type ... }}")

        path = path.strip()
        if not is_valid_path(path):
            raise GrammarError(f"Invalid path: {path}")

        type_text = type_text.strip()
        nullable = type_text.endswith("?")
        if nullable:
            type_text = type_text[:-1].strip()

        try:
            data_type = DataType(type_text)
        except ValueError:
            raise GrammarError(f"Invalid data type: {type_text}") from None

        return path, data_type, nullable

    def _parse_constraints(
        self, body: str, data_type: DataType
    ) -> tuple[Constraint, ...]:
        constraints = []
        for entry in split_constraint_entries(body, CONSTRAINT_KEYWORDS):
            keyword, colon, raw_value = entry.partition(":")
            if not colon:
                raise GrammarError(f"Constraint entry '{entry}' is missing ':'")
            constraints.append(
                self._build_constraint(keyword.strip(), raw_value.strip(), data_type)
            )
        return tuple(constraints)

    def _build_constraint(
        self, keyword: str, raw_value: str, data_type: DataType
    ) -> Constraint:
        if keyword not in CONSTRAINT_KEYWORDS:
            raise GrammarError(f"Unknown constraint: {keyword}")

        kind = CONSTRAINT_RULES[data_type].get(keyword)
        if kind is None:
            raise GrammarError(
                f'Constraint "{keyword}" is not allowed for type "{data_type.value}"'
            )

        if kind is ConstraintKind.ENUM:
            values = tuple(
                self._coerce_literal(part.strip(), data_type, keyword)
                for part in split_unquoted(raw_value, ",")
                if part.strip()
            )
            if not values:
                raise GrammarError(f'Constraint "{keyword}" requires at least one value')
            return Constraint(kind, values)

        if kind is ConstraintKind.FIXED:
            return Constraint(kind, self._coerce_literal(raw_value, data_type, keyword))

        if kind is ConstraintKind.PATTERN:
            return Constraint(kind, unquote(raw_value))

        integer_only = kind in _LENGTH_KINDS
        return Constraint(kind, self._parse_number(raw_value, keyword, integer_only))

    def _parse_number(
        self, raw_value: str, keyword: str, integer_only: bool = False
    ) -> int | float:
        text = unquote(raw_value)
        if not NUMBER_PATTERN.match(text):
            raise GrammarError(
                f'Constraint "{keyword}" expects a numeric value, got "{text}"'
            )

        if "." not in text and "e" not in text.lower():
            return int(text)

        number = float(text)
        if integer_only:
            if not number.is_integer():
                raise GrammarError(
                    f'Constraint "{keyword}" expects an integer, got "{text}"'
                )
            return int(number)
        return number

    def _coerce_literal(
        self, raw_value: str, data_type: DataType, keyword: str
    ) -> LiteralValue:
        """Coerce an `enum` or `fixed` literal to the declared data type."""
        if data_type is DataType.INTEGER:
            return self._parse_number(raw_value, keyword, integer_only=True)
        if data_type is DataType.NUMBER:
            return self._parse_number(raw_value, keyword)
        if data_type is DataType.BOOLEAN:
            text = unquote(raw_value)
            if text not in ("true", "false"):
                raise GrammarError(f"Invalid boolean literal: {text}")
            return text == "true"
        return unquote(raw_value)

    def _parse_filter(self, spec: str, data_type: DataType) -> Filter:
        name, colon, args_text = spec.partition(":")
        name = name.strip()
        args_text = args_text.strip()
        args = (
            tuple(unquote(arg.strip()) for arg in split_unquoted(args_text, ","))
            if colon and args_text
            else ()
        )

        if not is_known_filter(name):
            raise GrammarError(f'Unknown filter "{name}"')

        filter_spec = get_filter_spec(data_type, name)
        if filter_spec is None:
            raise GrammarError(
                f'Filter "{name}" is not allowed for type "{data_type.value}"'
            )
        if not filter_spec.accepts(len(args)):
            raise GrammarError(
                f'Filter "{name}" for type "{data_type.value}" expects '
                f"{filter_spec.arity_label} args, got {len(args)}"
            )

        return Filter(name=name, args=args)


_PARSER = ExpressionParser()


def parse_interpolation(raw: str) -> InterpolationSegment:
    """
    Convenience function to parse a single interpolation body.

    Params:
        raw: Expression text between `{{` and `}}`

    Returns:
        Parsed InterpolationSegment

    Raises:
        GrammarError: If the expression is malformed
    """
    return _PARSER.parse(raw)


def parse_text_segments(text: str) -> list[TextSegment]:
    """
    Split template text into literal and interpolation segments.

    Text outside `{{ ... }}` pairs is kept verbatim as literal segments; an
    opening `{{` with no closing `}}` stays literal.

    Params:
        text: Raw text content of a template text node

    Returns:
        Segments in document order; empty list for empty text

    Raises:
        GrammarError: If any interpolation is malformed
    """
    segments: list[TextSegment] = []
    last_index = 0

    for match in INTERPOLATION_PATTERN.finditer(text):
        if match.start() > last_index:
            segments.append(LiteralSegment(text[last_index : match.start()]))
        segments.append(parse_interpolation(match.group(1)))
        last_index = match.end()

    if last_index < len(text):
        segments.append(LiteralSegment(text[last_index:]))

    return segments


def parse_iteration_expression(expression: str, default_alias: str) -> tuple[str, str]:
    """
    Parse a `source.path as alias` iteration expression.

    Params:
        expression: Attribute value of `data-page` or `data-repeat`
        default_alias: Alias used when `as alias` is omitted

    Returns:
        Tuple of (source path, alias)

    Raises:
        GrammarError: If the expression is not `path` or `path as alias`

    Examples:
        "contract.items as item" -> ("contract.items", "item")
        "contracts" -> ("contracts", default_alias)
    """
    match = ITERATION_PATTERN.match(expression.strip())
    if not match:
        raise GrammarError("Invalid iteration expression", expression)

    logger.debug("Parsed iteration expression %r", expression)
    return match.group("path"), match.group("alias") or default_alias


def parse_row_count(attributes: Mapping[str, str], name: str) -> int | None:
    """
    Read a row-count modifier attribute.

    Returns:
        The positive integer value, or None when the attribute is absent

    Raises:
        GrammarError: If the value is not a positive integer
    """
    raw = attributes.get(name)
    if raw is None:
        return None
    text = raw.strip()
    if not text.isdigit() or int(text) <= 0:
        raise GrammarError(f"{name} must be a positive integer", raw)
    return int(text)


def parse_element_directives(
    attributes: Mapping[str, str],
) -> tuple[IterationDirective | None, str | None]:
    """
    Parse the iteration and conditional directives of an element.

    `data-page` takes precedence over `data-repeat` when both are present.
    Empty directive attributes count as absent.

    Params:
        attributes: Element attributes

    Returns:
        Tuple of (iteration directive or None, conditional path or None)

    Raises:
        GrammarError: If an iteration expression, row-count modifier or
            conditional path is malformed
    """
    iteration = None
    for kind in (IterationKind.PAGE, IterationKind.REPEAT):
        expression = attributes.get(kind.value)
        if not expression:
            continue
        source_path, alias = parse_iteration_expression(expression, kind.default_alias)
        iteration = IterationDirective(
            kind=kind,
            source_path=source_path,
            alias=alias,
            fixed_rows=parse_row_count(attributes, "data-fixed-rows"),
            max_rows=parse_row_count(attributes, "data-max-rows"),
        )
        break

    condition = (attributes.get("data-if") or "").strip() or None
    if condition is not None:
        validate_path_format(condition, "conditional path")

    return iteration, condition
