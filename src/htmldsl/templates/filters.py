"""
Format filter registry and pipeline for HTML DSL interpolations.

Filters are registered per data type with fixed argument arity. The parser
checks filter names and arity against this registry, so by the time a filter
chain runs it is known to be well-formed. Transforms never raise on odd
values: input that cannot be interpreted is passed through or stringified.
"""

import logging
import math
import re
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any
from zoneinfo import ZoneInfo

from attrs import frozen

from htmldsl.core.types import DataType, Filter
from htmldsl.core.values import is_falsy, stringify, to_number
from htmldsl.exceptions import GrammarError

logger = logging.getLogger(__name__)

DATE_TOKEN_PATTERN = re.compile(r"YYYY|MM|DD|HH|mm|ss")
DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?")
UTC_OFFSET_PATTERN = re.compile(r"([+-]\d{2}:?\d{2}|Z)$", re.IGNORECASE)
COMPACT_OFFSET_PATTERN = re.compile(r"([+-]\d{2})(\d{2})$")

DEFAULT_DATE_FORMAT = "YYYY-MM-DD"
MAX_FIXED_DIGITS = 100

# Wide enough for any finite float quantized to MAX_FIXED_DIGITS places
FIXED_CONTEXT = Context(prec=MAX_FIXED_DIGITS + 400)


@frozen
class FilterContext:
    """Per-interpolation information available to filter transforms."""

    data_type: DataType | None = None
    timezone: str = "UTC"


Transform = Callable[[Any, tuple[str, ...], FilterContext], Any]


@frozen
class FilterSpec:
    """Registry entry: argument arity bounds and the transform."""

    name: str
    min_args: int
    max_args: int
    transform: Transform

    @property
    def arity_label(self) -> str:
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args}-{self.max_args}"

    def accepts(self, arg_count: int) -> bool:
        return self.min_args <= arg_count <= self.max_args


def _int_arg(raw: str, fallback: int = 0) -> int:
    number = to_number(raw)
    if isinstance(number, float) and not math.isfinite(number):
        return fallback
    return int(number)


def _default(value: Any, args: tuple[str, ...], context: FilterContext) -> Any:
    return args[0] if value is None else value


def _upper(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    return stringify(value).upper()


def _lower(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    return stringify(value).lower()


def _replace(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    old, new = args
    return stringify(value).replace(old, new)


def _pad_left(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    text = stringify(value)
    width = _int_arg(args[0])
    fill = args[1] if len(args) > 1 else "0"
    missing = width - len(text)
    if missing <= 0 or not fill:
        return text
    repeats = missing // len(fill) + 1
    return (fill * repeats)[:missing] + text


def _slice(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    return stringify(value)[_int_arg(args[0]) : _int_arg(args[1])]


def _zenkaku(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    return "".join(
        chr(ord(char) + 0xFEE0) if "!" <= char <= "~" else char
        for char in stringify(value)
    )


def _hankaku(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    return "".join(
        chr(ord(char) - 0xFEE0) if "！" <= char <= "～" else char
        for char in stringify(value)
    )


def _comma(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    number = to_number(value)
    if not math.isfinite(number):
        return stringify(value)
    if isinstance(number, int):
        return f"{number:,}"
    if number.is_integer():
        return f"{int(number):,}"
    return format(Decimal(repr(number)), ",f")


def _fixed(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    number = to_number(value)
    if not math.isfinite(number):
        return stringify(value)
    digits = min(max(_int_arg(args[0]), 0), MAX_FIXED_DIGITS)
    exponent = Decimal(1).scaleb(-digits)
    rounded = Decimal(number).quantize(
        exponent, rounding=ROUND_HALF_UP, context=FIXED_CONTEXT
    )
    return format(rounded, "f")


def _either(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    truthy, falsy = args
    return falsy if is_falsy(value) else truthy


def _date_format(value: Any, args: tuple[str, ...], context: FilterContext) -> str:
    pattern = args[0] if args else DEFAULT_DATE_FORMAT
    return format_temporal(value, context.data_type, pattern, context.timezone)


DEFAULT = FilterSpec("default", 1, 1, _default)
UPPER = FilterSpec("upper", 0, 0, _upper)
LOWER = FilterSpec("lower", 0, 0, _lower)
REPLACE = FilterSpec("replace", 2, 2, _replace)
PAD_LEFT = FilterSpec("pad-left", 1, 2, _pad_left)
SLICE = FilterSpec("slice", 2, 2, _slice)
ZENKAKU = FilterSpec("zenkaku", 0, 0, _zenkaku)
HANKAKU = FilterSpec("hankaku", 0, 0, _hankaku)
COMMA = FilterSpec("comma", 0, 0, _comma)
FIXED = FilterSpec("fixed", 1, 1, _fixed)
EITHER = FilterSpec("either", 2, 2, _either)
DATE_FORMAT = FilterSpec("date-format", 1, 1, _date_format)


def _index(specs: Iterable[FilterSpec]) -> dict[str, FilterSpec]:
    return {spec.name: spec for spec in specs}


_NUMERIC_FILTERS = (COMMA, FIXED, PAD_LEFT, EITHER, DEFAULT)
_TEMPORAL_FILTERS = (DATE_FORMAT, DEFAULT)

FILTER_REGISTRY: dict[DataType, dict[str, FilterSpec]] = {
    DataType.STRING: _index(
        (UPPER, LOWER, REPLACE, PAD_LEFT, SLICE, DEFAULT, ZENKAKU, HANKAKU)
    ),
    DataType.INTEGER: _index(_NUMERIC_FILTERS),
    DataType.NUMBER: _index(_NUMERIC_FILTERS),
    DataType.BOOLEAN: _index((EITHER, DEFAULT)),
    DataType.DATE: _index(_TEMPORAL_FILTERS),
    DataType.TIME: _index(_TEMPORAL_FILTERS),
    DataType.DATETIME: _index(_TEMPORAL_FILTERS),
}

# One transform per name across all types
FILTERS_BY_NAME: dict[str, FilterSpec] = {
    name: spec for specs in FILTER_REGISTRY.values() for name, spec in specs.items()
}


def get_filter_spec(data_type: DataType, name: str) -> FilterSpec | None:
    """Look up the filter `name` for `data_type`; None when not allowed."""
    return FILTER_REGISTRY[data_type].get(name)


def is_known_filter(name: str) -> bool:
    """Check whether `name` is registered for any data type."""
    return name in FILTERS_BY_NAME


def apply_filters(
    value: Any, filters: Iterable[Filter], context: FilterContext | None = None
) -> Any:
    """
    Run a value through a filter chain, left to right.

    Each filter receives the previous filter's output, which may already be
    text (e.g. after `comma`).

    Params:
        value: Resolved data value (None when absent)
        filters: Filters in application order
        context: Data type and display timezone of the interpolation

    Returns:
        The transformed value

    Raises:
        GrammarError: If a filter name is not registered at all
    """
    context = context or FilterContext()
    for item in filters:
        spec = FILTERS_BY_NAME.get(item.name)
        if spec is None:
            raise GrammarError(f"Unknown filter '{item.name}'")
        value = spec.transform(value, tuple(item.args), context)
    return value


def parse_instant(source: str) -> datetime | None:
    """
    Parse an ISO-8601 instant; a missing offset or "Z" means UTC.

    Returns:
        Timezone-aware datetime, or None when the text is not an instant
    """
    text = source.strip()
    if not UTC_OFFSET_PATTERN.search(text):
        text += "+00:00"
    elif text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    else:
        text = COMPACT_OFFSET_PATTERN.sub(r"\1:\2", text)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_temporal(
    value: Any, data_type: DataType | None, pattern: str, tz_name: str
) -> str:
    """
    Substitute YYYY/MM/DD/HH/mm/ss tokens from a date-like value.

    `date` and `time` values are read field by field with no timezone
    conversion. Anything else is treated as a `datetime` instant and shown in
    `tz_name`. Values that do not parse are returned unchanged.

    Params:
        value: Raw data value
        data_type: Declared type of the interpolation
        pattern: Format pattern containing tokens
        tz_name: IANA timezone used to display instants

    Returns:
        Formatted text
    """
    if value is None:
        return ""
    source = stringify(value)

    if data_type is DataType.DATE:
        match = DATE_PATTERN.match(source)
        if not match:
            return source
        year, month, day = match.groups()
        tokens = {"YYYY": year, "MM": month, "DD": day, "HH": "00", "mm": "00", "ss": "00"}
    elif data_type is DataType.TIME:
        match = TIME_PATTERN.match(source)
        if not match:
            return source
        hour, minute, second = match.groups()
        tokens = {
            "YYYY": "0000",
            "MM": "00",
            "DD": "00",
            "HH": hour,
            "mm": minute,
            "ss": second or "00",
        }
    else:
        instant = parse_instant(source)
        if instant is None:
            logger.debug("Passing through unparseable datetime %r", source)
            return source
        local = instant.astimezone(ZoneInfo(tz_name))
        tokens = {
            "YYYY": f"{local.year:04d}",
            "MM": f"{local.month:02d}",
            "DD": f"{local.day:02d}",
            "HH": f"{local.hour:02d}",
            "mm": f"{local.minute:02d}",
            "ss": f"{local.second:02d}",
        }

    return DATE_TOKEN_PATTERN.sub(lambda match: tokens[match.group(0)], pattern)
