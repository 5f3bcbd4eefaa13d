"""
Data validation against compiled template schemas.

Validation uses jsonschema's Draft 2020-12 validator with format checks for
the `date`, `time` and `date-time` formats the compiler emits. Only the first
reported violation is raised.
"""

import logging
import re
from collections.abc import Iterable
from typing import Any

from jsonschema import Draft202012Validator, FormatChecker

from htmldsl.core.types import JsonSchema
from htmldsl.exceptions import ValidationError

logger = logging.getLogger(__name__)

DATA_ROOT = "$data"

FORMAT_PATTERNS = {
    "date": re.compile(r"^\d{4}-\d{2}-\d{2}$"),
    "time": re.compile(r"^\d{2}:\d{2}(?::\d{2})?$"),
    "date-time": re.compile(
        r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2})?(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?$",
        re.IGNORECASE,
    ),
}


def _build_format_checker() -> FormatChecker:
    checker = FormatChecker(formats=())
    for name, pattern in FORMAT_PATTERNS.items():

        def check(instance: Any, pattern: re.Pattern = pattern) -> bool:
            return not isinstance(instance, str) or bool(pattern.match(instance))

        checker.checks(name)(check)
    return checker


FORMAT_CHECKER = _build_format_checker()


def format_data_path(path: Iterable[str | int]) -> str:
    """
    Render a jsonschema error path as a data path.

    Examples:
        ["user", "age"] -> "$data.user.age"
        ["items", 0, "name"] -> "$data.items[0].name"
    """
    rendered = DATA_ROOT
    for part in path:
        rendered += f"[{part}]" if isinstance(part, int) else f".{part}"
    return rendered


def validate_data(data: Any, schema: JsonSchema) -> None:
    """
    Validate data against a compiled schema.

    Params:
        data: Data to validate
        schema: Schema produced by the schema compiler

    Raises:
        ValidationError: On the first violation, with its data path; a missing
            required field is reported at the field's own path
    """
    validator = Draft202012Validator(schema, format_checker=FORMAT_CHECKER)
    error = next(iter(validator.iter_errors(data)), None)
    if error is None:
        return

    parts = list(error.absolute_path)
    if error.validator == "required" and isinstance(error.instance, dict):
        missing = [key for key in error.validator_value if key not in error.instance]
        parts.extend(missing[:1])

    path = format_data_path(parts)
    logger.debug("Validation failed at %s (%s)", path, error.validator)
    raise ValidationError(path, error.message)
