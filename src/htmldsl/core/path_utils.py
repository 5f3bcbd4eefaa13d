"""
Common path utilities for the HTML DSL framework.

This module provides the dot-path splitting and validation shared by the
expression parser, the alias scopes and the schema compiler. Static (schema)
paths may carry an array marker on a component, e.g. "contracts[].items[]".
"""

import re
from dataclasses import dataclass

from htmldsl.exceptions import GrammarError

IDENTIFIER_PATTERN = r"[A-Za-z_$][A-Za-z0-9_$]*"
PATH_PATTERN = re.compile(rf"^{IDENTIFIER_PATTERN}(\.{IDENTIFIER_PATTERN})*$")

ARRAY_MARKER = "[]"

# Bound by iteration at render time only; no schema representation
IMPLICIT_NAMES = frozenset({"$index", "$page"})


@dataclass(frozen=True)
class PathComponents:
    """Result of splitting a path into its components."""

    first_part: str
    remainder: str
    has_remainder: bool

    @classmethod
    def split_path(cls, path: str) -> "PathComponents":
        """
        Split a path at the first dot separator.

        Params:
            path: Path string to split (e.g., "item.price.amount")

        Returns:
            PathComponents with first_part, remainder, and has_remainder flag

        Examples:
            "item.price.amount" -> PathComponents("item", "price.amount", True)
            "title" -> PathComponents("title", "", False)
        """
        if not path or "." not in path:
            return cls(first_part=path, remainder="", has_remainder=False)

        first_part, remainder = path.split(".", 1)
        return cls(first_part=first_part, remainder=remainder, has_remainder=True)


def split_path_components(path: str) -> list[str]:
    """Split a dot-path into its non-empty components."""
    return [part for part in path.split(".") if part]


def split_array_marker(part: str) -> tuple[str, bool]:
    """
    Separate a static path component from its array marker.

    Examples:
        "items[]" -> ("items", True)
        "name" -> ("name", False)
    """
    if part.endswith(ARRAY_MARKER):
        return part[: -len(ARRAY_MARKER)], True
    return part, False


def is_valid_path(path: str) -> bool:
    """Check whether `path` is an `identifier(.identifier)*` chain."""
    return bool(PATH_PATTERN.match(path))


def is_implicit_path(path: str) -> bool:
    """Check whether a path is rooted at a render-only implicit name."""
    return PathComponents.split_path(path).first_part in IMPLICIT_NAMES


def validate_path_format(path: str, path_type: str = "path") -> None:
    """
    Validate a data path as written in a template.

    Params:
        path: Path string to validate
        path_type: Type description for error messages

    Raises:
        GrammarError: If path format is invalid
    """
    if not path or not isinstance(path, str):
        raise GrammarError(f"{path_type} must be a non-empty string")

    if path.strip() != path:
        raise GrammarError(
            f"{path_type} must not have leading or trailing whitespace", path
        )

    if not is_valid_path(path):
        raise GrammarError(f"Invalid {path_type}", path)
