"""
htmldsl - Typed interpolation templates for HTML documents

htmldsl compiles HTML templates containing `{{ path:type | filters }}`
interpolations into two artifacts that always agree: a JSON Schema of the data
the template needs, and the rendered HTML for concrete data.
"""

from importlib.metadata import version
from typing import Any

from htmldsl.core.config import GlobalConfig, collect_global_config
from htmldsl.core.tree_node import DslNode, ElementNode, TextNode
from htmldsl.core.types import (
    Constraint,
    DataType,
    Filter,
    InterpolationSegment,
    JsonSchema,
    LiteralSegment,
    TextSegment,
)
from htmldsl.exceptions import (
    ConfigurationError,
    GrammarError,
    HtmlDslError,
    ValidationError,
)
from htmldsl.parsing.html_parser import parse_html
from htmldsl.parsing.parser import parse_text_segments
from htmldsl.structure.builder import compile_schema
from htmldsl.templates.filters import apply_filters
from htmldsl.templates.renderer import render_tree
from htmldsl.validation import validate_data

__version__ = version("htmldsl")

DOCTYPE = "<!doctype html>"


def parse_dsl_ast(html: str) -> ElementNode:
    """Parse template markup into its sanitized DSL tree."""
    return parse_html(html)


def extract_schema(html: str) -> JsonSchema:
    """
    Compile template markup into the JSON Schema of its input data.

    Raises:
        GrammarError: If the template contains a malformed expression
        ConfigurationError: If the template's global configuration is invalid
    """
    return compile_schema(parse_html(html))


def render(html: str, data: dict[str, Any]) -> str:
    """
    Render template markup with data into a complete HTML document.

    Raises:
        GrammarError: If the template contains a malformed expression
        ConfigurationError: If the template's global configuration is invalid
    """
    return f"{DOCTYPE}{render_tree(parse_html(html), data)}"


def validate(data: Any, schema: JsonSchema) -> None:
    """
    Validate data against a schema produced by `extract_schema`.

    Raises:
        ValidationError: On the first violation found
    """
    validate_data(data, schema)


__all__ = [
    "__version__",
    "parse_dsl_ast",
    "extract_schema",
    "render",
    "validate",
    "parse_html",
    "parse_text_segments",
    "compile_schema",
    "render_tree",
    "apply_filters",
    "validate_data",
    "collect_global_config",
    "GlobalConfig",
    "DslNode",
    "ElementNode",
    "TextNode",
    "TextSegment",
    "LiteralSegment",
    "InterpolationSegment",
    "DataType",
    "Constraint",
    "Filter",
    "JsonSchema",
    "HtmlDslError",
    "GrammarError",
    "ConfigurationError",
    "ValidationError",
]
