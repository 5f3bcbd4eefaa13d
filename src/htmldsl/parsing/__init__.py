"""
HTML DSL parsing components.

This package provides the interpolation expression parser, its quote-aware
scanner and the sanitizing HTML parser.
"""

from htmldsl.parsing.html_parser import parse_html, sanitize_style
from htmldsl.parsing.parser import (
    ExpressionParser,
    parse_element_directives,
    parse_interpolation,
    parse_iteration_expression,
    parse_text_segments,
)

__all__ = [
    "ExpressionParser",
    "parse_element_directives",
    "parse_interpolation",
    "parse_iteration_expression",
    "parse_text_segments",
    "parse_html",
    "sanitize_style",
]
