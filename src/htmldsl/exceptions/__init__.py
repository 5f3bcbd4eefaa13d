"""
HTML DSL exception classes.

This package provides all exception types used throughout the HTML DSL
framework for consistent error handling and reporting.
"""

from htmldsl.exceptions.core import (
    ConfigurationError,
    GrammarError,
    HtmlDslError,
    ValidationError,
)

__all__ = [
    "HtmlDslError",
    "GrammarError",
    "ConfigurationError",
    "ValidationError",
]
