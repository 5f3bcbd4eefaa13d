"""
Exception classes for HTML DSL template processing.

This module defines specific exception types for the error conditions that
can occur while parsing interpolations, resolving global configuration and
validating data against a compiled schema.
"""


class HtmlDslError(Exception):
    """Base exception for all HTML DSL-related errors."""

    pass


class GrammarError(HtmlDslError):
    """Raised when an interpolation or directive does not follow the grammar."""

    def __init__(self, reason: str, expression: str | None = None):
        """
        Initialize the exception.

        Params:
            reason: Why the expression was rejected
            expression: The raw expression text, when known
        """
        self.reason = reason
        self.expression = expression
        if expression is None:
            super().__init__(reason)
        else:
            super().__init__(f"Invalid expression '{expression}': {reason}")


class ConfigurationError(HtmlDslError):
    """Raised when head-level global configuration cannot be applied."""

    def __init__(self, setting: str, value: str, reason: str):
        """
        Initialize the exception.

        Params:
            setting: Name of the meta setting (e.g. "timezone")
            value: The rejected value
            reason: Why the value was rejected
        """
        self.setting = setting
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {setting} '{value}': {reason}")


class ValidationError(HtmlDslError):
    """Raised when data does not satisfy a compiled schema."""

    def __init__(self, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: Data path of the offending value (e.g. "$data.items[0].name")
            reason: Human-readable cause of the failure
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Validation failed at {path}: {reason}")
