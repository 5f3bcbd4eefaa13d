"""
HTML DSL alias resolution.

This package provides the static and dynamic alias scopes shared by the
schema compiler and the renderer.
"""

from htmldsl.execution.scopes import AliasScope, DynamicAliasScope, StaticAliasScope

__all__ = [
    "AliasScope",
    "DynamicAliasScope",
    "StaticAliasScope",
]
