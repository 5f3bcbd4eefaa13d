"""
Core HTML DSL components.

This package provides the fundamental building blocks for the HTML DSL
framework including type definitions, the DSL tree, path utilities and
global configuration.
"""

from htmldsl.core.config import GlobalConfig, collect_global_config, walk_elements
from htmldsl.core.path_utils import (
    PathComponents,
    split_array_marker,
    split_path_components,
    validate_path_format,
)
from htmldsl.core.tree_node import DslNode, ElementNode, TextNode
from htmldsl.core.types import (
    Constraint,
    ConstraintKind,
    DataType,
    Filter,
    InterpolationSegment,
    IterationDirective,
    IterationKind,
    JsonSchema,
    LiteralSegment,
    TextSegment,
)

__all__ = [
    "GlobalConfig",
    "collect_global_config",
    "walk_elements",
    "PathComponents",
    "split_array_marker",
    "split_path_components",
    "validate_path_format",
    "DslNode",
    "ElementNode",
    "TextNode",
    "Constraint",
    "ConstraintKind",
    "DataType",
    "Filter",
    "InterpolationSegment",
    "IterationDirective",
    "IterationKind",
    "JsonSchema",
    "LiteralSegment",
    "TextSegment",
]
