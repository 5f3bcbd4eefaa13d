"""
HTML DSL rendering components.

This package provides the format filter registry and the template renderer.
"""

from htmldsl.templates.filters import (
    FILTER_REGISTRY,
    FilterContext,
    FilterSpec,
    apply_filters,
    get_filter_spec,
)
from htmldsl.templates.renderer import TemplateRenderer, render_tree

__all__ = [
    "FILTER_REGISTRY",
    "FilterContext",
    "FilterSpec",
    "apply_filters",
    "get_filter_spec",
    "TemplateRenderer",
    "render_tree",
]
