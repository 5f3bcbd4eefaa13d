"""
HTML renderer for parsed DSL templates.

The renderer walks the same tree as the schema compiler, but resolves paths
against live data through a dynamic alias scope. It expands iterations with
the fixed/max row policy, skips elements whose condition is falsy, runs
interpolations through their filter chains and escapes all output text.
"""

import logging
from collections.abc import Mapping
from html import escape
from typing import Any

from htmldsl.core.config import GlobalConfig, collect_global_config
from htmldsl.core.tree_node import CONTROL_ATTRIBUTES, VOID_TAGS, DslNode, ElementNode
from htmldsl.core.types import IterationKind, LiteralSegment, TextSegment
from htmldsl.core.values import is_falsy, stringify
from htmldsl.execution.scopes import DynamicAliasScope
from htmldsl.templates.filters import FilterContext, apply_filters

logger = logging.getLogger(__name__)

PAGE_BREAK_AFTER = "page-break-after:always"


class TemplateRenderer:
    """
    Renders parsed templates with data.

    Params:
        config: Explicit configuration; when None it is resolved from each
            template's meta elements
    """

    def __init__(self, config: GlobalConfig | None = None):
        self.config = config

    def render(self, root: ElementNode, data: Mapping[str, Any]) -> str:
        """
        Render a template tree to markup.

        Absent or null data never raises: it renders as empty text, or as the
        output of a `default` filter.

        Params:
            root: Root element of a parsed template
            data: Root data mapping

        Returns:
            Rendered markup (without a doctype)
        """
        config = self.config if self.config is not None else collect_global_config(root)
        logger.debug("Rendering template with timezone %s", config.timezone)
        return self._render_element(root, DynamicAliasScope(data), config)

    def _render_node(
        self, node: DslNode, scope: DynamicAliasScope, config: GlobalConfig
    ) -> str:
        if isinstance(node, ElementNode):
            return self._render_element(node, scope, config)
        return "".join(
            self._render_segment(segment, scope, config) for segment in node.segments
        )

    def _render_segment(
        self, segment: TextSegment, scope: DynamicAliasScope, config: GlobalConfig
    ) -> str:
        if isinstance(segment, LiteralSegment):
            return escape(segment.value)

        value = scope.resolve(segment.path)
        filtered = apply_filters(
            value,
            segment.filters,
            FilterContext(data_type=segment.data_type, timezone=config.timezone),
        )
        return "" if filtered is None else escape(stringify(filtered))

    def _render_element(
        self, node: ElementNode, scope: DynamicAliasScope, config: GlobalConfig
    ) -> str:
        if node.iteration is None:
            return self._render_once(node, scope, config)

        iteration = node.iteration
        source = scope.resolve(iteration.source_path)
        if not isinstance(source, list | tuple):
            return ""

        effective = len(source)
        if iteration.max_rows is not None:
            effective = min(effective, iteration.max_rows)
        total = max(effective, iteration.fixed_rows or 0)

        is_page = iteration.kind is IterationKind.PAGE
        inject_break = is_page and not has_break_after(node)

        rendered = []
        for index in range(total):
            item = source[index] if index < effective else {}
            instance_scope = scope.bind_iteration(
                iteration.alias, item, index, total, page=is_page
            )
            break_after = inject_break and index < total - 1
            rendered.append(self._render_once(node, instance_scope, config, break_after))
        return "".join(rendered)

    def _render_once(
        self,
        node: ElementNode,
        scope: DynamicAliasScope,
        config: GlobalConfig,
        break_after: bool = False,
    ) -> str:
        if node.condition is not None and is_falsy(scope.resolve(node.condition)):
            return ""

        if node.tag_name == "meta":
            return ""

        open_tag = f"<{node.tag_name}{render_attributes(node, break_after)}>"
        if node.tag_name in VOID_TAGS:
            return open_tag

        body = "".join(self._render_node(child, scope, config) for child in node.children)
        return f"{open_tag}{body}</{node.tag_name}>"


def has_break_after(node: ElementNode) -> bool:
    """Check whether an element already sets an explicit break after itself."""
    if node.attributes.get("data-break-after"):
        return True
    return "page-break-after" in node.attributes.get("style", "").lower()


def render_attributes(node: ElementNode, break_after: bool = False) -> str:
    """
    Render the output attributes of an element.

    Control attributes are dropped. `data-break-before`/`data-break-after`
    become page-break declarations appended to the element's style.

    Params:
        node: Element to render
        break_after: Append an implicit `page-break-after:always`

    Returns:
        Attribute text with a leading space, or "" when there is none
    """
    attributes = node.attributes
    style_parts = []
    if attributes.get("style"):
        style_parts.append(attributes["style"])
    if attributes.get("data-break-before"):
        style_parts.append(f"page-break-before:{attributes['data-break-before']}")
    if attributes.get("data-break-after"):
        style_parts.append(f"page-break-after:{attributes['data-break-after']}")
    if break_after:
        style_parts.append(PAGE_BREAK_AFTER)

    entries = [
        f'{name}="{escape(value)}"'
        for name, value in attributes.items()
        if name not in CONTROL_ATTRIBUTES and name != "style"
    ]
    if style_parts:
        entries.append(f'style="{escape("; ".join(style_parts))}"')

    return f" {' '.join(entries)}" if entries else ""


def render_tree(
    root: ElementNode, data: Mapping[str, Any], config: GlobalConfig | None = None
) -> str:
    """
    Convenience function to render a parsed template.

    Params:
        root: Root element of a parsed template
        data: Root data mapping
        config: Explicit configuration overriding the template's meta elements

    Returns:
        Rendered markup (without a doctype)
    """
    return TemplateRenderer(config).render(root, data)
