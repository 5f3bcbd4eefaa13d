"""
Sanitizing HTML parser for DSL templates.

This module tokenizes template markup with the standard library HTMLParser
and builds an immutable DSL tree containing only allow-listed tags,
attributes and CSS declarations. Disallowed elements are dropped together
with their whole subtree. Text content is split into literal and
interpolation segments as it is read.
"""

import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser

from htmldsl.core.tree_node import (
    CONTROL_ATTRIBUTES,
    VOID_TAGS,
    DslNode,
    ElementNode,
    TextNode,
)
from htmldsl.parsing.parser import parse_text_segments

logger = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset(
    {
        "html",
        "head",
        "body",
        "meta",
        "div",
        "section",
        "header",
        "footer",
        "main",
        "p",
        "span",
        "strong",
        "em",
        "small",
        "br",
        "hr",
        "table",
        "thead",
        "tbody",
        "tr",
        "th",
        "td",
        "colgroup",
        "ul",
        "ol",
        "li",
        "img",
    }
)

ALLOWED_ATTRIBUTES = frozenset(
    {
        "style",
        "class",
        "id",
        "lang",
        "dir",
        "src",
        "alt",
        "colspan",
        "rowspan",
        "name",
        "content",
    }
)

ALLOWED_CSS_PROPERTIES = frozenset(
    {
        "display",
        "width",
        "height",
        "margin",
        "margin-top",
        "margin-right",
        "margin-bottom",
        "margin-left",
        "padding",
        "padding-top",
        "padding-right",
        "padding-bottom",
        "padding-left",
        "box-sizing",
        "border",
        "border-collapse",
        "font-family",
        "font-size",
        "font-weight",
        "line-height",
        "text-align",
        "white-space",
        "letter-spacing",
        "color",
        "background-color",
        "page-break-before",
        "page-break-after",
        "page-break-inside",
    }
)

BANNED_CSS_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\babsolute\b",
        r"\bfixed\b",
        r"\bfloat\b",
        r"\bflex\b",
        r"\bgrid\b",
        r"\banimation\b",
        r"\btransition\b",
        r"\btransform\b",
        r"\bfilter\b",
        r"calc\s*\(",
        r"var\s*\(",
        r"\d(?:\.\d+)?\s*(?:em|rem|vh|vw|%|ch)(?![A-Za-z])",
    )
)


def sanitize_style(style: str) -> str:
    """
    Keep only allow-listed CSS declarations with safe values.

    Examples:
        "color: red; position: absolute" -> "color:red"
        "width: 50%; font-size: 10pt" -> "font-size:10pt"
    """
    kept = []
    for declaration in style.split(";"):
        prop, colon, value = declaration.partition(":")
        if not colon:
            continue
        prop = prop.strip().lower()
        value = value.strip()
        if prop not in ALLOWED_CSS_PROPERTIES:
            continue
        if any(pattern.search(value) for pattern in BANNED_CSS_PATTERNS):
            continue
        kept.append(f"{prop}:{value}")
    return "; ".join(kept)


def filter_attributes(attrs: list[tuple[str, str | None]]) -> dict[str, str]:
    """Drop attributes outside the allow-lists and sanitize `style`."""
    filtered: dict[str, str] = {}
    for name, value in attrs:
        if name not in ALLOWED_ATTRIBUTES and name not in CONTROL_ATTRIBUTES:
            continue
        value = value or ""
        if name == "style":
            style = sanitize_style(value)
            if style:
                filtered["style"] = style
            continue
        filtered[name] = value
    return filtered


@dataclass
class _OpenElement:
    """Element under construction while its end tag is pending."""

    tag_name: str
    attributes: dict[str, str]
    children: list["_OpenElement | TextNode"] = field(default_factory=list)

    def freeze(self) -> ElementNode:
        children: list[DslNode] = [
            child.freeze() if isinstance(child, _OpenElement) else child
            for child in self.children
        ]
        return ElementNode(
            tag_name=self.tag_name,
            attributes=self.attributes,
            children=tuple(children),
        )


class TemplateHTMLParser(HTMLParser):
    """HTMLParser that builds a sanitized DSL tree."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.root = _OpenElement("__root__", {})
        self.stack: list[_OpenElement] = [self.root]
        self.ignored_depth = 0

    def handle_starttag(self, tag: str, attrs: list) -> None:
        self._open(tag, attrs, self_closing=False)

    def handle_startendtag(self, tag: str, attrs: list) -> None:
        self._open(tag, attrs, self_closing=True)

    def handle_endtag(self, tag: str) -> None:
        if self.ignored_depth > 0:
            self.ignored_depth -= 1
            return
        self._close_stack_until(tag)

    def handle_data(self, data: str) -> None:
        if self.ignored_depth > 0 or not data.strip():
            return
        segments = parse_text_segments(data)
        if segments:
            self.stack[-1].children.append(TextNode(segments=tuple(segments)))

    def _open(self, tag: str, attrs: list, self_closing: bool) -> None:
        is_void = self_closing or tag in VOID_TAGS

        if self.ignored_depth > 0:
            if not is_void:
                self.ignored_depth += 1
            return

        if tag not in ALLOWED_TAGS:
            logger.debug("Dropping disallowed element <%s>", tag)
            if not is_void:
                self.ignored_depth = 1
            return

        attributes = filter_attributes(attrs)
        if tag == "img" and not attributes.get("src", "").startswith("data:"):
            logger.debug("Dropping <img> without a data: source")
            return

        element = _OpenElement(tag, attributes)
        self.stack[-1].children.append(element)
        if not is_void:
            self.stack.append(element)

    def _close_stack_until(self, tag: str) -> None:
        for index in range(len(self.stack) - 1, 0, -1):
            if self.stack[index].tag_name == tag:
                del self.stack[index:]
                return

    def build(self) -> ElementNode:
        """Return the document root: a top-level `html` element or a synthetic one."""
        for child in self.root.children:
            if isinstance(child, _OpenElement) and child.tag_name == "html":
                return child.freeze()
        return _OpenElement("html", {}, self.root.children).freeze()


def parse_html(html: str) -> ElementNode:
    """
    Parse template markup into a sanitized DSL tree.

    Params:
        html: Template markup

    Returns:
        Root `html` element of the sanitized tree

    Raises:
        GrammarError: If an interpolation or element directive is malformed
    """
    parser = TemplateHTMLParser()
    parser.feed(html)
    parser.close()
    return parser.build()
