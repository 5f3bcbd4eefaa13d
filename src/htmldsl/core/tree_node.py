"""
DSL tree node models for the HTML DSL framework.

This module contains the immutable element and text nodes produced by the
sanitizing HTML parser and consumed by both the schema compiler and the
template renderer. Element directives (iteration and conditional attributes)
are parsed when the node is constructed, so a malformed directive fails
before any compile or render work starts.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from htmldsl.core.types import IterationDirective, TextSegment

VOID_TAGS = frozenset({"br", "hr", "img", "meta"})

# Directive and semantic attributes; consumed by the DSL, never rendered
CONTROL_ATTRIBUTES = frozenset(
    {
        "data-page",
        "data-repeat",
        "data-if",
        "data-format",
        "data-break-before",
        "data-break-after",
        "data-fixed-rows",
        "data-max-rows",
        "data-semantic-description",
        "data-semantic-instruction",
        "data-semantic-examples",
    }
)


class ElementNode(BaseModel):
    """
    A sanitized element with its parsed directives.

    Params:
        tag_name: Lower-case tag name
        attributes: Allow-listed attributes in source order
        children: Child element and text nodes
        iteration: Parsed `data-page` / `data-repeat` directive, if any
        condition: Dot-path of the `data-if` attribute, if any
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["element"] = "element"
    tag_name: str
    attributes: dict[str, str] = Field(default_factory=dict)
    children: tuple["DslNode", ...] = ()
    iteration: IterationDirective | None = None
    condition: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_directives(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        from htmldsl.parsing.parser import parse_element_directives

        iteration, condition = parse_element_directives(data.get("attributes") or {})
        derived = dict(data)
        derived.setdefault("iteration", iteration)
        derived.setdefault("condition", condition)
        return derived

    def element_children(self) -> list["ElementNode"]:
        return [child for child in self.children if isinstance(child, ElementNode)]


class TextNode(BaseModel):
    """A text node split into literal and interpolation segments."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    segments: tuple[TextSegment, ...] = ()


DslNode = Annotated[ElementNode | TextNode, Field(discriminator="type")]

ElementNode.model_rebuild()
