"""
Semantic metadata for schema fields.

Descriptions, instructions and examples come from two sources:

    <meta name="semantic-description:contracts[].customer" content="...">
    <section data-semantic-description="..." data-semantic-examples="A;B">

Inline attributes are inherited by every interpolation in the element's
subtree, with the nearest enclosing element winning per field.
"""

from dataclasses import dataclass, replace

from htmldsl.core.config import walk_elements
from htmldsl.core.tree_node import ElementNode

META_PREFIXES = {
    "semantic-description:": "description",
    "semantic-instruction:": "instruction",
    "semantic-examples:": "examples",
}

INLINE_ATTRIBUTES = {
    "data-semantic-description": "description",
    "data-semantic-instruction": "instruction",
    "data-semantic-examples": "examples",
}


@dataclass(frozen=True)
class SemanticAnnotation:
    description: str | None = None
    instruction: str | None = None
    examples: tuple[str, ...] | None = None


def split_examples(raw: str, delimiter: str) -> tuple[str, ...]:
    """Split an example list, dropping blank entries."""
    return tuple(entry.strip() for entry in raw.split(delimiter) if entry.strip())


def _field_value(field: str, raw: str, delimiter: str) -> str | tuple[str, ...]:
    if field == "examples":
        return split_examples(raw, delimiter)
    return raw


def collect_meta_semantics(
    root: ElementNode, delimiter: str
) -> dict[str, SemanticAnnotation]:
    """
    Collect head-level semantic metadata keyed by fully-resolved path.

    Params:
        root: Root element of a parsed template
        delimiter: Separator for example lists

    Returns:
        Mapping of path to its annotation; later declarations win per field
    """
    semantics: dict[str, SemanticAnnotation] = {}
    for element in walk_elements(root):
        if element.tag_name != "meta":
            continue
        name = element.attributes.get("name", "")
        content = element.attributes.get("content", "").strip()
        for prefix, field in META_PREFIXES.items():
            if not name.startswith(prefix) or not content:
                continue
            path = name[len(prefix) :].strip()
            current = semantics.get(path, SemanticAnnotation())
            semantics[path] = replace(
                current, **{field: _field_value(field, content, delimiter)}
            )
    return semantics


def build_inline_semantic(
    element: ElementNode, inherited: SemanticAnnotation | None, delimiter: str
) -> SemanticAnnotation | None:
    """
    Combine an element's inline semantic attributes with the inherited ones.

    Empty attributes count as absent, so they never clear an inherited value.
    """
    fields = {
        field: _field_value(field, element.attributes[attribute], delimiter)
        for attribute, field in INLINE_ATTRIBUTES.items()
        if element.attributes.get(attribute, "").strip()
    }
    if not fields:
        return inherited
    return replace(inherited or SemanticAnnotation(), **fields)
