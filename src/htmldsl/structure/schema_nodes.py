"""
Schema node classes built by the schema compiler.

Nodes are mutable while the compiler walks the template and are serialized to
plain JSON Schema dictionaries once at the end. An object's `required` list
is not stored: it is derived from its children when serialized.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from htmldsl.core.path_utils import split_array_marker, split_path_components
from htmldsl.core.types import DataType, JsonSchema
from htmldsl.structure.semantics import SemanticAnnotation
from htmldsl.structure.type_mapping import type_keywords

logger = logging.getLogger(__name__)


@dataclass(kw_only=True)
class SchemaNode:
    """Base class for schema nodes; carries semantic annotations."""

    description: str | None = None
    instruction: str | None = None
    examples: list[str] | None = None

    def annotate(self, annotation: SemanticAnnotation, overwrite: bool = True) -> None:
        """
        Apply semantic annotations to this node.

        Params:
            annotation: Values to apply; empty values are skipped
            overwrite: Replace values already set; when False only unset
                fields are filled
        """
        if annotation.description and (overwrite or self.description is None):
            self.description = annotation.description
        if annotation.instruction and (overwrite or self.instruction is None):
            self.instruction = annotation.instruction
        if annotation.examples and (overwrite or self.examples is None):
            self.examples = list(annotation.examples)

    def to_schema(self) -> JsonSchema:
        raise NotImplementedError

    def _semantic_keywords(self) -> JsonSchema:
        keywords: JsonSchema = {}
        if self.description:
            keywords["description"] = self.description
        if self.instruction:
            keywords["x-instruction"] = self.instruction
        if self.examples:
            keywords["examples"] = list(self.examples)
        return keywords


@dataclass(kw_only=True)
class ObjectNode(SchemaNode):
    properties: dict[str, SchemaNode] = field(default_factory=dict)

    @property
    def required(self) -> list[str]:
        """Every container child and every non-nullable leaf."""
        return [
            name
            for name, child in self.properties.items()
            if not (isinstance(child, LeafNode) and child.nullable)
        ]

    def to_schema(self) -> JsonSchema:
        return {
            "type": "object",
            "properties": {
                name: child.to_schema() for name, child in self.properties.items()
            },
            "required": self.required,
            **self._semantic_keywords(),
        }


@dataclass(kw_only=True)
class ArrayNode(SchemaNode):
    items: SchemaNode = field(default_factory=ObjectNode)

    def to_schema(self) -> JsonSchema:
        return {
            "type": "array",
            "items": self.items.to_schema(),
            **self._semantic_keywords(),
        }


@dataclass(kw_only=True)
class LeafNode(SchemaNode):
    data_type: DataType
    nullable: bool = False
    keywords: dict[str, Any] = field(default_factory=dict)
    conditional: bool = False

    def merge(self, other: "LeafNode") -> None:
        """
        Merge a later occurrence of the same field into this leaf.

        The later data type and constraint keywords win; the field stays
        nullable only if both occurrences are nullable. A conditional
        registration (`conditional=True`) never changes a leaf declared by an
        interpolation, and an interpolation takes over a leaf that so far only
        came from conditionals, nullability included.
        """
        if other.conditional and not self.conditional:
            return
        if self.conditional and not other.conditional:
            self.nullable = other.nullable
        else:
            self.nullable = self.nullable and other.nullable
        self.conditional = other.conditional
        self.data_type = other.data_type
        self.keywords.update(other.keywords)

    def to_schema(self) -> JsonSchema:
        return {
            **type_keywords(self.data_type, self.nullable),
            **self.keywords,
            **self._semantic_keywords(),
        }


def _is_placeholder(node: SchemaNode | None) -> bool:
    return node is None or (isinstance(node, ObjectNode) and not node.properties)


@dataclass
class _Slot:
    """A position in the tree that holds at most one node."""

    get: Callable[[], SchemaNode | None]
    set: Callable[[SchemaNode], None]


class SchemaTree:
    """
    Schema nodes addressed by fully-resolved static paths.

    Path components marked with "[]" step into an array's item schema, e.g.
    "contracts[].items[].name". Containers on the way to a node are created
    on demand.

    An empty object, such as the default item schema of an iteration, is a
    placeholder that a leaf may replace. An interpolation of the alias itself
    (`{{ tag:string }}` under `data-repeat="tags as tag"`) therefore turns the
    item schema into that leaf, deliberately departing from the rule that
    iteration items are objects, so lists of scalars get a usable schema.
    """

    def __init__(self):
        self.root = ObjectNode()

    def place_leaf(self, path: str, leaf: LeafNode) -> None:
        """Merge `leaf` into the position at `path`."""
        slot = self._slot(path)
        existing = slot.get()
        if isinstance(existing, LeafNode):
            existing.merge(leaf)
            return
        if not _is_placeholder(existing):
            logger.warning("Field '%s' replaces a nested structure at the same path", path)
        slot.set(leaf)

    def ensure_array(self, path: str) -> ArrayNode:
        """Ensure an array node exists at `path`, creating an object item schema."""
        slot = self._slot(path)
        existing = slot.get()
        if isinstance(existing, ArrayNode):
            return existing
        if not _is_placeholder(existing):
            logger.warning("Iteration over '%s' replaces a non-array node", path)
        array = ArrayNode()
        slot.set(array)
        return array

    def find(self, path: str) -> SchemaNode | None:
        """Return the node at `path`, or None if the path is not present."""
        current: SchemaNode | None = self.root
        for part in split_path_components(path):
            key, is_array = split_array_marker(part)
            if not isinstance(current, ObjectNode):
                return None
            current = current.properties.get(key)
            if is_array:
                current = current.items if isinstance(current, ArrayNode) else None
        return current

    def _slot(self, path: str) -> _Slot:
        *head, last = split_path_components(path)
        parent = self.root
        for part in head:
            parent = self._container(parent, part, path)

        key, is_array = split_array_marker(last)
        if not is_array:
            return _Slot(
                get=lambda: parent.properties.get(key),
                set=lambda node: parent.properties.__setitem__(key, node),
            )

        array = self._array(parent, key, path)
        return _Slot(get=lambda: array.items, set=lambda node: setattr(array, "items", node))

    def _array(self, parent: ObjectNode, key: str, path: str) -> ArrayNode:
        child = parent.properties.get(key)
        if isinstance(child, ArrayNode):
            return child
        if child is not None:
            logger.warning("Path '%s' turns '%s' into an array", path, key)
        array = ArrayNode()
        parent.properties[key] = array
        return array

    def _container(self, parent: ObjectNode, part: str, path: str) -> ObjectNode:
        """Step from `parent` into the object at `part`, creating it if needed."""
        key, is_array = split_array_marker(part)
        if is_array:
            array = self._array(parent, key, path)
            if not isinstance(array.items, ObjectNode):
                logger.warning("Path '%s' turns the items of '%s' into objects", path, key)
                array.items = ObjectNode()
            return array.items

        child = parent.properties.get(key)
        if isinstance(child, ObjectNode):
            return child
        if child is not None:
            logger.warning("Path '%s' turns '%s' into an object", path, key)
        obj = ObjectNode()
        parent.properties[key] = obj
        return obj


def canonicalize(value: Any) -> Any:
    """
    Deep-sort a schema into its canonical form.

    Object keys and `required` lists are sorted in code-point order; all other
    lists keep their order.
    """
    if isinstance(value, list):
        return [canonicalize(item) for item in value]
    if not isinstance(value, dict):
        return value
    return {
        key: sorted(nested)
        if key == "required" and isinstance(nested, list)
        else canonicalize(nested)
        for key, nested in sorted(value.items())
    }
