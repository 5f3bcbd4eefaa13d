"""
Tests for schema nodes and the path-addressed schema tree.
"""

from htmldsl.core.types import DataType
from htmldsl.structure.schema_nodes import (
    ArrayNode,
    LeafNode,
    ObjectNode,
    SchemaTree,
    canonicalize,
)
from htmldsl.structure.semantics import SemanticAnnotation
from htmldsl.structure.type_mapping import constraint_keywords, type_keywords


class TestLeafNode:
    def test_merge_later_wins(self):
        leaf = LeafNode(data_type=DataType.INTEGER, nullable=True, keywords={"minimum": 0})
        leaf.merge(
            LeafNode(data_type=DataType.NUMBER, nullable=True, keywords={"minimum": 1, "maximum": 9})
        )
        assert leaf.data_type is DataType.NUMBER
        assert leaf.nullable is True
        assert leaf.keywords == {"minimum": 1, "maximum": 9}

    def test_merge_non_nullable(self):
        leaf = LeafNode(data_type=DataType.STRING, nullable=True)
        leaf.merge(LeafNode(data_type=DataType.STRING))
        assert leaf.nullable is False

    def test_interpolation_takes_over_conditional_leaf(self):
        leaf = LeafNode(data_type=DataType.BOOLEAN, conditional=True)
        leaf.merge(LeafNode(data_type=DataType.STRING, nullable=True))
        assert leaf.data_type is DataType.STRING
        assert leaf.nullable is True
        assert leaf.conditional is False

    def test_conditional_does_not_change_declared_leaf(self):
        leaf = LeafNode(data_type=DataType.STRING, nullable=True, keywords={"maxLength": 5})
        leaf.merge(LeafNode(data_type=DataType.BOOLEAN, conditional=True))
        assert leaf.data_type is DataType.STRING
        assert leaf.nullable is True
        assert leaf.keywords == {"maxLength": 5}

    def test_to_schema(self):
        leaf = LeafNode(data_type=DataType.DATE, nullable=True, description="Issue date")
        assert leaf.to_schema() == {
            "type": ["string", "null"],
            "format": "date",
            "description": "Issue date",
        }


class TestAnnotate:
    def test_overwrite(self):
        node = ObjectNode(description="old")
        node.annotate(SemanticAnnotation(description="new", examples=("x",)))
        assert node.description == "new"
        assert node.examples == ["x"]

    def test_fill_only(self):
        node = ObjectNode(description="old")
        node.annotate(
            SemanticAnnotation(description="new", instruction="do"), overwrite=False
        )
        assert node.description == "old"
        assert node.instruction == "do"


class TestSchemaTree:
    """Tests for placing nodes by fully-resolved path."""

    def test_place_creates_containers(self):
        tree = SchemaTree()
        tree.place_leaf("a.b[].c", LeafNode(data_type=DataType.STRING))
        a = tree.root.properties["a"]
        assert isinstance(a, ObjectNode)
        assert isinstance(a.properties["b"], ArrayNode)
        assert isinstance(a.properties["b"].items.properties["c"], LeafNode)

    def test_ensure_array_keeps_existing(self):
        tree = SchemaTree()
        first = tree.ensure_array("rows")
        tree.place_leaf("rows[].x", LeafNode(data_type=DataType.INTEGER))
        assert tree.ensure_array("rows") is first
        assert "x" in first.items.properties

    def test_leaf_replaces_empty_item_object(self):
        tree = SchemaTree()
        tree.ensure_array("tags")
        tree.place_leaf("tags[]", LeafNode(data_type=DataType.STRING))
        assert isinstance(tree.find("tags[]"), LeafNode)

    def test_find(self):
        tree = SchemaTree()
        tree.place_leaf("a.b", LeafNode(data_type=DataType.STRING))
        assert isinstance(tree.find("a"), ObjectNode)
        assert isinstance(tree.find("a.b"), LeafNode)
        assert tree.find("a.c") is None
        assert tree.find("a[]") is None
        assert tree.find("a.b.c") is None

    def test_required_is_derived(self):
        tree = SchemaTree()
        tree.place_leaf("x", LeafNode(data_type=DataType.STRING, nullable=True))
        tree.place_leaf("y", LeafNode(data_type=DataType.STRING))
        tree.ensure_array("z")
        assert tree.root.required == ["y", "z"]


class TestTypeMapping:
    def test_type_keywords(self):
        assert type_keywords(DataType.INTEGER, False) == {"type": "integer"}
        assert type_keywords(DataType.DATETIME, True) == {
            "type": ["string", "null"],
            "format": "date-time",
        }

    def test_constraint_keywords_empty(self):
        assert constraint_keywords(()) == {}


class TestCanonicalize:
    def test_sorts_keys_and_required(self):
        result = canonicalize({"b": 1, "required": ["z", "a"], "a": {"y": [3, 1], "x": 0}})
        assert list(result) == ["a", "b", "required"]
        assert result["required"] == ["a", "z"]
        assert list(result["a"]) == ["x", "y"]
        assert result["a"]["y"] == [3, 1]

    def test_property_named_required(self):
        result = canonicalize({"properties": {"required": {"type": "string"}}})
        assert result == {"properties": {"required": {"type": "string"}}}
