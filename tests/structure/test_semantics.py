"""
Tests for semantic metadata collection.
"""

from htmldsl.core.tree_node import ElementNode
from htmldsl.parsing.html_parser import parse_html
from htmldsl.structure.semantics import (
    SemanticAnnotation,
    build_inline_semantic,
    collect_meta_semantics,
    split_examples,
)


class TestSplitExamples:
    def test_split_and_strip(self):
        assert split_examples(" a ; b ;; c ", ";") == ("a", "b", "c")

    def test_custom_delimiter(self):
        assert split_examples("x|y;z", "|") == ("x", "y;z")


class TestCollectMetaSemantics:
    def test_fields_per_path(self):
        root = parse_html(
            "<html><head>"
            '<meta name="semantic-description:user.name" content="Full name">'
            '<meta name="semantic-examples:user.name" content="Alice;Bob">'
            '<meta name="semantic-instruction:items[]" content="One per line">'
            '<meta name="semantic-description:user.name" content="Legal name">'
            '<meta name="semantic-instruction:user.name" content="">'
            "</head></html>"
        )
        semantics = collect_meta_semantics(root, ";")
        assert semantics == {
            "user.name": SemanticAnnotation(description="Legal name", examples=("Alice", "Bob")),
            "items[]": SemanticAnnotation(instruction="One per line"),
        }

    def test_no_meta(self):
        assert collect_meta_semantics(parse_html("<p>x</p>"), ";") == {}


class TestBuildInlineSemantic:
    def test_inherits_unset_fields(self):
        parent = SemanticAnnotation(description="Parent", instruction="Keep")
        element = ElementNode(
            tag_name="p", attributes={"data-semantic-description": "Child"}
        )
        assert build_inline_semantic(element, parent, ";") == SemanticAnnotation(
            description="Child", instruction="Keep"
        )

    def test_empty_attribute_does_not_clear(self):
        parent = SemanticAnnotation(description="Parent")
        element = ElementNode(tag_name="p", attributes={"data-semantic-description": " "})
        assert build_inline_semantic(element, parent, ";") is parent

    def test_no_attributes_and_no_parent(self):
        assert build_inline_semantic(ElementNode(tag_name="p"), None, ";") is None

    def test_examples_use_delimiter(self):
        element = ElementNode(tag_name="p", attributes={"data-semantic-examples": "1|2"})
        assert build_inline_semantic(element, None, "|").examples == ("1", "2")
