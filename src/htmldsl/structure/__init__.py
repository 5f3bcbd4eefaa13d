"""
HTML DSL schema components.

This package provides the schema compiler, its schema nodes and the mapping
from DSL types and constraints to JSON Schema keywords.
"""

from htmldsl.structure.builder import SCHEMA_DIALECT, SchemaCompiler, compile_schema
from htmldsl.structure.schema_nodes import (
    ArrayNode,
    LeafNode,
    ObjectNode,
    SchemaNode,
    SchemaTree,
    canonicalize,
)
from htmldsl.structure.semantics import SemanticAnnotation

__all__ = [
    "SCHEMA_DIALECT",
    "SchemaCompiler",
    "compile_schema",
    "ArrayNode",
    "LeafNode",
    "ObjectNode",
    "SchemaNode",
    "SchemaTree",
    "canonicalize",
    "SemanticAnnotation",
]
