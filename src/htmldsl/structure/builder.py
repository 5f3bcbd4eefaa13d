"""
Schema compiler for HTML DSL templates.

The compiler walks a parsed template once with a static alias scope and
builds the JSON Schema of the data the template needs. It works in two
phases:

1. Structure: every interpolation becomes a leaf at its fully-resolved path,
   every iteration an array, every conditional a required boolean.
2. Semantic overlay: inline annotations recorded during phase 1 are applied
   first, then head-level meta annotations fill fields that are still unset.

The result is returned in canonical deep-sorted form, so compiling the same
template twice gives identical output.
"""

import logging

from htmldsl.core.config import GlobalConfig, collect_global_config
from htmldsl.core.tree_node import DslNode, ElementNode, TextNode
from htmldsl.core.types import DataType, InterpolationSegment, JsonSchema
from htmldsl.execution.scopes import StaticAliasScope
from htmldsl.structure.schema_nodes import LeafNode, SchemaTree, canonicalize
from htmldsl.structure.semantics import (
    SemanticAnnotation,
    build_inline_semantic,
    collect_meta_semantics,
)
from htmldsl.structure.type_mapping import constraint_keywords

logger = logging.getLogger(__name__)

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


class SchemaCompiler:
    """
    Compiles parsed templates into JSON Schema.

    Params:
        config: Explicit configuration; when None it is resolved from each
            template's meta elements
    """

    def __init__(self, config: GlobalConfig | None = None):
        self.config = config

    def compile(self, root: ElementNode) -> JsonSchema:
        """
        Compile a template tree into a canonical JSON Schema.

        Params:
            root: Root element of a parsed template

        Returns:
            Schema dictionary with `$schema`, `type`, `properties` and `required`
        """
        config = self.config if self.config is not None else collect_global_config(root)
        tree = SchemaTree()
        inline: list[tuple[str, SemanticAnnotation]] = []

        self._walk(root, tree, StaticAliasScope(), None, config, inline)
        self._overlay(root, tree, inline, config)

        schema = {"$schema": SCHEMA_DIALECT, **tree.root.to_schema()}
        logger.debug("Compiled schema with %d top-level fields", len(tree.root.properties))
        return canonicalize(schema)

    def _walk(
        self,
        node: DslNode,
        tree: SchemaTree,
        scope: StaticAliasScope,
        semantic: SemanticAnnotation | None,
        config: GlobalConfig,
        inline: list[tuple[str, SemanticAnnotation]],
    ) -> None:
        if isinstance(node, TextNode):
            for segment in node.segments:
                if isinstance(segment, InterpolationSegment):
                    self._add_field(segment, tree, scope, semantic, inline)
            return

        if node.tag_name == "meta":
            return

        semantic = build_inline_semantic(node, semantic, config.examples_delimiter)

        if node.iteration is not None:
            source = scope.resolve(node.iteration.source_path)
            tree.ensure_array(source)
            scope = scope.bind_iteration(node.iteration.alias, source)

        if node.condition is not None and not scope.is_implicit(node.condition):
            tree.place_leaf(
                scope.resolve(node.condition),
                LeafNode(data_type=DataType.BOOLEAN, conditional=True),
            )

        for child in node.children:
            self._walk(child, tree, scope, semantic, config, inline)

    def _add_field(
        self,
        segment: InterpolationSegment,
        tree: SchemaTree,
        scope: StaticAliasScope,
        semantic: SemanticAnnotation | None,
        inline: list[tuple[str, SemanticAnnotation]],
    ) -> None:
        if scope.is_implicit(segment.path):
            return

        path = scope.resolve(segment.path)
        tree.place_leaf(
            path,
            LeafNode(
                data_type=segment.data_type,
                nullable=segment.nullable,
                keywords=constraint_keywords(segment.constraints),
            ),
        )
        if semantic is not None:
            inline.append((path, semantic))

    def _overlay(
        self,
        root: ElementNode,
        tree: SchemaTree,
        inline: list[tuple[str, SemanticAnnotation]],
        config: GlobalConfig,
    ) -> None:
        """Attach semantic annotations by fully-resolved path."""
        for path, annotation in inline:
            node = tree.find(path)
            if node is not None:
                node.annotate(annotation, overwrite=True)

        meta = collect_meta_semantics(root, config.examples_delimiter)
        for path, annotation in meta.items():
            node = tree.find(path)
            if node is None:
                logger.debug("Ignoring semantic metadata for unknown path '%s'", path)
                continue
            node.annotate(annotation, overwrite=False)


def compile_schema(root: ElementNode, config: GlobalConfig | None = None) -> JsonSchema:
    """
    Convenience function to compile a parsed template into JSON Schema.

    Params:
        root: Root element of a parsed template
        config: Explicit configuration overriding the template's meta elements

    Returns:
        Canonical schema dictionary
    """
    return SchemaCompiler(config).compile(root)
