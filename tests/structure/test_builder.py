"""
Tests for compiling templates into JSON Schema.
"""

import logging

from htmldsl.core.config import GlobalConfig
from htmldsl.parsing.html_parser import parse_html
from htmldsl.structure.builder import SCHEMA_DIALECT, SchemaCompiler, compile_schema


def compile_html(html: str, config: GlobalConfig | None = None) -> dict:
    return compile_schema(parse_html(html), config)


class TestLeaves:
    """Tests for interpolation leaves."""

    def test_constrained_integer(self):
        schema = compile_html("<p>{{ price:integer (min:0, exMax:10000) | comma }}</p>")
        assert schema == {
            "$schema": SCHEMA_DIALECT,
            "type": "object",
            "properties": {
                "price": {"type": "integer", "minimum": 0, "exclusiveMaximum": 10000}
            },
            "required": ["price"],
        }

    def test_nullable_is_optional(self):
        schema = compile_html("<p>{{ memo:string? }}{{ title:string }}</p>")
        assert schema["properties"]["memo"] == {"type": ["string", "null"]}
        assert schema["required"] == ["title"]

    def test_temporal_formats(self):
        schema = compile_html("<p>{{ d:date }} {{ t:time? }} {{ at:datetime }}</p>")
        assert schema["properties"]["d"] == {"type": "string", "format": "date"}
        assert schema["properties"]["t"] == {"type": ["string", "null"], "format": "time"}
        assert schema["properties"]["at"] == {"type": "string", "format": "date-time"}

    def test_enum_and_const(self):
        schema = compile_html(
            "<p>{{ status:string (enum:draft,paid) }} {{ ok:boolean (fixed:true) }}</p>"
        )
        assert schema["properties"]["status"] == {"type": "string", "enum": ["draft", "paid"]}
        assert schema["properties"]["ok"] == {"type": "boolean", "const": True}

    def test_string_lengths_and_pattern(self):
        schema = compile_html("<p>{{ code:string (min:2, max:8, pattern:'^[A-Z]+$') }}</p>")
        assert schema["properties"]["code"] == {
            "type": "string",
            "minLength": 2,
            "maxLength": 8,
            "pattern": "^[A-Z]+$",
        }

    def test_nested_objects_are_required(self):
        schema = compile_html("<p>{{ user.address.city:string? }}</p>")
        user = schema["properties"]["user"]
        assert schema["required"] == ["user"]
        assert user["required"] == ["address"]
        assert user["properties"]["address"]["required"] == []

    def test_repeated_field_merges(self):
        schema = compile_html("<p>{{ total:integer? }}</p><p>{{ total:integer (min:0) | comma }}</p>")
        assert schema["properties"]["total"] == {"type": "integer", "minimum": 0}
        assert schema["required"] == ["total"]

    def test_repeated_nullable_stays_nullable(self):
        schema = compile_html("<p>{{ memo:string? }}</p><p>{{ memo:string? | upper }}</p>")
        assert schema["required"] == []


class TestIterations:
    def test_nested_aliases(self, contract_tree):
        schema = compile_schema(contract_tree)
        contracts = schema["properties"]["contracts"]
        assert contracts["type"] == "array"
        contract = contracts["items"]
        assert contract["required"] == ["customer", "items"]
        item = contract["properties"]["items"]["items"]
        assert item["properties"]["name"] == {"type": "string"}
        assert item["properties"]["price"] == {"type": "integer"}
        assert item["required"] == ["name", "price"]

    def test_scalar_items(self):
        schema = compile_html('<ul><li data-repeat="tags as tag">{{ tag:string }}</li></ul>')
        assert schema["properties"]["tags"] == {"type": "array", "items": {"type": "string"}}

    def test_iteration_without_fields(self):
        schema = compile_html('<ul><li data-repeat="rows">-</li></ul>')
        assert schema["properties"]["rows"] == {
            "type": "array",
            "items": {"type": "object", "properties": {}, "required": []},
        }

    def test_implicit_names_are_skipped(self):
        schema = compile_html(
            '<section data-page="pages">{{ $page.number:integer }}/{{ $index:integer }}</section>'
        )
        assert list(schema["properties"]) == ["pages"]

    def test_conditional_adds_required_boolean(self):
        schema = compile_html(
            '<ul><li data-repeat="items as item" data-if="item.visible">x</li></ul>'
            '<p data-if="show_footer">f</p>'
        )
        assert schema["properties"]["show_footer"] == {"type": "boolean"}
        item = schema["properties"]["items"]["items"]
        assert item["properties"]["visible"] == {"type": "boolean"}
        assert item["required"] == ["visible"]

    def test_conditional_keeps_interpolation_nullability(self):
        schema = compile_html('<div data-if="note"><p>{{ note:string? }}</p></div>')
        assert schema["properties"]["note"] == {"type": ["string", "null"]}
        assert schema["required"] == []

    def test_conditional_after_interpolation(self):
        schema = compile_html(
            '<p>{{ count:integer (min:1) }}</p><div data-if="count">x</div>'
        )
        assert schema["properties"]["count"] == {"type": "integer", "minimum": 1}
        assert schema["required"] == ["count"]

    def test_inner_alias_shadows_outer(self):
        schema = compile_html(
            '<section data-repeat="groups as row">'
            '<div data-repeat="row.rows as row">{{ row.value:integer }}</div>'
            "<p>{{ row.title:string }}</p></section>"
        )
        group = schema["properties"]["groups"]["items"]
        assert group["properties"]["title"] == {"type": "string"}
        inner = group["properties"]["rows"]["items"]
        assert inner["properties"] == {"value": {"type": "integer"}}
        assert "title" not in inner["properties"]


class TestSemantics:
    """Tests for the semantic overlay phase."""

    def test_inline_semantics_are_inherited(self):
        schema = compile_html(
            '<section data-semantic-description="Customer block" data-semantic-examples="A;B">'
            '<p data-semantic-instruction="Use legal name">{{ customer:string }}</p>'
            "<p>{{ note:string }}</p></section>"
        )
        assert schema["properties"]["customer"] == {
            "type": "string",
            "description": "Customer block",
            "x-instruction": "Use legal name",
            "examples": ["A", "B"],
        }
        assert schema["properties"]["note"]["description"] == "Customer block"
        assert "x-instruction" not in schema["properties"]["note"]

    def test_inline_wins_over_meta(self):
        schema = compile_html(
            '<html><head><meta name="semantic-description:name" content="From meta">'
            '<meta name="semantic-instruction:name" content="Meta instruction"></head>'
            '<body><p data-semantic-description="Inline">{{ name:string }}</p></body></html>'
        )
        assert schema["properties"]["name"]["description"] == "Inline"
        assert schema["properties"]["name"]["x-instruction"] == "Meta instruction"

    def test_meta_uses_resolved_paths(self, contract_template):
        html = contract_template.replace(
            "</head>",
            '<meta name="semantic-description:contracts[].items[].price" content="Unit price">'
            '<meta name="semantic-description:contracts" content="One per page"></head>',
        )
        schema = compile_html(html)
        contracts = schema["properties"]["contracts"]
        assert contracts["description"] == "One per page"
        price = contracts["items"]["properties"]["items"]["items"]["properties"]["price"]
        assert price["description"] == "Unit price"

    def test_examples_delimiter_from_meta(self):
        schema = compile_html(
            '<html><head><meta name="semantic:examples-delimiter" content="|"></head>'
            '<body><p data-semantic-examples="a;b|c">{{ v:string }}</p></body></html>'
        )
        assert schema["properties"]["v"]["examples"] == ["a;b", "c"]

    def test_meta_for_unknown_path_is_ignored(self):
        schema = compile_html(
            '<html><head><meta name="semantic-description:ghost" content="x"></head>'
            "<body><p>{{ v:string }}</p></body></html>"
        )
        assert list(schema["properties"]) == ["v"]


class TestCanonicalOutput:
    def test_compile_is_idempotent(self, contract_template):
        first = compile_html(contract_template)
        second = compile_html(contract_template)
        assert first == second
        assert list(first) == sorted(first)

    def test_required_is_sorted(self):
        schema = compile_html("<p>{{ zeta:string }}{{ alpha:string }}{{ mid:string }}</p>")
        assert schema["required"] == ["alpha", "mid", "zeta"]
        assert list(schema["properties"]) == ["alpha", "mid", "zeta"]

    def test_required_matches_nullability(self):
        schema = compile_html("<p>{{ a:string }}{{ b:integer? }}{{ c.d:string? }}</p>")
        for name, node in schema["properties"].items():
            nullable = isinstance(node.get("type"), list)
            assert (name in schema["required"]) is not nullable

    def test_compiler_reuses_config(self, utc_config, contract_tree):
        compiler = SchemaCompiler(utc_config)
        assert compiler.compile(contract_tree) == compiler.compile(contract_tree)


class TestConflicts:
    def test_leaf_replacing_structure_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="htmldsl.structure.schema_nodes"):
            schema = compile_html("<p>{{ user.name:string }}</p><p>{{ user:string }}</p>")
        assert schema["properties"]["user"] == {"type": "string"}
        assert "replaces a nested structure" in caplog.text
