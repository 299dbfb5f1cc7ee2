"""Tests for schema declaration and rendering."""

import json

import pytest
from jsonschema.exceptions import SchemaError

from llmarena.core.schemas import declare_schema, schema_to_json, thaw
from llmarena.games import GAMES


class TestDeclareSchema:
    def test_returns_read_only_view(self):
        schema = declare_schema({"type": "object", "required": ["a"]})
        with pytest.raises(TypeError):
            schema["type"] = "array"
        assert schema["required"] == ("a",)

    def test_nested_mappings_frozen(self):
        schema = declare_schema({
            "type": "object",
            "properties": {"a": {"type": "string"}},
        })
        with pytest.raises(TypeError):
            schema["properties"]["a"]["type"] = "integer"

    def test_source_dict_changes_do_not_leak(self):
        raw = {"type": "object", "properties": {"a": {"type": "string"}}}
        schema = declare_schema(raw)
        raw["properties"]["a"]["type"] = "integer"
        assert schema["properties"]["a"]["type"] == "string"

    def test_invalid_schema_rejected(self):
        with pytest.raises(SchemaError):
            declare_schema({"type": "not-a-type"})


class TestSchemaToJson:
    def test_round_trips_to_plain_json(self):
        raw = {
            "type": "object",
            "properties": {"path": {"type": "array", "items": {"type": "integer"}}},
            "required": ["path"],
        }
        assert json.loads(schema_to_json(declare_schema(raw))) == raw

    def test_compact(self):
        assert schema_to_json(declare_schema({"type": "string"})) == '{"type":"string"}'

    def test_thaw_plain_values(self):
        assert thaw(("a", 1)) == ["a", 1]
        assert thaw(3) == 3

    @pytest.mark.parametrize("name", sorted(GAMES))
    def test_every_game_schema_renders(self, name):
        rendered = json.loads(schema_to_json(GAMES[name].schema))
        assert rendered["type"] == "object"
        assert rendered["additionalProperties"] is False
