"""Schema declaration utilities.

Game action schemas are declared once at import time. ``declare_schema``
checks the declaration against the JSON Schema meta-schema and returns a
read-only view so no caller can mutate a schema shared by every match.
"""

import json
from collections.abc import Mapping
from types import MappingProxyType

from jsonschema import Draft7Validator


def declare_schema(raw: dict) -> Mapping:
    """Check a schema declaration and return a deep read-only copy."""
    Draft7Validator.check_schema(raw)
    return _freeze(raw)


def schema_to_json(schema: Mapping) -> str:
    """Render a (possibly frozen) schema as compact JSON text."""
    return json.dumps(thaw(schema), separators=(",", ":"))


def thaw(value):
    """Convert a frozen schema back into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


def _freeze(value):
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value
