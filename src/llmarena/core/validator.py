"""Schema validator — a practical subset of JSON Schema on jsonschema.

Only ``type`` (string, number, integer, array, object), ``required``,
``properties``, ``additionalProperties``, ``items``, ``minItems`` and
``maxItems`` are checked. Everything else (enum, minimum, pattern,
oneOf...) is ignored here; games enforce those constraints as legality
rules.

The first error reported stops validation. Errors are prefixed with a
JSONPath rooted at ``$``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from jsonschema import Draft7Validator, validators
from jsonschema.exceptions import ValidationError

from llmarena.core.schemas import thaw

SUPPORTED_KEYWORDS = (
    "type",
    "properties",
    "required",
    "additionalProperties",
    "items",
    "minItems",
    "maxItems",
)


def _is_finite_number(checker, instance) -> bool:
    # Big JSON integers stay ints; only floats can be NaN or infinite
    if not Draft7Validator.TYPE_CHECKER.is_type(instance, "number"):
        return False
    return not isinstance(instance, float) or math.isfinite(instance)


SubsetValidator = validators.create(
    meta_schema=Draft7Validator.META_SCHEMA,
    validators={k: Draft7Validator.VALIDATORS[k] for k in SUPPORTED_KEYWORDS},
    type_checker=Draft7Validator.TYPE_CHECKER.redefine("number", _is_finite_number),
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a value against a schema."""

    ok: bool
    error: str | None = None


_OK = ValidationResult(ok=True)


def validate(value: object, schema: Mapping | None) -> ValidationResult:
    """Check ``value`` against ``schema``, returning the first error found."""
    if not isinstance(schema, Mapping):
        return _OK
    error = next(SubsetValidator(thaw(schema)).iter_errors(value), None)
    if error is None:
        return _OK
    return ValidationResult(ok=False, error=_describe(error))


def _describe(error: ValidationError) -> str:
    path = error.json_path
    kind = error.validator

    if kind == "type":
        expected = error.validator_value
        if not isinstance(expected, str):
            expected = "|".join(expected)
        return f"{path} expected {expected}"

    if kind == "required":
        missing = next(k for k in error.validator_value if k not in error.instance)
        return f"{path}.{missing} missing required property"

    if kind == "additionalProperties":
        known = error.schema.get("properties") or {}
        extra = next(k for k in error.instance if k not in known)
        return f"{path}.{extra} is not allowed"

    if kind in ("minItems", "maxItems"):
        return f"{path} has {len(error.instance)} items, {kind} {error.validator_value}"

    return f"{path} {error.message}"
