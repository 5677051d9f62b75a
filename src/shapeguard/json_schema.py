"""
JSON Schema generation for shapeguard.

Maps a ``Schema`` onto an equivalent JSON Schema document, e.g. to put in a
prompt or to hand to an LLM provider's structured-output API.

Example:
    >>> schema = define([("name", "string", {"min_length": 2})], title="User")
    >>> generate(schema)["properties"]["name"]
    {'type': 'string', 'minLength': 2}
"""

import re
from typing import Any, Dict, List, Optional

from shapeguard.core.types import (
    ArrayType,
    Kind,
    MapType,
    Primitive,
    RefType,
    TupleType,
    TypeSpec,
    UnionType,
)
from shapeguard.schema import FieldDefinition, Schema

PROVIDERS = ("generic", "openai", "anthropic")

_CONSTRAINT_KEYWORDS = {
    "min_length": "minLength",
    "max_length": "maxLength",
    "min_items": "minItems",
    "max_items": "maxItems",
    "gt": "exclusiveMinimum",
    "gteq": "minimum",
    "lt": "exclusiveMaximum",
    "lteq": "maximum",
    "format": "pattern",
    "choices": "enum",
}

_PRIMITIVE_SCHEMAS = {
    Kind.STRING: {"type": "string"},
    Kind.INTEGER: {"type": "integer"},
    Kind.FLOAT: {"type": "number"},
    Kind.BOOLEAN: {"type": "boolean"},
    Kind.ATOM: {"type": "string", "description": "Atom value"},
    Kind.ANY: {},
    Kind.MAP: {"type": "object"},
}

_JSON_TYPES = ("object", "array", "string", "number", "integer", "boolean", "null")


def _json_value(value: Any) -> Any:
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _json_value(v) for k, v in value.items()}
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _apply_constraints(document: Dict[str, Any], constraints) -> Dict[str, Any]:
    for name, bound in constraints:
        keyword = _CONSTRAINT_KEYWORDS.get(name)
        if keyword is not None:
            document[keyword] = _json_value(bound)
    return document


def type_to_json_schema(spec: TypeSpec) -> Dict[str, Any]:
    """Convert a single type spec to JSON Schema."""
    if isinstance(spec, Primitive):
        return dict(_PRIMITIVE_SCHEMAS[spec.kind])

    if isinstance(spec, ArrayType):
        document = {"type": "array", "items": type_to_json_schema(spec.inner)}
        return _apply_constraints(document, spec.constraints)

    if isinstance(spec, UnionType):
        return {"oneOf": [type_to_json_schema(t) for t in spec.alternatives]}

    if isinstance(spec, TupleType):
        return {
            "type": "array",
            "prefixItems": [type_to_json_schema(t) for t in spec.elements],
            "items": False,
            "minItems": len(spec.elements),
            "maxItems": len(spec.elements),
        }

    if isinstance(spec, MapType):
        # JSON object keys are always strings
        return {"type": "object", "additionalProperties": type_to_json_schema(spec.value)}

    if isinstance(spec, RefType) and isinstance(spec.target, Schema):
        return _object_schema(spec.target, include_descriptions=True, strict=None)

    return {"type": "object"}


def _property_schema(field_def: FieldDefinition, include_descriptions: bool) -> Dict[str, Any]:
    document = _apply_constraints(type_to_json_schema(field_def.type), field_def.constraints)
    if include_descriptions and field_def.description:
        document["description"] = field_def.description
    if field_def.example is not None:
        document["examples"] = [_json_value(field_def.example)]
    if field_def.has_default:
        document["default"] = _json_value(field_def.default)
    return document


def _object_schema(
    schema: Schema, include_descriptions: bool, strict: Optional[bool]
) -> Dict[str, Any]:
    strict = schema.is_strict if strict is None else strict
    document: Dict[str, Any] = {
        "type": "object",
        "properties": {
            name: _property_schema(f, include_descriptions)
            for name, f in schema.fields.items()
        },
        "required": schema.required_fields(),
        "additionalProperties": not strict,
    }
    if schema.config.title:
        document["title"] = schema.config.title
    if include_descriptions and schema.config.description:
        document["description"] = schema.config.description
    return document


def generate(
    schema: Schema,
    *,
    include_descriptions: bool = True,
    provider: str = "generic",
    strict: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Generate a JSON Schema document for ``schema``.

    Args:
        schema: The schema to convert.
        include_descriptions: Emit field and schema descriptions.
        provider: ``"generic"``, ``"openai"`` or ``"anthropic"``. Provider
            documents never allow additional properties.
        strict: Override the schema's strict flag for
            ``additionalProperties``.

    Raises:
        ValueError: If the provider is unknown.
    """
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown provider {provider!r}. Available: {list(PROVIDERS)}")

    document = _object_schema(schema, include_descriptions, strict)
    if provider != "generic":
        document["additionalProperties"] = False
        document.setdefault("required", [])
    if schema.metadata:
        document["x-metadata"] = _json_value(dict(schema.metadata))
    return document


def for_provider(schema: Schema, provider: str, **options: Any) -> Dict[str, Any]:
    """Generate a JSON Schema tuned for an LLM provider."""
    return generate(schema, provider=provider, **options)


def check_json_schema(document: Dict[str, Any]) -> List[str]:
    """
    Check a JSON Schema document for structural problems.

    Returns:
        A list of issues; empty when none were found.
    """
    issues: List[str] = []
    kind = document.get("type")

    if kind is None and "oneOf" not in document:
        issues.append("Schema missing 'type' field")
    elif isinstance(kind, str) and kind not in _JSON_TYPES:
        issues.append(f"Invalid type: {kind}")

    if kind == "object" and "properties" not in document and "additionalProperties" not in document:
        issues.append("Object schema missing 'properties'")

    for low, high in (("minimum", "maximum"), ("minLength", "maxLength"), ("minItems", "maxItems")):
        lower, upper = document.get(low), document.get(high)
        if isinstance(lower, (int, float)) and isinstance(upper, (int, float)) and lower > upper:
            issues.append(f"{low} ({lower}) cannot be greater than {high} ({upper})")

    for name, prop in (document.get("properties") or {}).items():
        if isinstance(prop, dict) and "type" in prop:
            issues.extend(f"{name}: {issue}" for issue in check_json_schema(prop))

    return issues
