"""
Schema inference from example values.

Builds a schema from an example of the expected output, the way one would
describe a JSON shape in a prompt. Example values may be real values
(``42``, ``"Alice"``) or type placeholders (``"integer"``, ``"string"``).
"""

from typing import Any, Dict, List, Mapping, Tuple

from shapeguard.core.types import (
    ANY,
    BOOLEAN,
    FLOAT,
    INTEGER,
    MAP,
    STRING,
    ArrayType,
    RefType,
    TypeSpec,
    UnionType,
)
from shapeguard.errors import SchemaDefinitionError
from shapeguard.schema import Schema, define

NUMBER = UnionType((FLOAT, INTEGER))

TYPE_PLACEHOLDERS: Dict[str, TypeSpec] = {
    "string": STRING,
    "number": NUMBER,
    "integer": INTEGER,
    "float": FLOAT,
    "boolean": BOOLEAN,
    "array": ArrayType(ANY),
    "object": MAP,
    "any": ANY,
}


def infer_type_spec(example: Any) -> TypeSpec:
    """
    Infer a type spec from an example value.

    Example:
        >>> infer_type_spec("integer")
        Primitive(kind=<Kind.INTEGER: 'integer'>)
        >>> infer_type_spec([3.5])
        ArrayType(inner=Primitive(kind=<Kind.FLOAT: 'float'>), min_items=None, max_items=None)
    """
    if isinstance(example, str) and example in TYPE_PLACEHOLDERS:
        return TYPE_PLACEHOLDERS[example]
    if isinstance(example, bool):
        return BOOLEAN
    if isinstance(example, int):
        return INTEGER
    if isinstance(example, float):
        return FLOAT
    if isinstance(example, str):
        return STRING
    if isinstance(example, (list, tuple)):
        if example:
            return ArrayType(infer_type_spec(example[0]))
        return ArrayType(ANY)
    if isinstance(example, Mapping):
        return RefType(infer_schema(example))
    return ANY


def infer_field_specs(example: Mapping[str, Any]) -> List[Tuple[str, TypeSpec, Dict[str, Any]]]:
    """Field specs for every key of ``example``; real values become examples."""
    specs = []
    for key, value in example.items():
        options: Dict[str, Any] = {}
        placeholder = isinstance(value, str) and value in TYPE_PLACEHOLDERS
        if not placeholder and not isinstance(value, (Mapping, list, tuple)):
            options["example"] = value
        specs.append((str(key), infer_type_spec(value), options))
    return specs


def infer_schema(example: Mapping[str, Any], **define_options: Any) -> Schema:
    """
    Build a schema whose fields are all required and typed after ``example``.

    Args:
        example: An example object, e.g. ``{"name": "string", "age": 30}``.
        **define_options: Passed to ``define`` (``title``, ``strict``...).

    Raises:
        SchemaDefinitionError: If ``example`` is not a mapping or a key is
            not a valid field name.
    """
    if not isinstance(example, Mapping):
        raise SchemaDefinitionError(
            f"Can only infer a schema from an object, got {type(example).__name__}"
        )
    return define(infer_field_specs(example), **define_options)
