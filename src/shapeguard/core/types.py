"""
Type system for shapeguard.

A type spec is a closed, recursive grammar of frozen dataclasses:

    Primitive(kind)            string, integer, float, boolean, atom, any, map
    ArrayType(inner, ...)      homogeneous list with optional item bounds
    UnionType(alternatives)    ordered alternatives, first match wins
    TupleType(elements)        fixed-arity positional types
    MapType(key, value)        typed mapping
    RefType(target)            anything implementing ``validate(value)``

``normalize_type`` turns the compact notation used in field specs
(``"string"``, ``("array", "integer")``, ``("union", [...])`` ...) into this
grammar and rejects anything malformed before data is ever validated.
"""

import enum
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from shapeguard.core.constraints import apply_constraints
from shapeguard.core.result import Err, Ok, Result
from shapeguard.core.symbols import Symbol
from shapeguard.errors import (
    SCHEMA,
    TUPLE_SIZE,
    TYPE,
    Path,
    SchemaDefinitionError,
    ValidationError,
)


class Kind(str, enum.Enum):
    """Primitive type kinds."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    ATOM = "atom"
    ANY = "any"
    MAP = "map"


@dataclass(frozen=True)
class Primitive:
    kind: Kind


@dataclass(frozen=True)
class ArrayType:
    inner: "TypeSpec"
    min_items: Optional[int] = None
    max_items: Optional[int] = None

    @property
    def constraints(self) -> Tuple[Tuple[str, int], ...]:
        bounds = []
        if self.min_items is not None:
            bounds.append(("min_items", self.min_items))
        if self.max_items is not None:
            bounds.append(("max_items", self.max_items))
        return tuple(bounds)


@dataclass(frozen=True)
class UnionType:
    alternatives: Tuple["TypeSpec", ...]


@dataclass(frozen=True)
class TupleType:
    elements: Tuple["TypeSpec", ...]


@dataclass(frozen=True)
class MapType:
    key: "TypeSpec"
    value: "TypeSpec"


@dataclass(frozen=True)
class RefType:
    """
    Reference to an external validator.

    ``target`` must expose ``validate(value)`` returning ``Ok(value)`` or
    ``Err(reason)``, where ``reason`` is a message, a ``ValidationError`` or
    a list of them. A ``Schema`` satisfies this, so schemas nest.
    """

    target: Any


TypeSpec = Union[Primitive, ArrayType, UnionType, TupleType, MapType, RefType]

STRING = Primitive(Kind.STRING)
INTEGER = Primitive(Kind.INTEGER)
FLOAT = Primitive(Kind.FLOAT)
BOOLEAN = Primitive(Kind.BOOLEAN)
ATOM = Primitive(Kind.ATOM)
ANY = Primitive(Kind.ANY)
MAP = Primitive(Kind.MAP)

_PRIMITIVES_BY_NAME = {kind.value: Primitive(kind) for kind in Kind}

_PRIMITIVES_BY_PYTHON_TYPE = {
    str: STRING,
    int: INTEGER,
    float: FLOAT,
    bool: BOOLEAN,
    dict: MAP,
    Symbol: ATOM,
}

_TYPE_SPEC_CLASSES = (Primitive, ArrayType, UnionType, TupleType, MapType, RefType)


def _fail(spec: Any, reason: str = "") -> SchemaDefinitionError:
    detail = f" ({reason})" if reason else ""
    return SchemaDefinitionError(f"Invalid type specification: {spec!r}{detail}")


def _check_bound(spec: Any, name: str, bound: Any) -> Optional[int]:
    if bound is None:
        return None
    if isinstance(bound, bool) or not isinstance(bound, int) or bound < 0:
        raise _fail(spec, f"{name} must be a non-negative integer")
    return bound


def _is_validatable(spec: Any) -> bool:
    return not isinstance(spec, type) and callable(getattr(spec, "validate", None))


def normalize_type(spec: Any) -> TypeSpec:
    """
    Convert a type specification into the canonical grammar.

    Args:
        spec: A type name, a Python type, a tagged tuple, a TypeSpec
              instance, or a ``Validatable`` object.

    Returns:
        The equivalent TypeSpec.

    Raises:
        SchemaDefinitionError: If the specification (or any nested part of
            it) is not recognized.

    Example:
        >>> normalize_type(("array", "integer"))
        ArrayType(inner=Primitive(kind=<Kind.INTEGER: 'integer'>), min_items=None, max_items=None)
    """
    if isinstance(spec, _TYPE_SPEC_CLASSES):
        _check_well_formed(spec)
        return spec

    if isinstance(spec, str):
        primitive = _PRIMITIVES_BY_NAME.get(spec)
        if primitive is None:
            raise _fail(spec, "unknown type name")
        return primitive

    if isinstance(spec, type):
        if spec is list:
            return ArrayType(ANY)
        primitive = _PRIMITIVES_BY_PYTHON_TYPE.get(spec)
        if primitive is None:
            raise _fail(spec, "unsupported Python type")
        return primitive

    if isinstance(spec, tuple) and spec and isinstance(spec[0], str):
        return _normalize_tagged(spec)

    if _is_validatable(spec):
        return RefType(spec)

    raise _fail(spec)


def _normalize_tagged(spec: Tuple[Any, ...]) -> TypeSpec:
    tag, args = spec[0], spec[1:]

    if tag == "array":
        if len(args) == 1:
            return ArrayType(normalize_type(args[0]))
        if len(args) == 2 and isinstance(args[1], Mapping):
            bounds = dict(args[1])
            unknown = set(bounds) - {"min_items", "max_items"}
            if unknown:
                raise _fail(spec, f"unknown array options {sorted(unknown)}")
            return ArrayType(
                normalize_type(args[0]),
                _check_bound(spec, "min_items", bounds.get("min_items")),
                _check_bound(spec, "max_items", bounds.get("max_items")),
            )
        raise _fail(spec, "expected ('array', inner) or ('array', inner, options)")

    if tag in ("union", "tuple"):
        if len(args) != 1 or not isinstance(args[0], (list, tuple)):
            raise _fail(spec, f"expected ('{tag}', [types...])")
        members = tuple(normalize_type(member) for member in args[0])
        if tag == "union":
            if not members:
                raise _fail(spec, "union needs at least one alternative")
            return UnionType(members)
        return TupleType(members)

    if tag == "map":
        if len(args) == 2:
            return MapType(normalize_type(args[0]), normalize_type(args[1]))
        if len(args) == 1 and isinstance(args[0], tuple) and len(args[0]) == 2:
            return MapType(normalize_type(args[0][0]), normalize_type(args[0][1]))
        raise _fail(spec, "expected ('map', key_type, value_type)")

    raise _fail(spec, f"unknown type tag {tag!r}")


def _check_well_formed(spec: TypeSpec) -> None:
    if isinstance(spec, Primitive):
        if not isinstance(spec.kind, Kind):
            raise _fail(spec, "unknown primitive kind")
    elif isinstance(spec, ArrayType):
        _check_bound(spec, "min_items", spec.min_items)
        _check_bound(spec, "max_items", spec.max_items)
        normalize_type(spec.inner)
    elif isinstance(spec, UnionType):
        if not spec.alternatives:
            raise _fail(spec, "union needs at least one alternative")
        for member in spec.alternatives:
            normalize_type(member)
    elif isinstance(spec, TupleType):
        for member in spec.elements:
            normalize_type(member)
    elif isinstance(spec, MapType):
        normalize_type(spec.key)
        normalize_type(spec.value)
    elif isinstance(spec, RefType):
        if not _is_validatable(spec.target):
            raise _fail(spec, "reference target has no validate()")


def describe_type(spec: TypeSpec) -> str:
    """Human-readable name of a type spec, used in error messages."""
    if isinstance(spec, Primitive):
        return spec.kind.value
    if isinstance(spec, ArrayType):
        return f"array of {describe_type(spec.inner)}"
    if isinstance(spec, UnionType):
        return " | ".join(describe_type(t) for t in spec.alternatives)
    if isinstance(spec, TupleType):
        return "tuple of (" + ", ".join(describe_type(t) for t in spec.elements) + ")"
    if isinstance(spec, MapType):
        return f"map of {describe_type(spec.key)} to {describe_type(spec.value)}"
    return getattr(spec.target, "__name__", type(spec.target).__name__)


def runtime_type_name(value: Any) -> str:
    """Name the runtime type of ``value`` in type-system vocabulary."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (Symbol, enum.Enum)):
        return "atom"
    if isinstance(value, Mapping):
        return "map"
    if isinstance(value, tuple):
        return "tuple"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _matches_primitive(kind: Kind, value: Any) -> bool:
    if kind is Kind.ANY:
        return True
    if kind is Kind.STRING:
        return isinstance(value, str)
    if kind is Kind.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if kind is Kind.FLOAT:
        return isinstance(value, float)
    if kind is Kind.BOOLEAN:
        return isinstance(value, bool)
    if kind is Kind.ATOM:
        return isinstance(value, (Symbol, enum.Enum))
    return isinstance(value, Mapping)


def _type_error(spec: TypeSpec, value: Any, path: Path, expected: str = "") -> Err:
    expected = expected or describe_type(spec)
    actual = runtime_type_name(value)
    return Err(
        [
            ValidationError(
                path,
                TYPE,
                f"expected {expected}, got {actual}",
                {"expected": expected, "actual": actual},
            )
        ]
    )


def validate_type(spec: TypeSpec, value: Any, path: Sequence[Any] = ()) -> Result:
    """
    Validate ``value`` against a type spec.

    Args:
        spec: A normalized TypeSpec.
        value: The value to check.
        path: Location of ``value``, prepended to every error path.

    Returns:
        ``Ok(value)`` (arrays come back as lists, tuples as tuples) or
        ``Err(list_of_errors)``.
    """
    path = tuple(path)

    if isinstance(spec, Primitive):
        if _matches_primitive(spec.kind, value):
            return Ok(value)
        return _type_error(spec, value, path)

    if isinstance(spec, ArrayType):
        if not is_sequence(value):
            return _type_error(spec, value, path, "array")
        result = _validate_elements(
            [(spec.inner, item) for item in value], path
        )
        if result.is_err():
            return result
        return apply_constraints(result.value, spec.constraints, path)

    if isinstance(spec, UnionType):
        for alternative in spec.alternatives:
            result = validate_type(alternative, value, path)
            if result.is_ok():
                return result
        return Err(
            [
                ValidationError(
                    path,
                    TYPE,
                    f"value does not match any type in union ({describe_type(spec)}), "
                    f"got {runtime_type_name(value)}",
                    {"expected": describe_type(spec), "actual": runtime_type_name(value)},
                )
            ]
        )

    if isinstance(spec, TupleType):
        if not is_sequence(value):
            return _type_error(spec, value, path, "tuple")
        if len(value) != len(spec.elements):
            return Err(
                [
                    ValidationError(
                        path,
                        TUPLE_SIZE,
                        f"expected tuple of size {len(spec.elements)}, got size {len(value)}",
                        {"expected": len(spec.elements), "actual": len(value)},
                    )
                ]
            )
        result = _validate_elements(list(zip(spec.elements, value)), path)
        if result.is_err():
            return result
        return Ok(tuple(result.value))

    if isinstance(spec, MapType):
        if not isinstance(value, Mapping):
            return _type_error(spec, value, path, "map")
        return _validate_entries(spec, value, path)

    if isinstance(spec, RefType):
        return _validate_ref(spec, value, path)

    raise _fail(spec)


def _validate_elements(pairs: List[Tuple[TypeSpec, Any]], path: Path) -> Result:
    validated = []
    errors: List[ValidationError] = []
    for index, (element_type, item) in enumerate(pairs):
        result = validate_type(element_type, item, path + (index,))
        if result.is_ok():
            validated.append(result.value)
        else:
            errors.extend(result.error)
    if errors:
        return Err(errors)
    return Ok(validated)


def _validate_entries(spec: MapType, value: Mapping, path: Path) -> Result:
    validated = {}
    errors: List[ValidationError] = []
    for position, (key, item) in enumerate(value.items()):
        key_result = validate_type(spec.key, key, path + (f"key_{position}",))
        value_result = validate_type(spec.value, item, path + (key,))
        if key_result.is_err():
            errors.extend(key_result.error)
        if value_result.is_err():
            errors.extend(value_result.error)
        if key_result.is_ok() and value_result.is_ok():
            validated[key_result.value] = value_result.value
    if errors:
        return Err(errors)
    return Ok(validated)


def _validate_ref(spec: RefType, value: Any, path: Path) -> Result:
    result = spec.target.validate(value)
    if result.is_ok():
        return result

    reason = result.error
    if isinstance(reason, ValidationError):
        return Err([reason.with_path_prefix(path)])
    if isinstance(reason, (list, tuple)) and reason and all(
        isinstance(e, ValidationError) for e in reason
    ):
        return Err([e.with_path_prefix(path) for e in reason])
    return Err([ValidationError(path, SCHEMA, str(reason))])
