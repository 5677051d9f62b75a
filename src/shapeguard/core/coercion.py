"""
Type coercion for shapeguard.

Coercion is a fixed list of conversions tried before validation when the
caller asks for it. It never falls back to casting: a value that is not on
the list fails with a ``coercion`` error. Types with no conversions (maps,
tuples, typed maps, any, references) pass the value through untouched and
leave the verdict to validation.
"""

import enum
import re
from typing import Any, List, Sequence

from shapeguard.core.result import Err, Ok, Result
from shapeguard.core.symbols import Symbol
from shapeguard.core.types import (
    ArrayType,
    Kind,
    Primitive,
    TypeSpec,
    UnionType,
    describe_type,
    is_sequence,
    runtime_type_name,
)
from shapeguard.errors import COERCION, Path, ValidationError

_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")
_FLOAT_LITERAL = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def _failure(spec: TypeSpec, value: Any, path: Path, reason: str) -> Err:
    return Err(
        [
            ValidationError(
                path,
                COERCION,
                f"cannot coerce {runtime_type_name(value)} to {describe_type(spec)}: {reason}",
                {"target": describe_type(spec), "actual": runtime_type_name(value)},
            )
        ]
    )


def _coerce_primitive(spec: Primitive, value: Any, path: Path) -> Result:
    kind = spec.kind

    if kind in (Kind.ANY, Kind.MAP):
        return Ok(value)

    if kind is Kind.STRING:
        if isinstance(value, str):
            return Ok(value)
        if isinstance(value, bool):
            return Ok("true" if value else "false")
        if isinstance(value, (int, float)):
            return Ok(str(value))
        if isinstance(value, Symbol):
            return Ok(value.name)
        if isinstance(value, enum.Enum):
            return Ok(value.name)
        return _failure(spec, value, path, "unsupported conversion")

    if kind is Kind.INTEGER:
        if isinstance(value, int) and not isinstance(value, bool):
            return Ok(value)
        if isinstance(value, str):
            if _INTEGER_LITERAL.fullmatch(value):
                return Ok(int(value))
            return _failure(spec, value, path, "invalid integer format")
        return _failure(spec, value, path, "unsupported conversion")

    if kind is Kind.FLOAT:
        if isinstance(value, float):
            return Ok(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return Ok(float(value))
        if isinstance(value, str):
            if _FLOAT_LITERAL.fullmatch(value):
                return Ok(float(value))
            return _failure(spec, value, path, "invalid float format")
        return _failure(spec, value, path, "unsupported conversion")

    if kind is Kind.BOOLEAN:
        if isinstance(value, bool):
            return Ok(value)
        if value == "true":
            return Ok(True)
        if value == "false":
            return Ok(False)
        return _failure(spec, value, path, "expected 'true' or 'false'")

    # Kind.ATOM
    if isinstance(value, (Symbol, enum.Enum)):
        return Ok(value)
    if isinstance(value, str):
        symbol = Symbol.existing(value)
        if symbol is not None:
            return Ok(symbol)
        return _failure(spec, value, path, "atom does not exist")
    return _failure(spec, value, path, "unsupported conversion")


def coerce(spec: TypeSpec, value: Any, path: Sequence[Any] = ()) -> Result:
    """
    Attempt to convert ``value`` to the type described by ``spec``.

    Args:
        spec: A normalized TypeSpec.
        value: The raw value.
        path: Location of ``value`` for error reporting.

    Returns:
        ``Ok(coerced_value)`` or ``Err(errors)`` with ``coercion`` errors.

    Example:
        >>> coerce(Primitive(Kind.INTEGER), "42")
        Ok(value=42)
    """
    path = tuple(path)

    if isinstance(spec, Primitive):
        return _coerce_primitive(spec, value, path)

    if isinstance(spec, ArrayType):
        if not is_sequence(value):
            return Ok(value)
        coerced: List[Any] = []
        errors: List[ValidationError] = []
        for index, item in enumerate(value):
            result = coerce(spec.inner, item, path + (index,))
            if result.is_ok():
                coerced.append(result.value)
            else:
                errors.extend(result.error)
        if errors:
            return Err(errors)
        return Ok(coerced)

    if isinstance(spec, UnionType):
        for alternative in spec.alternatives:
            result = coerce(alternative, value, path)
            if result.is_ok():
                return result
        return _failure(spec, value, path, "no type in union could coerce value")

    return Ok(value)
