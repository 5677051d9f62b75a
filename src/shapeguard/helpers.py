"""
Convenience helpers for one-off validation.

These wrap a value in a temporary single-field schema, run the normal
pipeline and unwrap the result. The temporary field name is removed from
error paths, so an error on the value itself has an empty path and an
error inside an array value has the element index as its path.

Example:
    >>> validate_type("integer", "42", coerce=True)
    Ok(value=42)
    >>> validate_type(("array", "integer"), [1, "two"]).error[0].path
    (1,)
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from shapeguard.core.result import Err, Ok, Result
from shapeguard.errors import ValidationError
from shapeguard.schema import Schema, define
from shapeguard.validator import validate

_VALUE_FIELD = "value"


def _single_field_schema(
    name: str, type_spec: Any, constraints: Optional[Mapping[str, Any]]
) -> Schema:
    return define([(name, type_spec, dict(constraints or {}))])


def _strip_field(errors: Sequence[ValidationError], name: str) -> List[ValidationError]:
    stripped = []
    for error in errors:
        if error.path[:1] == (name,):
            stripped.append(ValidationError(error.path[1:], error.code, error.message, error.context))
        else:
            stripped.append(error)
    return stripped


def _run_single(schema: Schema, name: str, value: Any, options: Dict[str, Any]) -> Result:
    result = validate(schema, {name: value}, **options)
    if result.is_err():
        return Err(_strip_field(result.error, name))
    return Ok(result.value.get(name))


def validate_type(
    type_spec: Any,
    value: Any,
    *,
    constraints: Optional[Mapping[str, Any]] = None,
    **options: Any,
) -> Result:
    """
    Validate a single value against a type spec.

    Args:
        type_spec: Any spec accepted by ``define``.
        value: The value to check.
        constraints: Field options such as ``{"gt": 0}``.
        **options: Options for ``validate`` (``coerce``, ``debug``...).

    Returns:
        ``Ok(validated_value)`` or ``Err(errors)`` with the synthetic field
        name stripped from every path.
    """
    schema = _single_field_schema(_VALUE_FIELD, type_spec, constraints)
    return _run_single(schema, _VALUE_FIELD, value, options)


def validate_value(
    name: str,
    type_spec: Any,
    value: Any,
    *,
    constraints: Optional[Mapping[str, Any]] = None,
    **options: Any,
) -> Result:
    """
    Validate a single named value.

    ``name`` is used for the temporary field and stripped from error paths
    like in ``validate_type``.
    """
    schema = _single_field_schema(name, type_spec, constraints)
    return _run_single(schema, name, value, options)


def validate_pairs(items: Iterable[Tuple[Any, ...]], **options: Any) -> Result:
    """
    Validate a heterogeneous list of values.

    Each item is ``(type_spec, value)``, ``(name, type_spec, value)`` or
    ``(name, type_spec, value, field_options)``; every item gets its own
    temporary schema. ``field_options`` may carry constraints and
    validation options such as ``coerce``.

    Returns:
        ``Ok(list_of_values)`` or ``Err({index: errors})``.
    """
    values: List[Any] = []
    failures: Dict[int, List[ValidationError]] = {}

    for index, item in enumerate(items):
        if len(item) == 2:
            result = validate_type(item[0], item[1], **options)
        elif len(item) == 3:
            result = validate_value(item[0], item[1], item[2], **options)
        elif len(item) == 4:
            merged = dict(options)
            constraints = {}
            for key, setting in item[3].items():
                if key in ("coerce", "strict", "debug"):
                    merged[key] = setting
                else:
                    constraints[key] = setting
            result = validate_value(item[0], item[1], item[2], constraints=constraints, **merged)
        else:
            raise ValueError(f"Invalid item at index {index}: {item!r}")

        if result.is_ok():
            values.append(result.value)
        else:
            failures[index] = result.error

    if failures:
        return Err(failures)
    return Ok(values)


def make_validator(
    type_spec: Any,
    *,
    constraints: Optional[Mapping[str, Any]] = None,
    **options: Any,
) -> Callable[[Any], Result]:
    """
    Build a reusable single-value validator.

    The schema is built once, so a malformed spec fails here rather than on
    the first call.

    Example:
        >>> is_email = make_validator("string", constraints={"format": r"@"})
        >>> is_email("test@example.com")
        Ok(value='test@example.com')
    """
    schema = _single_field_schema(_VALUE_FIELD, type_spec, constraints)

    def validator(value: Any) -> Result:
        return _run_single(schema, _VALUE_FIELD, value, options)

    return validator


def make_batch_validator(
    field_specs: Iterable[Tuple[Any, ...]], **options: Any
) -> Callable[[Any], Result]:
    """
    Build a reusable validator for whole records.

    Args:
        field_specs: ``(name, type_spec)`` or ``(name, type_spec, options)``.
        **options: Options passed to ``validate`` on every call.
    """
    schema = define(list(field_specs))

    def validator(data: Any) -> Result:
        return validate(schema, data, **options)

    return validator
