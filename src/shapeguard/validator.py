"""
Validation pipeline for shapeguard.

Every call runs the same stages in a fixed order:

1. Input shape     - the input must be a mapping
2. Required fields - every required field must be present
3. Field values    - coerce (optional), type check, constraint check
4. Strict mode     - reject keys the schema does not know
5. Post-validation - run the schema's custom hook

Problems are aggregated inside a stage (all missing fields, all bad field
values) but a failing stage stops the pipeline, so a missing field is
never reported together with unrelated type errors.
"""

import copy
import time
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from shapeguard.core.coercion import coerce as coerce_value
from shapeguard.core.constraints import apply_constraints
from shapeguard.core.result import Err, Ok, Result
from shapeguard.core.symbols import Symbol
from shapeguard.core.types import runtime_type_name, validate_type
from shapeguard.errors import (
    INPUT_FORMAT,
    POST_VALIDATION,
    REQUIRED,
    STRICT,
    SchemaValidationError,
    ValidationError,
)
from shapeguard.metrics import ValidationMetrics
from shapeguard.schema import FieldDefinition, Schema
from shapeguard.utils.logger import log_errors, log_success
from shapeguard.utils.logging_config import get_logger

logger = get_logger("validator")

_MISSING = object()


def _lookup(data: Mapping[Any, Any], name: str) -> Any:
    """Find a field under its string key or its symbol key."""
    if name in data:
        return data[name]
    symbol = Symbol.existing(name)
    if symbol is not None and symbol in data:
        return data[symbol]
    return _MISSING


def _key_name(key: Any) -> str:
    if isinstance(key, Symbol):
        return key.name
    return str(key)


def _check_input(data: Any, path: Tuple[Any, ...]) -> Optional[List[ValidationError]]:
    if isinstance(data, Mapping):
        return None
    actual = runtime_type_name(data)
    return [
        ValidationError(
            path, INPUT_FORMAT, f"expected a map, got {actual}", {"actual": actual}
        )
    ]


def _check_required(
    schema: Schema, data: Mapping[Any, Any], path: Tuple[Any, ...]
) -> Optional[List[ValidationError]]:
    errors = [
        ValidationError(path + (name,), REQUIRED, "field is required")
        for name in schema.required_fields()
        if _lookup(data, name) is _MISSING
    ]
    return errors or None


def _validate_field(
    field_def: FieldDefinition, value: Any, path: Tuple[Any, ...], coerce: bool
) -> Result:
    if coerce:
        coerced = coerce_value(field_def.type, value, path)
        if coerced.is_err():
            return coerced
        value = coerced.value

    result = validate_type(field_def.type, value, path)
    if result.is_err():
        return result
    return apply_constraints(result.value, field_def.constraints, path)


def _validate_fields(
    schema: Schema, data: Mapping[Any, Any], path: Tuple[Any, ...], coerce: bool
) -> Result:
    validated: Dict[str, Any] = {}
    errors: List[ValidationError] = []

    for name, field_def in schema.fields.items():
        field_path = path + (name,)
        value = _lookup(data, name)

        if value is not _MISSING:
            result = _validate_field(field_def, value, field_path, coerce)
            if result.is_ok():
                validated[name] = result.value
            else:
                errors.extend(result.error)
        elif field_def.has_default:
            validated[name] = copy.deepcopy(field_def.default)
        elif field_def.required:
            errors.append(ValidationError(field_path, REQUIRED, "field is required"))

    if errors:
        return Err(errors)
    return Ok(validated)


def _check_strict(
    validated: Mapping[str, Any], data: Mapping[Any, Any], path: Tuple[Any, ...]
) -> Optional[List[ValidationError]]:
    known = {_key_name(key) for key in validated}
    extra = []
    for key in data:
        name = _key_name(key)
        if name not in known and name not in extra:
            extra.append(name)
    if not extra:
        return None
    return [
        ValidationError(
            path, STRICT, f"unexpected fields: {extra!r}", {"extra_fields": extra}
        )
    ]


def _hook_errors(reason: Any, path: Tuple[Any, ...]) -> List[ValidationError]:
    if isinstance(reason, ValidationError):
        return [reason]
    if isinstance(reason, str):
        return [ValidationError(path, POST_VALIDATION, reason)]
    if isinstance(reason, (list, tuple)) and reason:
        errors = []
        for item in reason:
            errors.extend(_hook_errors(item, path))
        return errors
    return [
        ValidationError(
            path,
            POST_VALIDATION,
            f"post-validation hook returned an invalid error: {reason!r}",
        )
    ]


def _run_post_validation(
    schema: Schema, validated: Dict[str, Any], path: Tuple[Any, ...]
) -> Result:
    hook = schema.post_validate_hook
    if hook is None:
        return Ok(validated)

    try:
        outcome = hook(validated)
    except Exception as e:
        logger.warning("Post-validation hook raised %s: %s", type(e).__name__, e)
        return Err(
            [
                ValidationError(
                    path,
                    POST_VALIDATION,
                    f"post-validation hook failed: {e}",
                    {"exception": type(e).__name__},
                )
            ]
        )

    if isinstance(outcome, Ok) and isinstance(outcome.value, Mapping):
        return Ok(dict(outcome.value))
    if isinstance(outcome, Mapping):
        return Ok(dict(outcome))
    if isinstance(outcome, Err):
        return Err(_hook_errors(outcome.error, path))
    return Err(
        [
            ValidationError(
                path,
                POST_VALIDATION,
                f"post-validation hook returned an invalid result: {outcome!r}",
            )
        ]
    )


def validate(
    schema: Schema,
    data: Any,
    *,
    coerce: bool = False,
    strict: Optional[bool] = None,
    path: Sequence[Any] = (),
    debug: bool = False,
) -> Result:
    """
    Validate ``data`` against ``schema``.

    Args:
        schema: A schema built with ``define``.
        data: The input; must be a mapping. Keys may be field-name strings
              or ``Symbol`` instances.
        coerce: Try the enumerated coercions before type validation.
        strict: Override the schema's strict setting.
        path: Base path prepended to every error.
        debug: Print a rich report of the outcome.

    Returns:
        ``Ok(validated_dict)`` keyed by field name, or ``Err(errors)``.

    Example:
        >>> schema = define([("name", "string"), ("age", "integer", {"gt": 0})])
        >>> validate(schema, {"name": "Alice", "age": "30"}, coerce=True)
        Ok(value={'name': 'Alice', 'age': 30})
    """
    path = tuple(path)
    result = _run_pipeline(schema, data, coerce, strict, path)

    if result.is_err():
        logger.debug(
            "Validation failed with %d error(s): %s",
            len(result.error),
            ", ".join(sorted({e.code for e in result.error})),
        )
    if debug:
        if result.is_ok():
            log_success(f"Validated {len(result.value)} field(s)")
        else:
            log_errors(result.error, title=schema.config.title)
    return result


def _run_pipeline(
    schema: Schema,
    data: Any,
    coerce: bool,
    strict: Optional[bool],
    path: Tuple[Any, ...],
) -> Result:
    errors = _check_input(data, path)
    if errors:
        return Err(errors)

    errors = _check_required(schema, data, path)
    if errors:
        return Err(errors)

    fields = _validate_fields(schema, data, path, coerce)
    if fields.is_err():
        return fields
    validated = fields.value

    strict_mode = schema.is_strict if strict is None else strict
    if strict_mode:
        errors = _check_strict(validated, data, path)
        if errors:
            return Err(errors)

    return _run_post_validation(schema, validated, path)


def validate_or_raise(schema: Schema, data: Any, **options: Any) -> Dict[str, Any]:
    """
    Validate ``data`` and return the validated dict.

    Raises:
        SchemaValidationError: Carrying every error, when validation fails.
    """
    result = validate(schema, data, **options)
    if result.is_err():
        raise SchemaValidationError(result.error)
    return result.value


def _item_options(options: Dict[str, Any], index: int) -> Dict[str, Any]:
    item_options = dict(options)
    item_options["path"] = (index,) + tuple(options.get("path", ()))
    return item_options


def validate_many(schema: Schema, items: Iterable[Any], **options: Any) -> Result:
    """
    Validate several inputs against one schema.

    Each item's errors are rooted under its index.

    Returns:
        ``Ok(list_of_validated)`` when every item is valid, otherwise
        ``Err({index: errors})`` for the failing items only.
    """
    validated: List[Dict[str, Any]] = []
    failures: Dict[int, List[ValidationError]] = {}

    for index, item in enumerate(items):
        result = validate(schema, item, **_item_options(options, index))
        if result.is_ok():
            validated.append(result.value)
        else:
            failures[index] = result.error

    if failures:
        return Err(failures)
    return Ok(validated)


def validate_stream(
    schema: Schema,
    items: Iterable[Any],
    metrics: Optional[ValidationMetrics] = None,
    **options: Any,
) -> Iterator[Result]:
    """
    Lazily validate a possibly infinite stream of inputs.

    Items are pulled one at a time; stop iterating to abandon the rest.

    Yields:
        One ``Ok``/``Err`` per input, in input order, with error paths
        rooted under the item's index.
    """
    for index, item in enumerate(items):
        started = time.perf_counter()
        result = validate(schema, item, **_item_options(options, index))
        if metrics is not None:
            metrics.record_validation(
                result, (time.perf_counter() - started) * 1000.0
            )
        yield result
