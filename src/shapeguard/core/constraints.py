"""
Constraint checking for shapeguard.

Constraints are ``(name, value)`` pairs checked against an already
type-validated value. Each violated constraint yields exactly one error
whose code is the constraint name. A constraint that does not apply to the
value's runtime type is skipped, and unknown constraint names are ignored.
"""

import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from shapeguard.core.result import Err, Ok, Result
from shapeguard.errors import ValidationError

CONSTRAINT_KEYS = (
    "min_length",
    "max_length",
    "min_items",
    "max_items",
    "gt",
    "gteq",
    "lt",
    "lteq",
    "format",
    "choices",
)

Constraint = Tuple[str, Any]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_sized(value: Any) -> bool:
    return isinstance(value, (str, list, tuple))


def _is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _length_unit(value: Any) -> str:
    return "characters" if isinstance(value, str) else "items"


def _check_min_length(value: Any, bound: Any) -> Optional[str]:
    if not _is_sized(value) or not _is_number(bound):
        return None
    if len(value) >= bound:
        return None
    return f"must be at least {bound} {_length_unit(value)}"


def _check_max_length(value: Any, bound: Any) -> Optional[str]:
    if not _is_sized(value) or not _is_number(bound):
        return None
    if len(value) <= bound:
        return None
    return f"must be at most {bound} {_length_unit(value)}"


def _check_min_items(value: Any, bound: Any) -> Optional[str]:
    if not _is_collection(value) or not _is_number(bound):
        return None
    if len(value) >= bound:
        return None
    return f"must have at least {bound} items"


def _check_max_items(value: Any, bound: Any) -> Optional[str]:
    if not _is_collection(value) or not _is_number(bound):
        return None
    if len(value) <= bound:
        return None
    return f"must have at most {bound} items"


def _check_gt(value: Any, bound: Any) -> Optional[str]:
    if not (_is_number(value) and _is_number(bound)) or value > bound:
        return None
    return f"must be greater than {bound}"


def _check_gteq(value: Any, bound: Any) -> Optional[str]:
    if not (_is_number(value) and _is_number(bound)) or value >= bound:
        return None
    return f"must be greater than or equal to {bound}"


def _check_lt(value: Any, bound: Any) -> Optional[str]:
    if not (_is_number(value) and _is_number(bound)) or value < bound:
        return None
    return f"must be less than {bound}"


def _check_lteq(value: Any, bound: Any) -> Optional[str]:
    if not (_is_number(value) and _is_number(bound)) or value <= bound:
        return None
    return f"must be less than or equal to {bound}"


def _check_format(value: Any, pattern: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    elif not isinstance(pattern, re.Pattern):
        return None
    if pattern.search(value):
        return None
    return f"does not match required format {pattern.pattern!r}"


def _check_choices(value: Any, allowed: Any) -> Optional[str]:
    try:
        if value in allowed:
            return None
    except TypeError:
        return None
    return f"must be one of {list(allowed)!r}"


_CHECKS: Dict[str, Callable[[Any, Any], Optional[str]]] = {
    "min_length": _check_min_length,
    "max_length": _check_max_length,
    "min_items": _check_min_items,
    "max_items": _check_max_items,
    "gt": _check_gt,
    "gteq": _check_gteq,
    "lt": _check_lt,
    "lteq": _check_lteq,
    "format": _check_format,
    "choices": _check_choices,
}


def check_constraint(
    name: str, bound: Any, value: Any, path: Sequence[Any] = ()
) -> Optional[ValidationError]:
    """Check a single constraint, returning an error or ``None``."""
    check = _CHECKS.get(name)
    if check is None:
        return None
    message = check(value, bound)
    if message is None:
        return None
    if isinstance(bound, re.Pattern):
        bound = bound.pattern
    return ValidationError(tuple(path), name, message, {"constraint": name, "limit": bound})


def apply_constraints(
    value: Any, constraints: Iterable[Constraint], path: Sequence[Any] = ()
) -> Result:
    """
    Check every constraint in declared order.

    Args:
        value: A value that already passed type validation.
        constraints: ``(name, bound)`` pairs.
        path: Location of ``value`` for error reporting.

    Returns:
        ``Ok(value)`` or ``Err(errors)`` with one error per violation.
    """
    errors: List[ValidationError] = []
    for name, bound in constraints:
        error = check_constraint(name, bound, value, path)
        if error is not None:
            errors.append(error)
    if errors:
        return Err(errors)
    return Ok(value)
