"""
Error model for shapeguard.

Validation failures are plain data: a ``ValidationError`` record carries the
path to the offending value, a machine-readable code, a human message and
optional context. Only two situations raise exceptions: a malformed schema
definition (``SchemaDefinitionError``) and the raising validation entry
point (``SchemaValidationError``).
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from shapeguard.core.result import Err, Ok, Result

PathItem = Any
Path = Tuple[PathItem, ...]

# Error codes
INPUT_FORMAT = "input_format"
REQUIRED = "required"
TYPE = "type"
TUPLE_SIZE = "tuple_size"
COERCION = "coercion"
STRICT = "strict"
POST_VALIDATION = "post_validation"
SCHEMA = "schema"
PARSE = "parse"


def normalize_path(path: Union[None, PathItem, Iterable[PathItem]]) -> Path:
    """Turn ``None``, a scalar or a sequence into a path tuple."""
    if path is None:
        return ()
    if isinstance(path, (list, tuple)):
        return tuple(path)
    return (path,)


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation failure.

    Attributes:
        path: Field names and array indices leading to the failing value.
              Empty for input-level errors.
        code: Machine-readable error kind, e.g. ``"type"`` or ``"gt"``.
        message: Human-readable description.
        context: Optional structured details.

    Example:
        >>> error = ValidationError.new(["user", "email"], "format", "bad email")
        >>> error.format()
        'user.email: bad email'
    """

    path: Path
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    @classmethod
    def new(
        cls,
        path: Union[None, PathItem, Iterable[PathItem]],
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> "ValidationError":
        """Create an error, wrapping a bare scalar path into a tuple."""
        return cls(normalize_path(path), code, message, context)

    def format(self, include_path: bool = True, separator: str = ".") -> str:
        """Render the error as ``"a.b: message"``."""
        if include_path and self.path:
            path_str = separator.join(str(p) for p in self.path)
            return f"{path_str}: {self.message}"
        return self.message

    def with_path_prefix(self, prefix: Sequence[PathItem]) -> "ValidationError":
        """Return a copy rooted under ``prefix``."""
        if not prefix:
            return self
        return replace(self, path=tuple(prefix) + self.path)

    def with_context(self, **extra: Any) -> "ValidationError":
        """Return a copy with ``extra`` merged into the context."""
        context = dict(self.context or {})
        context.update(extra)
        return replace(self, context=context)

    def to_portable_map(self) -> Dict[str, Any]:
        """Export as a JSON-friendly dictionary."""
        data: Dict[str, Any] = {
            "path": [str(p) for p in self.path],
            "code": str(self.code),
            "message": self.message,
        }
        if self.context is not None:
            data["context"] = self.context
        return data

    @classmethod
    def from_portable_map(cls, data: Mapping[str, Any]) -> Result:
        """
        Rebuild an error from ``to_portable_map`` output.

        Path entries made only of ASCII digits become integer indices again.

        Returns:
            ``Ok(ValidationError)`` or ``Err(message)`` when a field is
            missing or has the wrong type.
        """
        if not isinstance(data, Mapping):
            return Err("expected a mapping")

        path = data.get("path")
        if path is None:
            return Err("missing 'path' field")
        if not isinstance(path, (list, tuple)):
            return Err("invalid 'path' field, expected list")

        code = data.get("code")
        if code is None:
            return Err("missing 'code' field")
        if not isinstance(code, str):
            return Err("invalid 'code' field, expected string")

        message = data.get("message")
        if message is None:
            return Err("missing 'message' field")
        if not isinstance(message, str):
            return Err("invalid 'message' field, expected string")

        context = data.get("context")
        if context is not None and not isinstance(context, Mapping):
            return Err("invalid 'context' field, expected mapping")

        restored = tuple(
            int(p) if isinstance(p, str) and p.isascii() and p.isdecimal() else p for p in path
        )
        if context is not None:
            context = dict(context)
        return Ok(cls(restored, code, message, context))


def format_errors(
    errors: Iterable[ValidationError], include_path: bool = True, separator: str = "."
) -> str:
    """Format several errors, one per line."""
    return "\n".join(e.format(include_path, separator) for e in errors)


def group_by_path(errors: Iterable[ValidationError]) -> Dict[Path, List[ValidationError]]:
    """Group errors by their path, keeping first-seen order."""
    grouped: Dict[Path, List[ValidationError]] = {}
    for error in errors:
        grouped.setdefault(error.path, []).append(error)
    return grouped


def group_by_code(errors: Iterable[ValidationError]) -> Dict[str, List[ValidationError]]:
    """Group errors by their code, keeping first-seen order."""
    grouped: Dict[str, List[ValidationError]] = {}
    for error in errors:
        grouped.setdefault(error.code, []).append(error)
    return grouped


def filter_by_code(errors: Iterable[ValidationError], code: str) -> List[ValidationError]:
    return [e for e in errors if e.code == code]


def _starts_with(path: Sequence[PathItem], prefix: Sequence[PathItem]) -> bool:
    return len(prefix) <= len(path) and tuple(path[: len(prefix)]) == tuple(prefix)


def filter_by_path_prefix(
    errors: Iterable[ValidationError], prefix: Sequence[PathItem]
) -> List[ValidationError]:
    """Keep errors located at or below ``prefix``."""
    return [e for e in errors if _starts_with(e.path, prefix)]


def most_specific_for_path(
    errors: Iterable[ValidationError], target: Sequence[PathItem]
) -> Optional[ValidationError]:
    """Return the error whose path is the longest prefix of ``target``."""
    best: Optional[ValidationError] = None
    for error in errors:
        if _starts_with(target, error.path):
            if best is None or len(error.path) > len(best.path):
                best = error
    return best


def summarize(errors: Sequence[ValidationError]) -> Dict[str, Any]:
    """Summarize a list of errors into counts and affected paths."""
    by_code: Dict[str, int] = {}
    affected: List[Path] = []
    for error in errors:
        by_code[error.code] = by_code.get(error.code, 0) + 1
        if error.path not in affected:
            affected.append(error.path)
    return {
        "total_errors": len(errors),
        "error_codes": list(by_code),
        "affected_paths": affected,
        "by_code": by_code,
    }


class SchemaDefinitionError(ValueError):
    """Raised when a schema or type specification is malformed."""


class SchemaValidationError(Exception):
    """
    Raised by ``validate_or_raise`` when data does not match a schema.

    Attributes:
        errors: Every validation error found, in pipeline order.
    """

    def __init__(self, errors: Sequence[ValidationError]) -> None:
        self.errors = list(errors)
        if not self.errors:
            message = "Validation failed"
        elif len(self.errors) == 1:
            message = f"Validation failed: {self.errors[0].format()}"
        else:
            message = (
                f"Validation failed with {len(self.errors)} errors:\n"
                f"{format_errors(self.errors)}"
            )
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"SchemaValidationError(errors={len(self.errors)})"
