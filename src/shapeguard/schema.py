"""
Schema model for shapeguard.

``define`` is the single way to build a ``Schema``. It checks every field
specification up front and raises ``SchemaDefinitionError`` on the first
malformed one, so a schema that exists is always well-formed. Schemas are
read-only after construction and safe to share between threads.

Example:
    >>> schema = define([
    ...     ("name", "string", {"min_length": 2}),
    ...     ("age", "integer", {"optional": True, "gt": 0}),
    ... ], title="User")
    >>> schema.required_fields()
    ['name']
"""

from collections.abc import Collection
from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from shapeguard.core.constraints import CONSTRAINT_KEYS, Constraint
from shapeguard.core.result import Result
from shapeguard.core.types import ArrayType, TypeSpec, normalize_type
from shapeguard.errors import SchemaDefinitionError

FIELD_OPTION_KEYS = frozenset(
    ("required", "optional", "default", "description", "example") + CONSTRAINT_KEYS
)

ARRAY_BOUND_KEYS = ("min_items", "max_items")

PostValidateHook = Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class FieldDefinition:
    """
    A single field of a schema.

    Attributes:
        name: Field name, a Python identifier.
        type: Normalized type spec. For arrays this carries the item bounds.
        required: Whether the field must be present in input.
        constraints: ``(name, bound)`` pairs checked after type validation.
        description: Optional documentation.
        example: Optional example value.
        default: Value used when the field is absent (``None`` = no default).
    """

    name: str
    type: TypeSpec
    required: bool = True
    constraints: Tuple[Constraint, ...] = ()
    description: Optional[str] = None
    example: Any = None
    default: Any = None

    @property
    def has_default(self) -> bool:
        return self.default is not None


@dataclass(frozen=True)
class SchemaConfig:
    title: Optional[str] = None
    description: Optional[str] = None
    strict: bool = False
    post_validate: Optional[PostValidateHook] = None


@dataclass(frozen=True, eq=False)
class Schema:
    """
    An immutable, validated collection of field definitions.

    Use ``define`` to build one. Fields keep their definition order.
    """

    fields: Mapping[str, FieldDefinition]
    config: SchemaConfig
    metadata: Mapping[str, Any]

    @property
    def field_names(self) -> List[str]:
        return list(self.fields)

    @property
    def is_strict(self) -> bool:
        return self.config.strict

    @property
    def post_validate_hook(self) -> Optional[PostValidateHook]:
        return self.config.post_validate

    def required_fields(self) -> List[str]:
        return [name for name, f in self.fields.items() if f.required]

    def optional_fields(self) -> List[str]:
        return [name for name, f in self.fields.items() if not f.required]

    def field_types(self) -> Dict[str, TypeSpec]:
        return {name: f.type for name, f in self.fields.items()}

    def constraints(self) -> Dict[str, List[Constraint]]:
        """Constraint lists per field, including bounds folded into array types."""
        result: Dict[str, List[Constraint]] = {}
        for name, f in self.fields.items():
            folded = list(f.type.constraints) if isinstance(f.type, ArrayType) else []
            result[name] = folded + list(f.constraints)
        return result

    def summary(self) -> Dict[str, Any]:
        """Counts and flags for introspection and debugging."""
        return {
            "field_count": len(self.fields),
            "required_count": len(self.required_fields()),
            "optional_count": len(self.optional_fields()),
            "field_names": self.field_names,
            "title": self.config.title,
            "description": self.config.description,
            "strict": self.is_strict,
            "has_post_validation": self.post_validate_hook is not None,
            "metadata": dict(self.metadata),
        }

    def validate(self, value: Any) -> Result:
        """Validate ``value`` with default options, making schemas nestable."""
        from shapeguard.validator import validate

        return validate(self, value)

    def __repr__(self) -> str:
        title = f" {self.config.title!r}" if self.config.title else ""
        return f"<Schema{title} fields={self.field_names} strict={self.is_strict}>"


def _split_field_spec(spec: Any) -> Tuple[Any, Any, Mapping[str, Any]]:
    if isinstance(spec, tuple) and len(spec) == 2:
        return spec[0], spec[1], {}
    if isinstance(spec, tuple) and len(spec) == 3 and isinstance(spec[2], Mapping):
        return spec
    raise SchemaDefinitionError(
        f"Invalid field specification: {spec!r}. "
        "Expected (name, type_spec) or (name, type_spec, options)"
    )


def _resolve_required(name: str, options: Mapping[str, Any]) -> bool:
    if "required" in options and "optional" in options:
        raise SchemaDefinitionError(
            f"Field {name!r}: cannot specify both 'required' and 'optional'"
        )
    if "required" in options:
        required = bool(options["required"])
    elif "optional" in options:
        required = not options["optional"]
    else:
        required = "default" not in options

    if required and options.get("default") is not None:
        raise SchemaDefinitionError(
            f"Field {name!r}: a field with a default cannot be required"
        )
    return required


def _check_choices(name: str, options: Mapping[str, Any]) -> None:
    if "choices" not in options:
        return
    allowed = options["choices"]
    if isinstance(allowed, (str, bytes)) or not isinstance(allowed, Collection):
        raise SchemaDefinitionError(
            f"Field {name!r}: choices must be a collection of values, got {allowed!r}"
        )


def build_field(spec: Any) -> FieldDefinition:
    """Check and normalize one ``(name, type_spec, options)`` tuple."""
    name, type_spec, options = _split_field_spec(spec)

    if not isinstance(name, str) or not name.isidentifier():
        raise SchemaDefinitionError(f"Field name must be an identifier, got {name!r}")

    unknown = [key for key in options if key not in FIELD_OPTION_KEYS]
    if unknown:
        raise SchemaDefinitionError(f"Field {name!r}: invalid field options {unknown}")

    try:
        field_type = normalize_type(type_spec)
    except SchemaDefinitionError as e:
        raise SchemaDefinitionError(f"Field {name!r}: {e}") from e

    required = _resolve_required(name, options)
    _check_choices(name, options)
    constraints = [(key, value) for key, value in options.items() if key in CONSTRAINT_KEYS]

    if isinstance(field_type, ArrayType):
        bounds = {key: value for key, value in constraints if key in ARRAY_BOUND_KEYS}
        if bounds:
            field_type = normalize_type(
                ArrayType(
                    field_type.inner,
                    bounds.get("min_items", field_type.min_items),
                    bounds.get("max_items", field_type.max_items),
                )
            )
            constraints = [c for c in constraints if c[0] not in ARRAY_BOUND_KEYS]

    return FieldDefinition(
        name=name,
        type=field_type,
        required=required,
        constraints=tuple(constraints),
        description=options.get("description"),
        example=options.get("example"),
        default=options.get("default"),
    )


def define(
    field_specs: Iterable[Any],
    *,
    title: Optional[str] = None,
    description: Optional[str] = None,
    strict: bool = False,
    post_validate: Optional[PostValidateHook] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Schema:
    """
    Build an immutable schema from field specifications.

    Args:
        field_specs: ``(name, type_spec)`` or ``(name, type_spec, options)``
            tuples. Recognized option keys are ``required``, ``optional``,
            ``default``, ``description``, ``example`` and the constraint keys
            ``min_length``, ``max_length``, ``min_items``, ``max_items``,
            ``gt``, ``gteq``, ``lt``, ``lteq``, ``format``, ``choices``.
        title: Optional schema title.
        description: Optional schema description.
        strict: Reject input keys that are not schema fields.
        post_validate: Optional hook run on the validated dict.
        metadata: Optional caller-supplied metadata kept on the schema.

    Returns:
        The new Schema.

    Raises:
        SchemaDefinitionError: If any field spec or option is invalid.
    """
    if isinstance(field_specs, (str, bytes, Mapping)):
        raise SchemaDefinitionError("field_specs must be a list of field tuples")

    if post_validate is not None and not callable(post_validate):
        raise SchemaDefinitionError(
            f"post_validate must be callable, got {type(post_validate).__name__}"
        )

    fields: Dict[str, FieldDefinition] = {}
    for spec in field_specs:
        field_def = build_field(spec)
        if field_def.name in fields:
            raise SchemaDefinitionError(f"Duplicate field name {field_def.name!r}")
        fields[field_def.name] = field_def

    config = SchemaConfig(
        title=title,
        description=description,
        strict=bool(strict),
        post_validate=post_validate,
    )
    return Schema(
        fields=MappingProxyType(fields),
        config=config,
        metadata=MappingProxyType(dict(metadata or {})),
    )


def field_specs_of(schema: Schema) -> List[Tuple[str, TypeSpec, Dict[str, Any]]]:
    """Return field specs equivalent to ``schema``, suitable for ``define``."""
    specs = []
    for f in schema.fields.values():
        options: Dict[str, Any] = dict(f.constraints)
        if f.has_default:
            options["default"] = f.default
        else:
            options["required"] = f.required
        if f.description is not None:
            options["description"] = f.description
        if f.example is not None:
            options["example"] = f.example
        specs.append((f.name, f.type, options))
    return specs


def extend(schema: Schema, field_specs: Sequence[Any], **overrides: Any) -> Schema:
    """
    Return a new schema with extra fields appended.

    The original schema is left untouched. Schema options not given in
    ``overrides`` are copied from ``schema``.
    """
    options = {
        "title": schema.config.title,
        "description": schema.config.description,
        "strict": schema.config.strict,
        "post_validate": schema.config.post_validate,
        "metadata": dict(schema.metadata),
    }
    options.update(overrides)
    return define(field_specs_of(schema) + list(field_specs), **options)
