"""
shapeguard - runtime schemas and validation for untrusted data.

Define a schema once from a list of field specifications, then validate
dictionaries against it: required fields, nested types, constraints,
optional coercion, strict mode and custom cross-field rules. Built for
checking the output of language models and other non-deterministic
sources, and able to emit an equivalent JSON Schema.

Example:
    >>> from shapeguard import define, validate
    >>>
    >>> schema = define([
    ...     ("name", "string", {"min_length": 2}),
    ...     ("age", "integer", {"optional": True, "gt": 0}),
    ...     ("tags", ("array", "string"), {"default": []}),
    ... ])
    >>>
    >>> validate(schema, {"name": "Alice", "age": "30"}, coerce=True)
    Ok(value={'name': 'Alice', 'age': 30, 'tags': []})
"""

from shapeguard.batch import BatchResult, BatchValidator
from shapeguard.config import Config, load_config
from shapeguard.core.coercion import coerce
from shapeguard.core.constraints import apply_constraints
from shapeguard.core.result import Err, Ok, Result
from shapeguard.core.symbols import Symbol
from shapeguard.core.types import (
    ArrayType,
    Kind,
    MapType,
    Primitive,
    RefType,
    TupleType,
    UnionType,
    normalize_type,
    validate_type as check_type,
)
from shapeguard.errors import (
    SchemaDefinitionError,
    SchemaValidationError,
    ValidationError,
    format_errors,
)
from shapeguard.helpers import (
    make_batch_validator,
    make_validator,
    validate_pairs,
    validate_type,
    validate_value,
)
from shapeguard.inference import infer_schema
from shapeguard.json_schema import generate as generate_json_schema
from shapeguard.llm import parse_json_output, validate_json, validate_llm_output
from shapeguard.metrics import ValidationMetrics
from shapeguard.schema import FieldDefinition, Schema, define, extend
from shapeguard.utils.logging_config import configure_logging, get_logger
from shapeguard.validator import (
    validate,
    validate_many,
    validate_or_raise,
    validate_stream,
)

__version__ = "0.1.0"
__all__ = [
    "ArrayType",
    "BatchResult",
    "BatchValidator",
    "Config",
    "Err",
    "FieldDefinition",
    "Kind",
    "MapType",
    "Ok",
    "Primitive",
    "RefType",
    "Result",
    "Schema",
    "SchemaDefinitionError",
    "SchemaValidationError",
    "Symbol",
    "TupleType",
    "UnionType",
    "ValidationError",
    "ValidationMetrics",
    "apply_constraints",
    "check_type",
    "coerce",
    "configure_logging",
    "define",
    "extend",
    "format_errors",
    "generate_json_schema",
    "get_logger",
    "infer_schema",
    "load_config",
    "make_batch_validator",
    "make_validator",
    "normalize_type",
    "parse_json_output",
    "validate",
    "validate_json",
    "validate_llm_output",
    "validate_many",
    "validate_or_raise",
    "validate_pairs",
    "validate_stream",
    "validate_type",
    "validate_value",
    "__version__",
]
