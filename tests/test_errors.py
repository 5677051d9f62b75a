"""Tests for the error model."""

import pytest

from shapeguard.core.result import Err, Ok
from shapeguard.errors import (
    SchemaDefinitionError,
    SchemaValidationError,
    ValidationError,
    filter_by_code,
    filter_by_path_prefix,
    format_errors,
    group_by_code,
    group_by_path,
    most_specific_for_path,
    summarize,
)


class TestValidationError:
    """Tests for ValidationError records."""

    def test_new_wraps_scalar_path(self):
        """A bare path item becomes a one-element tuple."""
        error = ValidationError.new("name", "required", "field is required")
        assert error.path == ("name",)

    def test_new_accepts_none_path(self):
        """None gives an empty path."""
        error = ValidationError.new(None, "input_format", "expected a map")
        assert error.path == ()

    def test_new_accepts_list_path(self):
        error = ValidationError.new(["users", 0, "email"], "format", "bad email")
        assert error.path == ("users", 0, "email")

    def test_errors_are_immutable(self):
        """ValidationError is a frozen record."""
        error = ValidationError.new("name", "type", "expected string")
        with pytest.raises(AttributeError):
            error.code = "other"

    def test_format_with_path(self):
        """Format prefixes the dotted path."""
        error = ValidationError.new(["user", "email"], "format", "bad email")
        assert error.format() == "user.email: bad email"

    def test_format_without_path(self):
        error = ValidationError.new(["user", "email"], "format", "bad email")
        assert error.format(include_path=False) == "bad email"

    def test_format_custom_separator(self):
        error = ValidationError.new(["items", 2], "type", "expected integer")
        assert error.format(separator="/") == "items/2: expected integer"

    def test_format_root_error_has_no_prefix(self):
        """Root-level errors render the message only."""
        error = ValidationError.new((), "input_format", "expected a map, got string")
        assert error.format() == "expected a map, got string"

    def test_with_path_prefix(self):
        """Prefixing re-roots the error without touching the original."""
        error = ValidationError.new(["email"], "format", "bad email")
        moved = error.with_path_prefix(("users", 3))

        assert moved.path == ("users", 3, "email")
        assert error.path == ("email",)

    def test_with_context_merges(self):
        error = ValidationError.new("age", "gt", "too small", {"limit": 0})
        enriched = error.with_context(prompt="p")

        assert enriched.context == {"limit": 0, "prompt": "p"}
        assert error.context == {"limit": 0}


class TestPortableMap:
    """Tests for portable map serialization."""

    def test_to_portable_map_stringifies_path(self):
        error = ValidationError.new(["items", 1], "type", "expected integer")
        assert error.to_portable_map() == {
            "path": ["items", "1"],
            "code": "type",
            "message": "expected integer",
        }

    def test_to_portable_map_includes_context(self):
        error = ValidationError.new("age", "gt", "too small", {"limit": 0})
        assert error.to_portable_map()["context"] == {"limit": 0}

    def test_round_trip(self):
        """from_portable_map(to_portable_map(e)) rebuilds an equal error."""
        error = ValidationError.new(
            ["users", 0, "tags", 2], "min_length", "too short", {"limit": 3}
        )
        result = ValidationError.from_portable_map(error.to_portable_map())

        assert isinstance(result, Ok)
        assert result.value == error

    def test_round_trip_without_context(self):
        error = ValidationError.new(["name"], "required", "field is required")
        result = ValidationError.from_portable_map(error.to_portable_map())

        assert result.value == error
        assert result.value.context is None

    def test_round_trip_keeps_empty_context(self):
        error = ValidationError.new(["name"], "type", "expected string", {})
        result = ValidationError.from_portable_map(error.to_portable_map())

        assert result.value.context == {}

    def test_non_ascii_digits_stay_strings(self):
        """Only ASCII digit strings become indices; other digits never raise."""
        result = ValidationError.from_portable_map(
            {"path": ["²", "١٢", "3"], "code": "type", "message": "m"}
        )

        assert isinstance(result, Ok)
        assert result.value.path == ("²", "١٢", 3)

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"code": "type", "message": "m"}, "missing 'path' field"),
            ({"path": "a", "code": "type", "message": "m"}, "invalid 'path' field, expected list"),
            ({"path": [], "message": "m"}, "missing 'code' field"),
            ({"path": [], "code": 1, "message": "m"}, "invalid 'code' field, expected string"),
            ({"path": [], "code": "type"}, "missing 'message' field"),
        ],
    )
    def test_from_portable_map_rejects_bad_input(self, data, message):
        """Malformed maps give an Err, never an exception."""
        result = ValidationError.from_portable_map(data)

        assert isinstance(result, Err)
        assert result.error == message


class TestErrorUtilities:
    """Tests for grouping, filtering and summarizing errors."""

    @pytest.fixture
    def errors(self):
        return [
            ValidationError.new(["user", "name"], "required", "field is required"),
            ValidationError.new(["user", "age"], "type", "expected integer"),
            ValidationError.new(["user", "age"], "gt", "must be greater than 0"),
            ValidationError.new(["tags", 0], "type", "expected string"),
        ]

    def test_format_errors_joins_lines(self, errors):
        lines = format_errors(errors).splitlines()

        assert len(lines) == 4
        assert lines[0] == "user.name: field is required"

    def test_group_by_path(self, errors):
        grouped = group_by_path(errors)

        assert list(grouped) == [("user", "name"), ("user", "age"), ("tags", 0)]
        assert len(grouped[("user", "age")]) == 2

    def test_group_by_code(self, errors):
        grouped = group_by_code(errors)
        assert {code: len(items) for code, items in grouped.items()} == {
            "required": 1,
            "type": 2,
            "gt": 1,
        }

    def test_filter_by_code(self, errors):
        assert [e.path for e in filter_by_code(errors, "type")] == [
            ("user", "age"),
            ("tags", 0),
        ]

    def test_filter_by_path_prefix(self, errors):
        assert len(filter_by_path_prefix(errors, ("user",))) == 3
        assert filter_by_path_prefix(errors, ("missing",)) == []

    def test_most_specific_for_path(self):
        errors = [
            ValidationError.new([], "post_validation", "bad record"),
            ValidationError.new(["user"], "type", "expected map"),
        ]
        best = most_specific_for_path(errors, ("user", "name"))
        assert best.path == ("user",)

    def test_most_specific_for_path_none(self, errors):
        assert most_specific_for_path(errors, ("other",)) is None

    def test_summarize(self, errors):
        summary = summarize(errors)

        assert summary["total_errors"] == 4
        assert summary["error_codes"] == ["required", "type", "gt"]
        assert summary["affected_paths"] == [("user", "name"), ("user", "age"), ("tags", 0)]


class TestExceptions:
    """Tests for the exception types."""

    def test_schema_definition_error_is_value_error(self):
        assert issubclass(SchemaDefinitionError, ValueError)

    def test_schema_validation_error_single(self):
        error = ValidationError.new("name", "required", "field is required")
        exc = SchemaValidationError([error])

        assert exc.errors == [error]
        assert str(exc) == "Validation failed: name: field is required"

    def test_schema_validation_error_lists_every_error(self):
        """The message renders all errors, not only the first."""
        errors = [
            ValidationError.new("name", "required", "field is required"),
            ValidationError.new("age", "required", "field is required"),
        ]
        exc = SchemaValidationError(errors)

        assert "2 errors" in str(exc)
        assert "name: field is required" in str(exc)
        assert "age: field is required" in str(exc)
