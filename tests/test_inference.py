"""Tests for schema inference."""

import pytest

from shapeguard.core.types import ANY, BOOLEAN, FLOAT, INTEGER, MAP, STRING, ArrayType, RefType
from shapeguard.errors import SchemaDefinitionError
from shapeguard.inference import NUMBER, infer_schema, infer_type_spec
from shapeguard.validator import validate


class TestInferTypeSpec:
    """Tests for infer_type_spec."""

    @pytest.mark.parametrize(
        "example,expected",
        [
            ("string", STRING),
            ("number", NUMBER),
            ("integer", INTEGER),
            ("boolean", BOOLEAN),
            ("array", ArrayType(ANY)),
            ("object", MAP),
            ("Alice", STRING),
            (42, INTEGER),
            (True, BOOLEAN),
            (3.5, FLOAT),
            ([1, 2], ArrayType(INTEGER)),
            ([], ArrayType(ANY)),
            (["string"], ArrayType(STRING)),
            (None, ANY),
        ],
    )
    def test_examples(self, example, expected):
        assert infer_type_spec(example) == expected

    def test_nested_object(self):
        spec = infer_type_spec({"city": "string"})

        assert isinstance(spec, RefType)
        assert spec.target.field_names == ["city"]


class TestInferSchema:
    """Tests for infer_schema."""

    def test_all_fields_required(self):
        schema = infer_schema({"name": "string", "age": 30, "tags": ["string"]})

        assert schema.required_fields() == ["name", "age", "tags"]
        assert schema.fields["age"].type == INTEGER
        assert schema.fields["age"].example == 30
        assert schema.fields["name"].example is None

    def test_define_options(self):
        schema = infer_schema({"a": 1}, title="Inferred", strict=True)

        assert schema.config.title == "Inferred"
        assert schema.is_strict

    def test_inferred_schema_validates(self):
        schema = infer_schema({"user": {"name": "string"}, "score": "number"})

        assert validate(schema, {"user": {"name": "Al"}, "score": 3}).is_ok()
        result = validate(schema, {"user": {"name": 1}, "score": 2.5})
        assert result.error[0].path == ("user", "name")

    def test_rejects_non_mapping(self):
        with pytest.raises(SchemaDefinitionError):
            infer_schema(["not", "an", "object"])

    def test_rejects_bad_key(self):
        with pytest.raises(SchemaDefinitionError):
            infer_schema({"not a name": 1})
