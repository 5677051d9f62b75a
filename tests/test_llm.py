"""Tests for JSON extraction and LLM output validation."""

import pytest

from shapeguard.core.parser import decode_json, extract_json_text, strip_code_fences
from shapeguard.core.result import Ok
from shapeguard.llm import (
    OUTPUT_PREVIEW_LENGTH,
    parse_json_output,
    validate_json,
    validate_llm_output,
)
from shapeguard.schema import define


@pytest.fixture
def answer_schema():
    return define([("answer", "integer"), ("reason", "string", {"optional": True})])


class TestParser:
    """Tests for the JSON extraction layers."""

    def test_strip_code_fences(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_extract_from_prose(self):
        text = 'Sure! Here is the JSON: {"a": 1} Hope it helps'
        assert extract_json_text(text) == '{"a": 1}'

    def test_extract_array(self):
        assert extract_json_text("Result: [1, 2, 3].") == "[1, 2, 3]"

    def test_braces_inside_strings(self):
        text = 'Output: {"text": "a } b", "n": {"x": 1}} trailing'
        assert extract_json_text(text) == '{"text": "a } b", "n": {"x": 1}}'

    def test_escaped_quotes(self):
        text = '{"quote": "he said \\"}\\""} done'
        assert decode_json(text) == Ok({"quote": 'he said "}"'})

    def test_no_json(self):
        assert extract_json_text("  nothing here ") == "nothing here"

    def test_decode_error_is_data(self):
        result = decode_json('{"a": }')

        assert result.is_err()
        assert "line 1" in result.error


class TestParseJsonOutput:
    """Tests for parse_json_output."""

    def test_fenced_output(self):
        assert parse_json_output('```json\n{"answer": 3}\n```') == Ok({"answer": 3})

    def test_parse_error(self):
        result = parse_json_output("I cannot answer that.")

        assert len(result.error) == 1
        assert result.error[0].code == "parse"
        assert result.error[0].context["output"] == "I cannot answer that."


class TestValidateJson:
    """Tests for validate_json."""

    def test_valid(self, answer_schema):
        assert validate_json(answer_schema, 'Answer: {"answer": 3}') == Ok({"answer": 3})

    def test_coerce(self, answer_schema):
        assert validate_json(answer_schema, '{"answer": "3"}', coerce=True) == Ok({"answer": 3})

    def test_invalid_shape(self, answer_schema):
        result = validate_json(answer_schema, '{"reason": "none"}')
        assert result.error[0].code == "required"


class TestValidateLlmOutput:
    """Tests for validate_llm_output."""

    def test_valid_decoded_output(self, answer_schema):
        assert validate_llm_output(answer_schema, {"answer": 1}, "What is 1?") == Ok({"answer": 1})

    def test_valid_text_output(self, answer_schema):
        result = validate_llm_output(answer_schema, '{"answer": 2}', "What is 2?")
        assert result == Ok({"answer": 2})

    def test_errors_carry_prompt(self, answer_schema):
        """Every error gets the prompt and an output preview."""
        result = validate_llm_output(answer_schema, {"answer": "x"}, "What is 1?")

        context = result.error[0].context
        assert context["prompt"] == "What is 1?"
        assert context["output"] == "{'answer': 'x'}"
        assert context["expected"] == "integer"

    def test_long_output_is_truncated(self, answer_schema):
        output = '{"answer": "' + "x" * 500 + '"}'
        result = validate_llm_output(answer_schema, output, "p")

        preview = result.error[0].context["output"]
        assert len(preview) == OUTPUT_PREVIEW_LENGTH + 3
        assert preview.endswith("...")

    def test_parse_errors_carry_prompt(self, answer_schema):
        result = validate_llm_output(answer_schema, "no json at all", "p")

        assert result.error[0].code == "parse"
        assert result.error[0].context["prompt"] == "p"
