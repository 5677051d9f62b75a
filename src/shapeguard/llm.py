"""
Helpers for validating language model output.

Model responses arrive as text with prose and code fences around the JSON,
and failures are easier to debug with the prompt at hand. These helpers
extract the JSON, run the validator and attach that context to errors.
"""

from typing import Any, List

from shapeguard.core.parser import decode_json
from shapeguard.core.result import Err, Ok, Result
from shapeguard.errors import PARSE, ValidationError
from shapeguard.schema import Schema
from shapeguard.utils.logging_config import get_logger
from shapeguard.validator import validate

logger = get_logger("llm")

OUTPUT_PREVIEW_LENGTH = 200


def _preview(output: Any) -> str:
    text = output if isinstance(output, str) else repr(output)
    if len(text) > OUTPUT_PREVIEW_LENGTH:
        return text[:OUTPUT_PREVIEW_LENGTH] + "..."
    return text


def parse_json_output(text: str) -> Result:
    """
    Extract and decode the JSON payload of a model response.

    Returns:
        ``Ok(data)`` or ``Err([ValidationError])`` with code ``parse``.
    """
    decoded = decode_json(text)
    if decoded.is_ok():
        return decoded
    logger.debug("Could not decode model output: %s", decoded.error)
    return Err(
        [
            ValidationError(
                (),
                PARSE,
                f"could not parse JSON: {decoded.error}",
                {"output": _preview(text)},
            )
        ]
    )


def validate_json(schema: Schema, text: str, **options: Any) -> Result:
    """Parse JSON out of ``text`` and validate it against ``schema``."""
    parsed = parse_json_output(text)
    if parsed.is_err():
        return parsed
    return validate(schema, parsed.value, **options)


def validate_llm_output(schema: Schema, output: Any, prompt: str, **options: Any) -> Result:
    """
    Validate model output, adding the prompt and an output preview to
    every error's context.

    Args:
        schema: The expected shape.
        output: Decoded data, or raw response text to parse first.
        prompt: The prompt that produced ``output``.
        **options: Passed to ``validate``.
    """
    if isinstance(output, str):
        result = validate_json(schema, output, **options)
    else:
        result = validate(schema, output, **options)

    if result.is_ok():
        return Ok(result.value)

    enriched: List[ValidationError] = [
        error.with_context(prompt=prompt, output=_preview(output)) for error in result.error
    ]
    return Err(enriched)
