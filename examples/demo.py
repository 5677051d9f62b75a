#!/usr/bin/env python3
"""
shapeguard Demo - Checking untrusted model output.

Walks through the main validation features using canned model responses,
so no model or network access is needed.

Requirements:
    - pip install shapeguard

Usage:
    python demo.py
"""

from shapeguard import (
    Err,
    Ok,
    SchemaValidationError,
    define,
    format_errors,
    generate_json_schema,
    validate,
    validate_llm_output,
    validate_or_raise,
)

PROMPT = "Describe the Python programming language as JSON."

LANGUAGE = define(
    [
        ("name", "string", {"min_length": 1, "description": "Language name"}),
        ("year_created", "integer", {"gt": 1900, "lt": 2100}),
        ("paradigms", ("array", "string"), {"min_items": 1}),
        ("typing", "string", {"choices": ["static", "dynamic"], "default": "dynamic"}),
    ],
    title="Language",
    strict=True,
)


def demo_schema_for_prompt() -> None:
    """
    Demo 1: JSON Schema for the prompt.

    The same schema that validates the answer can describe the expected
    shape to the model.
    """
    print("=" * 60)
    print("DEMO 1: JSON Schema for the Prompt")
    print("=" * 60)
    print()
    print(generate_json_schema(LANGUAGE, provider="openai"))
    print()


def demo_chatty_output() -> None:
    """
    Demo 2: Chatty Output with Coercion.

    Small models wrap JSON in prose and quote numbers. The JSON is pulled
    out of the text and "1991" is coerced to an integer.
    """
    print("=" * 60)
    print("DEMO 2: Chatty Output with Coercion")
    print("=" * 60)
    print()

    output = (
        "Sure! Here is the JSON you asked for:\n"
        '```json\n{"name": "Python", "year_created": "1991", "paradigms": ["oop"]}\n```'
    )
    print(f"Model output: {output}")
    print()

    result = validate_llm_output(LANGUAGE, output, PROMPT, coerce=True, debug=True)
    if isinstance(result, Ok):
        print(f"Validated: {result.value}")
    print()


def demo_aggregated_errors() -> None:
    """
    Demo 3: Every Problem at Once.

    All invalid fields are reported together, with paths.
    """
    print("=" * 60)
    print("DEMO 3: Aggregated Errors")
    print("=" * 60)
    print()

    data = {"name": "", "year_created": 1850, "paradigms": [], "typing": "gradual"}
    result = validate(LANGUAGE, data, debug=True)

    if isinstance(result, Err):
        print(format_errors(result.error))
    print()


def demo_raising() -> None:
    """Demo 4: Raising on bad data."""
    print("=" * 60)
    print("DEMO 4: validate_or_raise")
    print("=" * 60)
    print()

    try:
        validate_or_raise(LANGUAGE, {"name": "Python", "rating": 10})
    except SchemaValidationError as e:
        print(f"Failed: {e}")
    print()


def main() -> None:
    """Run all demos."""
    demos = [
        demo_schema_for_prompt,
        demo_chatty_output,
        demo_aggregated_errors,
        demo_raising,
    ]
    for demo_func in demos:
        demo_func()

    print("=" * 60)
    print("All demos complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
