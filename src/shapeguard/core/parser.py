"""
JSON extraction for untrusted model output.

Small language models wrap JSON in prose and markdown fences. These helpers
find the first JSON object or array in such text so it can be decoded and
handed to the validator:

Layer 1 (strip_code_fences): removes ```json fences
Layer 2 (extract_json_text): locates the first balanced {...} or [...]
Layer 3 (decode_json): decodes it, reporting failures as data
"""

import json
import re
from typing import Any, Optional

from shapeguard.core.result import Err, Ok, Result

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_OPENERS = {"{": "}", "[": "]"}


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code fences around a payload.

    Example:
        >>> strip_code_fences('```json\\n{"a": 1}\\n```')
        '{"a": 1}'
    """
    return _FENCE.sub("", text).strip()


def _find_closing(text: str, start: int) -> Optional[int]:
    """Index just past the bracket matching ``text[start]``, ignoring strings."""
    opener = text[start]
    closer = _OPENERS[opener]
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if escaped:
            escaped = False
        elif in_string:
            if char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def extract_json_text(text: str) -> str:
    """
    Extract the first JSON object or array from chatty text.

    If no opening bracket is found, the stripped text is returned as-is so
    decoding fails with a meaningful message. An unbalanced payload is
    returned up to the end of the text.

    Example:
        >>> extract_json_text('Sure! Here is the JSON: {"a": 1} Hope it helps')
        '{"a": 1}'
    """
    text = strip_code_fences(text)
    match = re.search(r"[\{\[]", text)
    if not match:
        return text

    start = match.start()
    end = _find_closing(text, start)
    return text[start:end] if end is not None else text[start:]


def decode_json(text: str) -> Result:
    """
    Decode JSON out of model output.

    Returns:
        ``Ok(data)`` or ``Err(message)`` describing the syntax error.
    """
    candidate = extract_json_text(text)
    try:
        data: Any = json.loads(candidate)
    except json.JSONDecodeError as e:
        return Err(f"{e.msg}: line {e.lineno} column {e.colno}")
    return Ok(data)
