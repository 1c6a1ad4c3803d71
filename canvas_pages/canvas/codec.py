"""Escaped-JSON codec for canvas attribute values.

Control metadata is stored as JSON inside quoted HTML attributes
(data-sp-controldata, data-sp-webpartdata). Four characters are
replaced so the JSON text cannot end the attribute or be mistaken for
markup: double quote, colon, open brace and close brace, in that order.
"""

import json
from typing import Any

from .errors import CodecError

_ESCAPES = (
    ('"', "&quot;"),
    (":", "&#58;"),
    ("{", "&#123;"),
    ("}", "&#125;"),
)


def json_to_escaped_string(value: Any) -> str:
    """Serialize value to compact JSON and escape it for an attribute.

    Args:
        value: Any JSON-representable value

    Returns:
        Attribute-safe escaped JSON text

    Raises:
        CodecError: If value cannot be serialized to JSON
    """
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise CodecError(f"Value is not JSON serializable: {e}") from e

    for char, escape in _ESCAPES:
        text = text.replace(char, escape)
    return text


def escaped_string_to_json(escaped: str) -> Any:
    """Reverse json_to_escaped_string.

    Entities are not distinguished from escapes, so a string value that
    itself contained one of the escape sequences (e.g. a literal
    "&quot;") does not decode back to the original value.

    Args:
        escaped: Escaped attribute value

    Returns:
        The decoded JSON value

    Raises:
        CodecError: If the input is missing or is not valid escaped JSON
    """
    if escaped is None:
        raise CodecError("No attribute value to decode")

    text = escaped
    for char, escape in _ESCAPES:
        text = text.replace(escape, char)

    try:
        return json.loads(text)
    except ValueError as e:
        raise CodecError(f"Attribute value is not valid JSON: {e}", value=escaped) from e
