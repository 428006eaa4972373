"""JSON encoding helpers shared by logging and input-state storage."""

import json
from typing import Any

__all__ = ("decode_json", "encode_json")


def encode_json(data: Any, *, indent: "int | None" = None) -> str:
    """Encode data to a JSON string.

    Args:
        data: Data to encode.
        indent: Optional indentation for human-readable output.

    Returns:
        JSON string.
    """
    return json.dumps(data, default=str, ensure_ascii=False, indent=indent)


def decode_json(data: "str | bytes") -> Any:
    """Decode a JSON string or bytes to Python objects.

    Args:
        data: JSON text.

    Returns:
        Decoded Python object.
    """
    return json.loads(data)
