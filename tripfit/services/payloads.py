from __future__ import annotations

import json
from typing import Any, Optional


def coerce_object(value: Any, *, strict: bool = False) -> Optional[dict]:
    """Return ``value`` as a dict, accepting both native objects and JSON text.

    Outfit weather/outfit payloads reach us either way; storage always holds
    the object form. With ``strict`` an unusable value raises ValueError,
    otherwise it reads back as an empty dict.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        return value
    if isinstance(value, (str, bytes)):
        text = value.decode() if isinstance(value, bytes) else value
        if not text.strip():
            if strict:
                raise ValueError("empty JSON payload")
            return {}
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            if strict:
                raise ValueError(f"invalid JSON payload: {e.msg}") from e
            return {}
        # Doubly-encoded rows: a JSON string holding JSON text
        if isinstance(parsed, str):
            return coerce_object(parsed, strict=strict)
        if isinstance(parsed, dict):
            return parsed
    if strict:
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return {}
