"""
Data serialization utilities for the application.

This module converts message payloads to and from JSON-safe structures.
"""

import json
from datetime import date, datetime
from typing import Any, Dict, Optional


def _to_json_safe(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_safe(v) for v in value]
    try:
        json.dumps(value)  # Test if value is JSON serializable
        return value
    except (TypeError, ValueError):
        return str(value)


def serialize_payload_data(data: Any) -> Optional[Dict[str, Any]]:
    """Convert a payload ``data`` value into a JSON-serializable dict."""
    if data is None:
        return None

    if not isinstance(data, dict):
        # A JSON string holding an object is accepted as-is
        if isinstance(data, str):
            try:
                parsed = json.loads(data)
                if isinstance(parsed, dict):
                    return parsed
            except json.JSONDecodeError:
                pass
        return {"value": _to_json_safe(data)}

    return _to_json_safe(data)


def deserialize_payload(raw: str) -> Optional[Dict[str, Any]]:
    """Parse a JSON object, returning None when ``raw`` is not one."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None
    return parsed if isinstance(parsed, dict) else None


def coerce_int(value: Any, default: int) -> int:
    """Lenient int conversion: accepts numbers and numeric strings."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except ValueError:
            return default
    return default


def coerce_bool(value: Any, default: bool) -> bool:
    """Lenient bool conversion: accepts booleans and "true"/"false" strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return default


def serialize_content(content: Any) -> str:
    """Serialize content to a string."""
    if isinstance(content, str):
        return content

    try:
        return json.dumps(content)
    except (TypeError, ValueError):
        return str(content)
