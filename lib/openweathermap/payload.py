"""
Helpers for reading OpenWeatherMap JSON payloads

Provider bodies are untrusted: nested sections that are present but have the
wrong type raise MalformedResponseError instead of leaking AttributeError.
"""

from typing import Any, Dict, Optional

from .errors import MalformedResponseError


def numberOrNone(*values: Any) -> Optional[float]:
    """Return the first value that is a real number (bool is not), as float"""
    for value in values:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return None


def nestedDict(container: Dict[str, Any], key: str, label: str) -> Dict[str, Any]:
    """
    Get nested JSON object by key

    Args:
        container: Parent JSON object
        key: Key of the nested object
        label: Operation name used in the error message

    Returns:
        Nested object, empty dict if the key is absent or null

    Raises:
        MalformedResponseError: If the value is not a JSON object
    """
    value = container.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedResponseError(label)
    return value
