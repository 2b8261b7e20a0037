"""Common utility functions."""

from typing import Any, Mapping


def get_first(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the value of the first key present in ``data``."""
    for key in keys:
        if key in data:
            return data[key]
    return default
