"""Serialization utilities."""

from dataclasses import asdict
from datetime import datetime
from typing import Any, Mapping


def _convert(value: Any, rename: Mapping[str, str]) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {rename.get(k, k): _convert(v, rename) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v, rename) for v in value]
    return value


def serialize_dataclass(obj, rename: Mapping[str, str] | None = None) -> dict:
    """Serialize a dataclass to dict, converting datetimes to ISO strings.

    ``rename`` maps attribute names to output keys and is applied at every
    nesting level, so nested dataclasses share one key table.
    """
    return _convert(asdict(obj), rename or {})
