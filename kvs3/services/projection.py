"""JSON value decoding and field masking."""

from __future__ import annotations

import json
import math
from typing import Any

from kvs3.exceptions import ValueDecodeError


def parse_mask(mask: str | None) -> list[str] | None:
    """Split a ``mask`` query value into field names (``None`` = no mask)."""
    if mask is None:
        return None
    return mask.split(",")


def _filter(value: dict[str, Any], fields: list[str]) -> dict[str, Any]:
    # Output order follows `fields`, not the source object.
    return {field: value[field] for field in fields if field in value}


def project(value: Any, fields: list[str] | None) -> Any:
    """Narrow a decoded JSON value to ``fields``.

    Objects keep only the listed keys that they actually have. Arrays are
    projected element by element; non-object elements pass through. Scalars
    are returned unchanged.
    """
    if fields is None:
        return value
    if isinstance(value, list):
        return [_filter(v, fields) if isinstance(v, dict) else v for v in value]
    if isinstance(value, dict):
        return _filter(value, fields)
    return value


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are accepted by json.loads but are not JSON.
    raise ValueError(f"{name} is not a JSON value")


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range for a JSON number")
    return value


def decode_value(raw: bytes, key: str = "") -> Any:
    """Decode a stored value; raises ValueDecodeError on bad UTF-8 or JSON."""
    try:
        return json.loads(
            raw.decode("utf-8"), parse_constant=_reject_constant, parse_float=_parse_float
        )
    except ValueError as e:
        raise ValueDecodeError(key, str(e)) from e


def encode_value(value: Any) -> bytes:
    """Serialize a JSON value the way it is written to the store."""
    return json.dumps(
        value, ensure_ascii=False, allow_nan=False, separators=(",", ":")
    ).encode("utf-8")
