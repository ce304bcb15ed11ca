"""
Typed field access for decoding JSON objects into models.

A missing or null field falls back to the type's empty value; a present
field of the wrong type raises DecodeError.
"""

import math
from typing import Any, Dict, List

from ..exceptions import DecodeError


def require_object(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what}: expected a JSON object, got {type(data).__name__}")
    return data


def require_list(data: Any, what: str) -> List[Any]:
    if not isinstance(data, list):
        raise DecodeError(f"{what}: expected a JSON array, got {type(data).__name__}")
    return data


def get_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"field '{key}': expected a string, got {type(value).__name__}")
    return value


def get_float(data: Dict[str, Any], key: str, default: float = 0.0) -> float:
    value = data.get(key)
    if value is None:
        return default
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"field '{key}': expected a number, got {type(value).__name__}")
    return float(value)


def get_int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        raise DecodeError(f"field '{key}': missing")
    if isinstance(value, bool):
        raise DecodeError(f"field '{key}': expected an integer, got bool")
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value) or not value.is_integer():
            raise DecodeError(f"field '{key}': expected an integer, got {value!r}")
        return int(value)
    if not isinstance(value, int):
        raise DecodeError(f"field '{key}': expected an integer, got {type(value).__name__}")
    return value
