"""Value coercion shared by the record codecs.

Stored records are loaded leniently: a malformed value becomes None so the
caller can substitute its default instead of failing the whole collection.
"""
from __future__ import annotations

import math
import uuid
from typing import Any


def new_id() -> str:
    return uuid.uuid4().hex


def to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def non_negative(value: Any) -> float | None:
    parsed = to_number(value)
    return parsed if parsed is not None and parsed >= 0 else None


def positive(value: Any) -> float | None:
    parsed = to_number(value)
    return parsed if parsed is not None and parsed > 0 else None


def positive_int(value: Any) -> int | None:
    parsed = to_number(value)
    if parsed is None:
        return None
    whole = math.floor(parsed)
    return whole if whole > 0 else None


def non_negative_int(value: Any) -> int | None:
    parsed = to_number(value)
    if parsed is None:
        return None
    whole = math.floor(parsed)
    return whole if whole >= 0 else None


def clean_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None
