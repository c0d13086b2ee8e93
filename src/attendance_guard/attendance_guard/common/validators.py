from __future__ import annotations

import math

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_finite(value: float, field_name: str) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(v):
        raise ValidationError(f"{field_name} must be a finite number")
    return v


def require_in_range(value: float, field_name: str, low: float, high: float) -> float:
    v = require_finite(value, field_name)
    if v < low or v > high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return v


def require_positive(value: float, field_name: str) -> float:
    v = require_finite(value, field_name)
    if v <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return v
