from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_negative(value: float, field_name: str) -> float:
    if value is None or float(value) < 0:
        raise ValidationError(f"{field_name} must be >= 0, got {value!r}")
    return float(value)
