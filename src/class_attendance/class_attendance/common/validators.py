from __future__ import annotations

from typing import Iterable

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_unique(values: Iterable[str], field_name: str) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in values:
        if v in seen:
            raise ValidationError(f"{field_name} contains duplicate entry: {v!r}")
        seen.add(v)
        out.append(v)
    return out


def require_positive(value: int, field_name: str) -> int:
    if value is None or int(value) <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return int(value)
