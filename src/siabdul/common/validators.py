from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_NON_DIGIT = re.compile(r"\D")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} tidak valid")
    return value.strip()


def digits_only(value: str | None) -> str:
    return _NON_DIGIT.sub("", value or "")


def require_digits(value: str, field_name: str) -> str:
    value = require_non_empty(value, field_name)
    if not value.isdigit():
        raise ValidationError(f"{field_name} hanya boleh berisi angka")
    return value
