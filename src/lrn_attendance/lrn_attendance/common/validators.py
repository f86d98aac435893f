from __future__ import annotations

import re
from typing import Optional

from ..core.constants import LRN_PATTERN
from ..core.exceptions import ValidationError

_LRN_RE = re.compile(LRN_PATTERN)


def is_valid_lrn(value: object) -> bool:
    return isinstance(value, str) and bool(_LRN_RE.fullmatch(value))


def require_lrn(value: object) -> str:
    if not is_valid_lrn(value):
        raise ValidationError("Invalid LRN format. Must be 12 digits.")
    return value  # type: ignore[return-value]


def require_non_empty(value: object, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_phone(value: object) -> Optional[str]:
    """Blank phone numbers are stored as NULL."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Phone number must be text")
    value = value.strip()
    return value or None
