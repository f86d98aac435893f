from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


def to_json_dict(obj: Any) -> Any:
    """Convert dataclasses/dicts into JSON-safe structures (ISO timestamps, enum values)."""

    if is_dataclass(obj) and not isinstance(obj, type):
        return to_json_dict(asdict(obj))
    if isinstance(obj, dict):
        return {k: to_json_dict(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_json_dict(v) for v in obj]
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, date):
        return obj.strftime("%Y-%m-%d")
    if isinstance(obj, Enum):
        return obj.value
    return obj
