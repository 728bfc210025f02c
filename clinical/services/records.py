"""Field access shared by the search and aggregation helpers."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def field_value(record: Any, field: str, default: Any = None) -> Any:
    """Read ``field`` from a dict row or a model instance.

    Dotted paths (``user.full_name``) walk nested mappings/attributes.
    Anything missing along the way yields ``default``.
    """
    current = record
    for part in field.split('.'):
        if current is None:
            return default
        if isinstance(current, Mapping):
            current = current.get(part)
        else:
            current = getattr(current, part, None)
    return default if current is None else current
