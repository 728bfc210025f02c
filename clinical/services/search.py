"""
Free-text search over an already fetched collection.

A record matches when any of the searched fields contains the query as
a case-insensitive substring.  The same helper backs the patient, doctor
and staff directories.
"""
from __future__ import annotations

from typing import Any, Iterable, Sequence

from .records import field_value

PATIENT_SEARCH_FIELDS = ('full_name', 'patient_id', 'department')
DOCTOR_SEARCH_FIELDS = ('name', 'specialization', 'department')
STAFF_SEARCH_FIELDS = ('name', 'role', 'department')


def _text(value: Any) -> str:
    return '' if value is None else str(value)


def matches(record: Any, needle: str, fields: Iterable[str]) -> bool:
    """``needle`` must already be case folded and non-empty."""
    return any(needle in _text(field_value(record, f)).casefold() for f in fields)


def filter_records(records: Sequence[Any], query: str | None, fields: Iterable[str]) -> list:
    """Return the records matching ``query`` on any of ``fields``.

    A blank query returns every record in input order.  Any other query
    is matched as typed, surrounding whitespace included.
    """
    if not (query or '').strip():
        return list(records)
    needle = query.casefold()
    fields = tuple(fields)
    return [r for r in records if matches(r, needle, fields)]
