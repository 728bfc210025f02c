from __future__ import annotations

from typing import Optional

from clinical.services.search import DOCTOR_SEARCH_FIELDS, STAFF_SEARCH_FIELDS, filter_records
from clinical.services.store import Store

PERSON_COLUMNS = ('user_id', 'user__first_name', 'user__last_name', 'user__username')

DOCTOR_COLUMNS = (
    'id', 'employee_id', 'specialization', 'department', 'qualification', 'experience_years',
    'rating', 'patient_count', 'phone', 'email', 'availability', 'schedule', 'created_at',
) + PERSON_COLUMNS

STAFF_COLUMNS = (
    'id', 'employee_id', 'role', 'department', 'phone', 'email', 'shift', 'joined_date', 'created_at',
) + PERSON_COLUMNS


def _with_name(row: dict) -> dict:
    first = row.pop('user__first_name', '') or ''
    last = row.pop('user__last_name', '') or ''
    username = row.pop('user__username', '') or ''
    row['name'] = f'{first} {last}'.strip() or username
    return row


def list_doctors(store: Store, q: Optional[str] = None) -> list[dict]:
    """Doctor directory, newest first, filtered by name/specialization/department."""
    rows = [_with_name(r) for r in store.select('doctors', columns=DOCTOR_COLUMNS, order=['-created_at', '-id'])]
    return filter_records(rows, q, DOCTOR_SEARCH_FIELDS)


def list_staff(store: Store, q: Optional[str] = None) -> list[dict]:
    rows = [_with_name(r) for r in store.select('staff', columns=STAFF_COLUMNS, order=['department', 'id'])]
    return filter_records(rows, q, STAFF_SEARCH_FIELDS)
