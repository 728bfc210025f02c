"""
Dashboard composition.

The overview page shows four headline numbers, the latest admissions and
a per-department patient histogram.  Each section is fetched on its own
and falls back to its empty value when its fetch fails, so one broken
query never blanks the whole page.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, TypeVar

from django.conf import settings

from clinical.exceptions import StoreError
from clinical.services.aggregates import as_buckets, group_count, most_recent, sum_amounts
from clinical.services.store import Store

logger = logging.getLogger(__name__)

T = TypeVar('T')

RECENT_PATIENT_COLUMNS = ('id', 'patient_id', 'full_name', 'department', 'status', 'admission_date')


def _safe(label: str, fetch: Callable[[], T], default: T) -> T:
    try:
        return fetch()
    except StoreError as exc:
        logger.warning('dashboard section %s unavailable: %s', label, exc)
        return default


def dashboard_stats(store: Store) -> dict:
    revenue = _safe('revenue', lambda: sum_amounts(store.select('bills', columns=['amount'])), Decimal(0))
    return {
        'totalPatients': _safe('patients', lambda: store.select('patients', count=True), 0),
        'totalDoctors': _safe('doctors', lambda: store.select('doctors', count=True), 0),
        'totalStaff': _safe('staff', lambda: store.select('staff', count=True), 0),
        'totalRevenue': revenue,
    }


def build_dashboard(store: Store, recent_limit: int | None = None) -> dict:
    if recent_limit is None:
        recent_limit = getattr(settings, 'DASHBOARD_RECENT_LIMIT', 5)
    patients = _safe('patient list', lambda: store.select('patients', columns=RECENT_PATIENT_COLUMNS, order='id'), [])
    return {
        'stats': dashboard_stats(store),
        'recentPatients': most_recent(patients, recent_limit, 'admission_date'),
        'departments': as_buckets(group_count(patients, 'department')),
    }
