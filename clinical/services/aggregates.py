"""
Derived views over fetched collections.

Revenue totals, "most recent N" lists and per-key histograms used by the
dashboard.  None of these functions modify the collection they are
given; each returns a new value and each returns its empty value
(``0``, ``[]``, ``{}``) for an empty input.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Sequence

from .records import field_value


def to_amount(value: Any) -> Decimal:
    """Coerce a bill amount; garbage and missing values count as zero.

    Negative and very large amounts pass through unchanged.
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return amount if amount.is_finite() else Decimal(0)


def sum_amounts(bills: Iterable[Any], field: str = 'amount') -> Decimal:
    return sum((to_amount(field_value(bill, field)) for bill in bills), Decimal(0))


def most_recent(records: Sequence[Any], n: int, date_field: str) -> list:
    """First ``n`` records by ``date_field``, newest first.

    The sort is stable, so records sharing a date keep their input order.
    Records without a date go after every dated record.
    """
    if n <= 0:
        return []
    dated = [r for r in records if field_value(r, date_field) is not None]
    undated = [r for r in records if field_value(r, date_field) is None]
    dated = sorted(dated, key=lambda r: field_value(r, date_field), reverse=True)
    # reverse=True keeps ties in input order
    return (dated + undated)[:n]


def group_count(records: Iterable[Any], key_field: str) -> dict:
    """Count records per value of ``key_field``.

    Records whose key is missing or blank are left out rather than being
    counted under a placeholder bucket.
    """
    counts: dict = {}
    for record in records:
        key = field_value(record, key_field)
        if key is None or (isinstance(key, str) and not key.strip()):
            continue
        counts[key] = counts.get(key, 0) + 1
    return counts


def as_buckets(counts: dict) -> list[dict]:
    return [{'name': name, 'count': count} for name, count in counts.items()]
