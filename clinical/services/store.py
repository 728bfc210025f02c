"""
Collection oriented data store over the Django ORM.

Services talk to the database through this narrow interface (select,
insert, update, delete on named collections) instead of reaching for
model managers directly, which keeps the multi-step writes in
:mod:`clinical.services.patients` testable with a failing store.

Each call runs in its own savepoint: a failed call leaves earlier,
already committed calls in place.  Callers that need all-or-nothing
semantics across several calls must compensate themselves.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence, Union

from django.core.exceptions import FieldError, ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from clinical.exceptions import StoreConflict, StoreError
from clinical.models import Bill, Doctor, Patient, Room, Staff, User

logger = logging.getLogger(__name__)

COLLECTIONS = {
    'patients': Patient,
    'doctors': Doctor,
    'staff': Staff,
    'rooms': Room,
    'bills': Bill,
    'user_roles': User,
}

# Never handed out through select()
HIDDEN_COLUMNS = {'user_roles': ('password',)}

Order = Union[str, Sequence[str], None]


class Store:
    """select/insert/update/delete over the named collections."""

    def __init__(self, using: Optional[str] = None):
        self.using = using

    def _model(self, collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise StoreError(collection, f'unknown collection {collection!r}')

    def _queryset(self, collection: str):
        qs = self._model(collection).objects.all()
        return qs.using(self.using) if self.using else qs

    def _columns(self, collection: str, columns: Optional[Iterable[str]]) -> list[str]:
        hidden = HIDDEN_COLUMNS.get(collection, ())
        if columns:
            return [c for c in columns if c not in hidden]
        model = self._model(collection)
        return [f.attname for f in model._meta.concrete_fields if f.attname not in hidden]

    def _fail(self, collection: str, op: str, exc: Exception):
        logger.warning('store %s on %s failed: %s', op, collection, exc)
        if isinstance(exc, IntegrityError):
            return StoreConflict(collection)
        return StoreError(collection, f'{collection}: {op} failed')

    def select(self, collection: str, columns: Optional[Iterable[str]] = None, filters: Optional[dict] = None,
               order: Order = None, limit: Optional[int] = None, count: bool = False) -> Union[list[dict], int]:
        """Rows of ``collection`` as dicts, or their number when ``count`` is set.

        ``filters`` are ORM lookups (``{'is_occupied': False}``), ``order``
        is one or more field names with an optional ``-`` prefix.
        """
        try:
            with transaction.atomic(using=self.using):
                qs = self._queryset(collection)
                if filters:
                    qs = qs.filter(**filters)
                if count:
                    return qs.count()
                if order:
                    qs = qs.order_by(*([order] if isinstance(order, str) else order))
                if limit is not None:
                    qs = qs[:limit]
                return list(qs.values(*self._columns(collection, columns)))
        except StoreError:
            raise
        except (DatabaseError, FieldError, ValidationError, ValueError, TypeError) as exc:
            raise self._fail(collection, 'select', exc) from exc

    def insert(self, collection: str, rows: Sequence[dict]) -> list[dict]:
        model = self._model(collection)
        try:
            with transaction.atomic(using=self.using):
                created = [model.objects.db_manager(self.using).create(**row) for row in rows]
        except (DatabaseError, FieldError, ValidationError, ValueError, TypeError) as exc:
            raise self._fail(collection, 'insert', exc) from exc
        ids = [obj.pk for obj in created]
        return self.select(collection, filters={'pk__in': ids}, order='pk')

    def _stamped(self, collection: str, patch: dict) -> dict:
        """``patch`` plus fresh values for ``auto_now`` fields, which ``QuerySet.update`` skips."""
        stamped = dict(patch)
        for f in self._model(collection)._meta.concrete_fields:
            if getattr(f, 'auto_now', False) and f.name not in stamped:
                stamped[f.name] = timezone.now()
        return stamped

    def update(self, collection: str, patch: dict, match: dict) -> list[dict]:
        """Apply ``patch`` to the rows matching ``match``; returns the rows changed.

        The match is re-applied by the UPDATE itself, so a conditional
        match such as ``{'id': 3, 'is_occupied': False}`` only changes
        rows that still satisfy it when the write lands.
        """
        if not match:
            raise StoreError(collection, f'{collection}: refusing update without a match filter')
        try:
            with transaction.atomic(using=self.using):
                qs = self._queryset(collection).filter(**match)
                ids = list(qs.select_for_update().values_list('pk', flat=True))
                self._queryset(collection).filter(pk__in=ids).filter(**match).update(**self._stamped(collection, patch))
        except (DatabaseError, FieldError, ValidationError, ValueError, TypeError) as exc:
            raise self._fail(collection, 'update', exc) from exc
        return self.select(collection, filters={'pk__in': ids}, order='pk')

    def delete(self, collection: str, match: dict) -> int:
        """Delete matching rows; returns how many rows of ``collection`` went (cascades not counted)."""
        if not match:
            raise StoreError(collection, f'{collection}: refusing delete without a match filter')
        label = self._model(collection)._meta.label
        try:
            with transaction.atomic(using=self.using):
                _, per_model = self._queryset(collection).filter(**match).delete()
        except (DatabaseError, FieldError, ValidationError, ValueError, TypeError) as exc:
            raise self._fail(collection, 'delete', exc) from exc
        return per_model.get(label, 0)
