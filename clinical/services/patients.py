"""
Patient creation with optional room assignment.

Admitting a patient into a room takes two separate writes: insert the
patient, then mark the room occupied.  The store gives no transaction
spanning both, so a failure of the second write is compensated by
deleting the freshly inserted patient.  If that delete fails as well the
patient is flagged ``needs_reconciliation``.  Either way the caller gets
:class:`~clinical.exceptions.RoomAssignmentFailed`; the inconsistency is
never hidden.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from clinical.exceptions import RoomAssignmentFailed, StoreError
from clinical.serializers.patient import PatientCreateSerializer
from clinical.services import access
from clinical.services.audit import log_action
from clinical.services.identity import Identity
from clinical.services.store import Store

logger = logging.getLogger(__name__)

PATIENT_LIST_COLUMNS = (
    'id', 'patient_id', 'full_name', 'age', 'gender', 'blood_type', 'department',
    'condition', 'status', 'admission_date', 'discharge_date', 'room_id',
    'room__room_number', 'assigned_doctor_id', 'medications', 'allergies',
)


@dataclass
class PatientResult:
    patient: dict
    room: Optional[dict] = None


def generate_patient_id() -> str:
    return 'P-' + timezone.now().strftime('%y%m%d') + '-' + secrets.token_hex(3).upper()


def ensure_can_perform(identity: Identity, action: str) -> None:
    if not access.can_perform(identity.role, action):
        raise PermissionDenied(f'role {identity.role or "anonymous"!r} may not {action}')


def validate_patient_payload(payload) -> dict:
    s = PatientCreateSerializer(data=payload)
    s.is_valid(raise_exception=True)
    return dict(s.validated_data)


def _available_room(store: Store, room_id: int) -> dict:
    rows = store.select('rooms', filters={'id': room_id}, limit=1)
    if not rows:
        raise ValidationError({'room_id': ['Room does not exist.']})
    if rows[0]['is_occupied']:
        raise ValidationError({'room_id': ['Room is already occupied.']})
    return rows[0]


def _audit(identity: Identity, action: str, patient_pk, detail: dict) -> None:
    try:
        log_action(user_id=identity.user_id, action=action, object_type='patient',
                   object_id=patient_pk, detail=detail)
    except Exception:
        logger.exception('audit %s for patient %s not recorded', action, patient_pk)


def _compensate(store: Store, patient_pk: int) -> bool:
    """Undo the patient insert; flag the row when that is impossible."""
    try:
        store.delete('patients', {'id': patient_pk})
        return True
    except StoreError:
        logger.exception('rollback of patient %s failed', patient_pk)
    try:
        store.update('patients', {'needs_reconciliation': True}, {'id': patient_pk})
    except StoreError:
        logger.exception('could not flag patient %s for reconciliation', patient_pk)
    return False


def create_patient(store: Store, identity: Identity, payload) -> PatientResult:
    """Insert a patient and, when a room is given, occupy it.

    Authorization and validation run before the first store call.
    """
    ensure_can_perform(identity, access.CREATE_PATIENT)
    data = validate_patient_payload(payload)
    room_id = data.pop('room_id', None)
    if room_id is not None:
        ensure_can_perform(identity, access.ASSIGN_ROOM)
        _available_room(store, room_id)

    if not data.get('patient_id'):
        data['patient_id'] = generate_patient_id()
    data['room_id'] = room_id

    patient = store.insert('patients', [data])[0]
    logger.info('patient %s created by user %s', patient['patient_id'], identity.user_id)

    room = None
    if room_id is not None:
        try:
            # only a room that is still free may be taken
            updated = store.update('rooms', {'is_occupied': True}, {'id': room_id, 'is_occupied': False})
            if not updated:
                raise StoreError('rooms', f'rooms: room {room_id} was taken or removed before it could be occupied')
            room = updated[0]
        except StoreError as exc:
            compensated = _compensate(store, patient['id'])
            _audit(identity, 'patient_room_failed', patient['id'], {'roomId': room_id, 'compensated': compensated})
            raise RoomAssignmentFailed(patient_id=patient['id'], room_id=room_id,
                                       compensated=compensated, cause=exc) from exc

    _audit(identity, 'patient_create', patient['id'], {'patientId': patient['patient_id'], 'roomId': room_id})
    return PatientResult(patient=patient, room=room)


def list_patients(store: Store) -> list[dict]:
    """Every patient, newest admission first, with the room number joined in."""
    return store.select('patients', columns=PATIENT_LIST_COLUMNS, order=['-admission_date', '-id'])


def available_rooms(store: Store) -> list[dict]:
    return store.select('rooms', columns=('id', 'room_number', 'room_type', 'floor'),
                        filters={'is_occupied': False}, order='room_number')
