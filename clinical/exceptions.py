import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class StoreError(APIException):
    """A read or write against the data store failed."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'data store unavailable'
    default_code = 'store_unavailable'

    def __init__(self, collection, detail=None):
        self.collection = collection
        super().__init__(detail or f'{collection}: {self.default_detail}')


class StoreConflict(StoreError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'conflicts with an existing record'
    default_code = 'conflict'


class RoomAssignmentFailed(APIException):
    """The patient row was written but the room could not be marked occupied.

    ``compensated`` tells whether the patient insert was rolled back; when
    it is ``False`` the record was flagged for manual reconciliation.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'patient saved but room assignment failed'
    default_code = 'partial_write'

    def __init__(self, *, patient_id, room_id, compensated, cause=None):
        self.patient_id = patient_id
        self.room_id = room_id
        self.compensated = compensated
        self.cause = cause
        if compensated:
            message = 'room assignment failed; the new patient record was rolled back, please retry'
        else:
            message = 'room assignment failed and the patient record could not be rolled back; it is flagged for reconciliation'
        super().__init__(message)

    def as_payload(self) -> dict:
        return {'patientId': self.patient_id, 'roomId': self.room_id, 'compensated': self.compensated}


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', context.get('view'))
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    code = getattr(exc, 'default_code', None) or 'api_error'
    error = {'code': code, 'message': detail}
    if isinstance(exc, RoomAssignmentFailed):
        logger.error('partial write: %s', exc.as_payload())
        error.update(exc.as_payload())
    return Response({'ok': False, 'error': error}, status=resp.status_code)
