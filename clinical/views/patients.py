"""
Patient record endpoints.

``GET`` lists patients newest admission first, optionally narrowed by a
free-text ``q`` over name, patient ID and department.  ``POST`` creates
a patient and occupies the selected room; only roles with the
``createPatient`` capability get that far.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle

from clinical.permissions import CanViewPatients
from clinical.serializers.patient import SearchQuerySerializer
from clinical.services.identity import identity_from_request
from clinical.services.patients import available_rooms, create_patient, list_patients
from clinical.services.search import PATIENT_SEARCH_FIELDS, filter_records
from clinical.services.store import Store


class PatientWriteThrottle(ScopedRateThrottle):
    """Only throttle writes; listing and searching stay unthrottled."""

    def allow_request(self, request, view):
        if request.method != 'POST':
            return True
        return super().allow_request(request, view)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanViewPatients])
@throttle_classes([PatientWriteThrottle])
def patients(request):
    store = Store()
    if request.method == 'POST':
        result = create_patient(store, identity_from_request(request), request.data)
        return Response({'ok': True, 'data': result.patient, 'room': result.room}, status=201)

    q = SearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    rows = filter_records(list_patients(store), q.validated_data.get('q'), PATIENT_SEARCH_FIELDS)
    return Response({'ok': True, 'data': rows, 'total': len(rows)})

patients.cls.throttle_scope = 'patient_write'


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewPatients])
def rooms_available(request):
    """Unoccupied rooms, for the room picker of the add-patient form."""
    return Response({'ok': True, 'data': available_rooms(Store())})
