from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.permissions import IsPatientRole
from clinical.services.aggregates import sum_amounts
from clinical.services.patients import PATIENT_LIST_COLUMNS
from clinical.services.store import Store

BILL_COLUMNS = ('id', 'bill_number', 'patient_id', 'amount', 'description', 'status', 'date', 'paid_date')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def patient_portal(request):
    """The caller's own records and bills; nothing about other patients."""
    store = Store()
    records = store.select('patients', columns=PATIENT_LIST_COLUMNS,
                           filters={'user_id': request.user.id}, order='-admission_date')
    ids = [r['id'] for r in records]
    bills = store.select('bills', columns=BILL_COLUMNS, filters={'patient_id__in': ids}, order='-date') if ids else []
    outstanding = [b for b in bills if b['status'] != 'paid']
    return Response({
        'ok': True,
        'records': records,
        'bills': bills,
        'outstanding': sum_amounts(outstanding),
    })
