"""Doctor and staff directories, searchable by ``q``."""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.permissions import CanViewDoctors, CanViewStaff
from clinical.serializers.patient import SearchQuerySerializer
from clinical.services.directory import list_doctors, list_staff
from clinical.services.store import Store


def _query(request):
    s = SearchQuerySerializer(data=request.query_params)
    s.is_valid(raise_exception=True)
    return s.validated_data.get('q')


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewDoctors])
def doctors(request):
    rows = list_doctors(Store(), _query(request))
    return Response({'ok': True, 'data': rows, 'total': len(rows)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewStaff])
def staff(request):
    """Admin only: the staff entry is part of the admin menu."""
    rows = list_staff(Store(), _query(request))
    return Response({'ok': True, 'data': rows, 'total': len(rows)})
