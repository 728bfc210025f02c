"""
Overview dashboard endpoint.

Returns everything the overview page renders in one response: headline
totals, the latest admissions and patients per department.  Patients
have no dashboard; their menu only holds the portal.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import CanViewDashboard
from ..services.dashboard import build_dashboard
from ..services.store import Store


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewDashboard])
def dashboard(request):
    return Response({'ok': True, **build_dashboard(Store())})
