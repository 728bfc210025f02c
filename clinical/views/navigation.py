from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.services.access import capabilities_for, resolve_menu
from clinical.services.identity import identity_from_request


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def navigation(request):
    """Sidebar entries and write capabilities for the signed-in role."""
    identity = identity_from_request(request)
    return Response({
        'ok': True,
        'role': identity.role,
        'menu': [item.as_dict() for item in resolve_menu(identity.role)],
        'capabilities': capabilities_for(identity.role),
    })
