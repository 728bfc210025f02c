"""
Permission classes backed by the role rules in :mod:`clinical.services.access`.

The access module stays the single source of truth; these classes only
adapt it to DRF's permission protocol.
"""
from rest_framework.permissions import BasePermission

from .services import access
from .services.identity import identity_from_request


class HasMenuCapability(BasePermission):
    """Allow access when the caller's menu contains ``capability``."""
    capability: str = ''

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        identity = identity_from_request(request)
        return identity.is_authenticated and access.can_view(identity.role, self.capability)


class CanViewDashboard(HasMenuCapability):
    capability = access.VIEW_DASHBOARD


class CanViewPatients(HasMenuCapability):
    capability = access.VIEW_PATIENTS


class CanViewDoctors(HasMenuCapability):
    capability = access.VIEW_DOCTORS


class CanViewStaff(HasMenuCapability):
    capability = access.VIEW_STAFF


class IsPatientRole(HasMenuCapability):
    """Only patients have the self-service portal."""
    capability = access.VIEW_PORTAL
