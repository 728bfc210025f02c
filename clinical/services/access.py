"""
Role based navigation and capability rules.

Every function here is a pure function of the role it is given.  Callers
pass the acting identity's role explicitly; nothing in this module reads
the request, the session or any cached state, so a sign-out followed by a
sign-in as somebody else is always evaluated from scratch.
"""
from __future__ import annotations

from typing import NamedTuple, Optional

ADMIN = 'admin'
DOCTOR = 'doctor'
STAFF = 'staff'
PATIENT = 'patient'

ROLES = (ADMIN, DOCTOR, STAFF, PATIENT)

# Capabilities attached to menu destinations
VIEW_PORTAL = 'viewPortal'
VIEW_DASHBOARD = 'viewDashboard'
VIEW_PATIENTS = 'viewPatients'
VIEW_DOCTORS = 'viewDoctors'
VIEW_STAFF = 'viewStaff'
ADMIN_PANEL = 'adminPanel'

# Mutating actions on clinical records
CREATE_PATIENT = 'createPatient'
UPDATE_PATIENT = 'updatePatient'
ASSIGN_ROOM = 'assignRoom'

CLINICAL_WRITE_ACTIONS = frozenset({CREATE_PATIENT, UPDATE_PATIENT, ASSIGN_ROOM})
CLINICAL_WRITERS = frozenset({ADMIN, DOCTOR, STAFF})


class MenuItem(NamedTuple):
    label: str
    route: str
    capability: str

    def as_dict(self) -> dict:
        return {'label': self.label, 'route': self.route, 'capability': self.capability}


PORTAL_MENU = (
    MenuItem('My Portal', '/patient-portal', VIEW_PORTAL),
)

BASE_MENU = (
    MenuItem('Dashboard', '/dashboard', VIEW_DASHBOARD),
    MenuItem('Patients', '/patients', VIEW_PATIENTS),
    MenuItem('Doctors', '/doctors', VIEW_DOCTORS),
)

ADMIN_MENU = (
    MenuItem('Staff', '/staff', VIEW_STAFF),
    MenuItem('Admin Panel', '/admin', ADMIN_PANEL),
)


def normalize_role(role: Optional[str]) -> Optional[str]:
    """Return ``role`` if it is a known role, otherwise ``None``."""
    if isinstance(role, str):
        role = role.strip().lower()
        if role in ROLES:
            return role
    return None


def resolve_menu(role: Optional[str]) -> list[MenuItem]:
    """Navigation destinations visible to ``role``, in display order.

    Patients get the self-service portal only.  Every other value,
    including a missing or unknown role, gets the base sequence; only
    administrators get the staff directory and admin panel appended.
    """
    role = normalize_role(role)
    if role == PATIENT:
        return list(PORTAL_MENU)
    items = list(BASE_MENU)
    if role == ADMIN:
        items.extend(ADMIN_MENU)
    return items


def can_view(role: Optional[str], capability: str) -> bool:
    """True when ``capability`` belongs to one of the role's menu items.

    Unknown roles see the base menu but are not allowed to open it.
    """
    if normalize_role(role) is None:
        return False
    return any(item.capability == capability for item in resolve_menu(role))


def can_perform(role: Optional[str], action: str) -> bool:
    """Gate for mutating actions on clinical records.

    Admins, doctors and staff may create/update patients and assign
    rooms; patients and unknown roles never may.  Unknown actions are
    refused for everyone.
    """
    return action in CLINICAL_WRITE_ACTIONS and normalize_role(role) in CLINICAL_WRITERS


def capabilities_for(role: Optional[str]) -> dict[str, bool]:
    """Flat capability map for the front-end to toggle buttons with."""
    return {action: can_perform(role, action) for action in sorted(CLINICAL_WRITE_ACTIONS)}
