import pytest

from clinical.services import access
from clinical.services.access import can_perform, can_view, capabilities_for, resolve_menu


def routes(role):
    return [item.route for item in resolve_menu(role)]


def test_menu_sizes_per_role():
    assert len(resolve_menu('doctor')) == 3
    assert len(resolve_menu('staff')) == 3
    assert len(resolve_menu('admin')) == 5
    assert len(resolve_menu('patient')) == 1


def test_patient_only_sees_portal():
    assert routes('patient') == ['/patient-portal']


def test_admin_items_follow_base_sequence_in_order():
    assert routes('admin') == ['/dashboard', '/patients', '/doctors', '/staff', '/admin']
    assert routes('doctor') == ['/dashboard', '/patients', '/doctors']
    assert [i.label for i in resolve_menu('admin')][-2:] == ['Staff', 'Admin Panel']


@pytest.mark.parametrize('role', [None, '', 'nurse', 'superuser', 42])
def test_unknown_role_gets_base_menu_without_admin_items(role):
    assert routes(role) == ['/dashboard', '/patients', '/doctors']


def test_role_is_normalized():
    assert routes(' Admin ') == routes('admin')


def test_can_perform_create_patient():
    assert can_perform('patient', 'createPatient') is False
    assert can_perform('staff', 'createPatient') is True
    assert can_perform('doctor', 'createPatient') is True
    assert can_perform('admin', 'createPatient') is True
    assert can_perform(None, 'createPatient') is False
    assert can_perform('nurse', 'createPatient') is False


def test_can_perform_refuses_unknown_actions():
    assert can_perform('admin', 'dropDatabase') is False


def test_patient_never_writes_clinical_records():
    assert not any(can_perform('patient', a) for a in access.CLINICAL_WRITE_ACTIONS)


def test_can_view_follows_menu():
    assert can_view('admin', access.VIEW_STAFF)
    assert not can_view('doctor', access.VIEW_STAFF)
    assert can_view('patient', access.VIEW_PORTAL)
    assert not can_view('patient', access.VIEW_PATIENTS)
    # unknown roles see the base menu but may not open it
    assert not can_view('nurse', access.VIEW_DASHBOARD)


def test_resolver_holds_no_state_between_identities():
    assert len(resolve_menu('admin')) == 5
    assert len(resolve_menu('patient')) == 1
    assert len(resolve_menu('admin')) == 5
    menu = resolve_menu('doctor')
    menu.append(access.MenuItem('x', '/x', 'x'))
    assert len(resolve_menu('doctor')) == 3


def test_capabilities_map():
    assert capabilities_for('patient') == {'assignRoom': False, 'createPatient': False, 'updatePatient': False}
    assert all(capabilities_for('staff').values())
