import pytest
from rest_framework.test import APIClient

from clinical.models import Room, User


@pytest.fixture
def make_user(db):
    def _make(username, role, **extra):
        return User.objects.create_user(username=username, password='P@ssw0rd1', role=role, **extra)
    return _make


@pytest.fixture
def staff_user(make_user):
    return make_user('staff1', 'staff', first_name='Sam', last_name='Lee')


@pytest.fixture
def room(db):
    return Room.objects.create(room_number='101', room_type='General', floor=1)


@pytest.fixture
def client_for():
    def _client(user):
        c = APIClient()
        c.force_authenticate(user=user)
        return c
    return _client


@pytest.fixture
def patient_payload():
    return {
        'patient_id': 'P001',
        'full_name': 'John Doe',
        'age': '45',
        'gender': 'Male',
        'department': 'Cardiology',
        'condition': 'Hypertension',
        'status': 'stable',
        'medications': 'Lisinopril, Aspirin',
        'allergies': '',
    }
