"""
Integration tests for the hospital management API.

Cover role based navigation, page access per role, the dashboard
aggregates, patient search/creation and sign-in/sign-out, using DRF's
APIClient inside APITestCase.

To run the tests:

```
pytest -q clinical/tests
```
"""
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import Bill, Doctor, Patient, Room, Staff, User
from .stores import FailingStore


class HospitalAPITests(APITestCase):
    def setUp(self) -> None:
        """Users for every role, a couple of rooms, doctors, patients and bills."""
        self.admin = User.objects.create_user(username='admin1', password='P@ssw0rd1', role='admin')
        self.doctor_user = User.objects.create_user(
            username='doc1', password='P@ssw0rd1', role='doctor', first_name='Gregory', last_name='House',
        )
        self.doctor_user2 = User.objects.create_user(
            username='doc2', password='P@ssw0rd1', role='doctor', first_name='Meredith', last_name='Grey',
        )
        self.staff_user = User.objects.create_user(
            username='staff1', password='P@ssw0rd1', role='staff', first_name='Amy', last_name='Jones',
        )
        self.patient_user = User.objects.create_user(username='pat1', password='P@ssw0rd1', role='patient')

        self.doctor = Doctor.objects.create(
            user=self.doctor_user, employee_id='DOC001', specialization='Diagnostics', department='Internal Medicine',
            qualification='MD', experience_years=20, phone='1', email='house@example.com',
        )
        Doctor.objects.create(
            user=self.doctor_user2, employee_id='DOC002', specialization='Surgeon', department='Surgery',
            qualification='MD', experience_years=10, phone='2', email='grey@example.com',
        )
        Staff.objects.create(
            user=self.staff_user, employee_id='STF001', role='Nurse', department='Cardiology',
            phone='3', email='amy@example.com',
        )

        self.room = Room.objects.create(room_number='101', room_type='General', floor=1)
        self.busy_room = Room.objects.create(room_number='102', room_type='ICU', floor=1, is_occupied=True)

        now = timezone.now()
        self.p1 = Patient.objects.create(
            patient_id='P001', full_name='John Doe', age=45, gender='Male', department='Cardiology',
            condition='Hypertension', admission_date=now - timedelta(days=3), user=self.patient_user,
        )
        self.p2 = Patient.objects.create(
            patient_id='P002', full_name='Jane Roe', age=30, gender='Female', department='Cardiology',
            condition='Arrhythmia', admission_date=now - timedelta(days=1), room=self.busy_room,
        )
        self.p3 = Patient.objects.create(
            patient_id='P003', full_name='Bob Stone', age=60, gender='Male', department='Neurology',
            condition='Migraine', admission_date=now - timedelta(days=2),
        )
        Bill.objects.create(bill_number='B1', patient=self.p1, amount=Decimal('100.00'), description='x', status='paid')
        Bill.objects.create(bill_number='B2', patient=self.p1, amount=Decimal('50.00'), description='y')
        Bill.objects.create(bill_number='B3', patient=self.p3, amount=Decimal('25.50'), description='z')

    def authenticate(self, user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    # -- navigation ------------------------------------------------------

    def test_navigation_per_role(self):
        expected = {self.admin: 5, self.doctor_user: 3, self.staff_user: 3, self.patient_user: 1}
        for user, size in expected.items():
            response = self.authenticate(user).get('/api/navigation')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(len(response.data['menu']), size)
            self.assertEqual(response.data['role'], user.role)

    def test_navigation_capabilities(self):
        response = self.authenticate(self.patient_user).get('/api/navigation')
        self.assertEqual(response.data['menu'][0]['route'], '/patient-portal')
        self.assertFalse(response.data['capabilities']['createPatient'])
        response = self.authenticate(self.staff_user).get('/api/navigation')
        self.assertTrue(response.data['capabilities']['createPatient'])

    def test_navigation_requires_login(self):
        response = APIClient().get('/api/navigation')
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
        self.assertFalse(response.data['ok'])

    # -- dashboard -------------------------------------------------------

    def test_dashboard_stats(self):
        response = self.authenticate(self.doctor_user).get('/api/dashboard')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stats = response.data['stats']
        self.assertEqual(stats['totalPatients'], 3)
        self.assertEqual(stats['totalDoctors'], 2)
        self.assertEqual(stats['totalStaff'], 1)
        self.assertEqual(stats['totalRevenue'], Decimal('175.50'))

    def test_dashboard_recent_patients_and_departments(self):
        response = self.authenticate(self.admin).get('/api/dashboard')
        recent = [p['patient_id'] for p in response.data['recentPatients']]
        self.assertEqual(recent, ['P002', 'P003', 'P001'])
        departments = {d['name']: d['count'] for d in response.data['departments']}
        self.assertEqual(departments, {'Cardiology': 2, 'Neurology': 1})

    def test_dashboard_recent_limit(self):
        with self.settings(DASHBOARD_RECENT_LIMIT=2):
            response = self.authenticate(self.admin).get('/api/dashboard')
        self.assertEqual(len(response.data['recentPatients']), 2)

    def test_dashboard_falls_back_when_a_fetch_fails(self):
        with mock.patch('clinical.views.dashboard.Store', lambda: FailingStore(fail_select={'bills', 'staff'})):
            response = self.authenticate(self.admin).get('/api/dashboard')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stats']['totalRevenue'], 0)
        self.assertEqual(response.data['stats']['totalStaff'], 0)
        self.assertEqual(response.data['stats']['totalPatients'], 3)

    def test_patient_cannot_open_dashboard(self):
        response = self.authenticate(self.patient_user).get('/api/dashboard')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_role_cannot_open_dashboard(self):
        odd = User.objects.create_user(username='odd', password='P@ssw0rd1', role='nurse')
        response = self.authenticate(odd).get('/api/dashboard')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    # -- patients --------------------------------------------------------

    def test_list_patients_newest_first(self):
        response = self.authenticate(self.staff_user).get('/api/patients')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['patient_id'] for p in response.data['data']], ['P002', 'P003', 'P001'])
        self.assertEqual(response.data['data'][0]['room__room_number'], '102')

    def test_search_patients(self):
        client = self.authenticate(self.staff_user)
        response = client.get('/api/patients', {'q': 'john'})
        self.assertEqual([p['full_name'] for p in response.data['data']], ['John Doe'])
        response = client.get('/api/patients', {'q': 'neuro'})
        self.assertEqual([p['patient_id'] for p in response.data['data']], ['P003'])
        response = client.get('/api/patients', {'q': 'xyz'})
        self.assertEqual(response.data['data'], [])
        self.assertEqual(response.data['total'], 0)
        response = client.get('/api/patients', {'q': 'doe '})
        self.assertEqual(response.data['data'], [])
        response = client.get('/api/patients', {'q': '   '})
        self.assertEqual(response.data['total'], 3)

    def test_patient_cannot_list_patients(self):
        response = self.authenticate(self.patient_user).get('/api/patients')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_patient_with_room(self):
        payload = {
            'patient_id': 'P010', 'full_name': 'Ann Lee', 'age': '52', 'gender': 'Female',
            'department': 'Neurology', 'condition': 'Stroke', 'status': 'critical',
            'room_id': str(self.room.id), 'medications': 'Aspirin', 'allergies': 'Penicillin, Peanuts',
        }
        response = self.authenticate(self.doctor_user).post('/api/patients', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['room_id'], self.room.id)
        self.room.refresh_from_db()
        self.assertTrue(self.room.is_occupied)
        created = Patient.objects.get(patient_id='P010')
        self.assertEqual(created.allergies, ['Penicillin', 'Peanuts'])

    def test_create_patient_invalid_age(self):
        payload = {'full_name': 'Ann Lee', 'age': 'abc', 'gender': 'Female', 'department': 'Neurology',
                   'condition': 'Stroke'}
        response = self.authenticate(self.staff_user).post('/api/patients', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'invalid')
        self.assertIn('age', response.data['error']['message'])
        self.assertFalse(Patient.objects.filter(full_name='Ann Lee').exists())

    def test_create_patient_unknown_doctor(self):
        payload = {'full_name': 'Ann Lee', 'age': 52, 'gender': 'Female', 'department': 'Neurology',
                   'condition': 'Stroke', 'assigned_doctor_id': 9999}
        response = self.authenticate(self.staff_user).post('/api/patients', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('assigned_doctor_id', response.data['error']['message'])
        self.assertFalse(Patient.objects.filter(full_name='Ann Lee').exists())

    def test_create_patient_room_failure_is_reported(self):
        payload = {'patient_id': 'P011', 'full_name': 'Ann Lee', 'age': 52, 'gender': 'Female',
                   'department': 'Neurology', 'condition': 'Stroke', 'room_id': self.room.id}
        with mock.patch('clinical.views.patients.Store', lambda: FailingStore(fail_update={'rooms'})):
            response = self.authenticate(self.staff_user).post('/api/patients', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        error = response.data['error']
        self.assertEqual(error['code'], 'partial_write')
        self.assertTrue(error['compensated'])
        self.assertEqual(error['roomId'], self.room.id)
        self.assertFalse(Patient.objects.filter(patient_id='P011').exists())
        self.room.refresh_from_db()
        self.assertFalse(self.room.is_occupied)

    def test_available_rooms(self):
        response = self.authenticate(self.staff_user).get('/api/rooms/available')
        self.assertEqual([r['room_number'] for r in response.data['data']], ['101'])

    # -- directories -----------------------------------------------------

    def test_doctor_directory_search(self):
        client = self.authenticate(self.staff_user)
        response = client.get('/api/doctors')
        self.assertEqual(response.data['total'], 2)
        names = {d['name'] for d in response.data['data']}
        self.assertEqual(names, {'Gregory House', 'Meredith Grey'})
        response = client.get('/api/doctors', {'q': 'SURG'})
        self.assertEqual([d['name'] for d in response.data['data']], ['Meredith Grey'])
        response = client.get('/api/doctors', {'q': 'house'})
        self.assertEqual([d['employee_id'] for d in response.data['data']], ['DOC001'])

    def test_staff_directory_is_admin_only(self):
        response = self.authenticate(self.admin).get('/api/staff')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'][0]['name'], 'Amy Jones')
        response = self.authenticate(self.doctor_user).get('/api/staff')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    # -- patient portal --------------------------------------------------

    def test_patient_portal_shows_only_own_records(self):
        response = self.authenticate(self.patient_user).get('/api/patient-portal')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['patient_id'] for r in response.data['records']], ['P001'])
        self.assertEqual(len(response.data['bills']), 2)
        self.assertEqual(response.data['outstanding'], Decimal('50.00'))

    def test_staff_has_no_portal(self):
        response = self.authenticate(self.staff_user).get('/api/patient-portal')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    # -- identity --------------------------------------------------------

    def test_login_me_logout(self):
        client = APIClient()
        response = client.post(reverse('login_view'), {'username': 'staff1', 'password': 'P@ssw0rd1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'staff')
        self.assertTrue(response.data['jwt_access'])
        client.credentials(HTTP_AUTHORIZATION=f"Token {response.data['token']}")

        me = client.get(reverse('me_view'))
        self.assertEqual(me.data['userId'], self.staff_user.id)
        self.assertEqual(me.data['role'], 'staff')
        self.assertEqual(me.data['name'], 'Amy Jones')

        out = client.post(reverse('logout_view'), {}, format='json')
        self.assertEqual(out.status_code, status.HTTP_204_NO_CONTENT)
        again = client.get(reverse('me_view'))
        self.assertEqual(again.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_ignores_role_in_body(self):
        response = APIClient().post(
            reverse('login_view'), {'username': 'pat1', 'password': 'P@ssw0rd1', 'role': 'admin'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'patient')

    def test_login_with_bad_password(self):
        response = APIClient().post(reverse('login_view'), {'username': 'pat1', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['ok'])

    # -- health ----------------------------------------------------------

    def test_healthz(self):
        response = APIClient().get('/healthz')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'ok': True, 'db': True})
