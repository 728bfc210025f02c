"""
Management command to populate the database with demo data.
"""
import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.utils import timezone

from clinical.models import Bill, Doctor, Patient, Room, Staff, User

DEPARTMENTS = ['Cardiology', 'Neurology', 'Orthopedics', 'Obstetrics', 'Emergency']


class Command(BaseCommand):
    help = 'Populate database with demo rooms, doctors, staff, patients and bills'

    def add_arguments(self, parser):
        parser.add_argument('--seed', type=int, default=42, help='Random seed for reproducible data')

    def handle(self, *args, **options):
        random.seed(options['seed'])
        self.stdout.write('Creating demo data...')
        rooms = self.create_rooms()
        self.create_doctors()
        self.create_staff()
        patients = self.create_patients(rooms)
        self.create_bills(patients)
        self.stdout.write(self.style.SUCCESS('Demo data created.'))

    def create_rooms(self):
        rooms = []
        for floor in (1, 2, 3):
            for n in range(1, 5):
                room, _ = Room.objects.get_or_create(
                    room_number=f'{floor}{n:02d}',
                    defaults={'room_type': 'ICU' if floor == 3 else random.choice(['General', 'Private']), 'floor': floor},
                )
                rooms.append(room)
        self.stdout.write(f'Rooms: {len(rooms)}')
        return rooms

    def _user(self, username, role, first_name, last_name):
        user, _ = User.objects.get_or_create(
            username=username,
            defaults={
                'email': f'{username}@hospital.example',
                'password': make_password('Demo@12345'),
                'role': role,
                'first_name': first_name,
                'last_name': last_name,
            },
        )
        return user

    def create_doctors(self):
        doctors_data = [
            ('dr_smith', 'John', 'Smith', 'Cardiologist', 'Cardiology', 'MD, FACC'),
            ('dr_patel', 'Priya', 'Patel', 'Neurologist', 'Neurology', 'MD, PhD'),
            ('dr_garcia', 'Luis', 'Garcia', 'Orthopedic Surgeon', 'Orthopedics', 'MS Ortho'),
            ('dr_chen', 'Mei', 'Chen', 'Obstetrician', 'Obstetrics', 'MD, FACOG'),
            ('dr_okafor', 'Ade', 'Okafor', 'Emergency Physician', 'Emergency', 'MD'),
        ]
        for i, (username, first, last, spec, dept, qual) in enumerate(doctors_data, start=1):
            user = self._user(username, 'doctor', first, last)
            Doctor.objects.get_or_create(
                user=user,
                defaults={
                    'employee_id': f'DOC{i:03d}',
                    'specialization': spec,
                    'department': dept,
                    'qualification': qual,
                    'experience_years': random.randint(3, 30),
                    'rating': Decimal(random.randint(35, 50)) / 10,
                    'phone': f'+1-555-01{i:02d}',
                    'email': user.email,
                    'availability': 'Mon-Fri',
                },
            )
            self.stdout.write(f'Doctor: {first} {last} ({dept})')

    def create_staff(self):
        staff_data = [
            ('nurse_jones', 'Amy', 'Jones', 'Nurse', 'Cardiology', 'Day'),
            ('nurse_kim', 'Dae', 'Kim', 'Nurse', 'Emergency', 'Night'),
            ('reception_lee', 'Sam', 'Lee', 'Receptionist', 'Front Desk', 'Day'),
        ]
        for i, (username, first, last, title, dept, shift) in enumerate(staff_data, start=1):
            user = self._user(username, 'staff', first, last)
            Staff.objects.get_or_create(
                user=user,
                defaults={
                    'employee_id': f'STF{i:03d}',
                    'role': title,
                    'department': dept,
                    'phone': f'+1-555-02{i:02d}',
                    'email': user.email,
                    'shift': shift,
                },
            )
            self.stdout.write(f'Staff: {first} {last} ({title})')

    def create_patients(self, rooms):
        names = ['John Doe', 'Jane Roe', 'Alex Kim', 'Maria Silva', 'Omar Haddad', 'Lena Novak', 'Tom Baker', 'Ivy Chen']
        conditions = ['Hypertension', 'Migraine', 'Fracture', 'Pregnancy', 'Chest pain', 'Asthma']
        free_rooms = [r for r in rooms if not r.is_occupied]
        patients = []
        now = timezone.now()
        for i, name in enumerate(names, start=1):
            status = random.choice(['stable', 'critical', 'recovering', 'discharged'])
            defaults = {
                'full_name': name,
                'age': random.randint(18, 85),
                'gender': random.choice(['Male', 'Female']),
                'department': random.choice(DEPARTMENTS),
                'condition': random.choice(conditions),
                'status': status,
                'admission_date': now - timedelta(days=random.randint(0, 30)),
                'medications': random.sample(['Lisinopril', 'Aspirin', 'Metformin', 'Ibuprofen'], 2),
                'allergies': random.sample(['Penicillin', 'Peanuts', 'Latex'], random.randint(0, 2)),
            }
            if status != 'discharged' and free_rooms:
                defaults['room'] = free_rooms.pop(0)
            patient, created = Patient.objects.get_or_create(patient_id=f'P{i:03d}', defaults=defaults)
            if created and patient.room_id:
                Room.objects.filter(pk=patient.room_id).update(is_occupied=True)
            patients.append(patient)
            self.stdout.write(f'Patient: {patient.full_name} ({patient.status})')
        return patients

    def create_bills(self, patients):
        for i, patient in enumerate(patients, start=1):
            Bill.objects.get_or_create(
                bill_number=f'B{i:05d}',
                defaults={
                    'patient': patient,
                    'amount': Decimal(random.randint(100, 5000)),
                    'description': f'{patient.department} treatment',
                    'status': random.choice(['paid', 'pending', 'overdue']),
                },
            )
        self.stdout.write(f'Bills: {len(patients)}')
