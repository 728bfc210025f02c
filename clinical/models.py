"""
Database models for the hospital management backend.

The entities mirror the collections the front-end reads: patients,
doctors, staff, rooms and bills, plus the custom user that carries the
role used for every authorization decision.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Custom user model with a single application role.

    The role is issued with the account and drives navigation and write
    capabilities (see :mod:`clinical.services.access`).
    """
    ROLE_ADMIN = 'admin'
    ROLE_DOCTOR = 'doctor'
    ROLE_STAFF = 'staff'
    ROLE_PATIENT = 'patient'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_STAFF, 'Staff'),
        (ROLE_PATIENT, 'Patient'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Room(models.Model):
    """A bed/room that can hold one active patient."""
    room_number = models.CharField(max_length=20, unique=True)
    room_type = models.CharField(max_length=50)
    floor = models.IntegerField(default=1)
    # Occupied iff exactly one non-discharged patient references the room
    is_occupied = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.room_number} - {self.room_type}"


class Doctor(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='doctor_profile')
    employee_id = models.CharField(max_length=20, unique=True)
    specialization = models.CharField(max_length=100)
    department = models.CharField(max_length=100, db_index=True)
    qualification = models.CharField(max_length=255)
    experience_years = models.PositiveIntegerField(default=0)
    rating = models.DecimalField(max_digits=3, decimal_places=1, null=True, blank=True)
    patient_count = models.PositiveIntegerField(default=0)
    phone = models.CharField(max_length=32)
    email = models.EmailField()
    availability = models.CharField(max_length=100, blank=True, null=True)
    schedule = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.user.get_full_name() or self.user.username} ({self.specialization})"


class Staff(models.Model):
    """Support personnel (nurses, receptionists, technicians)."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='staff_profile')
    employee_id = models.CharField(max_length=20, unique=True)
    role = models.CharField(max_length=100, help_text="Job title, e.g. 'Nurse'")
    department = models.CharField(max_length=100, db_index=True)
    phone = models.CharField(max_length=32)
    email = models.EmailField()
    shift = models.CharField(max_length=50, blank=True, null=True)
    salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    joined_date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'staff'

    def __str__(self) -> str:
        return f"{self.user.get_full_name() or self.user.username} ({self.role})"


class Patient(models.Model):
    """A patient record.

    Created through the role gated add action, updated on status change
    and never deleted in the normal flow.  The only deletion path is the
    compensating action of a failed room assignment.
    """
    STATUS_STABLE = 'stable'
    STATUS_CRITICAL = 'critical'
    STATUS_RECOVERING = 'recovering'
    STATUS_DISCHARGED = 'discharged'
    STATUS_CHOICES = [
        (STATUS_STABLE, 'Stable'),
        (STATUS_CRITICAL, 'Critical'),
        (STATUS_RECOVERING, 'Recovering'),
        (STATUS_DISCHARGED, 'Discharged'),
    ]
    GENDER_CHOICES = [
        ('Male', 'Male'),
        ('Female', 'Female'),
        ('Other', 'Other'),
    ]

    patient_id = models.CharField(max_length=20, unique=True)
    full_name = models.CharField(max_length=255)
    age = models.PositiveIntegerField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    blood_type = models.CharField(max_length=5, blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    emergency_contact = models.CharField(max_length=255, blank=True, null=True)
    emergency_phone = models.CharField(max_length=32, blank=True, null=True)
    department = models.CharField(max_length=100, db_index=True)
    condition = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_STABLE, db_index=True)
    admission_date = models.DateTimeField(default=timezone.now, db_index=True)
    discharge_date = models.DateTimeField(blank=True, null=True)
    room = models.ForeignKey(Room, null=True, blank=True, on_delete=models.SET_NULL, related_name='patients')
    assigned_doctor = models.ForeignKey(
        Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='patients'
    )
    medications = models.JSONField(default=list, blank=True)
    allergies = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True, null=True)
    # Portal login for the patient themselves
    user = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='patient_records')
    # Set when a failed room assignment could not be rolled back
    needs_reconciliation = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.patient_id})"


class Bill(models.Model):
    STATUS_CHOICES = [
        ('paid', 'Paid'),
        ('pending', 'Pending'),
        ('overdue', 'Overdue'),
    ]
    bill_number = models.CharField(max_length=30, unique=True)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='bills')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending', db_index=True)
    date = models.DateField(default=timezone.localdate)
    paid_date = models.DateField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.bill_number}: {self.amount} ({self.status})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at']),
            models.Index(fields=['object_type', 'object_id', 'created_at']),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
