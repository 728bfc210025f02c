"""
Django admin registrations for the clinical models.

Lets superusers inspect and correct data at ``/admin/``, in particular
patients flagged ``needs_reconciliation`` after a failed room assignment.
"""

from django.contrib import admin

from .models import AuditEvent, Bill, Doctor, Patient, Room, Staff, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'first_name', 'last_name', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'first_name', 'last_name')


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ('room_number', 'room_type', 'floor', 'is_occupied')
    list_filter = ('is_occupied', 'room_type', 'floor')
    search_fields = ('room_number',)


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('employee_id', 'user', 'specialization', 'department', 'experience_years', 'rating')
    list_filter = ('department', 'specialization')
    search_fields = ('employee_id', 'user__username', 'user__first_name', 'user__last_name', 'specialization')


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ('employee_id', 'user', 'role', 'department', 'shift')
    list_filter = ('department', 'role')
    search_fields = ('employee_id', 'user__username', 'user__first_name', 'user__last_name')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('patient_id', 'full_name', 'department', 'status', 'room', 'admission_date', 'needs_reconciliation')
    list_filter = ('status', 'department', 'needs_reconciliation')
    search_fields = ('patient_id', 'full_name', 'condition')


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('bill_number', 'patient', 'amount', 'status', 'date', 'paid_date')
    list_filter = ('status',)
    search_fields = ('bill_number', 'patient__full_name', 'patient__patient_id')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__username')
