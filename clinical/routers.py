"""
URL mappings for the hospital management API.

Paths carry no trailing slash, matching the front-end's routes.
"""
from django.urls import path, include

from .auth_views import login_view, logout_view, me_view
from .views import health
from .views.dashboard import dashboard
from .views.directory import doctors, staff
from .views.navigation import navigation
from .views.patients import patients, rooms_available
from .views.portal import patient_portal


urlpatterns = [
    # Prometheus exposes /metrics
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Identity
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/logout', logout_view, name='logout_view'),
    path('api/auth/me', me_view, name='me_view'),
    path('api/navigation', navigation, name='navigation'),
    # Pages
    path('api/dashboard', dashboard, name='dashboard'),
    path('api/patients', patients, name='patients'),
    path('api/rooms/available', rooms_available, name='rooms_available'),
    path('api/doctors', doctors, name='doctors'),
    path('api/staff', staff, name='staff'),
    path('api/patient-portal', patient_portal, name='patient_portal'),
]
