"""Clinical application for the hospital management backend.

Holds the models, role based access rules, collection helpers, services
and API views behind the dashboard, patient and doctor pages.
"""
