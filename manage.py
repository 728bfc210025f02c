#!/usr/bin/env python
"""
Command line entry point for the hospital management backend.

Points ``DJANGO_SETTINGS_MODULE`` at ``hms.settings`` and hands the
arguments to Django's management utility (``runserver``, ``migrate``,
``populate_data``, ``ensure_demo_users``).
"""
import os
import sys


def main() -> None:
    """Run administrative tasks for the hms project."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hms.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Is it installed and is the virtual "
            "environment active?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
