"""
Root pytest configuration for the Django project.

This module configures pytest-django. Project-wide fixtures live in
app/conftest.py; app-specific fixtures in each app's tests/conftest.py.
"""

import os

import django

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()
