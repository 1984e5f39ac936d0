"""Minimal smoke tests for initial scaffolding."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.unit


def test_analysis_package_imports() -> None:
    """Import the analysis package and verify the public entry points exist."""

    from analysis import aggregate, find_slot, resolve_absolute, resolve_proportional

    assert callable(aggregate)
    assert callable(find_slot)
    assert callable(resolve_absolute)
    assert callable(resolve_proportional)


def test_django_project_loads() -> None:
    """Import and initialize Django to verify settings are valid."""

    import os

    import django
    from django.conf import settings

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ledgerDashboard.settings")
    django.setup()
    assert "core.apps.CoreConfig" in settings.INSTALLED_APPS
