"""Pytest fixtures shared across the dashboard test suite."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@pytest.fixture
def sample_xml_path() -> Path:
    """Return the path of the bundled sample dashboard XML."""

    return DATA_DIR / "dashboard.xml"


@pytest.fixture
def sample_records_path() -> Path:
    """Return the path of the bundled sample records JSON."""

    return DATA_DIR / "records.json"


@pytest.fixture
def sample_sources(settings, sample_xml_path, sample_records_path):
    """Point the dashboard settings at the bundled sample files."""

    settings.DASHBOARD_XML_PATH = sample_xml_path
    settings.DASHBOARD_RECORDS_PATH = sample_records_path
    settings.DASHBOARD_CANVAS_WIDTH = 1200
    settings.DASHBOARD_CANVAS_HEIGHT = 800
    settings.DASHBOARD_GRID_COLUMNS = 2
    return settings


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite is runnable by intent:
    - `unit`: pure, fast tests with no Django request cycle or file I/O.
    - `integration`: tests touching Django views, commands, settings, or files.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
