"""Integration tests for the dashboard_summary management command."""

from __future__ import annotations

import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

pytestmark = pytest.mark.integration


def test_dashboard_summary_prints_series_and_slots(sample_sources) -> None:
    """The text summary lists every series and every resolved slot."""

    out = StringIO()
    call_command("dashboard_summary", stdout=out, stderr=StringIO())
    output = out.getvalue()

    assert "Dashboard: Financial Overview (10 records)" in output
    assert "By GL code:" in output
    assert "400200" in output
    assert "Jan 2023" in output
    assert "Slots (absolute):" in output
    assert "pieCompGroup         x=720.0 y=0.0 w=480.0 h=400.0" in output


def test_dashboard_summary_json_output(sample_sources) -> None:
    """--json emits the same document as the dashboard API."""

    out = StringIO()
    call_command("dashboard_summary", "--json", "--mode", "proportional", stdout=out)
    payload = json.loads(out.getvalue())

    assert payload["mode"] == "proportional"
    assert payload["aggregates"]["recordCount"] == 10
    assert [slot["componentName"] for slot in payload["slots"]] == [
        "chartGlCode",
        "pieCompGroup",
        "chartMonthYear",
        "chartAccComp",
        "pivotDetail",
    ]


def test_dashboard_summary_chronological_months(sample_sources, tmp_path) -> None:
    """--chronological sorts month buckets into calendar order."""

    records = tmp_path / "records.json"
    records.write_text(
        json.dumps(
            [
                {"glCode": "1", "docDate": "2023-03-01", "amount": "1"},
                {"glCode": "1", "docDate": "2023-01-01", "amount": "1"},
            ]
        ),
        encoding="utf-8",
    )

    out = StringIO()
    call_command("dashboard_summary", "--json", "--chronological", "--records", str(records), stdout=out)
    months = json.loads(out.getvalue())["aggregates"]["byMonthYear"]["2023"]

    assert list(months) == ["Jan", "Mar"]


def test_dashboard_summary_reports_missing_sources(sample_sources, tmp_path) -> None:
    """Unreadable sources fail the command."""

    with pytest.raises(CommandError, match="Cannot read dashboard XML"):
        call_command("dashboard_summary", "--xml", str(tmp_path / "missing.xml"), stdout=StringIO())


@pytest.mark.parametrize(
    "args",
    [
        ("--width", "-10"),
        ("--width", "0"),
        ("--height", "0"),
    ],
)
def test_dashboard_summary_rejects_non_positive_canvas(sample_sources, args: tuple[str, str]) -> None:
    """Canvas dimensions must be positive; zero is not treated as "use the default"."""

    with pytest.raises(CommandError, match="must be positive"):
        call_command("dashboard_summary", "--json", *args, stdout=StringIO())


def test_dashboard_summary_canvas_override(sample_sources) -> None:
    """Explicit canvas dimensions replace the configured ones."""

    out = StringIO()
    call_command("dashboard_summary", "--json", "--width", "600", "--height", "300", stdout=out)

    assert json.loads(out.getvalue())["container"] == {"width": 600, "height": 300}
