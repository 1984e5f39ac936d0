"""Integration tests for the file-backed dashboard sources."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.sources import DashboardSourceError, load_dashboard_config, load_records

pytestmark = pytest.mark.integration


def test_load_bundled_sources(sample_xml_path: Path, sample_records_path: Path) -> None:
    """The bundled sample files load without errors."""

    config = load_dashboard_config(sample_xml_path)
    records = load_records(sample_records_path)

    assert config.title == "Financial Overview"
    assert [item.component_name for item in config.items] == [
        "chartGlCode",
        "chartMonthYear",
        "pieCompGroup",
        "chartAccComp",
        "pivotDetail",
    ]
    assert len(records) == 10
    assert records[0].gl_code == "400100"
    assert records[7].amount == "N/A"


def test_sources_default_to_settings_paths(sample_sources) -> None:
    """Without an explicit path the configured settings paths are used."""

    assert load_dashboard_config().title == "Financial Overview"
    assert len(load_records()) == 10


def test_missing_files_raise_source_error(tmp_path: Path) -> None:
    """Unreadable files are reported as source errors."""

    with pytest.raises(DashboardSourceError):
        load_dashboard_config(tmp_path / "missing.xml")
    with pytest.raises(DashboardSourceError):
        load_records(tmp_path / "missing.json")


def test_malformed_xml_raises_source_error(tmp_path: Path) -> None:
    """A document that does not parse is a source error."""

    path = tmp_path / "dashboard.xml"
    path.write_text("<Dashboard><Items>", encoding="utf-8")

    with pytest.raises(DashboardSourceError, match="Failed to parse dashboard XML"):
        load_dashboard_config(path)


def test_malformed_json_raises_source_error(tmp_path: Path) -> None:
    """Invalid JSON is a source error."""

    path = tmp_path / "records.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(DashboardSourceError, match="Malformed records JSON"):
        load_records(path)


def test_non_array_json_yields_no_records(tmp_path: Path) -> None:
    """A JSON document that is not an array is ignored."""

    path = tmp_path / "records.json"
    path.write_text('{"glCode": "400100", "amount": "5"}', encoding="utf-8")

    assert load_records(path) == ()


def test_records_with_missing_fields_load_as_empty_strings(tmp_path: Path) -> None:
    """Missing key fields load as empty strings; non-object entries are skipped."""

    path = tmp_path / "records.json"
    path.write_text('[{"glCode": "400100", "amount": 12.5}, 7, null]', encoding="utf-8")

    (record,) = load_records(path)
    assert record.gl_code == "400100"
    assert record.comp_group_id == ""
    assert record.doc_date == ""
