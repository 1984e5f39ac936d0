"""File-backed sources for the dashboard configuration and records.

Both sources are static files configured through Django settings. Loading is
the only I/O in the dashboard pipeline; everything downstream is pure.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from django.conf import settings

from analysis.dto import FinancialRecord
from analysis.records import records_from_payload
from core.charting.schema import DashboardConfig
from core.parsers.dashboard_xml import DashboardConfigError, parse_dashboard_xml

logger = logging.getLogger(__name__)


class DashboardSourceError(Exception):
    """Raised when a dashboard source file cannot be read or decoded."""


def dashboard_xml_path() -> Path:
    """Return the configured dashboard XML path."""

    return Path(settings.DASHBOARD_XML_PATH)


def records_path() -> Path:
    """Return the configured records JSON path."""

    return Path(settings.DASHBOARD_RECORDS_PATH)


def load_dashboard_config(path: Path | None = None) -> DashboardConfig:
    """Read and parse the dashboard XML file.

    Args:
        path: Optional override; defaults to `settings.DASHBOARD_XML_PATH`.

    Returns:
        Parsed DashboardConfig.

    Raises:
        DashboardSourceError: If the file is missing, unreadable, or not a
            valid dashboard document.
    """

    xml_path = path or dashboard_xml_path()
    try:
        raw = xml_path.read_bytes()
    except OSError as exc:
        logger.error("Cannot read dashboard XML %s: %s", xml_path, exc)
        raise DashboardSourceError(f"Cannot read dashboard XML: {xml_path}") from exc

    try:
        config = parse_dashboard_xml(raw)
    except DashboardConfigError as exc:
        logger.error("Error parsing XML %s: %s", xml_path, exc)
        raise DashboardSourceError(f"Failed to parse dashboard XML: {xml_path}") from exc

    logger.info(
        "Loaded dashboard %r from %s (%d items, layout tree: %s)",
        config.title,
        xml_path,
        len(config.items),
        "yes" if config.layout is not None else "no",
    )
    return config


def load_records(path: Path | None = None) -> tuple[FinancialRecord, ...]:
    """Read the records JSON file.

    Args:
        path: Optional override; defaults to `settings.DASHBOARD_RECORDS_PATH`.

    Returns:
        Records in file order. A document that is not a JSON array yields no
        records.

    Raises:
        DashboardSourceError: If the file is missing, unreadable, or not JSON.
    """

    json_path = path or records_path()
    try:
        payload = json.loads(json_path.read_text(encoding="utf-8"))
    except OSError as exc:
        logger.error("Cannot read records %s: %s", json_path, exc)
        raise DashboardSourceError(f"Cannot read records: {json_path}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Malformed records JSON %s: %s", json_path, exc)
        raise DashboardSourceError(f"Malformed records JSON: {json_path}") from exc

    if not isinstance(payload, list):
        logger.warning("Records file %s does not contain a JSON array; ignoring it.", json_path)
    records = records_from_payload(payload)
    logger.info("Loaded %d records from %s", len(records), json_path)
    return records
