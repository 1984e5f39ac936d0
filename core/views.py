"""Views for the ledger dashboard page and its JSON endpoints."""

from __future__ import annotations

import logging
import math
from typing import Any

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse, QueryDict
from django.shortcuts import render
from django.views.decorators.http import require_GET

from analysis.aggregations import aggregate
from analysis.dto import AbsoluteSlot, Container
from core.charting.assembler import (
    LAYOUT_MODES,
    DashboardPanel,
    aggregates_as_dict,
    assemble_dashboard,
    dashboard_view_as_dict,
)
from core.charting.render import EMPTY_STATE, pivot_as_dict
from core.charting.validator import validate_dashboard_config
from core.parsers.dashboard_xml import dashboard_config_as_dict
from core.sources import DashboardSourceError, load_dashboard_config, load_records

logger = logging.getLogger(__name__)

NO_DASHBOARD_STATE = "No dashboard is available. Check the dashboard XML and records files."


def _configured_container() -> Container:
    """Return the canvas size configured in settings."""

    return Container(width=settings.DASHBOARD_CANVAS_WIDTH, height=settings.DASHBOARD_CANVAS_HEIGHT)


def _flag(query: QueryDict, name: str) -> bool:
    """Parse a boolean query-string flag."""

    return (query.get(name) or "").strip().lower() in {"1", "true", "yes", "on"}


@require_GET
def dashboard(request: HttpRequest) -> HttpResponse:
    """Render the dashboard page with absolute placement inside the canvas.

    Source failures are logged and rendered as an empty state rather than an
    error page.
    """

    container = _configured_container()
    context: dict[str, Any] = {
        "title": "Dashboard",
        "container": container,
        "panels": [],
        "charts": {},
        "warnings": (),
        "empty_state": None,
    }

    try:
        config = load_dashboard_config()
        records = load_records()
    except DashboardSourceError as exc:
        logger.warning("Dashboard sources unavailable: %s", exc)
        context["empty_state"] = NO_DASHBOARD_STATE
        return render(request, "core/dashboard.html", context)

    validation = validate_dashboard_config(config)
    for warning in validation.warnings:
        logger.warning("Dashboard config: %s", warning)

    view = assemble_dashboard(
        config,
        aggregate(records, chronological=_flag(request.GET, "chronological")),
        container=container,
        mode="absolute",
        grid_columns=settings.DASHBOARD_GRID_COLUMNS,
    )
    context["title"] = view.title
    context["warnings"] = validation.warnings + validation.errors
    context["panels"] = [_panel_context(panel) for panel in view.panels]
    context["charts"] = {
        panel.item.config.component_name: panel.item.chart_js
        for panel in view.panels
        if panel.item.chart_js is not None
    }
    if not view.panels:
        context["empty_state"] = EMPTY_STATE
    return render(request, "core/dashboard.html", context)


def _panel_context(panel: DashboardPanel) -> dict[str, Any]:
    """Return template context for one placed panel."""

    slot = panel.slot
    style = ""
    if isinstance(slot, AbsoluteSlot):
        style = (
            f"left: {slot.x:.2f}px; top: {slot.y:.2f}px; "
            f"width: {slot.width:.2f}px; height: {slot.height:.2f}px;"
        )
    item = panel.item
    return {
        "component_name": item.config.component_name,
        "dom_id": f"panel-{item.config.component_name}",
        "title": item.config.title,
        "kind": item.config.kind,
        "style": style,
        "has_chart": item.chart_js is not None,
        "pivot": pivot_as_dict(item.pivot) if item.pivot is not None else None,
        "empty_state": item.empty_state,
    }


@require_GET
def parse_xml_api(request: HttpRequest) -> JsonResponse:
    """Return the parsed dashboard configuration as JSON."""

    try:
        config = load_dashboard_config()
    except DashboardSourceError:
        return JsonResponse({"error": "Failed to parse XML file"}, status=500)
    return JsonResponse(dashboard_config_as_dict(config))


@require_GET
def dashboard_api(request: HttpRequest) -> JsonResponse:
    """Return aggregates, resolved slots and rendered items as JSON.

    Query parameters:
        mode: "absolute" (default) or "proportional".
        width, height: Optional canvas overrides for absolute mode.
        chronological: Sort month buckets into calendar order.
    """

    mode = (request.GET.get("mode") or "absolute").strip().lower()
    if mode not in LAYOUT_MODES:
        return JsonResponse({"error": f"Unsupported layout mode: {mode!r}."}, status=400)

    container = _configured_container()
    try:
        container = Container(
            width=_dimension(request.GET, "width", default=container.width),
            height=_dimension(request.GET, "height", default=container.height),
        )
    except ValueError as exc:
        return JsonResponse({"error": str(exc)}, status=400)

    try:
        config = load_dashboard_config()
        records = load_records()
    except DashboardSourceError:
        return JsonResponse({"error": "Failed to load dashboard sources"}, status=500)

    aggregates = aggregate(records, chronological=_flag(request.GET, "chronological"))
    view = assemble_dashboard(
        config,
        aggregates,
        container=container,
        mode=mode,  # type: ignore[arg-type]
        grid_columns=settings.DASHBOARD_GRID_COLUMNS,
    )
    validation = validate_dashboard_config(config)
    payload = dashboard_view_as_dict(view)
    payload["aggregates"] = aggregates_as_dict(aggregates)
    payload["warnings"] = list(validation.warnings)
    payload["errors"] = list(validation.errors)
    return JsonResponse(payload)


def _dimension(query: QueryDict, name: str, *, default: float) -> float:
    """Parse a positive canvas dimension from the query string."""

    raw = query.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number.") from exc
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be positive.")
    return value
