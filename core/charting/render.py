"""Rendering of dashboard items into Chart.js payloads and pivot tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, TypedDict

from analysis.aggregations import pivot_totals
from analysis.dto import AggregatedSeries, DashboardAggregates, PivotTable, SeriesPoint, TimeBucketedTotals
from analysis.series_types import AREA_LIKE, LINE_LIKE, STACKED, SeriesType

from .schema import DashboardItemConfig, PaneConfig


EMPTY_STATE: Final[str] = "No data available for chart"

DATA_MEMBER_SOURCES: Final[dict[str, str]] = {
    "glCode": "by_gl_code",
    "compGroupId": "by_comp_group",
    "accCompId": "by_acc_comp",
    "docDate": "by_month_year",
}

PALETTE: Final[tuple[str, ...]] = (
    "#3366CC",
    "#DC3912",
    "#FF9900",
    "#109618",
    "#990099",
    "#0099C6",
    "#DD4477",
    "#66AA00",
    "#B82E2E",
    "#316395",
    "#994499",
    "#22AA99",
)


class ChartDataset(TypedDict, total=False):
    """A Chart.js dataset payload for a dashboard chart."""

    type: str
    label: str
    seriesType: str
    data: list[float]
    borderColor: str
    backgroundColor: str | list[str]
    borderWidth: int
    pointRadius: int
    showLine: bool
    fill: bool
    stepped: bool
    tension: float
    xAxisID: str
    yAxisID: str


class ChartData(TypedDict):
    """Labels and datasets for a chart panel."""

    labels: list[str]
    datasets: list[ChartDataset]


class ChartPayload(TypedDict):
    """The full Chart.js configuration (type, data, options) for a panel."""

    type: str
    data: ChartData
    options: dict[str, Any]


@dataclass(frozen=True, slots=True)
class RenderedItem:
    """A rendered dashboard item.

    Exactly one of `chart_js`, `pivot` or `empty_state` describes the content.
    """

    config: DashboardItemConfig
    chart_js: ChartPayload | None = None
    pivot: PivotTable | None = None
    empty_state: str | None = None


def series_for_member(aggregates: DashboardAggregates, member: str | None) -> AggregatedSeries | None:
    """Return the aggregated series bound to a source member.

    Args:
        aggregates: Aggregated data sources.
        member: Source field name the item is grouped by.

    Returns:
        The bound series (month/year buckets flattened to "Mon YYYY" keys), or
        None when the member has no data source.
    """

    source = DATA_MEMBER_SOURCES.get(member or "")
    if source is None:
        return None
    if source == "by_month_year":
        return flatten_month_year(aggregates.by_month_year)
    return getattr(aggregates, source)


def flatten_month_year(buckets: TimeBucketedTotals) -> AggregatedSeries:
    """Flatten year/month buckets into "Mon YYYY" points, preserving order."""

    return tuple(
        SeriesPoint(key=f"{month} {year}", total=total)
        for year, months in buckets.items()
        for month, total in months.items()
    )


def render_item(item: DashboardItemConfig, aggregates: DashboardAggregates) -> RenderedItem:
    """Render a single dashboard item from the aggregated data sources.

    Args:
        item: Item configuration.
        aggregates: Aggregated data sources for the current records.

    Returns:
        RenderedItem with a Chart.js payload, a pivot table, or an empty state.
    """

    if item.kind == "pivot":
        pivot = pivot_totals(aggregates.raw, row_member=item.row_member, column_member=item.column_member)
        if not pivot.row_keys:
            return RenderedItem(config=item, empty_state=EMPTY_STATE)
        return RenderedItem(config=item, pivot=pivot)

    series = series_for_member(aggregates, item.argument_member)
    if not series:
        return RenderedItem(config=item, empty_state=EMPTY_STATE)

    if item.kind == "pie":
        return RenderedItem(config=item, chart_js=_pie_payload(item, series))
    return RenderedItem(config=item, chart_js=_chart_payload(item, series))


def _pie_payload(item: DashboardItemConfig, series: AggregatedSeries) -> ChartPayload:
    """Build a pie/doughnut payload with one slice per series point."""

    colors = [PALETTE[idx % len(PALETTE)] for idx in range(len(series))]
    dataset: ChartDataset = {
        "label": item.title,
        "data": [point.total for point in series],
        "backgroundColor": colors,
        "borderWidth": 1,
    }
    return {
        "type": "doughnut" if item.pie_type == "donut" else "pie",
        "data": {"labels": [point.key for point in series], "datasets": [dataset]},
        "options": {
            "responsive": True,
            "maintainAspectRatio": False,
            "plugins": {
                "title": {"display": True, "text": item.title},
                "legend": {"display": True, "position": "bottom"},
            },
        },
    }


def _chart_payload(item: DashboardItemConfig, series: AggregatedSeries) -> ChartPayload:
    """Build a (possibly mixed) bar/line payload, one dataset per pane series."""

    argument_axis = "y" if item.rotated else "x"
    value_axis = "x" if item.rotated else "y"
    labels = [point.key for point in series]
    values = [point.total for point in series]

    datasets: list[ChartDataset] = []
    scales: dict[str, Any] = {
        argument_axis: {
            "title": {"display": bool(item.axis_x_title), "text": item.axis_x_title or ""},
        },
    }
    panes = item.panes or (PaneConfig(name="Pane 1"),)
    stacked = False
    for pane_idx, pane in enumerate(panes):
        axis_id = value_axis if pane_idx == 0 else f"{value_axis}{pane_idx}"
        scales[axis_id] = _value_scale(pane, rotated=item.rotated, pane_idx=pane_idx)
        for series_type in pane.series:
            stacked = stacked or series_type in STACKED
            color = PALETTE[len(datasets) % len(PALETTE)]
            dataset = _dataset(
                label=_dataset_label(item, panes=panes, pane=pane, series_type=series_type),
                series_type=series_type,
                data=values,
                color=color,
            )
            dataset["xAxisID" if item.rotated else "yAxisID"] = axis_id
            datasets.append(dataset)

    if stacked:
        for scale in scales.values():
            scale["stacked"] = True

    options: dict[str, Any] = {
        "responsive": True,
        "maintainAspectRatio": False,
        "scales": scales,
        "plugins": {
            "title": {"display": True, "text": item.title},
            "legend": {"display": True, "position": "bottom"},
        },
    }
    if item.rotated:
        options["indexAxis"] = "y"

    base_type = "line" if all(ds["type"] == "line" for ds in datasets) else "bar"
    return {"type": base_type, "data": {"labels": labels, "datasets": datasets}, "options": options}


def _value_scale(pane: PaneConfig, *, rotated: bool, pane_idx: int) -> dict[str, Any]:
    """Return the Chart.js scale options for a pane's value axis."""

    scale: dict[str, Any] = {
        "beginAtZero": True,
        "title": {"display": bool(pane.axis_y_title), "text": pane.axis_y_title or ""},
    }
    if pane_idx > 0:
        scale["position"] = "top" if rotated else "right"
        scale["grid"] = {"drawOnChartArea": False}
    return scale


def _dataset_label(
    item: DashboardItemConfig,
    *,
    panes: tuple[PaneConfig, ...],
    pane: PaneConfig,
    series_type: SeriesType,
) -> str:
    """Return a legend label; multi-pane or multi-series charts get qualifiers."""

    if len(panes) == 1 and len(pane.series) == 1:
        return item.title
    return f"{pane.name} ({series_type})"


def _dataset(*, label: str, series_type: SeriesType, data: list[float], color: str) -> ChartDataset:
    """Build a Chart.js dataset dict with consistent styling."""

    if series_type in LINE_LIKE or series_type in AREA_LIKE or series_type == SeriesType.point:
        dataset: ChartDataset = {
            "type": "line",
            "label": label,
            "seriesType": str(series_type),
            "data": data,
            "borderColor": color,
            "backgroundColor": color,
            "borderWidth": 2,
            "pointRadius": 3,
            "tension": 0.0,
        }
        if series_type == SeriesType.point:
            dataset["showLine"] = False
            dataset["pointRadius"] = 5
        if series_type in AREA_LIKE:
            dataset["fill"] = True
        if series_type in (SeriesType.spline, SeriesType.spline_area):
            dataset["tension"] = 0.4
        if series_type in (SeriesType.step_line, SeriesType.step_area):
            dataset["stepped"] = True
        return dataset

    return {
        "type": "bar",
        "label": label,
        "seriesType": str(series_type),
        "data": data,
        "borderColor": color,
        "backgroundColor": color,
        "borderWidth": 1,
    }


def rendered_item_as_dict(rendered: RenderedItem) -> dict[str, Any]:
    """Convert a RenderedItem into a JSON-serializable dictionary."""

    payload: dict[str, Any] = {
        "componentName": rendered.config.component_name,
        "kind": rendered.config.kind,
        "title": rendered.config.title,
        "chart": rendered.chart_js,
        "pivot": None,
        "emptyState": rendered.empty_state,
    }
    if rendered.pivot is not None:
        payload["pivot"] = pivot_as_dict(rendered.pivot)
    return payload


def pivot_as_dict(pivot: PivotTable) -> dict[str, Any]:
    """Convert a PivotTable into rows suitable for JSON or template rendering."""

    return {
        "columns": list(pivot.column_keys),
        "rows": [
            {
                "key": row_key,
                "cells": [pivot.cell(row_key, column_key) for column_key in pivot.column_keys],
                "total": pivot.row_totals[row_key],
            }
            for row_key in pivot.row_keys
        ],
        "columnTotals": [pivot.column_totals[column_key] for column_key in pivot.column_keys],
        "grandTotal": pivot.grand_total,
    }
