"""Join resolved layout slots with rendered dashboard items.

The assembler is the only place where the two analysis components meet: the
layout resolver places component names, the aggregator produces data, and the
component name joins each slot to its item configuration.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Final, Literal

from analysis.dto import AbsoluteSlot, Container, DashboardAggregates, LayoutNode, ResolvedSlot
from analysis.layout import grid_layout, resolve_absolute, resolve_proportional

from .render import RenderedItem, render_item, rendered_item_as_dict
from .schema import DashboardConfig

LayoutMode = Literal["absolute", "proportional"]

LAYOUT_MODES: Final[tuple[LayoutMode, ...]] = ("absolute", "proportional")


@dataclass(frozen=True, slots=True)
class DashboardPanel:
    """One placed, rendered dashboard item."""

    slot: ResolvedSlot
    item: RenderedItem


@dataclass(frozen=True, slots=True)
class DashboardView:
    """The fully assembled dashboard.

    Args:
        title: Dashboard title.
        mode: Layout mode used to resolve slots.
        container: Canvas dimensions (absolute mode).
        slots: Every resolved slot, including lookup misses.
        panels: Slots joined with their rendered items, in slot order.
    """

    title: str
    mode: LayoutMode
    container: Container
    slots: tuple[ResolvedSlot, ...]
    panels: tuple[DashboardPanel, ...]


def dashboard_layout(config: DashboardConfig, *, grid_columns: int = 2) -> LayoutNode:
    """Return the configured layout tree, or a fixed grid over the items."""

    if config.layout is not None:
        return config.layout
    names: list[str] = []
    for item in config.items:
        if item.component_name and item.component_name not in names:
            names.append(item.component_name)
    return grid_layout(names, columns=grid_columns)


def assemble_dashboard(
    config: DashboardConfig,
    aggregates: DashboardAggregates,
    *,
    container: Container,
    mode: LayoutMode = "absolute",
    grid_columns: int = 2,
) -> DashboardView:
    """Resolve the layout and render every placed item.

    Args:
        config: Parsed dashboard configuration.
        aggregates: Aggregated data sources.
        container: Canvas dimensions used by absolute placement.
        mode: "absolute" for pixel boxes, "proportional" for flex-basis shares.
        grid_columns: Columns used when the config has no layout tree.

    Returns:
        DashboardView with one panel per slot whose component name resolves to
        an item. Slots without an item are kept in `slots` but not rendered.

    Raises:
        ValueError: If `mode` is not a supported layout mode.
    """

    if mode not in LAYOUT_MODES:
        raise ValueError(f"Unsupported layout mode: {mode!r}.")

    layout = dashboard_layout(config, grid_columns=grid_columns)
    slots: tuple[ResolvedSlot, ...]
    if mode == "absolute":
        slots = resolve_absolute(layout, container)
    else:
        slots = resolve_proportional(layout)

    rendered: dict[str, RenderedItem] = {}
    panels: list[DashboardPanel] = []
    for slot in slots:
        item = config.item(slot.component_name)
        if item is None:
            continue
        if slot.component_name not in rendered:
            rendered[slot.component_name] = render_item(item, aggregates)
        panels.append(DashboardPanel(slot=slot, item=rendered[slot.component_name]))

    return DashboardView(
        title=config.title,
        mode=mode,
        container=container,
        slots=slots,
        panels=tuple(panels),
    )


def slot_as_dict(slot: ResolvedSlot) -> dict[str, Any]:
    """Convert a slot into a JSON-serializable dictionary with camelCase keys."""

    if isinstance(slot, AbsoluteSlot):
        return {
            "componentName": slot.component_name,
            "x": slot.x,
            "y": slot.y,
            "width": slot.width,
            "height": slot.height,
        }
    return {
        "componentName": slot.component_name,
        "flexBasisPercent": slot.flex_basis_percent,
        "axis": slot.axis,
    }


def aggregates_as_dict(aggregates: DashboardAggregates) -> dict[str, Any]:
    """Convert aggregates into JSON-serializable series (raw records excluded)."""

    def _series(points: tuple) -> list[dict[str, Any]]:
        return [{"key": point.key, "total": point.total} for point in points]

    return {
        "byGlCode": _series(aggregates.by_gl_code),
        "byCompGroup": _series(aggregates.by_comp_group),
        "byAccComp": _series(aggregates.by_acc_comp),
        "byMonthYear": aggregates.by_month_year,
        "recordCount": len(aggregates.raw),
    }


def dashboard_view_as_dict(view: DashboardView) -> dict[str, Any]:
    """Convert a DashboardView into a JSON-serializable dictionary."""

    return {
        "title": view.title,
        "mode": view.mode,
        "container": asdict(view.container),
        "slots": [slot_as_dict(slot) for slot in view.slots],
        "panels": [
            {"slot": slot_as_dict(panel.slot), "item": rendered_item_as_dict(panel.item)}
            for panel in view.panels
        ],
    }
