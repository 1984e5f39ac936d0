"""Schema types for declarative dashboard configuration.

The dashboard is driven by a configuration document (parsed from XML) rather
than hard-coded chart logic. These types are the validated, typed form of that
document: optional attributes get explicit defaults at the parsing boundary so
the rendering layer never sees missing values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from analysis.dto import LayoutGroup
from analysis.series_types import SeriesType

ItemKind = Literal["chart", "pie", "pivot"]

PieType = Literal["pie", "donut"]


@dataclass(frozen=True, slots=True)
class PaneConfig:
    """A chart pane (value axis plus its series).

    Args:
        name: Pane display name.
        axis_y_title: Optional value axis title.
        series: Series types plotted in this pane; never empty.
    """

    name: str
    axis_y_title: str | None = None
    series: tuple[SeriesType, ...] = (SeriesType.bar,)


@dataclass(frozen=True, slots=True)
class DashboardItemConfig:
    """Declarative definition of one dashboard item.

    Args:
        kind: Item kind ("chart", "pie" or "pivot").
        component_name: Unique key joining the item to its layout slot.
        name: Title displayed above the item.
        argument_member: Source field the item is grouped by (charts/pies).
        rotated: Whether a chart swaps its axes (horizontal bars).
        axis_x_title: Optional argument axis title.
        panes: Chart panes; empty for pies and pivots.
        pie_type: Pie variant for pie items.
        row_member: Source field used for pivot rows.
        column_member: Source field used for pivot columns.
    """

    kind: ItemKind
    component_name: str
    name: str
    argument_member: str | None = None
    rotated: bool = False
    axis_x_title: str | None = None
    panes: tuple[PaneConfig, ...] = ()
    pie_type: PieType = "pie"
    row_member: str | None = None
    column_member: str | None = None

    @property
    def title(self) -> str:
        """Return the display title, falling back to the component name."""

        return self.name or self.component_name


@dataclass(frozen=True, slots=True)
class DashboardConfig:
    """A parsed dashboard definition.

    Args:
        title: Dashboard title.
        items: Items in document order.
        layout: Root layout group, or None when the document has no layout tree.
    """

    title: str
    items: tuple[DashboardItemConfig, ...] = ()
    layout: LayoutGroup | None = None

    def item(self, component_name: str) -> DashboardItemConfig | None:
        """Return the first item with the given component name, if any."""

        for item in self.items:
            if item.component_name == component_name:
                return item
        return None
