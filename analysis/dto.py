"""DTO types consumed and returned by the analysis package.

DTOs are plain data containers used to transport records, aggregates and
layout placements to the dashboard. They intentionally avoid any Django
dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Literal, Union


Orientation = Literal["horizontal", "vertical"]


@dataclass(frozen=True, slots=True)
class FinancialRecord:
    """One financial transaction as read from the records file.

    Values are kept as the raw strings found in the source. Numeric and date
    parsing happens in the aggregation layer so that a malformed value only
    affects the aggregates that depend on it.

    Attributes:
        comp_group_id: Company group code (e.g. "ASP").
        doc_date: Document date string.
        gl_code: General-ledger account code.
        acc_comp_id: Accounting company identifier.
        amount: Decimal amount string.
    """

    comp_group_id: str
    doc_date: str
    gl_code: str
    acc_comp_id: str
    amount: str


@dataclass(frozen=True, slots=True)
class SeriesPoint:
    """A single (key, total) entry of an aggregated series."""

    key: str
    total: float


AggregatedSeries = tuple[SeriesPoint, ...]
TimeBucketedTotals = dict[str, dict[str, float]]


@dataclass(frozen=True)
class DashboardAggregates:
    """All chart data sources derived from one record collection.

    Attributes:
        by_gl_code: Totals by GL code, descending by total.
        by_comp_group: Totals by company group, preferred groups first.
        by_acc_comp: Totals by accounting company id, descending by total.
        by_month_year: Year -> month abbreviation -> total.
        raw: The unmodified input records, for detail views.
    """

    by_gl_code: AggregatedSeries = ()
    by_comp_group: AggregatedSeries = ()
    by_acc_comp: AggregatedSeries = ()
    by_month_year: TimeBucketedTotals = field(default_factory=dict)
    raw: tuple[FinancialRecord, ...] = ()


@dataclass(frozen=True)
class PivotTable:
    """Two-dimensional amount totals used by pivot items.

    Attributes:
        row_keys: Row keys in first-encountered order.
        column_keys: Column keys in first-encountered order.
        cells: Mapping of (row key, column key) -> total.
        row_totals: Row key -> total across all columns.
        column_totals: Column key -> total across all rows.
        grand_total: Sum of every valid amount.
    """

    row_keys: tuple[str, ...] = ()
    column_keys: tuple[str, ...] = ()
    cells: dict[tuple[str, str], float] = field(default_factory=dict)
    row_totals: dict[str, float] = field(default_factory=dict)
    column_totals: dict[str, float] = field(default_factory=dict)
    grand_total: float = 0.0

    def cell(self, row_key: str, column_key: str) -> float | None:
        """Return the total for a cell, or None when no record landed there."""

        return self.cells.get((row_key, column_key))


@dataclass(frozen=True, slots=True)
class LayoutItem:
    """Leaf of a layout tree pointing at one dashboard item.

    Attributes:
        component_name: Component name of the dashboard item placed here.
        weight: Relative weight within the parent group; None when missing.
    """

    component_name: str
    weight: float | None = None


@dataclass(frozen=True, slots=True)
class LayoutGroup:
    """Weighted split of its children along one axis.

    Attributes:
        orientation: Raw orientation token; compared case-insensitively.
        weight: Relative weight within the parent group; None when missing.
        children: Ordered child nodes.
    """

    orientation: str = "horizontal"
    weight: float | None = None
    children: tuple["LayoutNode", ...] = ()


LayoutNode = Union[LayoutGroup, LayoutItem]


@dataclass(frozen=True, slots=True)
class Container:
    """Pixel dimensions of the area the root layout group fills."""

    width: float
    height: float


@dataclass(frozen=True, slots=True)
class AbsoluteSlot:
    """Absolute pixel placement for one dashboard item."""

    component_name: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class ProportionalSlot:
    """Flex-style placement for one dashboard item.

    Attributes:
        component_name: Component name of the placed item.
        flex_basis_percent: Extent along `axis` as a percentage of the
            container extent on that axis (0-100).
        axis: Primary axis of the parent group.
    """

    component_name: str
    flex_basis_percent: float
    axis: Orientation


ResolvedSlot = Union[AbsoluteSlot, ProportionalSlot]
