"""Aggregation helpers for the dashboard data sources.

This module turns a flat collection of financial records into the grouped
series consumed by charts. Every function is deterministic, performs a single
pass over its input, and never mutates the records it receives.

A record whose amount (or date) cannot be parsed is skipped by the aggregates
that depend on that value only; it always stays in the raw passthrough.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Callable, Final

from .dto import (
    AggregatedSeries,
    DashboardAggregates,
    FinancialRecord,
    PivotTable,
    SeriesPoint,
    TimeBucketedTotals,
)


PREFERRED_COMP_GROUP_ORDER: Final[tuple[str, ...]] = ("ASP", "OTH", "PC", "RMX")

MONTH_ABBREVIATIONS: Final[tuple[str, ...]] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%d.%m.%Y",
    "%b %d, %Y",
    "%B %d, %Y",
)

PIVOT_TOTAL_KEY: Final[str] = "Total"

KeyGetter = Callable[[FinancialRecord], str]


def aggregate(records: Iterable[FinancialRecord], *, chronological: bool = False) -> DashboardAggregates:
    """Build every dashboard data source from a record collection.

    Args:
        records: Financial records in source order.
        chronological: Sort months into calendar order instead of encounter
            order (see `month_year_totals`).

    Returns:
        DashboardAggregates with the three keyed series, the month/year buckets
        and the raw records. An empty input yields empty containers.
    """

    raw = tuple(records)
    by_gl_code = sort_by_total_desc(group_totals(raw, key_getter=lambda record: record.gl_code))
    by_acc_comp = sort_by_total_desc(group_totals(raw, key_getter=lambda record: record.acc_comp_id))
    by_comp_group = order_comp_groups(group_totals(raw, key_getter=lambda record: record.comp_group_id))
    return DashboardAggregates(
        by_gl_code=by_gl_code,
        by_comp_group=by_comp_group,
        by_acc_comp=by_acc_comp,
        by_month_year=month_year_totals(raw, chronological=chronological),
        raw=raw,
    )


def parse_amount(value: object) -> float | None:
    """Parse a record amount into a finite float.

    Args:
        value: Raw amount (usually a decimal string; JSON numbers are accepted).

    Returns:
        The parsed amount, or None when the value is not a finite number.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
    else:
        try:
            parsed = float(str(value).strip())
        except ValueError:
            return None
    if not math.isfinite(parsed):
        return None
    return parsed


def parse_doc_date(value: object) -> datetime | None:
    """Parse a record document date (best-effort).

    Args:
        value: Raw date string.

    Returns:
        A naive datetime, or None when no supported format matches.
    """

    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def group_totals(records: Iterable[FinancialRecord], *, key_getter: KeyGetter) -> dict[str, float]:
    """Sum record amounts per key.

    Args:
        records: Financial records.
        key_getter: Callable returning the grouping key of a record.

    Returns:
        Mapping of key -> total, in first-encountered key order. Records with an
        unparseable amount do not contribute.
    """

    totals: dict[str, float] = defaultdict(float)
    for record in records:
        amount = parse_amount(record.amount)
        if amount is None:
            continue
        totals[key_getter(record)] += amount
    return dict(totals)


def sort_by_total_desc(totals: dict[str, float]) -> AggregatedSeries:
    """Convert totals into a series sorted by descending total.

    Ties keep first-encountered order (the sort is stable).
    """

    ordered = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return tuple(SeriesPoint(key=key, total=total) for key, total in ordered)


def order_comp_groups(
    totals: dict[str, float],
    *,
    preferred: Sequence[str] = PREFERRED_COMP_GROUP_ORDER,
) -> AggregatedSeries:
    """Order company-group totals with the preferred groups first.

    Args:
        totals: Mapping of company group -> total in first-encountered order.
        preferred: Groups that lead the series, in this order, when present.

    Returns:
        Series with the present preferred groups first, followed by every other
        group in first-encountered order.
    """

    leading = [key for key in preferred if key in totals]
    trailing = [key for key in totals if key not in leading]
    return tuple(SeriesPoint(key=key, total=totals[key]) for key in (*leading, *trailing))


def month_year_totals(
    records: Iterable[FinancialRecord],
    *,
    chronological: bool = False,
) -> TimeBucketedTotals:
    """Sum record amounts per (year, month) bucket.

    Args:
        records: Financial records.
        chronological: When True, months inside each year are returned in
            calendar order instead of encounter order.

    Returns:
        Mapping of four-digit year -> three-letter month -> total. Records with
        an unparseable date or amount are skipped.
    """

    buckets: TimeBucketedTotals = {}
    for record in records:
        doc_date = parse_doc_date(record.doc_date)
        if doc_date is None:
            continue
        amount = parse_amount(record.amount)
        if amount is None:
            continue
        year = f"{doc_date.year:04d}"
        month = MONTH_ABBREVIATIONS[doc_date.month - 1]
        months = buckets.setdefault(year, {})
        months[month] = months.get(month, 0.0) + amount

    if chronological:
        return {
            year: {month: months[month] for month in MONTH_ABBREVIATIONS if month in months}
            for year, months in buckets.items()
        }
    return buckets


def record_member(record: FinancialRecord, member: str) -> str | None:
    """Return the value of a record field addressed by its source field name.

    `docDate` resolves to the four-digit year of the parsed date.

    Args:
        record: Financial record.
        member: Source field name (e.g. "glCode").

    Returns:
        The member value, or None when the member is unknown or unparseable.
    """

    if member == "glCode":
        return record.gl_code
    if member == "compGroupId":
        return record.comp_group_id
    if member == "accCompId":
        return record.acc_comp_id
    if member == "docDate":
        parsed = parse_doc_date(record.doc_date)
        return f"{parsed.year:04d}" if parsed is not None else None
    return None


def pivot_totals(
    records: Iterable[FinancialRecord],
    *,
    row_member: str | None,
    column_member: str | None,
) -> PivotTable:
    """Sum record amounts into a row/column pivot.

    Args:
        records: Financial records.
        row_member: Source field name used for rows; None collapses rows.
        column_member: Source field name used for columns; None collapses columns.

    Returns:
        PivotTable with keys in first-encountered order. Records with an
        unparseable amount, or an unresolvable member value, are skipped.
    """

    cells: dict[tuple[str, str], float] = defaultdict(float)
    row_totals: dict[str, float] = defaultdict(float)
    column_totals: dict[str, float] = defaultdict(float)
    grand_total = 0.0

    for record in records:
        amount = parse_amount(record.amount)
        if amount is None:
            continue
        row_key = record_member(record, row_member) if row_member else PIVOT_TOTAL_KEY
        column_key = record_member(record, column_member) if column_member else PIVOT_TOTAL_KEY
        if row_key is None or column_key is None:
            continue
        cells[(row_key, column_key)] += amount
        row_totals[row_key] += amount
        column_totals[column_key] += amount
        grand_total += amount

    return PivotTable(
        row_keys=tuple(row_totals),
        column_keys=tuple(column_totals),
        cells=dict(cells),
        row_totals=dict(row_totals),
        column_totals=dict(column_totals),
        grand_total=grand_total,
    )
