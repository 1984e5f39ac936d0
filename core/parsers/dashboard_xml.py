"""Dashboard XML parsing utilities.

The dashboard document looks like::

    <Dashboard>
      <Title Text="..." />
      <Items>
        <Chart ComponentName="..." Name="..." Rotated="true"> ... </Chart>
        <Pie ComponentName="..." PieType="Donut"> ... </Pie>
        <Pivot ComponentName="..."> ... </Pivot>
      </Items>
      <LayoutTree>
        <LayoutGroup Orientation="Vertical">
          <LayoutItem DashboardItem="..." Weight="50" />
          ...
        </LayoutGroup>
      </LayoutTree>
    </Dashboard>

Parsing follows a few guiding rules:

- Structural failures (malformed XML, wrong root element) raise
  `DashboardConfigError`.
- Everything below the root is best-effort: unknown elements are ignored and
  missing or malformed attributes fall back to documented defaults.
"""

from __future__ import annotations

import math
from dataclasses import asdict
from typing import Any

from lxml import etree

from analysis.dto import LayoutGroup, LayoutItem, LayoutNode
from analysis.series_types import series_type_from_token
from core.charting.schema import DashboardConfig, DashboardItemConfig, ItemKind, PaneConfig, PieType


class DashboardConfigError(ValueError):
    """Raised when a dashboard document cannot be parsed at all."""


DEFAULT_DASHBOARD_TITLE = "Dashboard"

_ITEM_KINDS: dict[str, ItemKind] = {
    "Chart": "chart",
    "Pie": "pie",
    "Pivot": "pivot",
}


def parse_dashboard_xml(xml_text: str | bytes) -> DashboardConfig:
    """Parse a dashboard XML document into a DashboardConfig.

    Args:
        xml_text: Raw XML document.

    Returns:
        DashboardConfig with items in document order and the layout tree (or
        None when the document has no `LayoutTree`).

    Raises:
        DashboardConfigError: If the document is not well-formed XML or its
            root element is not `Dashboard`.
    """

    raw = xml_text.encode("utf-8") if isinstance(xml_text, str) else xml_text
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
    try:
        root = etree.fromstring(raw, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise DashboardConfigError(f"Malformed dashboard XML: {exc}") from exc
    if root is None or _local_name(root) != "Dashboard":
        found = _local_name(root) if root is not None else None
        raise DashboardConfigError(f"Expected a <Dashboard> root element, found {found!r}.")

    title_el = _child(root, "Title")
    title = _parse_text(title_el.get("Text")) if title_el is not None else None

    return DashboardConfig(
        title=title or DEFAULT_DASHBOARD_TITLE,
        items=_parse_items(_child(root, "Items")),
        layout=_parse_layout_tree(_child(root, "LayoutTree")),
    )


def dashboard_config_as_dict(config: DashboardConfig) -> dict[str, Any]:
    """Convert a DashboardConfig into a JSON-serializable dictionary."""

    raw = asdict(config)
    for item in raw["items"]:
        for pane in item["panes"]:
            pane["series"] = [str(series_type) for series_type in pane["series"]]
    return raw


def _parse_items(items_el: etree._Element | None) -> tuple[DashboardItemConfig, ...]:
    """Parse the `Items` element into item configs (unknown kinds are skipped)."""

    if items_el is None:
        return ()

    items: list[DashboardItemConfig] = []
    for element in _elements(items_el):
        kind = _ITEM_KINDS.get(_local_name(element))
        if kind is None:
            continue
        items.append(_parse_item(element, kind=kind))
    return tuple(items)


def _parse_item(element: etree._Element, *, kind: ItemKind) -> DashboardItemConfig:
    """Parse a single Chart/Pie/Pivot element."""

    members = _data_members(element)
    component_name = _parse_text(element.get("ComponentName")) or ""
    name = _parse_text(element.get("Name")) or ""

    if kind == "pivot":
        return DashboardItemConfig(
            kind=kind,
            component_name=component_name,
            name=name,
            row_member=_referenced_member(element, "Rows", members),
            column_member=_referenced_member(element, "Columns", members),
        )

    argument_member = _referenced_member(element, "Arguments", members) or _first_dimension_member(element)
    if kind == "pie":
        return DashboardItemConfig(
            kind=kind,
            component_name=component_name,
            name=name,
            argument_member=argument_member,
            pie_type=_parse_pie_type(element.get("PieType")),
        )

    axis_x = _child(element, "AxisX")
    return DashboardItemConfig(
        kind=kind,
        component_name=component_name,
        name=name,
        argument_member=argument_member,
        rotated=_parse_bool(element.get("Rotated")),
        axis_x_title=_parse_text(axis_x.get("Title")) if axis_x is not None else None,
        panes=_parse_panes(_child(element, "Panes")),
    )


def _parse_panes(panes_el: etree._Element | None) -> tuple[PaneConfig, ...]:
    """Parse chart panes; a chart without panes gets one default pane."""

    if panes_el is None:
        return (PaneConfig(name="Pane 1"),)

    panes: list[PaneConfig] = []
    for idx, pane_el in enumerate(_children(panes_el, "Pane"), start=1):
        axis_y = _child(pane_el, "AxisY")
        series_el = _child(pane_el, "Series")
        series = tuple(
            series_type_from_token(el.get("SeriesType"))
            for el in (_elements(series_el) if series_el is not None else ())
        )
        pane_kwargs: dict[str, Any] = {
            "name": _parse_text(pane_el.get("Name")) or f"Pane {idx}",
            "axis_y_title": _parse_text(axis_y.get("Title")) if axis_y is not None else None,
        }
        if series:
            pane_kwargs["series"] = series
        panes.append(PaneConfig(**pane_kwargs))
    return tuple(panes) or (PaneConfig(name="Pane 1"),)


def _parse_layout_tree(tree_el: etree._Element | None) -> LayoutGroup | None:
    """Parse `LayoutTree/LayoutGroup` into a LayoutGroup, or None when absent."""

    if tree_el is None:
        return None
    root_el = _child(tree_el, "LayoutGroup")
    if root_el is None:
        return None
    return _parse_layout_group(root_el)


def _parse_layout_group(element: etree._Element) -> LayoutGroup:
    """Parse a LayoutGroup element and its descendants."""

    children: list[LayoutNode] = []
    for child in _elements(element):
        name = _local_name(child)
        if name == "LayoutGroup":
            children.append(_parse_layout_group(child))
        elif name == "LayoutItem":
            children.append(
                LayoutItem(
                    component_name=_parse_text(child.get("DashboardItem")) or "",
                    weight=_parse_weight(child.get("Weight")),
                )
            )
    return LayoutGroup(
        orientation=_parse_text(element.get("Orientation")) or "horizontal",
        weight=_parse_weight(element.get("Weight")),
        children=tuple(children),
    )


def _data_members(element: etree._Element) -> dict[str, str]:
    """Return DataItems ids mapped to their source field names."""

    data_items = _child(element, "DataItems")
    if data_items is None:
        return {}
    members: dict[str, str] = {}
    for data_item in _elements(data_items):
        default_id = _parse_text(data_item.get("DefaultId"))
        member = _parse_text(data_item.get("DataMember"))
        if default_id and member and default_id not in members:
            members[default_id] = member
    return members


def _referenced_member(element: etree._Element, container: str, members: dict[str, str]) -> str | None:
    """Return the member of the first data item referenced under `container`."""

    container_el = _child(element, container)
    if container_el is None:
        return None
    for ref in _elements(container_el):
        member = members.get(_parse_text(ref.get("DefaultId")) or "")
        if member:
            return member
    return None


def _first_dimension_member(element: etree._Element) -> str | None:
    """Return the first `Dimension` data member, if any."""

    data_items = _child(element, "DataItems")
    if data_items is None:
        return None
    for dimension in _children(data_items, "Dimension"):
        member = _parse_text(dimension.get("DataMember"))
        if member:
            return member
    return None


def _elements(parent: etree._Element) -> list[etree._Element]:
    """Return element children, skipping comments and processing instructions."""

    return [child for child in parent if isinstance(child.tag, str)]


def _children(parent: etree._Element, name: str) -> list[etree._Element]:
    """Return element children with the given local name."""

    return [child for child in _elements(parent) if _local_name(child) == name]


def _child(parent: etree._Element, name: str) -> etree._Element | None:
    """Return the first element child with the given local name."""

    matches = _children(parent, name)
    return matches[0] if matches else None


def _local_name(element: etree._Element) -> str:
    """Return an element's tag without any namespace."""

    return etree.QName(element).localname


def _parse_text(value: str | None) -> str | None:
    """Return a trimmed string, or None when empty."""

    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    return cleaned


def _parse_bool(value: str | None) -> bool:
    """Parse an XML boolean attribute (missing values are False)."""

    if value is None:
        return False
    return value.strip().lower() in {"true", "1", "yes"}


def _parse_weight(value: str | None) -> float | None:
    """Parse a layout weight; unparseable values count as zero."""

    cleaned = _parse_text(value)
    if cleaned is None:
        return None
    try:
        weight = float(cleaned)
    except ValueError:
        return 0.0
    if not math.isfinite(weight):
        return 0.0
    return weight


def _parse_pie_type(value: str | None) -> PieType:
    """Parse the pie variant; anything other than "Donut" is a plain pie."""

    if value is not None and value.strip().lower() == "donut":
        return "donut"
    return "pie"
