"""Weighted layout resolution for dashboard layout trees.

A layout tree is a rooted tree of `LayoutGroup` splits and `LayoutItem` leaves.
Each group divides its primary axis (x for horizontal, y for vertical) between
its children in proportion to their weights; children always receive the full
cross-axis extent. Resolution emits one slot per item and none for groups.

Both resolvers are pure: the same tree (and container) always produces the
same slots, in depth-first declared order.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Final, TypeVar

from .dto import (
    AbsoluteSlot,
    Container,
    LayoutGroup,
    LayoutItem,
    LayoutNode,
    Orientation,
    ProportionalSlot,
)


DEFAULT_TOTAL_WEIGHT: Final[float] = 100.0

SlotT = TypeVar("SlotT", AbsoluteSlot, ProportionalSlot)


def normalize_orientation(value: str | None) -> Orientation:
    """Map an orientation token to "horizontal" or "vertical".

    Comparison is case-insensitive; unknown or missing values are horizontal.
    """

    if value is not None and value.strip().lower() == "vertical":
        return "vertical"
    return "horizontal"


def effective_weight(node: LayoutNode) -> float:
    """Return the non-negative weight used for a node's share.

    Missing, negative and non-finite weights count as zero.
    """

    weight = node.weight
    if weight is None or not math.isfinite(weight) or weight < 0:
        return 0.0
    return float(weight)


def child_shares(group: LayoutGroup) -> tuple[float, ...]:
    """Return each child's fraction (0-1) of the group's primary axis.

    Args:
        group: Layout group whose direct children are weighted.

    Returns:
        One fraction per child, in declared order. When no child carries a
        positive weight, the default total is split evenly across the children.
    """

    weights = [effective_weight(child) for child in group.children]
    total = sum(weights)
    if total <= 0:
        if not weights:
            return ()
        even = DEFAULT_TOTAL_WEIGHT / len(weights)
        weights = [even] * len(weights)
        total = DEFAULT_TOTAL_WEIGHT
    return tuple(weight / total for weight in weights)


def resolve_absolute(root: LayoutNode, container: Container) -> tuple[AbsoluteSlot, ...]:
    """Resolve a layout tree into absolute pixel placements.

    Args:
        root: Root layout node; it fills the whole container.
        container: Pixel dimensions of the dashboard canvas.

    Returns:
        One AbsoluteSlot per layout item, in depth-first declared order.
    """

    slots: list[AbsoluteSlot] = []
    _place_absolute(root, x=0.0, y=0.0, width=float(container.width), height=float(container.height), slots=slots)
    return tuple(slots)


def _place_absolute(
    node: LayoutNode,
    *,
    x: float,
    y: float,
    width: float,
    height: float,
    slots: list[AbsoluteSlot],
) -> None:
    """Emit slots for `node` placed in the box (x, y, width, height)."""

    if isinstance(node, LayoutItem):
        slots.append(AbsoluteSlot(component_name=node.component_name, x=x, y=y, width=width, height=height))
        return

    horizontal = normalize_orientation(node.orientation) == "horizontal"
    offset = 0.0
    for child, share in zip(node.children, child_shares(node)):
        if horizontal:
            extent = share * width
            _place_absolute(child, x=x + offset, y=y, width=extent, height=height, slots=slots)
        else:
            extent = share * height
            _place_absolute(child, x=x, y=y + offset, width=width, height=extent, slots=slots)
        offset += extent


def resolve_proportional(root: LayoutNode) -> tuple[ProportionalSlot, ...]:
    """Resolve a layout tree into flex-basis percentages.

    This is absolute placement in percent units: each item's
    `flex_basis_percent` is its extent along its parent group's primary axis
    divided by the container's extent on that axis, so shares of nested
    same-axis groups multiply. A root that is a bare item fills 100% of a
    horizontal container.

    Args:
        root: Root layout node.

    Returns:
        One ProportionalSlot per layout item, in depth-first declared order.
    """

    if isinstance(root, LayoutItem):
        return (ProportionalSlot(component_name=root.component_name, flex_basis_percent=100.0, axis="horizontal"),)

    slots: list[ProportionalSlot] = []
    _place_proportional(root, width=1.0, height=1.0, slots=slots)
    return tuple(slots)


def _place_proportional(
    group: LayoutGroup,
    *,
    width: float,
    height: float,
    slots: list[ProportionalSlot],
) -> None:
    """Emit proportional slots for the items below `group`.

    `width` and `height` are the group's fractions of the container.
    """

    axis = normalize_orientation(group.orientation)
    for child, share in zip(group.children, child_shares(group)):
        child_width = share * width if axis == "horizontal" else width
        child_height = share * height if axis == "vertical" else height
        if isinstance(child, LayoutItem):
            extent = child_width if axis == "horizontal" else child_height
            slots.append(
                ProportionalSlot(
                    component_name=child.component_name,
                    flex_basis_percent=extent * 100.0,
                    axis=axis,
                )
            )
        else:
            _place_proportional(child, width=child_width, height=child_height, slots=slots)


def find_slot(slots: Iterable[SlotT], component_name: str) -> SlotT | None:
    """Return the first slot whose component name matches exactly.

    Returns:
        The matching slot, or None when the name has no slot.
    """

    for slot in slots:
        if slot.component_name == component_name:
            return slot
    return None


def grid_layout(component_names: Sequence[str], *, columns: int = 2) -> LayoutGroup:
    """Build a fixed-grid layout tree for items without a layout tree.

    Args:
        component_names: Item component names in display order.
        columns: Items per row (>= 1).

    Returns:
        A vertical group of equally weighted horizontal rows. Every item in a
        row has the same weight; the last row may hold fewer items.
    """

    if columns < 1:
        raise ValueError("columns must be >= 1")

    rows: list[LayoutNode] = []
    for start in range(0, len(component_names), columns):
        row_names = component_names[start : start + columns]
        rows.append(
            LayoutGroup(
                orientation="horizontal",
                weight=1.0,
                children=tuple(LayoutItem(component_name=name, weight=1.0) for name in row_names),
            )
        )
    return LayoutGroup(orientation="vertical", weight=None, children=tuple(rows))


def layout_component_names(root: LayoutNode) -> tuple[str, ...]:
    """Return every item component name in the tree, depth-first."""

    if isinstance(root, LayoutItem):
        return (root.component_name,)
    names: list[str] = []
    for child in root.children:
        names.extend(layout_component_names(child))
    return tuple(names)
