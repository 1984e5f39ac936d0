"""Tests for weighted layout resolution."""

from __future__ import annotations

import pytest

from analysis.dto import AbsoluteSlot, Container, LayoutGroup, LayoutItem, ProportionalSlot
from analysis.layout import (
    child_shares,
    find_slot,
    grid_layout,
    layout_component_names,
    normalize_orientation,
    resolve_absolute,
    resolve_proportional,
)

pytestmark = pytest.mark.unit


def _box(slot: AbsoluteSlot) -> tuple[float, float, float, float]:
    return (slot.x, slot.y, slot.width, slot.height)


def test_horizontal_group_splits_width_by_weight() -> None:
    """A 30/70 horizontal split divides the width and keeps the full height."""

    root = LayoutGroup(
        orientation="horizontal",
        weight=100,
        children=(LayoutItem("Item1", weight=30), LayoutItem("Item2", weight=70)),
    )
    slots = resolve_absolute(root, Container(width=1000, height=500))

    assert [slot.component_name for slot in slots] == ["Item1", "Item2"]
    assert _box(slots[0]) == pytest.approx((0, 0, 300, 500))
    assert _box(slots[1]) == pytest.approx((300, 0, 700, 500))


def test_vertical_group_with_zero_total_weight_splits_evenly() -> None:
    """Zero-weight children fall back to an even share of the default total."""

    root = LayoutGroup(
        orientation="vertical",
        children=(LayoutItem("Top", weight=0), LayoutItem("Bottom", weight=0)),
    )
    slots = resolve_absolute(root, Container(width=400, height=600))

    assert _box(slots[0]) == pytest.approx((0, 0, 400, 300))
    assert _box(slots[1]) == pytest.approx((0, 300, 400, 300))
    assert child_shares(root) == pytest.approx((0.5, 0.5))


def test_missing_weights_are_treated_like_zero() -> None:
    """Unweighted children of an otherwise unweighted group share evenly."""

    root = LayoutGroup(children=(LayoutItem("A"), LayoutItem("B"), LayoutItem("C"), LayoutItem("D")))
    slots = resolve_absolute(root, Container(width=800, height=100))
    assert [slot.width for slot in slots] == pytest.approx([200, 200, 200, 200])
    assert [slot.x for slot in slots] == pytest.approx([0, 200, 400, 600])


def test_negative_weight_gets_zero_extent_without_error() -> None:
    """A negative weight counts as zero next to positively weighted siblings."""

    root = LayoutGroup(
        orientation="horizontal",
        children=(LayoutItem("A", weight=50), LayoutItem("B", weight=-10), LayoutItem("C", weight=50)),
    )
    slots = resolve_absolute(root, Container(width=1000, height=200))

    assert _box(slots[0]) == pytest.approx((0, 0, 500, 200))
    assert _box(slots[1]) == pytest.approx((500, 0, 0, 200))
    assert _box(slots[2]) == pytest.approx((500, 0, 500, 200))


def test_nested_groups_recurse_into_sub_boxes() -> None:
    """Nested groups resolve inside the box assigned by their parent."""

    root = LayoutGroup(
        orientation="Vertical",
        children=(
            LayoutGroup(
                weight=50,
                children=(LayoutItem("chart", weight=60), LayoutItem("pie", weight=40)),
            ),
            LayoutGroup(
                weight=50,
                children=(
                    LayoutGroup(
                        orientation="VERTICAL",
                        weight=50,
                        children=(LayoutItem("month", weight=50), LayoutItem("company", weight=50)),
                    ),
                    LayoutItem("pivot", weight=50),
                ),
            ),
        ),
    )
    slots = resolve_absolute(root, Container(width=1200, height=800))
    boxes = {slot.component_name: _box(slot) for slot in slots}

    assert [slot.component_name for slot in slots] == ["chart", "pie", "month", "company", "pivot"]
    assert boxes["chart"] == pytest.approx((0, 0, 720, 400))
    assert boxes["pie"] == pytest.approx((720, 0, 480, 400))
    assert boxes["month"] == pytest.approx((0, 400, 600, 200))
    assert boxes["company"] == pytest.approx((0, 600, 600, 200))
    assert boxes["pivot"] == pytest.approx((600, 400, 600, 400))


def test_empty_group_produces_no_slots() -> None:
    """Groups without children emit nothing, at the root or nested."""

    assert resolve_absolute(LayoutGroup(), Container(width=100, height=100)) == ()
    assert resolve_proportional(LayoutGroup()) == ()

    root = LayoutGroup(children=(LayoutGroup(weight=50), LayoutItem("A", weight=50)))
    slots = resolve_absolute(root, Container(width=100, height=100))
    assert [slot.component_name for slot in slots] == ["A"]
    assert _box(slots[0]) == pytest.approx((50, 0, 50, 100))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("horizontal", "horizontal"),
        ("Vertical", "vertical"),
        ("VERTICAL", "vertical"),
        (" vertical ", "vertical"),
        ("diagonal", "horizontal"),
        ("", "horizontal"),
        (None, "horizontal"),
    ],
)
def test_normalize_orientation(raw: str | None, expected: str) -> None:
    """Orientation matching ignores case; unknown values mean horizontal."""

    assert normalize_orientation(raw) == expected


def test_unknown_orientation_splits_horizontally() -> None:
    """An unrecognized orientation behaves like a horizontal group."""

    root = LayoutGroup(orientation="sideways", children=(LayoutItem("A", 1), LayoutItem("B", 1)))
    slots = resolve_absolute(root, Container(width=200, height=50))
    assert _box(slots[1]) == pytest.approx((100, 0, 100, 50))


def test_proportional_slots_report_parent_axis_share() -> None:
    """Proportional slots carry the flex basis along the parent's axis."""

    root = LayoutGroup(
        orientation="vertical",
        children=(
            LayoutItem("top", weight=25),
            LayoutGroup(weight=75, children=(LayoutItem("left", weight=1), LayoutItem("right", weight=3))),
        ),
    )
    slots = resolve_proportional(root)

    assert slots == (
        ProportionalSlot("top", flex_basis_percent=pytest.approx(25.0), axis="vertical"),
        ProportionalSlot("left", flex_basis_percent=pytest.approx(25.0), axis="horizontal"),
        ProportionalSlot("right", flex_basis_percent=pytest.approx(75.0), axis="horizontal"),
    )


@pytest.mark.parametrize(
    "root",
    [
        LayoutGroup(
            orientation="horizontal",
            children=(LayoutItem("A", weight=13), LayoutItem("B", weight=29), LayoutItem("C", weight=58)),
        ),
        LayoutGroup(
            orientation="horizontal",
            children=(
                LayoutGroup(orientation="horizontal", weight=50, children=(LayoutItem("A", 50), LayoutItem("B", 50))),
                LayoutItem("C", weight=50),
            ),
        ),
        LayoutGroup(
            orientation="vertical",
            children=(
                LayoutGroup(
                    weight=30,
                    children=(
                        LayoutGroup(weight=2, children=(LayoutItem("A", 1), LayoutItem("B", 3))),
                        LayoutItem("C", weight=1),
                    ),
                ),
                LayoutGroup(
                    weight=70,
                    children=(
                        LayoutGroup(orientation="vertical", weight=1, children=(LayoutItem("D", 1), LayoutItem("E", 1))),
                        LayoutItem("F", weight=1),
                    ),
                ),
            ),
        ),
    ],
    ids=["flat", "nested-horizontal", "mixed"],
)
def test_proportional_and_absolute_resolution_agree(root: LayoutGroup) -> None:
    """Absolute extents over the container extent match the flex-basis shares."""

    container = Container(width=1234, height=321)
    absolute = resolve_absolute(root, container)
    proportional = resolve_proportional(root)

    assert len(absolute) == len(proportional)
    for abs_slot, prop_slot in zip(absolute, proportional):
        assert abs_slot.component_name == prop_slot.component_name
        if prop_slot.axis == "horizontal":
            assert abs_slot.width / container.width == pytest.approx(prop_slot.flex_basis_percent / 100)
        else:
            assert abs_slot.height / container.height == pytest.approx(prop_slot.flex_basis_percent / 100)


def test_nested_same_axis_groups_multiply_shares() -> None:
    """An item inside a half-width horizontal group gets a quarter of the width."""

    root = LayoutGroup(
        orientation="horizontal",
        children=(
            LayoutGroup(orientation="horizontal", weight=50, children=(LayoutItem("a", 50), LayoutItem("b", 50))),
            LayoutItem("c", weight=50),
        ),
    )

    assert [slot.flex_basis_percent for slot in resolve_proportional(root)] == pytest.approx([25.0, 25.0, 50.0])


def test_bare_item_root_fills_container() -> None:
    """A root that is a single item receives the whole container."""

    item = LayoutItem("only", weight=10)
    assert resolve_absolute(item, Container(width=300, height=200)) == (
        AbsoluteSlot("only", x=0, y=0, width=300, height=200),
    )
    assert resolve_proportional(item)[0].flex_basis_percent == 100.0


def test_resolution_is_repeatable() -> None:
    """Resolving the same tree twice yields identical slots."""

    root = grid_layout(["a", "b", "c"], columns=2)
    container = Container(width=640, height=480)
    assert resolve_absolute(root, container) == resolve_absolute(root, container)


def test_find_slot_returns_first_match_or_none() -> None:
    """Lookup is an exact match; duplicates resolve to the first slot."""

    root = LayoutGroup(children=(LayoutItem("dup", 1), LayoutItem("other", 1), LayoutItem("dup", 2)))
    slots = resolve_absolute(root, Container(width=400, height=100))

    found = find_slot(slots, "dup")
    assert found is slots[0]
    assert find_slot(slots, "Dup") is None
    assert find_slot(slots, "missing") is None


def test_grid_layout_places_items_in_rows() -> None:
    """The fixed grid uses equal rows with `columns` equal items per row."""

    root = grid_layout(["a", "b", "c"], columns=2)
    slots = resolve_absolute(root, Container(width=800, height=600))
    boxes = {slot.component_name: _box(slot) for slot in slots}

    assert boxes["a"] == pytest.approx((0, 0, 400, 300))
    assert boxes["b"] == pytest.approx((400, 0, 400, 300))
    assert boxes["c"] == pytest.approx((0, 300, 800, 300))
    assert layout_component_names(root) == ("a", "b", "c")


def test_grid_layout_rejects_non_positive_columns() -> None:
    """Column counts below one are a programming error."""

    with pytest.raises(ValueError):
        grid_layout(["a"], columns=0)
