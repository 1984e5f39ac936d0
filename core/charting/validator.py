"""Validation for parsed dashboard configurations.

Parsing is lenient, so validation is where configuration mistakes surface.
Only problems that make an item unaddressable are errors; everything the
dashboard can still render around (duplicates, dangling layout references,
unplaced items) is reported as a warning.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from analysis.layout import layout_component_names

from .render import DATA_MEMBER_SOURCES
from .schema import DashboardConfig


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of validating a dashboard config."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate_dashboard_config(config: DashboardConfig) -> ValidationResult:
    """Validate a DashboardConfig for rendering.

    Args:
        config: Parsed dashboard configuration.

    Returns:
        ValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []

    for idx, item in enumerate(config.items):
        if not item.component_name:
            errors.append(f"Dashboard item {idx} ({item.kind}) must have a non-empty ComponentName.")
            continue
        if item.kind in ("chart", "pie") and item.argument_member not in DATA_MEMBER_SOURCES:
            warnings.append(
                f"Dashboard item {item.component_name!r} is bound to an unsupported member: "
                f"{item.argument_member!r}."
            )
        if item.kind == "pivot":
            for axis, member in (("row", item.row_member), ("column", item.column_member)):
                if member is not None and member not in DATA_MEMBER_SOURCES:
                    warnings.append(
                        f"Pivot {item.component_name!r} has an unsupported {axis} member: {member!r}."
                    )

    counts = Counter(item.component_name for item in config.items if item.component_name)
    for name, count in counts.items():
        if count > 1:
            warnings.append(f"Component name {name!r} is used by {count} items; the first one is rendered.")

    if config.layout is not None:
        placed = layout_component_names(config.layout)
        for name in placed:
            if not name:
                warnings.append("A layout item has no DashboardItem reference.")
            elif name not in counts:
                warnings.append(f"Layout item references unknown component {name!r}.")
        for name in counts:
            if name not in placed:
                warnings.append(f"Component {name!r} is not placed in the layout tree.")

    return ValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
