"""Print dashboard aggregates and resolved layout slots."""

from __future__ import annotations

import json
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from analysis.aggregations import aggregate
from analysis.dto import AbsoluteSlot, Container
from core.charting.assembler import (
    LAYOUT_MODES,
    aggregates_as_dict,
    assemble_dashboard,
    dashboard_view_as_dict,
)
from core.charting.validator import validate_dashboard_config
from core.sources import DashboardSourceError, load_dashboard_config, load_records


class Command(BaseCommand):
    """Summarize the configured dashboard sources without starting a server."""

    help = "Print aggregated series and resolved layout slots for the dashboard sources."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("--xml", type=Path, default=None, help="Dashboard XML path (default: settings).")
        parser.add_argument("--records", type=Path, default=None, help="Records JSON path (default: settings).")
        parser.add_argument("--width", type=int, default=None, help="Canvas width in pixels.")
        parser.add_argument("--height", type=int, default=None, help="Canvas height in pixels.")
        parser.add_argument(
            "--mode",
            choices=LAYOUT_MODES,
            default="absolute",
            help="Layout mode (default: absolute).",
        )
        parser.add_argument(
            "--chronological",
            action="store_true",
            help="Sort month buckets into calendar order.",
        )
        parser.add_argument("--json", action="store_true", help="Emit a JSON document instead of text.")

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        width = settings.DASHBOARD_CANVAS_WIDTH if options["width"] is None else options["width"]
        height = settings.DASHBOARD_CANVAS_HEIGHT if options["height"] is None else options["height"]
        if width <= 0 or height <= 0:
            raise CommandError("--width and --height must be positive.")

        try:
            config = load_dashboard_config(options["xml"])
            records = load_records(options["records"])
        except DashboardSourceError as exc:
            raise CommandError(str(exc)) from exc

        aggregates = aggregate(records, chronological=options["chronological"])
        view = assemble_dashboard(
            config,
            aggregates,
            container=Container(width=width, height=height),
            mode=options["mode"],
            grid_columns=settings.DASHBOARD_GRID_COLUMNS,
        )
        validation = validate_dashboard_config(config)

        if options["json"]:
            payload = dashboard_view_as_dict(view)
            payload["aggregates"] = aggregates_as_dict(aggregates)
            payload["warnings"] = list(validation.warnings)
            self.stdout.write(json.dumps(payload, indent=2))
            return None

        self.stdout.write(f"Dashboard: {view.title} ({len(records)} records)")
        for label, series in (
            ("By GL code", aggregates.by_gl_code),
            ("By company group", aggregates.by_comp_group),
            ("By company", aggregates.by_acc_comp),
        ):
            self.stdout.write(f"{label}:")
            for point in series:
                self.stdout.write(f"  {point.key:<12} {point.total:>14,.2f}")
        self.stdout.write("By month:")
        for year, months in aggregates.by_month_year.items():
            for month, total in months.items():
                self.stdout.write(f"  {month} {year:<7} {total:>14,.2f}")

        self.stdout.write(f"Slots ({view.mode}):")
        for slot in view.slots:
            if isinstance(slot, AbsoluteSlot):
                self.stdout.write(
                    f"  {slot.component_name:<20} x={slot.x:.1f} y={slot.y:.1f} "
                    f"w={slot.width:.1f} h={slot.height:.1f}"
                )
            else:
                self.stdout.write(f"  {slot.component_name:<20} {slot.flex_basis_percent:.2f}% ({slot.axis})")

        for warning in validation.warnings + validation.errors:
            self.stderr.write(f"warning: {warning}")
        return None
