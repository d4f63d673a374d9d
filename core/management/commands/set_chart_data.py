"""Load target chart data from a file (or stdin) into the chart settings document."""

from __future__ import annotations

import sys
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from core.chart_settings import ChartConfig, ChartSettingsError, save_chart_config
from core.parsers.chart_data import parse_chart_data


class Command(BaseCommand):
    """Parse NAME=VALUE text and merge it into the stored chart configuration."""

    help = "Load NAME=VALUE chart data into the chart settings document (merge-write)."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "source",
            help="Path to a UTF-8 text file with one NAME=VALUE per line, or '-' for stdin.",
        )
        parser.add_argument("--program-service", default=None, help="Optional program service title.")
        parser.add_argument("--person-in-charge", default=None, help="Optional responsible person.")
        parser.add_argument("--period", default=None, help="Optional reporting period.")
        parser.add_argument(
            "--check",
            action="store_true",
            help="Dry-run: report parsed and skipped lines without writing.",
        )
        parser.add_argument(
            "--write",
            action="store_true",
            help="Write the data to the settings document.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        check: bool = options["check"]
        write: bool = options["write"]
        if check and write:
            raise CommandError("Use either --check or --write, not both.")
        if not check and not write:
            raise CommandError("Refusing to write without explicit intent; pass --check or --write.")

        raw_text = self._read_source(options["source"])
        parsed = parse_chart_data(raw_text)
        for skipped in parsed.skipped:
            self.stderr.write(f"line {skipped.line_number}: skipped ({skipped.reason}): {skipped.text!r}")
        if not parsed.records:
            raise CommandError("No NAME=VALUE lines with numeric values were found.")

        summary = f"records={len(parsed.records)} skipped={len(parsed.skipped)}"
        if check:
            self.stdout.write(f"check: {summary}")
            return None

        config = ChartConfig(
            target_data=raw_text,
            program_service=options["program_service"],
            person_in_charge=options["person_in_charge"],
            period=options["period"],
        )
        try:
            save_chart_config(config)
        except ChartSettingsError as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(self.style.SUCCESS(f"write: {summary}"))
        return None

    def _read_source(self, source: str) -> str:
        """Return the raw text from a file path or stdin."""

        if source == "-":
            return sys.stdin.read()
        path = Path(source)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}") from exc
