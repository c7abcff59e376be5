"""Human-readable rendering of the triage report."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from postcorpus.logging_setup import console as default_console
from postcorpus.types import TriageRecord, TriageSeverity


def triage_table(records: Sequence[TriageRecord]) -> Table:
    table = Table(title=f"Triage report ({len(records)})", show_lines=False)
    table.add_column("Source", style="cyan")
    table.add_column("Segment", justify="right")
    table.add_column("Severity")
    table.add_column("Reason", style="bold")
    table.add_column("Detail", overflow="fold")

    for record in records:
        severity_style = "red" if record.severity == TriageSeverity.ERROR else "yellow"
        table.add_row(
            Text(record.source_path),
            "-" if record.segment_index is None else str(record.segment_index),
            f"[{severity_style}]{record.severity.value}[/{severity_style}]",
            record.reason.value,
            Text(record.detail),
        )
    return table


def render_triage(records: Sequence[TriageRecord], console: Console | None = None) -> None:
    """Print the triage table, or a one-line all-clear when there is nothing to report."""
    console = console or default_console
    if not records:
        console.print("[green]No triage records.[/green]")
        return
    console.print(triage_table(records))
