"""Rich terminal renderer for the delegate monitor.

Color scheme
------------
- green     : FORGED_THIS_ROUND, AWAITING_FORGED_LAST
- yellow    : AWAITING_MISSED_LAST, MISSED_THIS_BLOCK
- bold red  : MISSED_MORE, AWAITING_MISSED_MORE
- cyan      : NEW
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from delegatewatch.models.delegates import DelegateStatus
from delegatewatch.models.events import (
    BlockMissed,
    DroppedTop,
    MonitorEvent,
    NewTop,
    RankChanged,
    StatusChanged,
)
from delegatewatch.monitor.projection import MonitorSnapshot

_STATUS_LABELS: dict[DelegateStatus, str] = {
    DelegateStatus.FORGED_THIS_ROUND: "[green]FORGED[/green]",
    DelegateStatus.AWAITING_FORGED_LAST: "[green]AWAITING[/green]",
    DelegateStatus.AWAITING_MISSED_LAST: "[yellow]AWAITING (missed last)[/yellow]",
    DelegateStatus.AWAITING_MISSED_MORE: "[bold red]AWAITING (missed more)[/bold red]",
    DelegateStatus.MISSED_THIS_BLOCK: "[yellow]MISSED[/yellow]",
    DelegateStatus.MISSED_MORE: "[bold red]NOT FORGING[/bold red]",
    DelegateStatus.NEW: "[cyan]NEW[/cyan]",
}


def format_status(status: DelegateStatus | None) -> str:
    if status is None:
        return "[dim]unknown[/dim]"
    return _STATUS_LABELS.get(status, status.value)


def format_event(event: MonitorEvent) -> str:
    """Return a one-line Rich markup description of *event*."""
    if isinstance(event, RankChanged):
        direction = "up" if event.rank_delta < 0 else "down"
        return (
            f"[bold]{event.snapshot.username or event.snapshot.public_key[:12]}[/bold] "
            f"moved {direction} {abs(event.rank_delta)} to rank {event.snapshot.rank}"
        )
    if isinstance(event, NewTop):
        return (
            f"[green]+[/green] [bold]{event.snapshot.username or event.snapshot.public_key[:12]}[/bold] "
            f"entered the forging set at rank {event.snapshot.rank}"
        )
    if isinstance(event, DroppedTop):
        return (
            f"[red]-[/red] [bold]{event.snapshot.username or event.snapshot.public_key[:12]}[/bold] "
            f"left the forging set (was rank {event.snapshot.rank})"
        )
    if isinstance(event, StatusChanged):
        name = (event.snapshot.username if event.snapshot else "") or event.public_key[:12]
        return (
            f"[bold]{name}[/bold] {format_status(event.old_status)} -> "
            f"{format_status(event.new_status)}"
        )
    if isinstance(event, BlockMissed):
        name = (event.snapshot.username if event.snapshot else "") or event.public_key[:12]
        return f"[bold red]![/bold red] [bold]{name}[/bold] missed a block"
    return event.event_kind.value


class MonitorRenderer:
    """Renders monitor snapshots and events to a Rich console.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_snapshot(self, snapshot: MonitorSnapshot) -> Panel:
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Rank", style="dim", width=5, justify="right")
        table.add_column("Delegate", min_width=20)
        table.add_column("Status", min_width=14)
        table.add_column("Last block", justify="right")
        table.add_column("Next slot", justify="right")
        table.add_column("Round", justify="center")

        for row in snapshot.delegates:
            table.add_row(
                str(row.rank) if row.rank is not None else "-",
                row.name,
                format_status(row.status),
                str(row.last_forged_height) if row.last_forged_height else "[dim]-[/dim]",
                str(row.next_slot) if row.next_slot is not None else "[dim]-[/dim]",
                "[green]yes[/green]" if row.is_round_member else "[dim]no[/dim]",
            )

        summary_parts = [
            f"[bold]Height:[/bold] {snapshot.network_height}",
            f"[bold]Round:[/bold] {snapshot.network_round}",
            f"[bold]Forged:[/bold] {snapshot.forging_count}/{len(snapshot.delegates)}",
            f"[bold]Missing:[/bold] {len(snapshot.missing_delegates)}",
            f"[bold]Cycles:[/bold] {snapshot.cycle_count}",
        ]
        if snapshot.last_error:
            summary_parts.append(f"[bold red]Last error:[/bold red] {snapshot.last_error}")

        return Panel(
            Group(table, Text(""), Text.from_markup("  |  ".join(summary_parts))),
            title="[bold]Delegate Monitor[/bold]",
            subtitle=f"Taken at: {snapshot.taken_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            border_style="blue",
        )

    def print_snapshot(self, snapshot: MonitorSnapshot) -> None:
        self.console.print(self.render_snapshot(snapshot))

    def print_event(self, event: MonitorEvent) -> None:
        stamp = event.timestamp_utc.strftime("%H:%M:%S")
        self.console.print(f"[dim]{stamp}[/dim] {format_event(event)}")
