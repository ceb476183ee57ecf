"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse the same tables/panels.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from spec_sync.core.services.collection_generator import GenerationResult
from spec_sync.core.services.sync_driver import SyncResult


def print_banner(console: Console, command: str) -> None:
    title = Text("postman-spec-sync", style="bold cyan")
    subtitle = Text(command, style="dim")
    console.print(Panel(Text.assemble(title, "  ", subtitle), border_style="cyan", expand=False))


def build_sync_table(result: SyncResult) -> Table:
    """Summary of a sync run."""

    table = Table(title="Spec Hub sync")
    table.add_column("Resource", style="cyan", no_wrap=True)
    table.add_column("Identifier", style="white")
    table.add_column("Source", style="magenta")
    table.add_column("Status", style="green")

    table.add_row("Spec", result.spec_id, result.spec_source, "patched")

    if result.collection_uid is None:
        table.add_row("Collection", "-", "-", "[yellow]not found[/yellow]")
    else:
        status = "sync requested" if result.sync_accepted else "sync not accepted"
        if result.poll_result is not None:
            status = f"task {result.poll_result.status or 'unknown'}"
        table.add_row("Collection", result.collection_uid, result.collection_source or "-", status)
    return table


def build_generation_panel(result: GenerationResult) -> Panel:
    body = Text()
    body.append("Spec: ", style="bold")
    body.append(f"{result.spec_id}\n")
    body.append("Collection: ", style="bold")
    body.append(result.collection_uid)
    if result.already_exists:
        body.append("\n\nCollection already existed; nothing generated.", style="yellow")
    elif result.task is not None:
        body.append(f"\n\nTask status: {result.task.status}", style="dim")
    return Panel(body, title=Text("Collection generation", style="bold yellow"), border_style="yellow")
