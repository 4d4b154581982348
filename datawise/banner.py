"""
Banner and UI components for Datawise
"""

from typing import Dict, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from core._version import __version__

# Global console instance
console = Console()


TAGLINE = "Map, validate and export spreadsheet data to your APIs"


def show_banner():
    """Display banner"""
    art = (
        "[bold cyan]"
        "╔╦╗╔═╗╔╦╗╔═╗╦ ╦╦╔═╗╔═╗\n"
        " ║║╠═╣ ║ ╠═╣║║║║╚═╗║╣ \n"
        "═╩╝╩ ╩ ╩ ╩ ╩╚╩╝╩╚═╝╚═╝"
        "[/bold cyan]"
    )
    panel = Panel(
        f"{art}\n\n[dim]{TAGLINE}[/dim]\n[dim]v{__version__}[/dim]",
        border_style="cyan",
        padding=(1, 3),
    )
    console.print(panel)


def show_step(step: int, title: str, description: str = ""):
    """Show a step header"""
    console.print()
    header = f"[bold cyan]Step {step}: {title}[/bold cyan]"
    if description:
        console.print(f"{header}\n[dim]{description}[/dim]")
    else:
        console.print(header)


def show_success(message: str):
    """Show success message"""
    console.print(f"☉ [green]{message}[/green]")


def show_error(message: str):
    """Show error message"""
    console.print(f"☿ [red]{message}[/red]")


def show_warning(message: str):
    """Show warning message"""
    console.print(f"▲ [yellow]{message}[/yellow]")


def show_info(message: str):
    """Show info message"""
    console.print(f"◈ [blue]{message}[/blue]")


def show_preview_table(records: list, headers: list, limit: int = 5, title: Optional[str] = None):
    """Display preview of data in a table"""
    table = Table(title=title, show_header=True, header_style="bold cyan")

    for header in headers:
        table.add_column(str(header)[:20], overflow="fold")  # Truncate long headers

    for record in records[:limit]:
        row = ["" if record.get(h) is None else escape(str(record.get(h))[:30]) for h in headers]
        table.add_row(*row)

    console.print(table)


def show_entities_table(entities: Sequence, base_url: str = ""):
    """List configured target entities"""
    table = Table(
        title=f"Target Entities [dim]{base_url}[/dim]" if base_url else "Target Entities",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("ID", style="cyan bold")
    table.add_column("Name")
    table.add_column("URL", style="dim")
    table.add_column("Fields", justify="right")
    table.add_column("Required", justify="right")

    for entity in entities:
        table.add_row(
            entity.id, entity.name, entity.url,
            str(len(entity.fields)), str(len(entity.required_fields)),
        )

    console.print(table)


def show_mapping_table(entity, mapping: Dict[str, str], suggestions: Optional[Dict] = None):
    """Show target field -> source column mapping with status"""
    table = Table(
        title=f"[bold cyan]Mapping: {entity.name}[/bold cyan]",
        show_header=True,
        header_style="bold cyan",
        border_style="cyan",
    )
    table.add_column("Target Field", style="cyan bold")
    table.add_column("Type", style="dim")
    table.add_column("Source Column")
    table.add_column("Status", justify="center")
    if suggestions:
        table.add_column("AI", justify="right", style="dim")

    for target_field in entity.fields:
        source = mapping.get(target_field.name) or ''
        if source:
            status = "[green]☉[/green]"
        elif target_field.required:
            status = "[red]☿[/red]"
        else:
            status = "[dim]—[/dim]"

        label = f"◆ {target_field.name}" if target_field.required else f"  {target_field.name}"
        row = [label, target_field.field_type.value, escape(source) if source else "[dim]-[/dim]", status]
        if suggestions:
            suggestion = suggestions.get(target_field.name)
            row.append(f"{suggestion.confidence:.0f}%" if suggestion else "")
        table.add_row(*row)

    console.print(table)


def show_validation_report(report, limit: int = 20):
    """Show validation outcome and the first errors"""
    if report.is_valid:
        panel = Panel(
            f"[bold green]Validation Successful[/bold green]\n\n"
            f"Rows checked: [white]{report.row_count}[/white]\n"
            f"Data is valid and ready for export.",
            border_style="green",
            padding=(1, 2),
        )
        console.print(panel)
        return

    lines = [f"  [red]•[/red] {escape(error.message)}" for error in report.errors[:limit]]
    hidden = len(report.errors) - len(lines)
    if hidden > 0:
        lines.append(f"  [dim]... and {hidden} more[/dim]")
    if report.truncated:
        lines.append(
            f"  [yellow]Stopped collecting after {len(report.errors)} errors. There are more.[/yellow]"
        )

    panel = Panel(
        f"[bold red]Validation Failed[/bold red]\n\n"
        f"{report.summary()}\n\n" + "\n".join(lines),
        border_style="red",
        padding=(1, 2),
    )
    console.print(panel)


def show_export_summary(records_exported: int, destination: str, dry_run: bool = False):
    """Show export summary"""
    title = "Export Simulated" if dry_run else "Export Complete!"
    panel = Panel(
        f"[bold green]{title}[/bold green]\n\n"
        f"Records exported: [white]{records_exported}[/white]\n"
        f"Destination: [cyan]{destination}[/cyan]",
        border_style="green",
        padding=(1, 2)
    )
    console.print(panel)
