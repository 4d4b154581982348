"""
Interactive field mapper

Provides an interactive UI for adjusting which source column feeds each
target entity field.
"""

from dataclasses import replace
from typing import List, Optional, Dict, Any, Tuple
from rich.table import Table
from rich.prompt import Prompt, Confirm

from core.models import FieldMapping, TargetEntity, TargetField, is_mapped
from ..normalizers import clean_value
from ..validators import validate_row
from ..banner import console, show_mapping_table

# Typed at a field prompt to clear its mapping
UNMAP_TOKEN = '-'


class InteractiveMapper:
    """
    Interactive field mapping with Rich UI.

    Example:
        mapper = InteractiveMapper(headers, sample_records)
        mapping = mapper.map(entity, auto_mapping)
    """

    def __init__(self, source_headers: List[str], sample_records: Optional[List[Dict[str, Any]]] = None):
        """
        Initialize interactive mapper.

        Args:
            source_headers: List of source column names
            sample_records: Optional list of sample records for preview (recommended 3-5 records)
        """
        self.source_headers = source_headers
        self.sample_records = sample_records or []

    def map(self, entity: TargetEntity, auto_mapping: Optional[FieldMapping] = None) -> FieldMapping:
        """
        Interactively map fields.

        Args:
            entity: Target entity whose fields are being mapped
            auto_mapping: Optional pre-detected mapping to use as defaults

        Returns:
            FieldMapping with one entry per target field ('' = unmapped)
        """
        current: FieldMapping = {
            f.name: (auto_mapping or {}).get(f.name) or '' for f in entity.fields
        }

        console.print()
        console.rule(f"[bold cyan]Field Mapping · {entity.name}[/bold cyan]", style="cyan")
        console.print("[dim]Type a column [bold]#[/bold] or [bold]name[/bold] at each prompt · "
                      f"Enter = keep · [bold]{UNMAP_TOKEN}[/bold] = unmap[/dim]")

        console.print()
        self._show_source_columns()

        console.print()
        show_mapping_table(entity, current)

        missing = [f.name for f in entity.required_fields if not is_mapped(current[f.name])]
        if not missing and Confirm.ask("\n[cyan]Use this mapping?[/cyan]", default=True):
            console.print("[green]☉ Mapping accepted[/green]")
            return current

        console.print("\n[yellow]Manual mapping mode[/yellow]\n")

        total = len(entity.fields)
        for position, target_field in enumerate(entity.fields, 1):
            current[target_field.name] = self._map_field(
                target_field, position, total, default=current[target_field.name],
            )

        console.print()
        console.rule("[bold green]Mapping Complete[/bold green]", style="green")
        show_mapping_table(entity, current)

        return current

    # ── Internal helpers ──────────────────────────────────────────────────────

    def resolve_column(self, user_input: str) -> Tuple[Optional[str], List[str]]:
        """
        Resolve typed input to a source column.

        Accepts an exact name, a 1-based column number, or a case-insensitive
        substring that matches exactly one column. An exact name wins over
        a column number.

        Returns:
            Tuple of (column or None, candidate columns when ambiguous)
        """
        text = user_input.strip()
        if not text:
            return None, []

        if text in self.source_headers:
            return text, []

        if text.isdigit():
            index = int(text) - 1
            if 0 <= index < len(self.source_headers):
                return self.source_headers[index], []
            return None, []

        matches = [h for h in self.source_headers if text.lower() in h.lower()]
        if len(matches) == 1:
            return matches[0], []
        return None, matches

    def _show_source_columns(self):
        """Display available source columns with sample data."""
        table = Table(title="Source Columns", show_header=True)
        table.add_column("#", style="dim", width=4)
        table.add_column("Column Name", style="cyan bold", width=25)
        table.add_column("Sample Values", style="white", overflow="fold")

        for i, header in enumerate(self.source_headers, 1):
            samples = []
            for record in self.sample_records[:3]:
                val = record.get(header, "")
                if val not in (None, ""):
                    val_str = str(val)[:40]
                    if len(str(val)) > 40:
                        val_str += "..."
                    samples.append(val_str)

            sample_text = " | ".join(samples) if samples else "[dim]<empty>[/dim]"
            table.add_row(f"{i}.", header, sample_text)

        console.print(table)

    def _inline_preview(self, column_name: str, target_field: Optional[TargetField] = None) -> str:
        """
        One-line preview of a column's sample values.

        When a target field is given, samples that would fail its type and
        constraint checks are counted, e.g. "12 · 7 · n/a  (3/5 filled, 1 invalid)".
        """
        samples = [clean_value(record.get(column_name)) for record in self.sample_records[:5]]
        filled = [value for value in samples if value]
        if not filled:
            return ""

        shown = " · ".join(value if len(value) <= 35 else value[:35] + "…" for value in filled[:3])
        tags = [f"{len(filled)}/{len(samples)} filled"]
        warn = len(filled) / len(samples) < 0.5

        if target_field is not None:
            check = replace(target_field, required=False, lookup_validation=None)
            invalid = sum(
                1 for value in filled
                if validate_row({column_name: value}, 0, [check], {check.name: column_name})
            )
            if invalid:
                tags.append(f"{invalid} invalid")
                warn = True

        marker = "▲ " if warn else ""
        return f"{marker}{shown}  [dim]({', '.join(tags)})[/dim]"

    def _confirm(self, column: str, target_field: Optional[TargetField] = None) -> str:
        preview = self._inline_preview(column, target_field)
        console.print(f"  [green]☉ {column}[/green]  {preview}" if preview else f"  [green]☉ {column}[/green]")
        return column

    def _map_field(self, target_field: TargetField, position: int, total: int, default: str = "") -> str:
        """
        Prompt for the source column of one target field.

        Returns:
            Selected source column name or '' when unmapped
        """
        marker = "[red]◆[/red] " if target_field.required else ""
        hint = target_field.field_type.value + (" · required" if target_field.required else "")
        console.print(
            f"[bold cyan]{marker}{target_field.name}[/bold cyan] "
            f"[dim]({position}/{total})[/dim]  [dim]{hint}[/dim]"
        )
        if default:
            console.print(f"  [green]☉ current:[/green] [white]{default}[/white]")

        while True:
            answer = Prompt.ask("  [cyan]→[/cyan]", default=default, show_default=False).strip()

            if not answer or answer == UNMAP_TOKEN:
                console.print("  [dim]— not mapped[/dim]")
                return ''

            column, candidates = self.resolve_column(answer)
            if column:
                return self._confirm(column, target_field)

            if answer.isdigit():
                console.print(f"  [red]☿ No column #{answer} (1–{len(self.source_headers)})[/red]")
            elif candidates:
                console.print(f"  [yellow]Ambiguous, matches:[/yellow] {', '.join(candidates[:5])}")
            else:
                listed = ', '.join(self.source_headers[:5])
                extra = len(self.source_headers) - 5
                suffix = f" (+{extra} more)" if extra > 0 else ""
                console.print(f"  [red]☿ No column named '{answer}'[/red]  [dim]{listed}{suffix}[/dim]")
