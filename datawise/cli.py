"""
Datawise CLI

Usage:
    python run.py                                   # Interactive mode
    python run.py config                            # Show configuration status
    python run.py version                           # Show version
    python run.py entities                          # List target entities
    python run.py validate data.csv -e customers    # Map + validate
    python run.py export data.csv -e customers      # Map + validate + export CSV
    python run.py export data.csv -e customers --to api --dry-run
    python run.py suggest data.csv -e customers     # AI mapping suggestions
    python run.py lookup load owners.csv --id owners
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import requests
from rich.prompt import Confirm, Prompt

from core import __version__
from core.config import get_config, reload_config
from core.entity_config import load_export_config, find_config_warnings
from core.log import setup_logging
from core.models import ExportConfig, TargetEntity

from .banner import (
    console,
    show_banner,
    show_entities_table,
    show_error,
    show_export_summary,
    show_info,
    show_mapping_table,
    show_preview_table,
    show_step,
    show_success,
    show_validation_report,
    show_warning,
)
from .exporters import APIExporter, CSVExporter, ExportSubmissionError
from .loaders import get_loader
from .loaders.excel_loader import ExcelLoader
from .lookups import (
    clear_cache,
    fetch_lookup,
    get_cache_stats,
    load_cached_lookups,
    load_lookup_file,
    store_lookup,
)
from .mappers import InteractiveMapper
from .services import AIMappingSuggester, MappingSuggestionError
from .session import ExportState

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


class CLIError(Exception):
    """Reported to the user as a single error line."""

    def __init__(self, message: str, exit_code: int = EXIT_FAILED):
        super().__init__(message)
        self.exit_code = exit_code


# ── Helpers ───────────────────────────────────────────────────────────────────

def parse_map_overrides(items: Optional[Sequence[str]]) -> Dict[str, str]:
    """
    Parse repeated --map TARGET=SOURCE options.

    An empty SOURCE (``--map email=``) unmaps the target field.
    """
    overrides: Dict[str, str] = {}
    for item in items or []:
        if '=' not in item:
            raise CLIError(f"Invalid --map '{item}', expected TARGET=SOURCE", EXIT_USAGE)
        target, source = item.split('=', 1)
        target = target.strip()
        if not target:
            raise CLIError(f"Invalid --map '{item}', target field is empty", EXIT_USAGE)
        overrides[target] = source.strip()
    return overrides


def load_config(path: Optional[str]) -> ExportConfig:
    config_path = Path(path) if path else get_config().entity_config_path
    export_config = load_export_config(config_path)
    if export_config.is_empty:
        show_warning(f"No target entities configured in {config_path}")
    for warning in find_config_warnings(export_config):
        logger.warning(warning)
    return export_config


def resolve_entity(export_config: ExportConfig, entity_id: str) -> TargetEntity:
    entity = export_config.get_entity(entity_id)
    if entity is None:
        known = ', '.join(e.id for e in export_config.entities) or 'none'
        raise CLIError(f"Unknown entity '{entity_id}' (configured: {known})", EXIT_USAGE)
    return entity


def load_dataset(file_path: str, sheet: Optional[str] = None) -> Tuple[List[dict], List[str]]:
    sheet_ref = int(sheet) if sheet is not None and sheet.isdigit() else sheet
    try:
        records, headers = get_loader(file_path, sheet=sheet_ref).load()
    except (FileNotFoundError, ValueError) as e:
        raise CLIError(str(e))
    logger.info("Loaded %d row(s), %d column(s) from %s", len(records), len(headers), file_path)
    return records, headers


def apply_overrides(state: ExportState, overrides: Dict[str, str]) -> ExportState:
    for target, source in overrides.items():
        try:
            state = state.with_mapping_change(target, source)
        except KeyError:
            raise CLIError(f"Entity '{state.entity.id}' has no field '{target}'", EXIT_USAGE)
        except ValueError:
            raise CLIError(f"Source column '{source}' not found in data", EXIT_USAGE)
    return state


def apply_ai_suggestions(state: ExportState) -> ExportState:
    config = get_config()
    if not config.has_ai_provider:
        raise CLIError(f"AI provider '{config.ai_provider}' is not configured (set its API key in .env)")
    try:
        suggester = AIMappingSuggester(config.ai_provider, config.ai_api_key, config.ai_model)
        with console.status("[cyan]Asking AI for mapping suggestions...[/cyan]"):
            suggestions = suggester.suggest(state.source_columns, state.entity.fields)
    except (MappingSuggestionError, ImportError, ValueError) as e:
        raise CLIError(f"Auto-map error: {e}")
    show_success("AI mapping suggestions applied. Review them before exporting.")
    return state.with_suggestions(suggestions)


def load_lookups(lookup_files: Optional[Sequence[str]]) -> Dict[str, object]:
    lookups: Dict[str, object] = dict(load_cached_lookups())
    for item in lookup_files or []:
        lookup_id, _, path = item.rpartition('=')
        try:
            table = load_lookup_file(path, lookup_id or None)
        except (OSError, ValueError) as e:
            raise CLIError(f"Cannot load lookup '{item}': {e}")
        lookups[table.lookup_id] = table
    return lookups


def run_validation(state: ExportState, records: List[dict], lookups) -> ExportState:
    config = get_config()
    with console.status(f"[cyan]Validating {len(records)} row(s)...[/cyan]"):
        state = state.validate(records, max_errors=config.max_validation_errors, lookups=lookups)
    show_validation_report(state.report)
    return state


def run_export(
    state: ExportState,
    records: List[dict],
    export_config: ExportConfig,
    target: str,
    output: Optional[str],
    source_name: str,
    dry_run: bool,
    token: Optional[str],
) -> None:
    payload = state.transform(records)
    entity = state.entity
    config = get_config()

    if target == 'csv':
        output_path = output or CSVExporter.generate_filename(entity.name, source_name)
        count = CSVExporter().export(payload, entity, output_path)
        show_export_summary(count, output_path)
        return

    exporter = APIExporter(
        export_config.base_url,
        token=token if token is not None else config.auth_token,
        timeout=config.export_timeout,
        dry_run=dry_run,
    )
    if not exporter.token:
        show_warning("Exporting to API without an authentication token")
    try:
        result = exporter.submit(entity, payload)
    except ExportSubmissionError as e:
        raise CLIError(f"API export error: {e}")
    show_export_summary(result['records'], result['url'], dry_run=result['dry_run'])


# ── Commands ──────────────────────────────────────────────────────────────────

def cmd_version(args) -> int:
    console.print(f"Datawise v{__version__}")
    return EXIT_OK


def cmd_config(args) -> int:
    status = get_config().get_config_status()
    for section, values in status.items():
        console.print(f"[bold cyan]{section}[/bold cyan]")
        for key, value in values.items():
            if isinstance(value, bool):
                value = "[green]yes[/green]" if value else "[red]no[/red]"
            console.print(f"  {key}: {value}")
    return EXIT_OK


def cmd_entities(args) -> int:
    export_config = load_config(args.config)
    if export_config.is_empty:
        return EXIT_OK
    if args.entity:
        entity = resolve_entity(export_config, args.entity)
        show_mapping_table(entity, {})
        return EXIT_OK
    show_entities_table(export_config.entities, export_config.base_url)
    return EXIT_OK


def _prepare(args) -> Tuple[ExportConfig, ExportState, List[dict]]:
    export_config = load_config(args.config)
    entity = resolve_entity(export_config, args.entity)
    records, headers = load_dataset(args.file, args.sheet)
    if not records:
        raise CLIError(f"No data rows found in {args.file}")

    overrides = parse_map_overrides(args.map)

    state = ExportState.start(entity, headers)
    if args.ai_map:
        state = apply_ai_suggestions(state)
    state = apply_overrides(state, overrides)

    show_mapping_table(entity, state.field_mapping, state.suggestions)
    return export_config, state, records


def cmd_validate(args) -> int:
    _, state, records = _prepare(args)
    state = run_validation(state, records, load_lookups(args.lookup))
    return EXIT_OK if state.is_export_eligible else EXIT_FAILED


def cmd_export(args) -> int:
    export_config, state, records = _prepare(args)
    state = run_validation(state, records, load_lookups(args.lookup))
    if not state.is_export_eligible:
        show_error("Export blocked: fix the validation errors first")
        return EXIT_FAILED
    run_export(
        state, records, export_config, args.to, args.output,
        Path(args.file).name, args.dry_run, args.token,
    )
    return EXIT_OK


def cmd_suggest(args) -> int:
    export_config = load_config(args.config)
    entity = resolve_entity(export_config, args.entity)
    _, headers = load_dataset(args.file, args.sheet)
    state = apply_ai_suggestions(ExportState.start(entity, headers))
    show_mapping_table(entity, state.field_mapping, state.suggestions)
    for name, suggestion in state.suggestions.items():
        console.print(f"  [cyan]{name}[/cyan]: [dim]{suggestion.reasoning}[/dim]")
    return EXIT_OK


def cmd_lookup(args) -> int:
    if args.lookup_command == 'load':
        try:
            table = load_lookup_file(args.source, args.id)
        except (OSError, ValueError) as e:
            raise CLIError(f"Cannot load lookup: {e}")
        store_lookup(table)
        show_success(f"Cached lookup '{table.lookup_id}' ({len(table)} rows)")
    elif args.lookup_command == 'fetch':
        try:
            table = fetch_lookup(args.url, args.id, token=args.token or get_config().auth_token)
        except (requests.RequestException, ValueError) as e:
            raise CLIError(f"Lookup fetch error: {e}")
        store_lookup(table)
        show_success(f"Fetched lookup '{table.lookup_id}' ({len(table)} rows)")
    elif args.lookup_command == 'clear':
        clear_cache()
        show_success("Lookup cache cleared")
    else:
        stats = get_cache_stats()
        show_info(f"{stats['fresh']} fresh / {stats['stale']} stale lookup(s) in {stats['cache_file']}")
        for lookup_id, rows in stats['rows'].items():
            console.print(f"  [cyan]{lookup_id}[/cyan]: {rows} rows")
    return EXIT_OK


def cmd_interactive(args) -> int:
    show_banner()
    export_config = load_config(args.config)
    if export_config.is_empty:
        show_error("Configure at least one target entity before exporting")
        return EXIT_FAILED

    # Step 1: data
    show_step(1, "Load Data", "CSV or Excel file")
    file_path = Prompt.ask("[cyan]Path to data file[/cyan]").strip().strip('"\'')
    sheet = None
    if Path(file_path).suffix.lower() in ('.xlsx', '.xlsm', '.xls'):
        try:
            sheets = ExcelLoader(file_path).sheet_names()
        except FileNotFoundError as e:
            raise CLIError(str(e))
        sheet = sheets[0] if len(sheets) == 1 else Prompt.ask(
            "[cyan]Sheet[/cyan]", choices=sheets, default=sheets[0]
        )
    records, headers = load_dataset(file_path, sheet)
    if not records:
        raise CLIError(f"No data rows found in {file_path}")
    show_success(f"Loaded {len(records)} rows, {len(headers)} columns")
    show_preview_table(records, headers)

    # Step 2: entity
    show_step(2, "Target Entity")
    show_entities_table(export_config.entities, export_config.base_url)
    entity_ids = [e.id for e in export_config.entities]
    entity = resolve_entity(
        export_config,
        Prompt.ask("[cyan]Entity[/cyan]", choices=entity_ids, default=entity_ids[0]),
    )

    # Step 3: mapping
    show_step(3, "Map Fields")
    state = ExportState.start(entity, headers)
    if get_config().has_ai_provider and Confirm.ask("[cyan]Ask AI for mapping suggestions?[/cyan]", default=False):
        try:
            state = apply_ai_suggestions(state)
        except CLIError as e:
            show_error(str(e))
    mapper = InteractiveMapper(headers, records[:5])
    state = state.with_mapping(mapper.map(entity, state.field_mapping))

    # Step 4: validation
    show_step(4, "Validate")
    lookups = load_lookups(None)
    state = run_validation(state, records, lookups)
    while not state.is_export_eligible:
        if not Confirm.ask("[cyan]Adjust mapping and validate again?[/cyan]", default=True):
            show_error("Export blocked: fix the validation errors first")
            return EXIT_FAILED
        state = state.with_mapping(mapper.map(entity, state.field_mapping))
        state = run_validation(state, records, lookups)

    # Step 5: export
    show_step(5, "Export")
    target = Prompt.ask("[cyan]Export to[/cyan]", choices=['csv', 'api'], default='csv')
    dry_run = target == 'api' and Confirm.ask("[cyan]Dry run (log payload only)?[/cyan]", default=True)
    run_export(state, records, export_config, target, None, Path(file_path).name, dry_run, None)
    return EXIT_OK


# ── Parser ────────────────────────────────────────────────────────────────────

def _add_data_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('file', help="CSV or Excel file")
    parser.add_argument('-e', '--entity', required=True, help="Target entity id")
    parser.add_argument('--sheet', help="Excel sheet name or 0-based index")
    parser.add_argument('--map', action='append', metavar='TARGET=SOURCE',
                        help="Override the mapping for one field (repeatable, empty SOURCE unmaps)")
    parser.add_argument('--ai-map', action='store_true', help="Start from AI mapping suggestions")
    parser.add_argument('--lookup', action='append', metavar='[ID=]FILE',
                        help="Lookup table file for lookup validation (repeatable)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='datawise', description="Map, validate and export tabular data")
    parser.add_argument('--config', help="Entity configuration JSON (default: ENTITY_CONFIG_PATH)")
    parser.add_argument('--env-file', help="Alternative .env file")
    parser.add_argument('-v', '--verbose', action='count', default=0, help="More log output (-vv for debug)")

    sub = parser.add_subparsers(dest='command')

    sub.add_parser('version', help="Show version").set_defaults(func=cmd_version)
    sub.add_parser('config', help="Show configuration status").set_defaults(func=cmd_config)

    entities = sub.add_parser('entities', help="List target entities")
    entities.add_argument('entity', nargs='?', help="Show the fields of one entity")
    entities.set_defaults(func=cmd_entities)

    validate = sub.add_parser('validate', help="Map and validate a data file")
    _add_data_args(validate)
    validate.set_defaults(func=cmd_validate)

    export = sub.add_parser('export', help="Map, validate and export a data file")
    _add_data_args(export)
    export.add_argument('--to', choices=['csv', 'api'], default='csv', help="Export destination")
    export.add_argument('-o', '--output', help="CSV output path")
    export.add_argument('--dry-run', action='store_true', help="Log the API request instead of sending it")
    export.add_argument('--token', help="Bearer token (default: DATAWISE_AUTH_TOKEN)")
    export.set_defaults(func=cmd_export)

    suggest = sub.add_parser('suggest', help="Show AI mapping suggestions")
    suggest.add_argument('file', help="CSV or Excel file")
    suggest.add_argument('-e', '--entity', required=True, help="Target entity id")
    suggest.add_argument('--sheet', help="Excel sheet name or 0-based index")
    suggest.set_defaults(func=cmd_suggest)

    lookup = sub.add_parser('lookup', help="Manage cached lookup tables")
    lookup_sub = lookup.add_subparsers(dest='lookup_command')
    load = lookup_sub.add_parser('load', help="Cache a lookup table from a file")
    load.add_argument('source', help="CSV/Excel/JSON file")
    load.add_argument('--id', help="Lookup id (default: file name)")
    fetch = lookup_sub.add_parser('fetch', help="Cache a lookup table from an API")
    fetch.add_argument('url')
    fetch.add_argument('--id', required=True, help="Lookup id")
    fetch.add_argument('--token', help="Bearer token (default: DATAWISE_AUTH_TOKEN)")
    lookup_sub.add_parser('clear', help="Clear the lookup cache")
    lookup_sub.add_parser('stats', help="Show cached lookups")
    lookup.set_defaults(func=cmd_lookup)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = reload_config(Path(args.env_file)) if args.env_file else get_config()
    level = {0: config.log_level, 1: 'INFO'}.get(args.verbose, 'DEBUG')
    setup_logging(level, console=console)

    func = getattr(args, 'func', cmd_interactive)
    try:
        return func(args)
    except CLIError as e:
        show_error(str(e))
        return e.exit_code
    except KeyboardInterrupt:
        console.print("\n[dim]Cancelled[/dim]")
        return EXIT_FAILED


if __name__ == '__main__':
    sys.exit(main())
