"""
Command-line interface for calsync.
"""

import json
import logging
from configparser import ConfigParser
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from calsync.exchange_export import load_appointments
from calsync.mapping import EventMapper
from calsync.models import DEFAULT_CONFIG
from calsync.models import DEFAULT_TOKEN_FILE
from calsync.models import DEFAULT_TOTAL_SYNC_DAYS
from calsync.models import CalendarSyncError
from calsync.models import ExchangeAppointment
from calsync.models import SyncConfig

# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="One-way sync of Exchange appointments into a Google calendar.",
)

console = Console()

CONFIG_SECTION = "calsync"


# ---------------------------------------------------------------------------
# Global state shared across subcommands
# ---------------------------------------------------------------------------


@dataclass
class _State:
    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG)
    verbose: bool = False


state = _State()


@app.callback()
def _global(
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help=f"Config file path (default: {DEFAULT_CONFIG})"),
    ] = DEFAULT_CONFIG,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose debug output"),
    ] = False,
) -> None:
    state.config_path = config
    state.verbose = verbose
    _setup_logging(verbose)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False, console=console)],
    )


def _load_config_file(config_path: Path) -> dict[str, str]:
    if not config_path.exists():
        return {}
    parser = ConfigParser()
    parser.read(config_path)
    if CONFIG_SECTION not in parser:
        return {}
    return dict(parser[CONFIG_SECTION])


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in ("1", "yes", "true", "on"):
        return True
    if lowered in ("0", "no", "false", "off"):
        return False
    raise typer.BadParameter(f"Not a boolean in config file: {value!r}")


def _build_config(
    calendar: str | None,
    dry_run: bool,
    yes: bool,
    include_body: bool | None = None,
) -> SyncConfig:
    config_file = _load_config_file(state.config_path)
    calendar_id = calendar or config_file.get("google_calendar_id")

    if not calendar_id:
        console.print(
            "[bold red]Error:[/] A Google calendar ID must be provided via "
            "[cyan]--calendar[/] or [cyan]google_calendar_id[/] in the config file."
        )
        raise typer.Exit(1)

    if include_body is None:
        include_body = _parse_bool(config_file.get("include_event_body"), False)

    try:
        total_sync_days = int(config_file.get("total_sync_days", DEFAULT_TOTAL_SYNC_DAYS))
    except ValueError:
        raise typer.BadParameter("total_sync_days must be an integer") from None
    if total_sync_days < 1:
        raise typer.BadParameter("total_sync_days must be at least 1")

    client_secrets = config_file.get("client_secrets")
    token_file = config_file.get("token_file")

    return SyncConfig(
        google_calendar_id=calendar_id,
        client_secrets=Path(client_secrets).expanduser() if client_secrets else None,
        token_file=Path(token_file).expanduser() if token_file else DEFAULT_TOKEN_FILE,
        include_event_body=include_body,
        include_canceled_events=_parse_bool(config_file.get("include_canceled_events"), False),
        total_sync_days=total_sync_days,
        dry_run=dry_run,
        verbose=state.verbose,
        yes=yes,
    )


def _run_sync(cfg: SyncConfig, appointments_path: Path) -> None:
    """Core sync runner: display panel, confirm, run, show results."""
    from calsync.google_client import GoogleCalendarClient
    from calsync.google_client import build_service
    from calsync.sync import CalendarSynchronizer

    # -- Info panel ----------------------------------------------------------
    info = Text()
    info.append("  Source:    ", style="bold")
    info.append(f"{appointments_path}\n")
    info.append("  Calendar:  ", style="bold")
    info.append(f"{cfg.google_calendar_id}\n")
    info.append("  Window:    ", style="bold")
    info.append(f"{cfg.total_sync_days} days\n")
    info.append("  Bodies:    ", style="bold")
    if cfg.include_event_body:
        info.append("included", style="yellow")
    else:
        info.append("hidden", style="green")
    if cfg.include_canceled_events:
        info.append("\n  Canceled:  ", style="bold")
        info.append("included", style="yellow")
    if cfg.dry_run:
        info.append("\n  Mode:      ")
        info.append("DRY RUN", style="bold magenta")

    console.print(Panel(info, title="[bold]Calendar Sync[/bold]"))

    # -- Confirmation --------------------------------------------------------
    if not cfg.yes and not cfg.dry_run:
        typer.confirm("Proceed?", abort=True)

    # -- Run -----------------------------------------------------------------
    try:
        appointments = load_appointments(appointments_path)
        service = build_service(cfg.client_secrets, cfg.token_file)
        client = GoogleCalendarClient(service, cfg.google_calendar_id)
        stats = CalendarSynchronizer(cfg, client).run(appointments)
    except CalendarSyncError as e:
        console.print(f"[bold red]Sync failed:[/] {e}")
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted by user[/]")
        raise typer.Exit(130) from None
    except Exception as e:
        console.print_exception()
        console.print(f"[bold red]Unexpected error:[/] {e}")
        raise typer.Exit(1) from e

    # -- Results table -------------------------------------------------------
    results = Table.grid(padding=(0, 2))
    results.add_column(style="bold")
    results.add_column(justify="right")
    results.add_row("Added", str(stats.added))
    results.add_row("Deleted", str(stats.deleted))
    results.add_row("Unchanged", str(stats.unchanged))
    error_val = Text(str(stats.errors))
    if stats.errors == 0:
        error_val.append(" ✓", style="green")
    else:
        error_val.stylize("bold red")
    results.add_row("Errors", error_val)

    console.print(Panel(results, title="[bold]Results[/bold]", expand=False))

    if stats.errors:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

_APPOINTMENTS_ARG = Annotated[
    Path,
    typer.Argument(help="JSON export of Exchange appointments", exists=True, dir_okay=False),
]
_CALENDAR_OPT = Annotated[
    str | None,
    typer.Option("--calendar", "-g", help="Google calendar ID (overrides config)"),
]
_INCLUDE_BODY = Annotated[
    bool | None,
    typer.Option(
        "--include-body/--no-include-body",
        help="Copy appointment bodies as plain text (overrides config; hidden by default)",
        show_default=False,
    ),
]
_DRY_RUN = Annotated[bool, typer.Option("--dry-run", "-n", help="Preview changes without applying")]
_YES = Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")]


@app.command()
def sync(
    appointments: _APPOINTMENTS_ARG,
    calendar: _CALENDAR_OPT = None,
    include_body: _INCLUDE_BODY = None,
    dry_run: _DRY_RUN = False,
    yes: _YES = False,
) -> None:
    """Mirror Exchange appointments into the Google calendar.

    Events missing from Google are created; Google events with no matching
    appointment are removed.
    """
    _run_sync(
        _build_config(calendar, dry_run=dry_run, yes=yes, include_body=include_body),
        appointments,
    )


@app.command()
def preview(
    appointments: _APPOINTMENTS_ARG,
    include_body: _INCLUDE_BODY = None,
) -> None:
    """Print the Google event bodies the appointments map to, as JSON."""
    config_file = _load_config_file(state.config_path)
    if include_body is None:
        include_body = _parse_bool(config_file.get("include_event_body"), False)

    try:
        records = load_appointments(appointments)
    except CalendarSyncError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1) from None

    bodies = []
    errors = 0
    for index, record in enumerate(records):
        try:
            appointment = ExchangeAppointment.from_dict(record)
            bodies.append(
                EventMapper.to_google_event(
                    EventMapper.from_exchange_appointment(appointment, include_body)
                )
            )
        except CalendarSyncError as e:
            console.print(f"[bold red]Skipping record {index}:[/] {e}")
            errors += 1

    console.print_json(json.dumps(bodies))

    if errors:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    app()
