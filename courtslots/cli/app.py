"""
Main CLI application using Typer.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..adapters.snapshot_repository import JsonSnapshotRepository
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import CourtSlotsError
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="courtslots",
    help="Court availability and pricing from a venue snapshot",
    add_completion=False,
)

console = Console()

logger = logging.getLogger(__name__)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
SnapshotOption = Annotated[
    Optional[Path],
    typer.Option("--snapshot", "-s", help="Venue snapshot (JSON or YAML). Overrides the config."),
]
SampleOption = Annotated[
    bool, typer.Option("--sample", help="Use the bundled sample venue.")
]
JsonOption = Annotated[
    bool, typer.Option("--json", help="Print the raw result as JSON.")
]


def setup_logging(verbose: bool) -> None:
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s]: %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Court availability and pricing from a venue snapshot."""
    setup_logging(verbose)


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the config file, falling back to defaults when none exists."""
    config_path = config_file or get_default_config_path()

    if config_file is None and not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return AppConfig()

    return AppConfig.load_from_yaml(config_path)


def _open_repository(
    config: AppConfig,
    snapshot: Optional[Path],
    sample: bool,
) -> JsonSnapshotRepository:
    if sample:
        return JsonSnapshotRepository.sample()

    snapshot_path = snapshot or config.snapshot_path
    if snapshot_path is None:
        raise typer.BadParameter(
            "No venue snapshot given. Use --snapshot, set snapshot_path in the config, or --sample."
        )
    return JsonSnapshotRepository.load(snapshot_path)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def _money(value: float) -> str:
    return f"${value:,.2f}"


@app.command()
def availability(
    court_id: Annotated[str, typer.Argument(help="Court id")],
    date: Annotated[str, typer.Option("--date", "-d", help="Date (YYYY-MM-DD)")],
    duration: Annotated[Optional[int], typer.Option("--duration", help="Slot duration in minutes")] = None,
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    sample: SampleOption = False,
    as_json: JsonOption = False,
):
    """
    List bookable slots of a court on a date.

    Examples:

        courtslots availability court-1 --date 2025-11-24 --sample

        courtslots availability court-1 -d 2025-11-28 --duration 90 -s venue.json
    """
    try:
        config = _load_config(config_file)
        service = AvailabilityService.from_config(_open_repository(config, snapshot, sample), config)
        minutes = duration if duration is not None else config.defaults.duration_minutes
        result = service.get_availability(court_id, date, minutes)
    except (CourtSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
        return

    if result.is_closed:
        console.print(f"[yellow]⚠ {result.message}[/yellow]")
        return

    if not result.available_slots:
        console.print(f"[yellow]⚠ No {minutes} minute slots left on {date}.[/yellow]")
        return

    table = Table(
        title=f"{result.court.name} | {date} | {minutes} min",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Start", style="bold yellow", no_wrap=True)
    table.add_column("End")
    table.add_column("Price", justify="right", style="green")

    for slot in result.available_slots:
        table.add_row(slot.start_time, slot.end_time, _money(slot.price))

    console.print()
    console.print(table)
    console.print()


@app.command()
def price(
    court_id: Annotated[str, typer.Argument(help="Court id")],
    date: Annotated[str, typer.Option("--date", "-d", help="Date (YYYY-MM-DD)")],
    start: Annotated[str, typer.Option("--start", help="Start time (HH:MM)")],
    end: Annotated[str, typer.Option("--end", help="End time (HH:MM)")],
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    sample: SampleOption = False,
    as_json: JsonOption = False,
):
    """
    Itemize the price of a booking interval.
    """
    try:
        config = _load_config(config_file)
        service = AvailabilityService.from_config(_open_repository(config, snapshot, sample), config)
        quote = service.calculate_price(court_id, date, start, end)
    except (CourtSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if as_json:
        console.print_json(json.dumps(quote.to_dict()))
        return

    table = Table(title=f"{date} | {start} - {end}", show_header=True, header_style="bold cyan")
    table.add_column("Rate", style="bold yellow")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Min", justify="right")
    table.add_column("Per hour", justify="right")
    table.add_column("Amount", justify="right", style="green")

    for line in quote.breakdown:
        table.add_row(
            line.schedule_name,
            line.start_time,
            line.end_time,
            str(line.minutes),
            _money(line.price_per_hour),
            _money(line.amount),
        )

    console.print()
    console.print(table)
    console.print(f"[bold]Total:[/bold] {_money(quote.total_price)}\n")


@app.command("check-dates")
def check_dates(
    court_id: Annotated[str, typer.Argument(help="Court id")],
    dates: Annotated[List[str], typer.Argument(help="Dates (YYYY-MM-DD) to check")],
    start: Annotated[str, typer.Option("--start", help="Start time (HH:MM)")],
    duration: Annotated[Optional[int], typer.Option("--duration", help="Duration in minutes")] = None,
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    sample: SampleOption = False,
    as_json: JsonOption = False,
):
    """
    Check one start time across several dates.
    """
    try:
        config = _load_config(config_file)
        service = AvailabilityService.from_config(_open_repository(config, snapshot, sample), config)
        minutes = duration if duration is not None else config.defaults.duration_minutes
        checks = service.check_dates(court_id, dates, start, minutes)
    except (CourtSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if as_json:
        console.print_json(json.dumps([check.to_dict() for check in checks]))
        return

    for check in checks:
        if check.available:
            console.print(f"  [green]✓[/green] {check.date} {start} ({minutes} min) {_money(check.price)}")
        else:
            console.print(f"  [red]✗[/red] {check.date} {start} [dim]{check.reason}[/dim]")


@app.command()
def courts(
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    sample: SampleOption = False,
):
    """
    List the bookable courts of a venue snapshot.
    """
    try:
        config = _load_config(config_file)
        repository = _open_repository(config, snapshot, sample)
    except (CourtSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(title="Courts", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="bold yellow", no_wrap=True)
    table.add_column("Name")
    table.add_column("60 min", justify="right")
    table.add_column("90 min", justify="right", style="dim")
    table.add_column("120 min", justify="right", style="dim")

    for court in repository.list_courts():
        if not court.is_active:
            continue
        table.add_row(
            court.id,
            court.name,
            _money(court.price_per_hour),
            _money(court.price_per_hour_90) if court.price_per_hour_90 else "-",
            _money(court.price_per_hour_120) if court.price_per_hour_120 else "-",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]courtslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
