"""
Main CLI application using Typer.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Annotated, Iterator, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.database import create_db_engine, create_session_factory, init_db
from ..adapters.holiday_lookup import WorkalendarHolidayLookup
from ..adapters.interval_store import SqlIntervalStore
from ..adapters.roster import ConfigGroupRoster
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import DayfinderError
from ..domain.models import CalendarMonth, DayCell
from ..services.availability import AvailabilityService
from ..services.group_views import AggregationEngine, CalendarGridBuilder

app = typer.Typer(
    name="dayfinder",
    help="Find the dates on which a whole group is available",
    add_completion=False
)

console = Console()

_state = {"verbose": False}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]

COVERAGE_STYLES = {
    "full": "bold green",
    "high": "blue",
    "medium": "yellow",
    "low": "white",
}


@dataclass
class _AppContext:
    config: AppConfig
    availability: AvailabilityService
    aggregation: AggregationEngine
    grid_builder: CalendarGridBuilder


def _configure_logging(level: str) -> None:
    """Route log records through rich, once per process."""
    root = logging.getLogger()
    if any(isinstance(handler, RichHandler) for handler in root.handlers):
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _build_context(config_file: Optional[Path]) -> _AppContext:
    """Load the configuration and wire adapters and services together."""
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)
    _configure_logging("DEBUG" if _state["verbose"] else config.log_level)

    engine = create_db_engine(config.database_url)
    init_db(engine)
    store = SqlIntervalStore(create_session_factory(engine))
    holidays = WorkalendarHolidayLookup()
    roster = ConfigGroupRoster(config)

    return _AppContext(
        config=config,
        availability=AvailabilityService(
            store, holiday_lookup=holidays, country_code=config.country_code
        ),
        aggregation=AggregationEngine(store, roster, holidays, config.country_code),
        grid_builder=CalendarGridBuilder(
            store, roster, holidays, config.country_code, timezone=config.timezone
        ),
    )


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Print expected failures in red and exit with status 1."""
    try:
        yield
    except (DayfinderError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


def _parse_date(value: str, label: str) -> date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        raise ValueError(f"Could not parse {label} '{value}' (expected YYYY-MM-DD): {e}") from e


def _parse_month(value: Optional[str], timezone: str) -> date:
    if not value:
        return pendulum.today(timezone).date().replace(day=1)
    try:
        return pendulum.from_format(value, "YYYY-MM").date()
    except ValueError as e:
        raise ValueError(f"Could not parse month '{value}' (expected YYYY-MM): {e}") from e


def _format_cell(cell: DayCell) -> str:
    text = f"{cell.day_number:>2}"
    if cell.total_members:
        text += f"\n{cell.user_count}/{cell.total_members}"
    if cell.viewer_available:
        text += " ✓"

    if not cell.is_in_month or cell.disabled:
        return f"[dim]{text}[/dim]"
    style = COVERAGE_STYLES[cell.coverage_level] if cell.user_count else "white"
    if cell.is_holiday:
        style = "magenta"
    if cell.is_today:
        style += " underline"
    return f"[{style}]{text}[/{style}]"


def _render_calendar(calendar: CalendarMonth) -> Table:
    table = Table(title=calendar.month_name, show_header=True, header_style="bold cyan")
    for weekday in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"):
        table.add_column(weekday, justify="center")
    for week in calendar.weeks():
        table.add_row(*[_format_cell(cell) for cell in week])
    return table


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Declare availability and find the dates that suit the whole group.
    """
    _state["verbose"] = verbose


@app.command()
def add(
    user: Annotated[str, typer.Argument(help="User id")],
    group: Annotated[str, typer.Argument(help="Group id")],
    start: Annotated[str, typer.Argument(help="First available day (YYYY-MM-DD)")],
    end: Annotated[str, typer.Argument(help="Last available day (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
):
    """
    Declare a range of available days, merged with overlapping or adjacent ones.
    """
    with _handle_errors():
        ctx = _build_context(config_file)
        interval = ctx.availability.add(
            user, group, _parse_date(start, "start date"), _parse_date(end, "end date")
        )
        console.print(f"[green]✓ Available {interval.date_range}[/green] (#{interval.id})")


@app.command()
def remove(
    user: Annotated[str, typer.Argument(help="User id")],
    group: Annotated[str, typer.Argument(help="Group id")],
    start: Annotated[str, typer.Argument(help="First day to remove (YYYY-MM-DD)")],
    end: Annotated[str, typer.Argument(help="Last day to remove (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
):
    """
    Remove a range of days from a member's availability.
    """
    with _handle_errors():
        ctx = _build_context(config_file)
        ctx.availability.remove(
            user, group, _parse_date(start, "start date"), _parse_date(end, "end date")
        )
        console.print(f"[green]✓ Removed {start} - {end}[/green]")


@app.command("list")
def list_intervals(
    user: Annotated[str, typer.Argument(help="User id")],
    group: Annotated[str, typer.Argument(help="Group id")],
    config_file: ConfigOption = None,
):
    """
    List a member's availability in a group.
    """
    with _handle_errors():
        ctx = _build_context(config_file)
        intervals = ctx.availability.list_intervals(user, group)

        if not intervals:
            console.print("[yellow]No availability declared yet.[/yellow]")
            return

        table = Table(title=f"Availability of {user} in {group}", header_style="bold cyan")
        table.add_column("ID", style="dim")
        table.add_column("Range", style="bold yellow")
        table.add_column("Days", justify="right")
        for interval in intervals:
            table.add_row(str(interval.id), str(interval.date_range), str(interval.days()))

        console.print()
        console.print(table)
        total = ctx.availability.member_availability_days(user, group)
        console.print(f"Total: {total} day(s)\n")


@app.command()
def delete(
    user: Annotated[str, typer.Argument(help="User id")],
    group: Annotated[str, typer.Argument(help="Group id")],
    interval_ids: Annotated[List[int], typer.Argument(help="Interval ids to delete")],
    config_file: ConfigOption = None,
):
    """
    Delete some of your own intervals by id.
    """
    with _handle_errors():
        ctx = _build_context(config_file)
        if len(interval_ids) == 1:
            ctx.availability.delete_interval(user, group, interval_ids[0])
            deleted = 1
        else:
            deleted = ctx.availability.batch_delete(user, group, interval_ids)
        console.print(f"[green]✓ Deleted {deleted} interval(s)[/green]")


@app.command()
def results(
    group: Annotated[str, typer.Argument(help="Group id")],
    limit: Annotated[int, typer.Option("--limit", "-n", help="Show at most this many dates")] = 20,
    config_file: ConfigOption = None,
):
    """
    Show the best dates of a group, most available members first.
    """
    with _handle_errors():
        ctx = _build_context(config_file)
        rows = ctx.aggregation.results(group)

        if not rows:
            console.print("[yellow]⚠ No availability declared in this group yet.[/yellow]")
            return

        table = Table(title=f"Best dates for {group}", header_style="bold cyan")
        table.add_column("Date", style="bold")
        table.add_column("Weekday")
        table.add_column("Members", justify="right")
        table.add_column("%", justify="right")
        table.add_column("Who")
        table.add_column("Holiday", style="magenta")
        for row in rows[:limit]:
            style = "green" if row.is_full else None
            table.add_row(
                row.date.isoformat(),
                row.date.strftime("%A"),
                str(row.count),
                f"{row.percentage}",
                ", ".join(row.users),
                row.holiday_name or "",
                style=style,
            )

        console.print()
        console.print(table)
        console.print()


@app.command()
def calendar(
    group: Annotated[str, typer.Argument(help="Group id")],
    month: Annotated[Optional[str], typer.Option("--month", "-m", help="Month to show (YYYY-MM)")] = None,
    viewer: Annotated[str, typer.Option("--viewer", help="Mark the days this user is available")] = "",
    config_file: ConfigOption = None,
):
    """
    Show a month calendar with the group's coverage per day.
    """
    with _handle_errors():
        ctx = _build_context(config_file)
        target = _parse_month(month, ctx.config.timezone)
        grid = ctx.grid_builder.grid(group, target, viewer)

        console.print()
        console.print(_render_calendar(grid))
        holidays = [cell for cell in grid.days if cell.is_in_month and cell.is_holiday]
        for cell in holidays:
            console.print(f"  [magenta]{cell.date.isoformat()}[/magenta] {cell.holiday_name}")
        console.print()


@app.command()
def holidays(
    year: Annotated[Optional[int], typer.Option("--year", "-y", help="Year (defaults to the current one)")] = None,
    config_file: ConfigOption = None,
):
    """
    Preview the public holidays of a year.
    """
    with _handle_errors():
        ctx = _build_context(config_file)
        year = year or pendulum.today(ctx.config.timezone).year
        found = ctx.availability.holidays_for_year(year)

        table = Table(
            title=f"{ctx.config.country_code} holidays {year} ({len(found)})",
            header_style="bold cyan"
        )
        table.add_column("Date", style="bold")
        table.add_column("Weekday")
        table.add_column("Holiday", style="magenta")
        for holiday in found:
            table.add_row(holiday.date.isoformat(), holiday.date.strftime("%A"), holiday.name)

        console.print()
        console.print(table)
        console.print()


@app.command("add-holidays")
def add_holidays(
    user: Annotated[str, typer.Argument(help="User id")],
    group: Annotated[str, typer.Argument(help="Group id")],
    year: Annotated[Optional[int], typer.Option("--year", "-y", help="Year (defaults to the current one)")] = None,
    config_file: ConfigOption = None,
):
    """
    Mark yourself available on every public holiday of a year.
    """
    with _handle_errors():
        ctx = _build_context(config_file)
        year = year or pendulum.today(ctx.config.timezone).year
        added = ctx.availability.add_holidays(user, group, year)
        if added:
            console.print(f"[green]✓ Added {added} holiday(s) of {year}[/green]")
        else:
            console.print(f"[yellow]No holidays found for {year}.[/yellow]")


@app.command("remove-member")
def remove_member(
    user: Annotated[str, typer.Argument(help="User id")],
    group: Annotated[str, typer.Argument(help="Group id")],
    config_file: ConfigOption = None,
):
    """
    Delete all availability of a member leaving a group.
    """
    with _handle_errors():
        ctx = _build_context(config_file)
        deleted = ctx.availability.remove_member(user, group)
        console.print(f"[green]✓ Deleted {deleted} interval(s) of {user}[/green]")


@app.command()
def groups(
    config_file: ConfigOption = None,
):
    """
    List all configured groups.
    """
    with _handle_errors():
        config_path = config_file or get_default_config_path()
        config = AppConfig.load_from_yaml(config_path)

        if not config.groups:
            console.print("[yellow]No groups defined in the config file.[/yellow]")
            return

        table = Table(title="Configured groups", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="bold yellow")
        table.add_column("Name")
        table.add_column("Owner", style="dim")
        table.add_column("Members", justify="right")
        table.add_column("Weekends only")

        for group in config.groups:
            table.add_row(
                group.id,
                group.name,
                group.owner,
                str(len(group.members)),
                "yes" if group.weekends_only else "no",
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
    console.print(f"\n[bold cyan]dayfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
