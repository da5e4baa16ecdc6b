"""CLI entry point for the training scheduler."""

import logging
from dataclasses import replace
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .exceptions import SchedulingError
from .exporters import get_exporter
from .loader import SchedulingInput, load_scheduling_input, validate_input
from .models import ScheduleResult, SchedulingMode, WarningSeverity
from .scheduler import CapacityPlanner, SchedulingEngine, group_trainees_by_location
from .scheduler.capacity import total_training_hours

app = typer.Typer(
    name="training-scheduler",
    help="Generate conflict-free training session timetables",
    add_completion=False,
)
console = Console()


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    csv = "csv"
    excel = "excel"


SEVERITY_STYLES = {
    WarningSeverity.INFO: "blue",
    WarningSeverity.WARNING: "yellow",
    WarningSeverity.ERROR: "red",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load(
    input_file: Path,
    trainees_file: Path | None,
    mode: SchedulingMode | None = None,
    start_date: str | None = None,
) -> SchedulingInput:
    """Load the input document, applying command-line overrides."""
    try:
        data = load_scheduling_input(input_file, trainees_path=trainees_file)
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if mode is not None:
        data.criteria = replace(data.criteria, mode=mode)
    if start_date:
        try:
            data.criteria = replace(data.criteria, start_date=date.fromisoformat(start_date))
        except ValueError:
            console.print(f"[bold red]Error:[/bold red] Invalid start date: {start_date}")
            raise typer.Exit(1)
    return data


@app.command()
def schedule(
    input_file: Annotated[
        Path,
        typer.Argument(help="JSON document with criteria, courses and trainees"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file or directory path"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Output format"),
    ] = OutputFormat.json,
    mode: Annotated[
        Optional[SchedulingMode],
        typer.Option("-m", "--mode", help="Override the scheduling mode"),
    ] = None,
    start_date: Annotated[
        Optional[str],
        typer.Option("--start-date", help="Override the start date (YYYY-MM-DD)"),
    ] = None,
    trainees_file: Annotated[
        Optional[Path],
        typer.Option("--trainees", help="CSV or Excel table of trainees"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Generate a training timetable."""
    _configure_logging(verbose)
    data = _load(input_file, trainees_file, mode, start_date)

    console.print(f"\n[bold]Schedule Generation for:[/bold] {input_file.name}")
    console.print(f"  Courses: {len(data.courses)}")
    console.print(f"  Trainees: {len(data.trainees)}")
    console.print(f"  Mode: {data.criteria.mode.value}")

    try:
        with console.status("[bold green]Creating schedule..."):
            result = SchedulingEngine().schedule(data.trainees, data.courses, data.criteria)
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    _show_summary(result)
    _show_warnings(result, verbose)
    if verbose:
        _show_sessions(result)

    if output:
        exporter = get_exporter(format.value)

        if format == OutputFormat.csv:
            # CSV exports to directory
            output_path = output if output.is_dir() or not output.suffix else output.parent / output.stem
        else:
            suffix = ".xlsx" if format == OutputFormat.excel else ".json"
            output_path = output if output.suffix else output.with_suffix(suffix)

        with console.status(f"[bold green]Exporting to {format.value}..."):
            exporter.export(result, output_path)

        console.print(f"\n[bold green]✓[/bold green] Exported to: {output_path}")


@app.command()
def capacity(
    input_file: Annotated[
        Path,
        typer.Argument(help="JSON document with criteria, courses and trainees"),
    ],
    trainees_file: Annotated[
        Optional[Path],
        typer.Option("--trainees", help="CSV or Excel table of trainees"),
    ] = None,
) -> None:
    """Estimate the classrooms needed at each location."""
    data = _load(input_file, trainees_file)
    criteria = data.criteria
    catalogue = {c.id: c for c in data.courses}
    planner = CapacityPlanner()

    table = Table(title="Classroom Requirements")
    table.add_column("Location", style="cyan")
    table.add_column("Trainees", style="green", justify="right")
    table.add_column("Training Hours", style="green", justify="right")
    table.add_column("Classrooms", style="magenta", justify="right")
    table.add_column("Status")

    for location, trainees in group_trainees_by_location(data.trainees).items():
        requirement = planner.classrooms_needed(
            total_training_hours(trainees, catalogue), criteria, location
        )
        available = (criteria.available_classrooms or {}).get(location)
        validation = planner.validate_capacity(requirement.number_of_classrooms, available)
        style = SEVERITY_STYLES.get(validation.severity, "green")
        table.add_row(
            location,
            str(len(trainees)),
            f"{requirement.total_training_hours:g}",
            str(requirement.number_of_classrooms),
            f"[{style}]{validation.message}[/{style}]",
        )

    console.print(table)


@app.command()
def validate(
    input_file: Annotated[
        Path,
        typer.Argument(help="JSON document with criteria, courses and trainees"),
    ],
    trainees_file: Annotated[
        Optional[Path],
        typer.Option("--trainees", help="CSV or Excel table of trainees"),
    ] = None,
) -> None:
    """Validate an input document without scheduling."""
    data = _load(input_file, trainees_file)
    problems = validate_input(data)

    console.print(f"\n[bold]Validation Results for:[/bold] {input_file.name}")
    console.print(f"  Courses: {len(data.courses)}")
    console.print(f"  Trainees: {len(data.trainees)}")

    if not problems:
        console.print("[bold green]✓ Input is valid[/bold green]")
        return

    console.print("[bold red]✗ Input has issues[/bold red]")
    console.print(f"\n[bold red]Errors ({len(problems)}):[/bold red]")
    for problem in problems:
        console.print(f"  [red]• {problem}[/red]")
    raise typer.Exit(1)


def _show_summary(result: ScheduleResult) -> None:
    stats = result.statistics

    overview_table = Table(title="Overview", show_header=False)
    overview_table.add_column("Metric", style="cyan")
    overview_table.add_column("Value", style="green")

    overview_table.add_row("Sessions", str(stats.total_sessions))
    overview_table.add_row("Session Parts", str(stats.total_parts))
    overview_table.add_row("Training Hours", f"{stats.total_hours:g}")
    overview_table.add_row("Warnings", str(len(result.warnings)))

    console.print(overview_table)

    if stats.by_location:
        location_table = Table(title="Sessions by Location")
        location_table.add_column("Location", style="cyan")
        location_table.add_column("Sessions", style="green", justify="right")
        location_table.add_column("Classrooms", style="magenta", justify="right")
        location_table.add_column("Booked Hours", style="green", justify="right")

        for location, count in stats.by_location.items():
            utilization = stats.utilization.get(location, {})
            location_table.add_row(
                location,
                str(count),
                str(stats.classrooms_used.get(location, 0)),
                f"{utilization.get('booked_hours', 0):g}",
            )

        console.print(location_table)


def _show_warnings(result: ScheduleResult, verbose: bool) -> None:
    shown = [
        w for w in result.warnings if verbose or w.severity != WarningSeverity.INFO
    ]
    if not shown:
        return

    console.print(f"\n[bold yellow]Warnings ({len(shown)}):[/bold yellow]")
    for warning in shown:
        style = SEVERITY_STYLES[warning.severity]
        prefix = f"{warning.location}: " if warning.location else ""
        console.print(f"  [{style}]• {prefix}{warning.message}[/{style}]")


def _show_sessions(result: ScheduleResult) -> None:
    """Show the first scheduled parts in a table."""
    parts = result.parts
    if not parts:
        return

    sessions_table = Table(title="Sessions")
    sessions_table.add_column("Start", style="cyan")
    sessions_table.add_column("End", style="cyan")
    sessions_table.add_column("Location", style="blue")
    sessions_table.add_column("Classroom", style="magenta")
    sessions_table.add_column("Title", style="green", max_width=50)

    for part in parts[:30]:  # Limit to first 30
        sessions_table.add_row(
            f"{part.start:%Y-%m-%d %H:%M}",
            f"{part.end:%H:%M}",
            part.location,
            part.classroom_key,
            part.title,
        )

    if len(parts) > 30:
        sessions_table.add_row("...", "...", "...", "...", "...")

    console.print(sessions_table)


if __name__ == "__main__":
    app()
