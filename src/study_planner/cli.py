"""CLI entry point for the study planner."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .exceptions import PlannerError
from .exporters import get_exporter, load_plan_json
from .loader import load_graph
from .models import CourseGraph, CourseStatus
from .planner import (
    PlanRequest,
    TermPlanner,
    check_course_states,
    generate_validation_report,
    load_plan_request,
    term_label,
    validate_schedule,
)
from .planner.constants import DEFAULT_MAX_CREDITS

app = typer.Typer(
    name="study-planner",
    help="Plan multi-term course schedules from a prerequisite graph",
    add_completion=False,
)
console = Console()

STATUS_STYLES = {
    CourseStatus.COMPLETED: "blue",
    CourseStatus.SATISFIED: "green",
    CourseStatus.UNSATISFIED: "yellow",
    CourseStatus.CONFLICTED: "red",
}


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    csv = "csv"
    excel = "excel"


FORMAT_SUFFIXES = {
    OutputFormat.json: ".json",
    OutputFormat.excel: ".xlsx",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_graph_or_exit(graph_file: Path) -> CourseGraph:
    try:
        with console.status("[bold green]Loading course graph..."):
            return load_graph(graph_file)
    except PlannerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def plan(
    graph_file: Annotated[
        Path,
        typer.Argument(help="Course graph (.json, .xlsx or CSV directory)", exists=True),
    ],
    targets: Annotated[
        Optional[list[str]],
        typer.Option("-t", "--target", help="Target course code (repeatable)"),
    ] = None,
    exempted: Annotated[
        Optional[list[str]],
        typer.Option("-e", "--exempt", help="Exempted course code (repeatable)"),
    ] = None,
    request_file: Annotated[
        Optional[Path],
        typer.Option("--request", help="Plan request JSON file", exists=True),
    ] = None,
    special_terms: Annotated[
        Optional[bool],
        typer.Option("--special-terms/--no-special-terms", help="Allow short terms"),
    ] = None,
    max_credits: Annotated[
        Optional[int],
        typer.Option("--max-credits", help="Maximum credits per term"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file or directory path"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Output format"),
    ] = OutputFormat.json,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Generate a term-by-term plan for the target courses."""
    _configure_logging(verbose)
    graph = _load_graph_or_exit(graph_file)

    try:
        request = load_plan_request(request_file) if request_file else PlanRequest()
        if targets:
            request.targets = list(targets)
        if exempted:
            request.exempted = list(exempted)
        if special_terms is not None:
            request.use_special_terms = special_terms
        if max_credits is not None:
            request = PlanRequest(
                targets=request.targets,
                exempted=request.exempted,
                use_special_terms=request.use_special_terms,
                max_credits=max_credits,
                preserved=request.preserved,
            )

        with console.status("[bold green]Planning terms..."):
            result = TermPlanner(graph).plan(request)
    except PlannerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"\n[bold]Plan for:[/bold] {', '.join(result.targets)}")
    console.print(f"  Terms used: {len(result.terms)}")
    console.print(f"  Total courses: {result.total_courses}")
    console.print(f"  Total credits: {result.validation.stats.total_credits}")

    table = Table(title="Planned Terms")
    table.add_column("Term", style="cyan")
    table.add_column("Label", style="cyan")
    table.add_column("Courses", style="green")
    table.add_column("Credits", justify="right")
    for row in result.terms:
        credits = sum(
            c.credit_weight for c in map(graph.course_by_code, row.course_codes) if c
        )
        table.add_row(str(row.term_id), row.label, ", ".join(row.course_codes), str(credits))
    console.print(table)

    _print_validation(result.validation.errors, result.validation.warnings, verbose)

    if output:
        exporter = get_exporter(format.value)

        if format == OutputFormat.csv:
            # CSV exports to directory
            output_path = output if output.is_dir() else output.parent / output.stem
        else:
            if not output.suffix:
                output = output.with_suffix(FORMAT_SUFFIXES[format])
            output_path = output

        with console.status(f"[bold green]Exporting to {format.value}..."):
            exporter.export(result, output_path)

        console.print(f"\n[bold green]✓[/bold green] Exported to: {output_path}")


@app.command()
def validate(
    plan_file: Annotated[
        Path,
        typer.Argument(help="Plan JSON file", exists=True),
    ],
    graph_file: Annotated[
        Path,
        typer.Argument(help="Course graph (.json, .xlsx or CSV directory)", exists=True),
    ],
    targets: Annotated[
        Optional[list[str]],
        typer.Option("-t", "--target", help="Target course code (repeatable)"),
    ] = None,
    exempted: Annotated[
        Optional[list[str]],
        typer.Option("-e", "--exempt", help="Exempted course code (repeatable)"),
    ] = None,
    max_credits: Annotated[
        int,
        typer.Option("--max-credits", help="Maximum credits per term"),
    ] = DEFAULT_MAX_CREDITS,
) -> None:
    """Validate a plan against the prerequisite graph."""
    graph = _load_graph_or_exit(graph_file)

    try:
        terms = load_plan_json(plan_file)
    except PlannerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    result = validate_schedule(terms, graph, targets or [], max_credits, exempted or [])

    console.print(f"\n[bold]Validation Results for:[/bold] {plan_file.name}")
    console.print(generate_validation_report(result, max_credits), markup=False)

    if result.is_valid:
        console.print("[bold green]✓ Plan is valid[/bold green]")
    else:
        console.print("[bold red]✗ Plan has issues[/bold red]")
        raise typer.Exit(1)


@app.command()
def check(
    plan_file: Annotated[
        Path,
        typer.Argument(help="Plan JSON file", exists=True),
    ],
    graph_file: Annotated[
        Path,
        typer.Argument(help="Course graph (.json, .xlsx or CSV directory)", exists=True),
    ],
    exempted: Annotated[
        Optional[list[str]],
        typer.Option("-e", "--exempt", help="Exempted course code (repeatable)"),
    ] = None,
) -> None:
    """Show the status of every course in a plan."""
    graph = _load_graph_or_exit(graph_file)

    try:
        terms = load_plan_json(plan_file)
    except PlannerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    states = check_course_states(terms, graph, exempted or [])

    table = Table(title=f"Course States: {plan_file.name}")
    table.add_column("Term", style="cyan")
    table.add_column("Code", style="cyan")
    table.add_column("Status")
    table.add_column("Issues")
    for state in sorted(states.values(), key=lambda s: (s.term_id, s.code)):
        style = STATUS_STYLES[state.status]
        table.add_row(
            term_label(state.term_id),
            state.code,
            f"[{style}]{state.status.value}[/{style}]",
            "; ".join(str(issue) for issue in state.issues),
        )
    console.print(table)

    problems = [
        s for s in states.values()
        if s.status in (CourseStatus.UNSATISFIED, CourseStatus.CONFLICTED)
    ]
    if problems:
        console.print(f"\n[bold yellow]{len(problems)} course(s) need attention[/bold yellow]")
    else:
        console.print("\n[bold green]✓ All courses satisfied[/bold green]")


@app.command("graph-info")
def graph_info(
    graph_file: Annotated[
        Path,
        typer.Argument(help="Course graph (.json, .xlsx or CSV directory)", exists=True),
    ],
) -> None:
    """Show a summary of a course graph."""
    graph = _load_graph_or_exit(graph_file)

    courses = list(graph.courses())
    logic_nodes = list(graph.logic_nodes())

    console.print(f"\n[bold]Course graph:[/bold] {graph_file.name}")

    overview_table = Table(title="Overview", show_header=False)
    overview_table.add_column("Metric", style="cyan")
    overview_table.add_column("Value", style="green")
    overview_table.add_row("Courses", str(len(courses)))
    overview_table.add_row("Logic Nodes", str(len(logic_nodes)))
    overview_table.add_row("Edges", str(len(graph.edges)))
    overview_table.add_row("With Exams", str(sum(1 for c in courses if c.exam)))
    overview_table.add_row("With Preclusions", str(sum(1 for c in courses if c.preclusions)))
    console.print(overview_table)

    if logic_nodes:
        logic_table = Table(title="Logic Nodes by Type", min_width=30)
        logic_table.add_column("Type", style="cyan")
        logic_table.add_column("Count", style="green")
        counts: dict[str, int] = {}
        for node in logic_nodes:
            counts[node.kind.value] = counts.get(node.kind.value, 0) + 1
        for kind, count in sorted(counts.items()):
            logic_table.add_row(kind, str(count))
        console.print(logic_table)


def _print_validation(errors: list[str], warnings: list[str], verbose: bool) -> None:
    if not errors:
        console.print("\n[bold green]✓ Plan is valid[/bold green]")
    else:
        console.print(f"\n[bold red]Errors ({len(errors)}):[/bold red]")
        for error in errors:
            console.print(f"  [red]• {escape(error)}[/red]")

    if warnings and verbose:
        console.print(f"\n[bold yellow]Warnings ({len(warnings)}):[/bold yellow]")
        for warning in warnings:
            console.print(f"  [yellow]• {escape(warning)}[/yellow]")


if __name__ == "__main__":
    app()
