"""Command-line interface for critpath."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .config import UnifiedConfig, discover_config
from .engine import DateSpanDurationResolver, build_graph
from .exceptions import CritpathError
from .graph import GraphGenerator, GraphView
from .logger import setup_logger
from .models import Project
from .parser import load_project
from .service import CriticalPathService
from .store import YamlTaskStore
from .summary import CriticalPathReport, error_response

app = typer.Typer(
    name="critpath",
    help="Critical path scheduling for project task snapshots",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity: 0=errors only (default), 1=critical path changes, 2=pass progress, 3=per-task timings",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: critpath_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for critpath commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def _load(file: Path) -> tuple[Project, UnifiedConfig]:
    try:
        return load_project(file), discover_config(file)
    except CritpathError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


@app.command()
def compute(
    file: Annotated[Path, typer.Argument(help="Path to the project snapshot YAML file")] = Path(
        "project.yaml"
    ),
    *,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the API response envelope as JSON")
    ] = False,
    output_csv: Annotated[
        Path | None,
        typer.Option("--output-csv", help="Export every task's timings to a CSV file"),
    ] = None,
    mark: Annotated[
        bool,
        typer.Option("--mark", help="Write is_on_critical_path flags back to the snapshot file"),
    ] = False,
) -> None:
    """Compute the critical path and display or persist the results."""
    project, config = _load(file)
    service = CriticalPathService(YamlTaskStore(file), config, context.get_project_locks())

    try:
        if mark:
            previous = {task_id for task_id, flag in project.critical_flags.items() if flag}
            report = service.recompute(project.id, previous=previous)
        else:
            report = service.analyze(project.id)
    except CritpathError as e:
        if as_json:
            typer.echo(json.dumps(error_response(e), indent=2))
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    # With --json, stdout carries only the envelope; status lines go to stderr
    if output_csv:
        _export_timings_csv(project, report, output_csv)
        typer.echo(f"Timings exported to {output_csv}", err=as_json)

    if as_json:
        typer.echo(json.dumps(report.to_response(), indent=2))
    elif not output_csv:
        _display_results(project, report)

    if mark:
        typer.echo(f"Critical path flags written to {file}", err=as_json)

    if report.result.warnings and not as_json:
        typer.echo("\nWarnings:", err=True)
        for warning in report.result.warnings:
            typer.echo(f"  - {warning}", err=True)


def _display_results(project: Project, report: CriticalPathReport) -> None:
    """Display timing table and critical path to stdout."""
    result = report.result
    title = project.name or project.id
    typer.echo(f"Critical Path: {title}")
    typer.echo("=" * 80)
    typer.echo(f"Project duration: {result.project_duration} days")
    typer.echo("")

    if result.is_empty:
        typer.echo("No tasks.")
        return

    header = f"{'Task':<24} {'ES':>5} {'EF':>5} {'LS':>5} {'LF':>5} {'Slack':>6}  Critical"
    typer.echo(header)
    typer.echo("-" * len(header))
    for task_id, timing in result.timings.items():
        marker = "*" if timing.is_critical else ""
        typer.echo(
            f"{task_id:<24} {timing.earliest_start:>5} {timing.earliest_finish:>5} "
            f"{timing.latest_start:>5} {timing.latest_finish:>5} {timing.slack:>6}  {marker}"
        )

    typer.echo("")
    typer.echo("Critical path:")
    for summary in report.critical_path:
        assignee = f" [{summary.assignee}]" if summary.assignee else ""
        typer.echo(f"  {summary.title} ({summary.id}){assignee} - risk: {summary.risk.value}")


def _export_timings_csv(project: Project, report: CriticalPathReport, output_path: Path) -> None:
    """Export every task's timings to CSV."""
    with output_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(
            [
                "task_id",
                "title",
                "duration",
                "earliest_start",
                "earliest_finish",
                "latest_start",
                "latest_finish",
                "slack",
                "critical",
            ]
        )
        for task_id, timing in report.result.timings.items():
            task = project.get_task_by_id(task_id)
            writer.writerow(
                [
                    task_id,
                    task.title if task else "",
                    timing.earliest_finish - timing.earliest_start,
                    timing.earliest_start,
                    timing.earliest_finish,
                    timing.latest_start,
                    timing.latest_finish,
                    timing.slack,
                    "yes" if timing.is_critical else "no",
                ]
            )


@app.command()
def graph(
    file: Annotated[Path, typer.Argument(help="Path to the project snapshot YAML file")] = Path(
        "project.yaml"
    ),
    *,
    view: Annotated[
        GraphView, typer.Option("--view", help="Type of graph to generate")
    ] = GraphView.ALL,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Generate the dependency graph in DOT format with the critical path highlighted."""
    project, config = _load(file)
    service = CriticalPathService(YamlTaskStore(file), config, context.get_project_locks())

    try:
        report = service.analyze(project.id)
    except CritpathError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    dot_output = GraphGenerator(project, report.result).generate(view)

    if output:
        output.write_text(dot_output, encoding="utf-8")
        typer.echo(f"Graph written to {output}")
    else:
        typer.echo(dot_output)


@app.command()
def validate(
    file: Annotated[Path, typer.Argument(help="Path to the project snapshot YAML file")] = Path(
        "project.yaml"
    ),
) -> None:
    """Check a snapshot for dangling dependencies and cycles."""
    project, config = _load(file)
    resolver = DateSpanDurationResolver(config.engine.default_duration_days)

    try:
        task_graph = build_graph(project.tasks, resolver)
    except CritpathError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    for warning in task_graph.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    typer.echo(
        f"OK: {len(task_graph)} tasks, {len(task_graph.edges())} dependencies, "
        f"{len(task_graph.warnings)} ignored"
    )


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
