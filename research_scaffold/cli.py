"""Command-line interface for research-scaffold.

Commands:
    research-scaffold init: Create a project skeleton with its first study
    research-scaffold add-study: Add a study to an existing project
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any, Callable, NoReturn, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from research_scaffold import config
from research_scaffold.errors import PartialFailure, ScaffoldError
from research_scaffold.scaffold.orchestrator import add_study, init_project
from research_scaffold.scaffold.types import ArtifactResult, ScaffoldReport, parse_mode

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="research-scaffold",
    help="Scaffold reproducible research projects and studies",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

_ACTION_STYLES = {"written": "green", "skipped": "dim"}


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    load_dotenv()
    level = logging.DEBUG if verbose else config.log_level()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def display_results(results: list[ArtifactResult], title: str) -> None:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Path", style="cyan", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Action", justify="center")
    for r in results:
        style = _ACTION_STYLES.get(r.action, "white")
        table.add_row(str(r.relative_path), r.kind, f"[{style}]{r.action}[/{style}]")
    console.print(table)


def _print_warnings(report: ScaffoldReport) -> None:
    for w in report.warnings:
        console.print(f"[yellow]Warning:[/yellow] {w}")


def _mode_option(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    if parse_mode(raw) is None:
        raise typer.BadParameter("mode must be 'literate' or 'scripted'")
    return raw.strip().lower()


def _fail(exc: ScaffoldError) -> NoReturn:
    if isinstance(exc, PartialFailure) and exc.results:
        display_results(exc.results, "Handled before the failure")
    typer.echo(typer.style(f"Error: {exc}", fg="red"), err=True)
    raise typer.Exit(1)


def _run(func: Callable[..., ScaffoldReport], *args: Any, **kwargs: Any) -> ScaffoldReport:
    try:
        return func(*args, **kwargs)
    except ScaffoldError as exc:
        _fail(exc)
    except Exception as exc:
        logger.exception("Unexpected error")
        typer.echo(typer.style(f"Error: {exc}", fg="red"), err=True)
        raise typer.Exit(2) from exc


@app.command(name="init")
def init_cmd(
    path: Annotated[
        str, typer.Argument(help="Directory to create the project in ('.' for here)")
    ] = ".",
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Project name; creates PATH/NAME unless PATH is '.'"),
    ] = None,
    study: Annotated[str, typer.Option("--study", "-s", help="Name of the first study")] = "study-1",
    mode: Annotated[
        Optional[str],
        typer.Option("--mode", "-m", help="Authoring mode (literate, scripted)"),
    ] = None,
    overwrite: Annotated[
        bool, typer.Option("--overwrite", help="Replace existing generated files")
    ] = False,
    git: Annotated[
        bool, typer.Option("--git/--no-git", help="Initialize a git repository")
    ] = False,
    open_session: Annotated[
        bool, typer.Option("--open", help="Open the project file afterwards")
    ] = False,
) -> None:
    """Create a research project skeleton."""
    chosen = _mode_option(mode) or config.default_mode()
    report = _run(
        init_project,
        path,
        project_name=name,
        study_name=study,
        overwrite=overwrite,
        mode=chosen,
        git_init=git,
        open_session=open_session,
    )

    display_results(report.results, f"Project '{report.project_name}'")
    _print_warnings(report)
    if report.all_skipped:
        console.print("Nothing to do: every artifact already exists.")
    else:
        console.print(f"[green]*[/green] Project '{report.project_name}' created successfully!")
        console.print(f"[green]*[/green] Study '{report.study.name}' initialized in studies/ folder")
    if not open_session and report.project_file is not None:
        console.print("\nTo get started:")
        console.print(f"   Open the project: {report.project_file}")


@app.command(name="add-study")
def add_study_cmd(
    name: Annotated[str, typer.Argument(help="Name of the new study folder")],
    path: Annotated[Path, typer.Option("--path", "-p", help="Project root")] = Path("."),
    mode: Annotated[
        Optional[str],
        typer.Option("--mode", "-m", help="Authoring mode; detected from existing studies if omitted"),
    ] = None,
    git: Annotated[
        Optional[bool],
        typer.Option("--git/--no-git", help="Stage and commit the new study"),
    ] = None,
    overwrite: Annotated[
        bool, typer.Option("--overwrite", help="Replace an existing study's files")
    ] = False,
    resume: Annotated[
        bool,
        typer.Option("--resume", help="Complete a study left unfinished by a failed run"),
    ] = False,
) -> None:
    """Add a study to an existing project."""
    report = _run(
        add_study,
        name,
        path=path,
        mode=_mode_option(mode),
        git_add=git,
        overwrite=overwrite,
        resume=resume,
    )

    display_results(report.results, f"Study '{report.study.name}'")
    _print_warnings(report)
    console.print(
        f"[green]*[/green] Study '{report.study.name}' added in {report.study.authoring_mode} mode"
    )
    if report.git_committed:
        console.print(f"[green]*[/green] Added to git with commit: Add {report.study.name}")
    console.print("\nStart working on your new study:")
    console.print(f"   {report.study.layout.code}")


if __name__ == "__main__":
    app()
