"""Command-line interface for testthat."""

import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from testthat import __version__
from testthat.config import TestThatConfig, create_example_config
from testthat.reporters import REPORTERS, RunSummary


console = Console()


def load_config(config_path: Optional[str]) -> TestThatConfig:
    """Load the configuration or exit with an error message."""
    try:
        return TestThatConfig.load_or_default(config_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print("Run [bold]testthat init[/bold] to create a configuration file")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="testthat")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: testthat.json, searched upwards)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """testthat - run tests made of expectations."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="testthat.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Create a testthat configuration file."""
    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]Created configuration file:[/green] {output_path}")


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--reporter",
    "-r",
    type=click.Choice(sorted(REPORTERS), case_sensitive=False),
    help="Reporter to use (overrides the configuration)",
)
@click.pass_context
def run(ctx: click.Context, files: tuple[str, ...], reporter: Optional[str]) -> None:
    """Run the tests in FILES."""
    from testthat.logging_utils import configure_logging
    from testthat.runner import TestFileError, test_files_with_config

    config = load_config(ctx.obj.get("config_path"))
    if reporter:
        config.reporter.name = reporter.lower()

    level = "DEBUG" if ctx.obj.get("verbose") else config.logging.level
    log_file = Path(config.logging.file) if config.logging.file else None
    configure_logging(level, log_file)

    try:
        summary = test_files_with_config(files, config)
    except TestFileError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    _display_results_summary(summary)

    if not summary.success:
        sys.exit(1)


def _display_results_summary(summary: RunSummary) -> None:
    """Display a summary table of test results."""
    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Total Tests", str(summary.total))
    table.add_row("Passed", f"[green]{summary.passed}[/green]")
    table.add_row("Failed", f"[red]{summary.failed}[/red]")
    table.add_row("Errors", f"[red]{summary.errors}[/red]")
    table.add_row("Skipped", f"[yellow]{summary.skipped}[/yellow]")
    table.add_row("Duration", f"{summary.duration_ms}ms")

    console.print(table)


if __name__ == "__main__":
    main()
