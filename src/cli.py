"""Command Line Interface for Bundle-Sentinel.

This module provides a CLI using Typer for validating FHIR Bundles from the
command line, inspecting the effective configuration and serving the API.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.api.models.outcome import OperationOutcome
from src.domain.ports import BundleValidationError
from src.infrastructure.config_manager import get_app_config
from src.infrastructure.logging_config import setup_logging
from src.infrastructure.settings import APP_VERSION, settings
from src.main import validate_file

# Initialize Typer app and Rich console
app = typer.Typer(
    name="bundle-sentinel",
    help="Bundle-Sentinel: FHIR Bundle completeness and terminology validation",
    add_completion=False
)
console = Console()


@app.command()
def validate(
    input_file: Path = typer.Argument(..., help="FHIR Bundle JSON file", exists=True, dir_okay=False),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON configuration file", exists=True),
    as_json: bool = typer.Option(False, "--json", help="Print the OperationOutcome as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Validate a FHIR Bundle file.

    Exits with code 0 when no issues are found and 1 otherwise.

    Examples:
        bundle-sentinel validate bundle.json
        bundle-sentinel validate bundle.json --config sentinel.json --json
    """
    setup_logging(log_level="DEBUG" if verbose else "WARNING")

    try:
        config = get_app_config(str(config_file) if config_file else settings.config_file)
        with console.status("[bold green]Validating bundle..."):
            report = validate_file(input_file, config)
    except (BundleValidationError, FileNotFoundError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(OperationOutcome.from_report(report).to_fhir()))
    elif report.is_successful:
        console.print(f"[green]✓[/green] {input_file}: no issues found")
    else:
        issues_table = Table(show_header=True, header_style="bold")
        issues_table.add_column("#", justify="right")
        issues_table.add_column("Severity", style="red")
        issues_table.add_column("Type")
        issues_table.add_column("Message")
        issues_table.add_column("Location", style="cyan")
        for index, issue in enumerate(report.issues, start=1):
            issues_table.add_row(
                str(index),
                issue.severity.value,
                issue.code.value,
                issue.message,
                issue.location or ""
            )
        console.print(issues_table)
        console.print(f"\n[yellow]⚠[/yellow] {input_file}: {len(report.issues)} issue(s) found")

    raise typer.Exit(code=0 if report.is_successful else 1)


@app.command()
def info(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON configuration file", exists=True),
) -> None:
    """Display the effective configuration."""
    try:
        config = get_app_config(str(config_file) if config_file else settings.config_file)
    except (BundleValidationError, FileNotFoundError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    console.print("[bold blue]Configuration[/bold blue]\n")

    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_row("Application:", settings.app_name)
    info_table.add_row("Version:", APP_VERSION)
    info_table.add_row("Terminology Server:", config.terminology.base_url)
    info_table.add_row("Lookup Mode:", config.terminology.mode.value)
    info_table.add_row("Branch:", config.terminology.branch)
    info_table.add_row("Timeout:", f"{config.terminology.timeout_seconds}s")
    info_table.add_row("Concurrent Lookups:", str(config.terminology.max_workers))
    info_table.add_row("Coding System:", config.validation.target_system)
    info_table.add_row("Required Resources:", ", ".join(config.validation.required_types))

    console.print(info_table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
) -> None:
    """Run the validation API with uvicorn."""
    import uvicorn

    logging.getLogger(__name__).info("Starting API server")
    uvicorn.run(
        "src.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower()
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version information")
) -> None:
    """Bundle-Sentinel: FHIR Bundle completeness and terminology validation."""
    if version:
        console.print(f"Bundle-Sentinel v{APP_VERSION}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
