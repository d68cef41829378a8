"""
Command-line interface for postmeta.

``postmeta check`` reports every broken post in a content tree;
``postmeta export`` writes the validated documents as JSON for a renderer.
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from postmeta import __version__
from postmeta.config import load_config
from postmeta.exceptions import PostmetaError
from postmeta.pipeline import PipelineReport
from postmeta.utils import get_logger, setup_logging

logger = get_logger(__name__)

app = typer.Typer(
    help="postmeta - check and export blog post front-matter.",
    no_args_is_help=True,
)

RootsArgument = typer.Argument(
    None, help="Content roots. Defaults to content.root from the configuration."
)
ConfigOption = typer.Option(
    None, "--config", "-c", help="Path to a postmeta TOML configuration file."
)
LogLevelOption = typer.Option(
    None, "--log-level", "-l", help="Override the configured log level."
)
SequentialOption = typer.Option(
    False, "--sequential", help="Process files one by one instead of concurrently."
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"postmeta v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """postmeta - check and export blog post front-matter."""


def run_report(
    roots: Optional[List[Path]],
    config_path: Optional[Path],
    log_level: Optional[str],
    sequential: bool = False,
) -> PipelineReport:
    """
    Load configuration, set up logging and run the pipeline.

    Raises:
        typer.Exit: With the error's exit code on configuration errors or a
            missing content root.
    """
    err_console = Console(stderr=True)
    try:
        config = load_config(str(config_path) if config_path else None)
    except PostmetaError as e:
        err_console.print(f"Error: {e.message}", style="red", markup=False)
        raise typer.Exit(code=e.exit_code)

    try:
        setup_logging(
            level=log_level or config.logging.level,
            structured=config.logging.structured,
        )
    except ValueError as e:
        err_console.print(f"Error: {e}", style="red", markup=False)
        raise typer.Exit(code=2)

    try:
        pipeline = config.build_pipeline(roots or None)
        if sequential:
            return pipeline.run()
        return asyncio.run(pipeline.arun())
    except PostmetaError as e:
        logger.error("command_failed", error=e.message)
        err_console.print(f"Error: {e.message}", style="red", markup=False)
        raise typer.Exit(code=e.exit_code)


def display_report(report: PipelineReport, console: Console) -> None:
    """Print failures as a table followed by a one-line summary."""
    if report.failures:
        table = Table(title="Rejected documents")
        table.add_column("File", style="cyan", no_wrap=True)
        table.add_column("Error", style="red")
        table.add_column("Details")
        for result in report.failures:
            violations = getattr(result.error, "violations", None)
            if violations:
                details = "\n".join(str(v) for v in violations)
            else:
                details = result.error.reason if result.error else ""
            table.add_row(result.path, type(result.error).__name__, details)
        console.print(table)

    summary = report.summary()
    console.print(
        f"{summary['total']} documents, {summary['valid']} valid, "
        f"{summary['failed']} failed",
        markup=False,
        highlight=False,
    )


@app.command()
def check(
    roots: Optional[List[Path]] = RootsArgument,
    config: Optional[Path] = ConfigOption,
    log_level: Optional[str] = LogLevelOption,
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
    sequential: bool = SequentialOption,
) -> None:
    """Validate every post and report all problems. Exits 1 if any post is invalid."""
    report = run_report(roots, config, log_level, sequential)
    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        display_report(report, Console())
    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def export(
    roots: Optional[List[Path]] = RootsArgument,
    config: Optional[Path] = ConfigOption,
    log_level: Optional[str] = LogLevelOption,
    strict: bool = typer.Option(
        False, "--strict", help="Exit 1 when any post was rejected."
    ),
    sequential: bool = SequentialOption,
) -> None:
    """Write the validated documents to stdout as a JSON array."""
    report = run_report(roots, config, log_level, sequential)
    documents = [document.to_dict() for document in report.documents]
    typer.echo(json.dumps(documents, indent=2, ensure_ascii=False))
    if strict and not report.ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
