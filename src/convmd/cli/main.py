"""Main CLI application using Typer."""

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from convmd import __version__
from convmd.cli.callbacks import validate_dialect, validate_output_dir
from convmd.config.constants import APP_NAME
from convmd.config.settings import RunConfig, get_settings
from convmd.core.pipeline import BatchResult, DocumentConverter, PipelineResult
from convmd.exceptions import ConfigurationError, UnsupportedDialectPairError
from convmd.mapper.registry import get_mapper, supported_pairs
from convmd.utils.fs import discover_files, ensure_directory, shorten_path
from convmd.utils.logging import get_logger, setup_task_logging

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name=APP_NAME,
    help="Convert markdown blog drafts between static-site dialects.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()
log = get_logger(__name__)

# Maximum number of failed files listed in the summary
MAX_LISTED_FAILURES = 10


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]{APP_NAME}[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.command()
def convert(
    indir: Annotated[
        Path,
        typer.Argument(
            help="Directory containing the source documents.",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    outdir: Annotated[
        Path,
        typer.Argument(
            help="Directory receiving the converted documents.",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            callback=validate_output_dir,
        ),
    ],
    inmat: Annotated[
        str,
        typer.Argument(
            help="Input dialect: default (d).",
            callback=validate_dialect,
        ),
    ],
    outmat: Annotated[
        str,
        typer.Argument(
            help="Output dialect: jekyll (j).",
            callback=validate_dialect,
        ),
    ],
    asset_dir: Annotated[
        str | None,
        typer.Option(
            "--asset-dir",
            help="Directory image references are moved into (default: /assets/img).",
        ),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option(
            "--recursive",
            "-r",
            help="Recursively process subdirectories.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show planned outputs without writing anything.",
        ),
    ] = False,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log-dir",
            help="Directory for the run's log file.",
            file_okay=False,
            dir_okay=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Convert every markdown document in INDIR from INMAT to OUTMAT.

    Examples:
        convmd ./drafts ./_posts default jekyll
        convmd ./drafts ./_posts d j --asset-dir /assets/images
        convmd ./drafts ./_posts d j --dry-run
    """
    settings = get_settings()
    _, log_path = setup_task_logging(
        log_dir or settings.log_dir,
        prefix="convert",
        verbose=verbose,
        file_level=settings.log_level,
        json_format=settings.log_format == "json",
    )

    try:
        config = RunConfig.from_settings(
            settings,
            input_dir=indir,
            output_dir=outdir,
            source=inmat,
            target=outmat,
            asset_dir=asset_dir,
            recursive=True if recursive else None,
            dry_run=dry_run,
        )
        mapper = get_mapper(
            config.source,
            config.target,
            asset_dir=config.asset_dir,
            layout=config.layout,
            mathjax=config.mathjax,
        )
    except UnsupportedDialectPairError as e:
        pairs = ", ".join(f"{s.value} -> {t.value}" for s, t in supported_pairs())
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        console.print(f"[dim]Supported: {pairs}[/dim]")
        log.error("Unsupported dialect pair", source=e.source, target=e.target)
        raise typer.Exit(2) from None
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid configuration\n{escape(str(e))}")
        log.error("Invalid run configuration", error=str(e))
        raise typer.Exit(2) from None

    log.info(
        "Starting conversion",
        input_dir=str(config.input_dir),
        output_dir=str(config.output_dir),
        mapping=mapper.name,
        asset_dir=config.asset_dir,
        recursive=config.recursive,
        log_file=str(log_path),
    )

    files = discover_files(config.input_dir, config.recursive, config.extensions)
    if not files:
        console.print("[yellow]No files to process.[/yellow]")
        return

    converter = DocumentConverter(mapper, dry_run=config.dry_run)

    if config.dry_run:
        batch = converter.convert_batch(files, config.output_dir)
        _show_dry_run(batch, config.input_dir)
    else:
        try:
            _prepare_output_dir(config.output_dir)
        except ConfigurationError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1) from None
        batch = converter.convert_batch(files, config.output_dir, on_result=_report_written)

    _display_summary(batch)

    if batch.failed:
        raise typer.Exit(1)


def _prepare_output_dir(output_dir: Path) -> None:
    try:
        ensure_directory(output_dir)
    except OSError as e:
        log.error("Cannot create output directory", output_dir=str(output_dir), error=str(e))
        raise ConfigurationError(f"Cannot create output directory {output_dir}: {e}") from e


def _report_written(result: PipelineResult) -> None:
    """Print each written file as it lands."""
    if result.success and result.output_path is not None:
        shown = escape(str(shorten_path(result.output_path)))
        console.print(f"write {shown}", soft_wrap=True)


def _show_dry_run(batch: BatchResult, input_dir: Path) -> None:
    """Display the planned conversions."""
    table = Table(title="Conversion Plan")
    table.add_column("Source", style="cyan")
    table.add_column("Output")

    for result in batch.results:
        try:
            source = result.input_path.relative_to(input_dir)
        except ValueError:
            source = result.input_path

        if result.success and result.output_path is not None:
            target = escape(result.output_path.name)
        else:
            target = "[red]error[/red]"
        table.add_row(escape(str(source)), target)

    console.print(table)


def _display_summary(batch: BatchResult) -> None:
    """Display batch processing summary."""
    console.print()

    table = Table(title="Conversion Summary", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Total Files", str(batch.total))
    table.add_row("Converted", f"[green]{len(batch.succeeded)}[/green]")
    table.add_row("Failed", f"[red]{len(batch.failed)}[/red]")

    console.print(table)

    failed = batch.failed
    if not failed:
        return

    console.print()
    console.print("[bold red]Failed Files:[/bold red]")

    for result in failed[:MAX_LISTED_FAILURES]:
        cause = result.error.cause if result.error else None
        message = str(cause) if cause is not None else str(result.error)
        console.print(f"  [dim]-[/dim] {escape(result.input_path.name)}")
        console.print(f"    [dim]{escape(message)}[/dim]")

    if len(failed) > MAX_LISTED_FAILURES:
        console.print(f"  [dim]... and {len(failed) - MAX_LISTED_FAILURES} more[/dim]")


if __name__ == "__main__":
    app()
