from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import typer
from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .analysis.thresholds import format_score
from .core.config import AppConfig, ConfigLoadResult, load_config
from .core.console import console, setup_logging, stderr_console
from .core.result import Err, Ok
from .governance import (
    Diagnostic,
    count_diagnostics_by_severity,
    format_diagnostics,
    scan_paths,
    score_file,
)

app = typer.Typer(help="ianitorlint: require Ianitor.Check<T> on complex TypeScript types.")

_SEVERITY_STYLES = {"error": "red", "warning": "yellow", "info": "cyan"}


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    text = "text"


@dataclass
class AppState:
    config: AppConfig
    config_meta: ConfigLoadResult
    logger: logging.Logger


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a config file (TOML, JSON or pyproject.toml)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings, meta = load_config(config_path=config)
    package_logger = setup_logging(level=settings.log_level, verbose=verbose)
    ctx.obj = AppState(config=settings, config_meta=meta, logger=package_logger)

    if meta.error is None:
        package_logger.debug("Configuration: %s (file loaded: %s)", meta.path, meta.file_loaded)
        return

    # stderr, so that --format json output stays valid.
    stderr_console.print(
        Panel(
            f"{escape(meta.error)}\n\n[yellow]Continuing with default settings.[/yellow]",
            title=f"[bold red]Safe Mode Active[/bold red]: {escape(str(meta.path))}",
            border_style="red",
        )
    )


@app.command("check")
def check(
    ctx: typer.Context,
    paths: list[Path] = typer.Argument(..., help="ESTree JSON dumps or directories of them."),
    output: OutputFormat = typer.Option(
        OutputFormat.table, "--format", "-f", help="Output format."
    ),
    base_threshold: float | None = typer.Option(
        None, "--base-threshold", help="Override the policy's base threshold."
    ),
    entry_depth: int | None = typer.Option(
        None, "--entry-depth", help="Depth at which declarations are scored."
    ),
    performance_mode: bool | None = typer.Option(
        None,
        "--performance-mode/--no-performance-mode",
        help="Clamp accumulation at twice the error threshold.",
    ),
) -> None:
    """Report declarations that need an explicit Check<T> annotation."""
    state: AppState = ctx.obj
    config = _with_overrides(
        state.config,
        base_threshold=base_threshold,
        entry_depth=entry_depth,
        performance_mode=performance_mode,
    )

    missing = [path for path in paths if not path.exists()]
    if missing:
        for path in missing:
            console.print(f"[red]No such file or directory:[/red] {escape(str(path))}")
        raise typer.Exit(code=2)

    diagnostics, file_count = scan_paths(paths, config)
    state.logger.debug("Scanned %d files, %d diagnostics", file_count, len(diagnostics))

    if output is OutputFormat.json:
        typer.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))
    elif output is OutputFormat.text:
        if diagnostics:
            typer.echo(format_diagnostics(diagnostics))
    else:
        _print_diagnostics_table(diagnostics, file_count)

    if diagnostics:
        raise typer.Exit(code=1)


@app.command("score")
def score(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="ESTree JSON dump."),
    entry_depth: int | None = typer.Option(
        None, "--entry-depth", help="Depth at which declarations are scored."
    ),
) -> None:
    """Show the score of every type alias, interface and validator in a file."""
    state: AppState = ctx.obj
    config = _with_overrides(state.config, entry_depth=entry_depth)

    match score_file(path, config):
        case Err(error):
            console.print(f"[red]Failed to load AST:[/red] {escape(str(error))}")
            raise typer.Exit(code=1)
        case Ok(scored):
            table = Table(title=escape(str(path)), box=box.SIMPLE_HEAVY, expand=True)
            table.add_column("Line", justify="right", style="dim")
            table.add_column("Kind", style="cyan")
            table.add_column("Name", style="white")
            table.add_column("Score", justify="right", style="magenta")
            for declaration in scored:
                line = str(declaration.source.line) if declaration.source else "?"
                table.add_row(
                    line,
                    declaration.kind,
                    escape(declaration.name or "<anonymous>"),
                    format_score(declaration.score),
                )
            console.print(table)


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show the active configuration and where each value came from."""
    state: AppState = ctx.obj
    settings = state.config
    meta = state.config_meta

    rows = [(f"policy.{key}", value) for key, value in settings.policy.model_dump().items()]
    rows += list(settings.model_dump(exclude={"policy"}).items())

    table = Table(title=f"Configuration ({escape(str(meta.path))})", box=box.SIMPLE_HEAVY)
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_column("From", style="dim")
    for key, value in rows:
        source = "env" if key in meta.env_overrides else "file/default"
        table.add_row(key, escape(str(value)), source)
    console.print(table)

    if meta.error:
        console.print("[red]Config file rejected; defaults are in effect.[/red]")
    elif meta.file_loaded:
        console.print(f"Read {escape(str(meta.path))}.")
    else:
        console.print(f"No config file at {escape(str(meta.path))}; defaults and environment only.")


@app.command("version")
def show_version() -> None:
    """Print the ianitorlint version."""
    console.print(__version__)


def _with_overrides(config: AppConfig, **overrides: float | int | bool | None) -> AppConfig:
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return config
    policy = config.policy.model_copy(update=updates)
    return config.model_copy(update={"policy": policy})


def _print_diagnostics_table(diagnostics: list[Diagnostic], file_count: int) -> None:
    if not diagnostics:
        console.print(f"[green]No issues found in {file_count} file(s).[/green]")
        return

    table = Table(box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Location", style="white", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Score", justify="right", style="magenta")
    table.add_column("Message", style="white")

    for d in diagnostics:
        style = _SEVERITY_STYLES.get(d.severity, "white")
        table.add_row(
            escape(f"{d.file}:{d.line}:{d.column}"),
            f"[{style}]{d.severity}[/{style}]",
            format_score(d.score) if d.score is not None else "-",
            escape(d.message),
        )

    console.print(table)
    errors, warnings, infos = count_diagnostics_by_severity(diagnostics)
    console.print(
        f"{len(diagnostics)} problem(s) in {file_count} file(s): "
        f"[red]{errors} error(s)[/red], [yellow]{warnings} warning(s)[/yellow], "
        f"[cyan]{infos} info[/cyan]"
    )


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()
