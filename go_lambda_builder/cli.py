"""Thin CLI wrapper for go_lambda_builder.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from go_lambda_builder import __version__
from go_lambda_builder.config import get_settings, print_settings_json

if TYPE_CHECKING:
    from go_lambda_builder.builds.schema import BuildRequestSchema
    from go_lambda_builder.errors import BuilderError

app = typer.Typer(
    name="go-lambda",
    help="Go Lambda Builder - compile a Go HTTP handler into a deployable Lambda",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"go-lambda-builder version {__version__}")
        raise typer.Exit()


def print_json(data: object) -> None:
    """Print JSON without Rich wrapping or markup."""
    console.print(
        json.dumps(data, indent=2), markup=False, highlight=False, soft_wrap=True
    )


def configure_logging(level: str) -> None:
    """Send library logs to stderr through Rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override the configured log level"),
    ] = None,
) -> None:
    """Go Lambda Builder - compile a Go HTTP handler into a deployable Lambda."""
    configure_logging((log_level or get_settings().log_level).upper())


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        console.print(print_settings_json(settings), markup=False, soft_wrap=True)
    else:
        tmp_dir_display = (
            str(settings.tmp_dir) if settings.tmp_dir else "(system default)"
        )
        console.print("[bold]Effective Configuration:[/bold]")
        console.print()
        console.print("[bold]Tools:[/bold]")
        console.print(f"  Go binary:           {settings.go_bin}")
        console.print(f"  Analyzer binary:     {settings.analyzer_bin}")
        console.print()
        console.print("[bold]Target:[/bold]")
        console.print(f"  GOOS/GOARCH:         {settings.goos}/{settings.goarch}")
        console.print(f"  Linker flags:        {settings.ldflags}")
        console.print(f"  Max Lambda size:     {settings.max_lambda_size}")
        console.print()
        console.print("[bold]Paths:[/bold]")
        console.print(f"  Temp directory:      {tmp_dir_display}")
        console.print(f"  Log level:           {settings.log_level}")
        console.print()
        console.print("[bold]Timeouts (seconds):[/bold]")
        console.print(f"  Analyze timeout:     {settings.analyze_timeout}")
        console.print(f"  Build timeout:       {settings.build_timeout}")
        console.print(f"  Download timeout:    {settings.download_timeout}")


@app.command()
def analyze(
    file: Annotated[Path, typer.Argument(help="Go source file", exists=True)],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show the exported handler and the build strategy for a Go file."""
    from go_lambda_builder.builds.analyzer import ExternalAnalyzer
    from go_lambda_builder.builds.analyzer import analyze as analyze_entry
    from go_lambda_builder.builds.strategy import NamedPackage, select_strategy
    from go_lambda_builder.errors import BuilderError

    settings = get_settings()
    analyzer = ExternalAnalyzer(
        settings.analyzer_bin, timeout=settings.analyze_timeout
    )

    try:
        descriptor = analyze_entry(str(file), file, analyzer)
    except BuilderError as e:
        _print_error(e, json_output)
        raise typer.Exit(code=1) from None

    strategy = select_strategy(descriptor)
    strategy_name = (
        "named-package" if isinstance(strategy, NamedPackage) else "default-package"
    )

    if json_output:
        output = {
            "function_name": descriptor.function_name,
            "package_name": descriptor.package_name,
            "strategy": strategy_name,
        }
        print_json(output)
    else:
        console.print(f"  Function: [green]{descriptor.function_name}[/green]")
        console.print(f"  Package:  {descriptor.package_name}")
        console.print(f"  Strategy: {strategy_name}")


@app.command("build")
def build_cmd(
    root: Annotated[
        Path,
        typer.Argument(help="Project directory", exists=True, file_okay=False),
    ],
    entrypoint: Annotated[
        str,
        typer.Argument(help="Handler source file, relative to the project"),
    ],
    include: Annotated[
        list[str] | None,
        typer.Option("--include", "-i", help="Auxiliary file pattern (repeatable)"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the Lambda zip here"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Build a Lambda from a local project directory."""
    from pydantic import ValidationError

    from go_lambda_builder.builds.io import request_from_directory

    include_files: str | list[str] | None = None
    if include:
        include_files = include[0] if len(include) == 1 else include

    try:
        request = request_from_directory(root, entrypoint, include_files)
    except ValidationError as e:
        console.print(f"[red]Invalid build request: {e}[/red]")
        raise typer.Exit(code=1) from None

    _run_build(request, output, json_output)


@app.command("build-request")
def build_request_cmd(
    request_file: Annotated[
        Path,
        typer.Argument(help="Build request (YAML or JSON)", exists=True),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the Lambda zip here"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Build a Lambda from a request file."""
    from pydantic import ValidationError

    from go_lambda_builder.builds.io import load_build_request

    try:
        request = load_build_request(request_file)
    except (ValidationError, ValueError, OSError) as e:
        console.print(f"[red]Failed to load {request_file}: {e}[/red]")
        raise typer.Exit(code=1) from None

    _run_build(request, output, json_output, base_path=request_file.parent)


def _print_error(error: "BuilderError", json_output: bool) -> None:
    from go_lambda_builder.builds.service import describe_failure

    result = describe_failure(error)
    if json_output:
        print_json(
            {
                "success": False,
                "code": result.code,
                "message": result.message,
                "details": result.details,
            }
        )
    else:
        console.print(f"[red]Build failed ({result.code}):[/red]")
        console.print(result.message, markup=False, highlight=False)


def _run_build(
    request: "BuildRequestSchema",
    output: Path | None,
    json_output: bool,
    base_path: Path | None = None,
) -> None:
    from go_lambda_builder.builds.packager import parse_size
    from go_lambda_builder.builds.service import build_request
    from go_lambda_builder.errors import BuilderError

    settings = get_settings()

    if not json_output:
        console.print(f"[blue]Building {request.entrypoint}...[/blue]")

    try:
        artifacts = build_request(request, settings=settings, base_path=base_path)
    except BuilderError as e:
        _print_error(e, json_output)
        raise typer.Exit(code=1) from None

    artifact = artifacts[request.entrypoint]
    summary = artifact.summary()

    if output is not None:
        data = artifact.to_zip()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)
        if len(data) > parse_size(settings.max_lambda_size):
            err_console.print(
                f"[yellow]Warning: {output} is {len(data)} bytes, "
                f"over the {settings.max_lambda_size} limit[/yellow]"
            )

    if json_output:
        print_json({request.entrypoint: summary})
    else:
        console.print(f"[green]✓ Built {request.entrypoint}[/green]")
        console.print(f"  Handler: {artifact.handler}")
        console.print(f"  Runtime: {artifact.runtime}")
        console.print(f"  Files: {len(artifact.files)}")
        for name in sorted(artifact.files):
            console.print(f"    {name}")
        console.print(f"  Zip size: {summary['zip_size_bytes']} bytes")
        if output is not None:
            console.print(f"  Wrote: {output}")


if __name__ == "__main__":
    app()
