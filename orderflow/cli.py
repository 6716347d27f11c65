"""Typer based command line entry points for OrderFlow."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import typer

from orderflow.config import AppConfig, RuntimeSource, derive_runtime_source, derive_runtime_sources, load_config_location
from orderflow.core.errors import OrderFlowError
from orderflow.core.logger import set_level
from orderflow.core.pipeline import Pipeline
from orderflow.core.settings import default_config_location
from orderflow.services.validation import ValidationIssue, validate_workbook_file

app = typer.Typer(help="Convert spreadsheet orders into ERP text archives.")


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path or URL (defaults to ORDERFLOW_CONFIG or the bundled sample).",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    try:
        set_level(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    ctx.obj = {"config_location": config or default_config_location()}


def _load(ctx: typer.Context) -> AppConfig:
    location = ctx.obj["config_location"]
    try:
        return load_config_location(location)
    except OrderFlowError as exc:
        typer.secho(exc.to_display_string(), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc


def _parse_fields(values: List[str]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected NAME=VALUE, got {item!r}", param_hint="--field")
        fields[name.strip()] = value
    return fields


def _prompt_missing(runtime: RuntimeSource, fields: Dict[str, str]) -> Dict[str, str]:
    for spec in runtime.user_input_fields:
        if fields.get(spec.name, "").strip():
            continue
        label = spec.prompt
        if spec.type == "date":
            label = f"{label} (YYYY-MM-DD)"
        if spec.fyi:
            typer.echo(spec.fyi)
        fields[spec.name] = typer.prompt(label)
    return fields


def _echo_warnings(warnings: List[ValidationIssue]) -> None:
    for warning in warnings:
        typer.secho(f"warning: {warning.message}", fg=typer.colors.YELLOW, err=True)


@app.command("sources")
def list_sources(ctx: typer.Context) -> None:
    """List configured sources and the fields each one asks the user for."""

    config = _load(ctx)
    for runtime in derive_runtime_sources(config):
        typer.echo(f"{runtime.name}\t{runtime.description}")
        for spec in runtime.user_input_fields:
            typer.echo(f"  - {spec.name} ({spec.type}): {spec.prompt}")


@app.command("validate")
def validate_cmd(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, resolve_path=True, help="Spreadsheet to check"),
    source: str = typer.Option(..., "--source", "-s", help="Source name from the configuration"),
) -> None:
    """Run the pre-flight checks without generating output."""

    config = _load(ctx)
    try:
        source_config = config.source(source)
    except OrderFlowError as exc:
        typer.secho(exc.to_display_string(), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc

    report = validate_workbook_file(file.read_bytes(), file.name, source_config)
    _echo_warnings(report.warnings)
    if not report.valid:
        for issue in report.errors:
            typer.secho(f"error: {issue.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"{file.name} is valid for source {source}", fg=typer.colors.GREEN)


@app.command("run")
def run_cmd(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, resolve_path=True, help="Spreadsheet to convert"),
    source: str = typer.Option(..., "--source", "-s", help="Source name from the configuration"),
    field: List[str] = typer.Option([], "--field", "-f", help="User input as NAME=VALUE; repeatable."),
    out_dir: Optional[Path] = typer.Option(None, "--out", "-o", help="Directory for the generated archive."),
    preview: bool = typer.Option(False, "--preview/--no-preview", help="Print the extracted data before writing."),
    interactive: bool = typer.Option(True, "--input/--no-input", help="Prompt for fields not given with --field."),
) -> None:
    """Convert FILE into a ZIP archive with the header and detail text files."""

    config = _load(ctx)
    fields = _parse_fields(field)
    try:
        runtime = derive_runtime_source(config, config.source(source))
    except OrderFlowError as exc:
        typer.secho(exc.to_display_string(), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc

    if interactive:
        fields = _prompt_missing(runtime, fields)

    pipeline = Pipeline(config)
    try:
        result = pipeline.run(file, source, fields, out_dir=out_dir)
    except OrderFlowError as exc:
        typer.secho(exc.to_display_string(), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    _echo_warnings(result.warnings)
    if preview:
        for name, value in result.extracted.header.items():
            typer.echo(f"{name}: {value}")
        frame = result.extracted.detail_frame()
        typer.echo(frame.to_string(index=False) if not frame.empty else "(no detail rows)")
    typer.echo(result.archive_path)


def main() -> None:  # pragma: no cover - console entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
