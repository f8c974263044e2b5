"""Command line interface for csspipe."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import pathlib
from typing import Optional

import typer
import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from csspipe import get_version
from csspipe.config import TransformerConfig
from csspipe.core import Asset, CssTransformer, OutputAsset
from csspipe.fs import LocalFileSystem, resolve_path
from csspipe.logging import configure_logging
from csspipe.plugins import load_default_plugins, registry as plugin_registry

app = typer.Typer(
    name="csspipe",
    help="Transform stylesheets with plugins and CSS-Modules scoping.",
    no_args_is_help=True,
    add_completion=False,
)

config_app = typer.Typer(help="Configuration utilities.", no_args_is_help=True)
app.add_typer(config_app, name="config")


def _load_environment(env_file: Optional[pathlib.Path]) -> None:
    """Load environment variables from .env files."""

    if env_file is not None:
        load_dotenv(dotenv_path=env_file, override=True)
    else:
        load_dotenv(override=False)


def _prepare_logging(
    override_path: Optional[pathlib.Path],
    override_level: Optional[str],
) -> logging.Logger:
    """Configure logging from CLI overrides, falling back to CSSPIPE_LOG_* variables."""

    env_path = os.environ.get("CSSPIPE_LOG_PATH")
    configured_path = override_path or (pathlib.Path(env_path) if env_path else None)
    configured_level = override_level or os.environ.get("CSSPIPE_LOG_LEVEL", "warning")
    try:
        return configure_logging(log_path=configured_path, level=configured_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


def _version_callback(value: bool) -> None:
    """Print the package version and exit when requested."""

    if value:
        typer.echo(get_version())
        raise typer.Exit()


@app.callback()
def main(  # pragma: no cover - exercised via CLI invocation
    ctx: typer.Context,
    config: Optional[pathlib.Path] = typer.Option(
        None,
        "--config",
        metavar="PATH",
        help="Path to a YAML configuration file (used instead of discovery).",
    ),
    root: Optional[pathlib.Path] = typer.Option(
        None,
        "--root",
        metavar="DIR",
        help="Stop configuration discovery at this directory.",
    ),
    env_file: Optional[pathlib.Path] = typer.Option(
        None,
        "--env-file",
        metavar="PATH",
        help="Load environment variables from .env-style file before execution.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        metavar="LEVEL",
        help="Log level (debug, info, warn, error).",
    ),
    log_path: Optional[pathlib.Path] = typer.Option(
        None,
        "--log-path",
        metavar="PATH",
        help="Also write logs to this file or directory.",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show csspipe version and exit.",
    ),
) -> None:
    """CLI root; configures logging, plugins and shared context."""

    ctx.ensure_object(dict)
    _load_environment(env_file)

    logger = _prepare_logging(log_path, log_level)
    load_default_plugins()
    plugin_registry.load_entrypoints()

    ctx.obj.update(
        {
            "config_path": config or _env_path("CSSPIPE_CONFIG"),
            "root": root,
            "logger": logger,
        }
    )


def _env_path(name: str) -> Optional[pathlib.Path]:
    value = os.environ.get(name)
    return pathlib.Path(value) if value else None


def _load_file_config(ctx: typer.Context, stylesheet: pathlib.Path) -> Optional[TransformerConfig]:
    transformer = CssTransformer()
    try:
        return transformer.load_config(
            stylesheet,
            config_path=ctx.obj.get("config_path"),
            root=ctx.obj.get("root"),
            registry=plugin_registry,
        )
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"Unable to load configuration for {stylesheet}: {exc}", err=True)
        raise typer.Exit(code=1) from exc


async def _transform_file(
    stylesheet: pathlib.Path,
    config: Optional[TransformerConfig],
) -> list[OutputAsset]:
    asset = Asset(file_path=str(stylesheet.resolve()), fs=LocalFileSystem())
    return await CssTransformer().run(asset, config, resolve_path)


@app.command()
def transform(
    ctx: typer.Context,
    files: list[pathlib.Path] = typer.Argument(..., exists=True, dir_okay=False, help="Stylesheets."),
    out_dir: Optional[pathlib.Path] = typer.Option(
        None,
        "--out",
        metavar="DIR",
        help="Write outputs into this directory instead of printing them.",
    ),
) -> None:
    """Transform stylesheets and print or write the produced assets."""

    logger: logging.Logger = ctx.obj["logger"]
    console = Console()
    summary = Table(title="csspipe outputs")
    summary.add_column("source")
    summary.add_column("kind")
    summary.add_column("output")
    summary.add_column("bytes", justify="right")

    for stylesheet in files:
        config = _load_file_config(ctx, stylesheet)
        if config is None:
            logger.info("No configuration applies to %s; passing through.", stylesheet)
        try:
            outputs = asyncio.run(_transform_file(stylesheet, config))
        except Exception as exc:
            typer.echo(f"Failed to transform {stylesheet}: {exc}", err=True)
            raise typer.Exit(code=1) from exc

        for output in outputs:
            if out_dir is None:
                typer.echo(f"/* {output.file_path} */")
                typer.echo(output.content)
                continue
            destination = out_dir / pathlib.Path(output.file_path).name
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(output.content, encoding="utf-8")
            summary.add_row(
                str(stylesheet),
                output.kind,
                str(destination),
                str(len(output.content.encode("utf-8"))),
            )

    if out_dir is not None:
        console.print(summary)


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    stylesheet: pathlib.Path = typer.Argument(..., help="Stylesheet whose configuration to show."),
    format: str = typer.Option(
        "yaml",
        "--format",
        help="Output format (yaml or json).",
    ),
) -> None:
    """Show the configuration that applies to a stylesheet."""

    normalized_format = format.strip().lower()
    if normalized_format not in {"yaml", "json"}:
        raise typer.BadParameter("Format must be 'yaml' or 'json'.", param_hint="--format")

    config = _load_file_config(ctx, stylesheet)
    if config is None:
        typer.echo(f"No configuration applies to {stylesheet}.", err=True)
        raise typer.Exit(code=1)

    for entry in config.loaded_from:
        typer.echo(f"Loaded configuration from: {entry}", err=True)

    data = CssTransformer().pre_serialize_config(config)["config"]
    if normalized_format == "json":
        typer.echo(json.dumps(data, indent=2))
    else:
        typer.echo(yaml.safe_dump(data, sort_keys=False))


@app.command()
def version() -> None:
    """Print the csspipe version."""

    typer.echo(get_version())
