"""
chartlang CLI Utilities.

Shared utility functions used by the CLI commands.
"""

import logging
import platform
from pathlib import Path

import typer

from chartlang._version import get_version
from chartlang.core.errors import ConfigError
from chartlang.core.manifest import ChartlangConfig, find_config, load_config


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"chartlang {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Send log records to stderr at ``level``; later calls only change the level."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)


def load_cli_config(config_path: Path | None, source: Path) -> ChartlangConfig:
    """
    Load the explicit config file, or the nearest chartlang.toml above ``source``.

    Exits with code 1 when the file cannot be used.
    """
    path = config_path if config_path is not None else find_config(source)
    try:
        return load_config(path)
    except (ConfigError, OSError) as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1)


def read_source(path: Path) -> str:
    """Read a chart file, exiting with code 1 if it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Cannot read {path}: {e}", err=True)
        raise typer.Exit(code=1)
