"""
calcula CLI utilities.

Shared helpers used across CLI modules.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer

from calcula.core.errors import ConfigError
from calcula.core.settings import CalculaSettings, load_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_version() -> str:
    """Get calcula version from package metadata."""
    from calcula import __version__

    return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"calcula version {get_version()}")
        typer.echo(
            f"Python {platform.python_implementation()} {platform.python_version()}"
            f" on {platform.system()} {platform.machine()}"
        )
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Configure root logging for CLI runs."""
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        typer.echo(f"Unknown log level: {level}", err=True)
        raise typer.Exit(code=2)
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("calcula").setLevel(numeric)


def load_cli_settings(config: Path | None) -> CalculaSettings:
    """Load settings, turning configuration problems into a clean exit."""
    try:
        return load_settings(config)
    except ConfigError as e:
        typer.echo(f"Error loading settings: {e}", err=True)
        raise typer.Exit(code=1)
