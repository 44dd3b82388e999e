"""Add and remove commands for dotctl CLI."""

from typing import List, Optional

import typer

from ..config import Config
from .helpers import get_state
from .output import error, plain


def register(app: typer.Typer) -> None:
    """Register package configuration commands with the app."""
    app.command()(add)
    app.command()(remove)


def _save(config: Config):
    try:
        config.save()
    except OSError as e:
        error(f"Failed to save configuration: {e}")
        raise typer.Exit(1)


def add(
    ctx: typer.Context,
    package: str = typer.Argument(..., help="Package directory name"),
    systems: Optional[List[str]] = typer.Argument(
        None, help="Systems to deploy on (default: all)"
    ),
):
    """Add a package to the configuration.

    Examples:
        dotctl add vim linux macos   # vim on Linux and macOS
        dotctl add shell all         # shell everywhere
    """
    state = get_state(ctx)
    config = state.load_config()

    entry = config.add_package(package, list(systems or []))
    _save(config)

    plain(
        f"Added package '{package}' for systems: {', '.join(entry.systems)}"
    )


def remove(
    ctx: typer.Context,
    package: str = typer.Argument(..., help="Package to remove"),
):
    """Remove a package from the configuration.

    The package directory itself is left alone.
    """
    state = get_state(ctx)
    config = state.load_config()

    if not config.remove_package(package):
        plain(f"Package '{package}' not found in configuration")
        return

    _save(config)
    plain(f"Removed package '{package}' from configuration")
