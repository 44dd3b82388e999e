"""Adopt command for dotctl CLI."""

from typing import List, Optional

import typer

from ..adopt import Adopter, parse_adopt_args
from .helpers import get_state
from .output import error, plain


def register(app: typer.Typer) -> None:
    """Register the adopt command with the app."""
    app.command()(adopt)


def adopt(
    ctx: typer.Context,
    args: Optional[List[str]] = typer.Argument(
        None, help="[package] [systems...]"
    ),
):
    """Adopt config directories from ~/.config into your dotfiles.

    Each adopted directory is moved into the dotfiles directory and
    replaced by a symlink.

    Examples:
        dotctl adopt                 # All new directories, all systems
        dotctl adopt arch linux      # All new directories, given systems
        dotctl adopt new-app         # One directory, all systems
        dotctl adopt new-app arch    # One directory, given systems
    """
    state = get_state(ctx)
    config = state.load_config()
    targets, systems = parse_adopt_args(args or [])

    adopter = Adopter(
        state.dotfiles_dir, config, state.env.home, reporter=plain
    )
    try:
        adopter.adopt(targets, systems, dry_run=state.dry_run)
    except OSError as e:
        error(f"Error adopting config directories: {e}")
        raise typer.Exit(1)
