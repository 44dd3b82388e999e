"""dotctl CLI - System-aware dotfiles manager."""

from typing import Optional

import typer

from ..system import Environment
from ..utils import get_version, setup_logging
from . import adopt, debug, deploy, init, packages, status, sync
from .helpers import AppState, resolve_dotfiles_dir

# Create the main app
app = typer.Typer(
    name="dotctl",
    help="System-aware dotfiles manager.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    dotfiles_dir: Optional[str] = typer.Option(
        None,
        "--dotfiles-dir",
        help="Path to dotfiles directory (default: ~/.dotfiles).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be done without executing.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging output.",
    ),
):
    """dotctl - link dotfiles packages per system and sync them to GitHub."""
    setup_logging(verbose=verbose)
    env = Environment()
    ctx.obj = AppState(
        dotfiles_dir=resolve_dotfiles_dir(dotfiles_dir, env.home),
        env=env,
        dry_run=dry_run,
    )


# Register all commands
init.register(app)
deploy.register(app)
status.register(app)
packages.register(app)
adopt.register(app)
sync.register(app)
debug.register(app)


@app.command()
def version():
    """Show the version of dotctl."""
    typer.echo(f"dotctl version {get_version()}")


def main():
    """Main entry point for the dotctl CLI."""
    app()
