"""Init command for dotctl CLI."""

import typer

from ..config import CONFIG_FILENAME, Config, has_config
from ..packages import scan_packages
from .helpers import get_state
from .output import error, muted, plain, success


def register(app: typer.Typer) -> None:
    """Register the init command with the app."""
    app.command()(init)


def init(ctx: typer.Context):
    """Initialize configuration by scanning package directories.

    Every package directory found is configured for the current system.
    Does nothing if a configuration file already exists.
    """
    state = get_state(ctx)
    root = state.dotfiles_dir
    system = state.env.system

    if has_config(root):
        plain(f"Configuration file already exists at {state.config_path}")
        muted("Run 'dotctl status' to see current configuration")
        return

    packages = scan_packages(root)
    if not packages:
        plain(f"No package directories found in {root}")
        muted("Create package directories first, then run 'dotctl init'")
        return

    if state.dry_run:
        plain(
            "DRY RUN: Would create configuration with packages: "
            f"{', '.join(packages)}"
        )
        plain(
            "DRY RUN: All packages would be configured for current "
            f"system: {system}"
        )
        return

    config = Config.initial(packages, system, root / CONFIG_FILENAME)
    try:
        config.save()
    except OSError as e:
        error(f"Error initializing configuration: {e}")
        raise typer.Exit(1)

    success(
        f"Initialized configuration with {len(packages)} packages "
        f"for system '{system}'"
    )
    plain(f"Packages configured: {', '.join(packages)}")
    plain(f"Configuration saved to: {config.path}")
    muted("\nYou can now run 'dotctl deploy' to deploy your dotfiles")
    muted(
        "Use 'dotctl add <package> <systems...>' to configure packages "
        "for other systems"
    )
