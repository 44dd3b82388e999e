"""Debug command: dump paths, system detection and package filtering."""

import os
import platform
from pathlib import Path

import typer

from ..system import OS_RELEASE
from .helpers import get_state
from .output import info, muted, plain

PREVIEW_CHARS = 200
SAMPLE_SYSTEMS = ["arch", "linux", "macos", "ubuntu"]


def register(app: typer.Typer) -> None:
    """Register the debug command with the app."""
    app.command()(debug)


def _describe_path(label: str, path: Path):
    if not path.exists():
        plain(f"{label} error: {path} does not exist")
    elif path.is_dir():
        plain(f"{label} exists: True, is dir: True")
    else:
        plain(f"{label} exists: True, size: {path.stat().st_size} bytes")


def debug(ctx: typer.Context):
    """Show filesystem, system detection and package filtering details."""
    state = get_state(ctx)
    config_path = state.config_path

    info("=== FILESYSTEM DEBUG ===")
    plain(f"Current working directory: {os.getcwd()}")
    plain(f"Dotfiles directory: {state.dotfiles_dir}")
    plain(f"Config file path: {config_path}")
    _describe_path("Dotfiles directory", state.dotfiles_dir)
    _describe_path("Config file", config_path)

    if config_path.is_file():
        content = config_path.read_text(errors="replace")
        plain(f"Config file content length: {len(content)} chars")
        if content:
            preview = content[:PREVIEW_CHARS]
            plain(f"Config file preview (first {len(preview)} chars):")
            muted(preview)

    info("\n=== SYSTEM DETECTION ===")
    plain(f"Platform: {platform.system()}")
    os_info = state.env.os_info
    plain(
        f"OS: {os_info['pretty_name']} "
        f"(release {os_info['release']}, {os_info['machine']})"
    )
    plain(f"Detected system: {state.env.system}")
    if state.env.is_linux():
        try:
            plain(f"{OS_RELEASE} content:\n{OS_RELEASE.read_text()}")
        except OSError as e:
            plain(f"Error reading {OS_RELEASE}: {e}")

    config = state.load_config()
    info("\n=== PACKAGE ANALYSIS ===")
    plain(f"Total packages in config: {len(config.packages)}")

    if not config.packages:
        muted(
            "No packages found in configuration - this suggests config "
            "loading failed"
        )
        return

    plain("\nPackage analysis:")
    for name, entry in sorted(config.packages.items()):
        deployable = entry.is_eligible(state.env.system)
        plain(
            f"  {name}: {entry!r} -> deployable for "
            f"{state.env.system}: {deployable}"
        )

    for system in SAMPLE_SYSTEMS:
        names = config.packages_for_system(system)
        plain(f"\nPackages for {system}: {len(names)} packages")
        if names:
            plain(f"  {', '.join(names)}")
