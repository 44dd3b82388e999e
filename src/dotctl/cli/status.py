"""Status command for dotctl CLI."""

from typing import Dict, List

import typer

from ..config import Config
from ..packages import scan_config_packages, scan_packages
from ..repo import is_gh_authenticated, is_gh_available, is_git_available
from .helpers import get_state
from .output import checkmark, muted, plain


def register(app: typer.Typer) -> None:
    """Register the status command with the app."""
    app.command()(status)


def classify_packages(
    available: List[str], config: Config, system: str
) -> Dict[str, str]:
    """Label each package found on disk for the status listing."""
    deployable = set(config.packages_for_system(system))
    labels = {}
    for name in available:
        if name not in config.packages:
            labels[name] = "? not configured"
        elif name in deployable:
            labels[name] = "✓ deployable"
        else:
            labels[name] = "- not for this system"
    return labels


def find_orphans(available: List[str], config: Config) -> List[str]:
    """Configured packages whose directory no longer exists."""
    present = set(available)
    return sorted(name for name in config.packages if name not in present)


def status(ctx: typer.Context):
    """Show dotfiles directory, system, tools and per-package status."""
    state = get_state(ctx)
    config = state.load_config()
    root = state.dotfiles_dir
    system = state.env.system

    plain(f"Dotfiles directory: {root}")
    plain(f"Current system: {system}")
    plain(f"Git available: {checkmark(is_git_available())}")

    gh_available = is_gh_available()
    plain(f"GitHub CLI available: {checkmark(gh_available)}")
    if gh_available:
        plain(f"GitHub authenticated: {checkmark(is_gh_authenticated())}")

    if config.github_repository:
        plain(f"GitHub repository: {config.github_repository}")
        plain(f"GitHub branch: {config.github_branch}")
    plain()

    available = scan_packages(root, config.global_excludes)
    available += scan_config_packages(root)

    if not available:
        muted(f"No package directories found in {root}")
    else:
        plain("Package status:")
        labels = classify_packages(available, config, system)
        for name in available:
            plain(f"  {name}: {labels[name]}")

    orphaned = find_orphans(available, config)
    if orphaned:
        plain(f"\nOrphaned config entries: {', '.join(orphaned)}")
