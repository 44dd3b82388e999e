"""GitHub repository, sync and pull commands for dotctl CLI."""

import subprocess
from typing import Optional

import typer

from ..errors import DotctlError, MergeConflictError
from ..repo import GitRepo
from ..repo.sync import pull as pull_repo
from ..repo.sync import sync as sync_repo
from .helpers import get_state
from .output import error, muted, plain, warning


def register(app: typer.Typer) -> None:
    """Register sync commands with the app."""
    app.command("github-repo")(github_repo)
    app.command()(sync)
    app.command()(pull)


def github_repo(
    ctx: typer.Context,
    repository: str = typer.Argument(..., help="Repository as owner/repo"),
    branch: Optional[str] = typer.Argument(
        None, help="Branch to sync (default: main)"
    ),
):
    """Set the GitHub repository used by sync and pull."""
    state = get_state(ctx)
    config = state.load_config()

    if "/" not in repository.strip("/"):
        error(f"Invalid repository '{repository}', expected owner/repo")
        raise typer.Exit(1)

    config.set_github(repository, branch)
    try:
        config.save()
    except OSError as e:
        error(f"Error setting GitHub repository: {e}")
        raise typer.Exit(1)

    plain(
        f"Set GitHub repository to '{repository}' "
        f"(branch: {config.github_branch})"
    )


def sync(ctx: typer.Context):
    """Sync dotfiles with the GitHub repository.

    Fetches, stashes local changes if the remote moved, pulls, restores
    them, then commits and pushes. On first run only initializes the
    repository and its remote.
    """
    state = get_state(ctx)
    config = state.load_config()
    repo = GitRepo(state.dotfiles_dir)

    try:
        sync_repo(config, repo, dry_run=state.dry_run, reporter=plain)
    except MergeConflictError as e:
        warning("Merge conflicts detected after restoring local changes.")
        plain("Please resolve conflicts manually and run 'dotctl sync' again.")
        muted("Conflicted files can be found with: git status")
        error(f"Error syncing to GitHub: {e}")
        raise typer.Exit(1)
    except (DotctlError, OSError, subprocess.TimeoutExpired) as e:
        error(f"Error syncing to GitHub: {e}")
        raise typer.Exit(1)


def pull(ctx: typer.Context):
    """Pull dotfiles from the GitHub repository.

    Clones the repository into the dotfiles directory if it is not a git
    repository yet.
    """
    state = get_state(ctx)
    config = state.load_config()
    repo = GitRepo(state.dotfiles_dir)

    try:
        pull_repo(config, repo, dry_run=state.dry_run, reporter=plain)
    except (DotctlError, OSError, subprocess.TimeoutExpired) as e:
        error(f"Error pulling from GitHub: {e}")
        raise typer.Exit(1)
