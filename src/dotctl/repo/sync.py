"""Reconciling the dotfiles root with its GitHub remote."""

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from ..config import CONFIG_FILENAMES, Config, has_config
from ..errors import (
    DotctlError,
    GitCommandError,
    MergeConflictError,
    ToolUnavailableError,
)
from ..utils import timestamp
from .git import GitRepo
from .github import is_git_available, repository_url, require_github

logger = logging.getLogger(__name__)

Reporter = Callable[[str], None]


class SyncOutcome(Enum):
    INITIALIZED = "initialized"
    DRY_RUN = "dry-run"
    NOTHING_TO_SYNC = "nothing-to-sync"
    SYNCED = "synced"


class PullOutcome(Enum):
    CLONED = "cloned"
    DRY_RUN = "dry-run"
    PULLED = "pulled"


@dataclass
class SyncResult:
    outcome: SyncOutcome
    repository: str
    branch: str
    stashed: bool = False
    pulled: bool = False
    committed: bool = False
    pushed: bool = False


def _require_git():
    if not is_git_available():
        raise ToolUnavailableError("git is not installed or not on PATH")


def sync(
    config: Config,
    repo: GitRepo,
    dry_run: bool = False,
    reporter: Optional[Reporter] = None,
) -> SyncResult:
    """Fetch, stash if needed, pull, restore, commit and push.

    A brand-new directory is only initialized and pointed at the remote;
    the next run does the actual sync.

    Raises:
        MergeConflictError: Restoring stashed changes produced conflicts.
        GitCommandError: Any other git step failed.
    """
    report = reporter or logger.info
    repository = require_github(config)
    _require_git()
    branch = config.github_branch
    result = SyncResult(SyncOutcome.SYNCED, repository, branch)

    if not repo.is_initialized():
        url = repository_url(repository)
        if dry_run:
            report(f"DRY RUN: Would initialize git repository in {repo.path}")
            report(f"DRY RUN: Would add remote origin {repository}")
        else:
            report(f"Initializing git repository in {repo.path}...")
            repo.init()
            repo.add_remote(url)
            report(f"✓ Added remote origin {url}")
            report("Run 'dotctl sync' again to push your dotfiles")
        result.outcome = SyncOutcome.INITIALIZED
        return result

    if dry_run:
        report("DRY RUN: Would fetch from upstream")
        report("DRY RUN: Would check for local changes")
        report("DRY RUN: Would stash local changes if needed")
        report("DRY RUN: Would pull upstream changes")
        report("DRY RUN: Would restore local changes and merge")
        report("DRY RUN: Would add all files to git")
        report("DRY RUN: Would commit changes")
        report(f"DRY RUN: Would push to {repository}:{branch}")
        result.outcome = SyncOutcome.DRY_RUN
        return result

    report(f"Syncing with GitHub repository {repository}...")

    report("Fetching upstream changes...")
    repo.fetch(branch)

    has_local_changes = repo.has_local_changes()
    is_behind = repo.is_behind(branch)

    if has_local_changes and is_behind:
        report("Local changes detected, stashing before pull...")
        repo.stash_push(f"dotctl-sync-stash-{timestamp()}")
        result.stashed = True

    if is_behind:
        report("Pulling upstream changes...")
        try:
            repo.pull(branch)
        except GitCommandError:
            if result.stashed:
                report("Pull failed, restoring stashed changes...")
                try:
                    repo.stash_pop()
                except GitCommandError as e:
                    logger.error(f"Could not restore stashed changes: {e}")
            raise
        result.pulled = True
        report("✓ Successfully pulled upstream changes")

    if result.stashed:
        report("Restoring local changes...")
        try:
            repo.stash_pop()
        except GitCommandError:
            conflicts = repo.conflicted_files()
            if conflicts:
                raise MergeConflictError(
                    "merge conflicts detected - manual resolution required "
                    f"({', '.join(conflicts)})"
                )
            raise
        report("✓ Successfully restored local changes")

    repo.add_all()
    if not repo.has_staged_changes():
        report("✓ Repository is up to date, no changes to sync")
        result.outcome = SyncOutcome.NOTHING_TO_SYNC
        return result

    repo.commit(f"Update dotfiles - {timestamp()}")
    result.committed = True

    repo.push(branch)
    result.pushed = True
    report(f"✓ Successfully synced with GitHub repository {repository}")
    return result


def pull(
    config: Config,
    repo: GitRepo,
    dry_run: bool = False,
    reporter: Optional[Reporter] = None,
) -> PullOutcome:
    """Bring the dotfiles root up to date with the remote.

    Clones into a sibling temp directory and renames it into place when the
    root is not a repository yet; otherwise pulls. Assumes a clean tree.
    """
    report = reporter or logger.info
    repository = require_github(config, hint=False)
    _require_git()
    branch = config.github_branch

    if not repo.is_initialized():
        if dry_run:
            report(
                f"DRY RUN: Would clone repository {repository} to {repo.path}"
            )
            return PullOutcome.DRY_RUN

        leftovers = list(repo.path.iterdir()) if repo.path.is_dir() else []
        unexpected = [p.name for p in leftovers if p.name not in CONFIG_FILENAMES]
        if unexpected:
            raise DotctlError(
                f"{repo.path} already contains files ({', '.join(sorted(unexpected))}); "
                "move them away before pulling"
            )

        temp_dir = Path(f"{repo.path}.tmp")
        if os.path.lexists(temp_dir):
            raise DotctlError(
                f"{temp_dir} already exists, probably from an interrupted "
                "pull; remove it and try again"
            )

        report(f"Cloning repository {repository}...")
        GitRepo.clone(repository_url(repository), temp_dir)

        # Keep the local config only if the clone brings none of its own
        clone_has_config = has_config(temp_dir)
        for path in leftovers:
            if clone_has_config:
                path.unlink()
            else:
                shutil.move(str(path), str(temp_dir / path.name))
        if repo.path.is_dir():
            repo.path.rmdir()
        os.rename(temp_dir, repo.path)
        report(f"✓ Cloned {repository} into {repo.path}")
        return PullOutcome.CLONED

    if dry_run:
        report(f"DRY RUN: Would pull from {repository}:{branch}")
        return PullOutcome.DRY_RUN

    report(f"Pulling from GitHub repository {repository}...")
    repo.pull(branch)
    report(f"✓ Successfully pulled from GitHub repository {repository}")
    return PullOutcome.PULLED
