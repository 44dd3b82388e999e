"""Git repository management for the dotfiles root."""

from .git import GitRepo
from .github import (
    is_gh_authenticated,
    is_gh_available,
    is_git_available,
    repository_url,
)
from .sync import PullOutcome, SyncOutcome, SyncResult, pull, sync

__all__ = [
    "GitRepo",
    "PullOutcome",
    "SyncOutcome",
    "SyncResult",
    "is_gh_authenticated",
    "is_gh_available",
    "is_git_available",
    "pull",
    "repository_url",
    "sync",
]
