"""GitHub CLI checks and repository URLs."""

import shutil
import subprocess

from ..config import Config
from ..errors import ConfigurationError, ToolUnavailableError


def is_git_available() -> bool:
    """Check if git is installed and accessible."""
    return shutil.which("git") is not None


def is_gh_available() -> bool:
    return shutil.which("gh") is not None


def is_gh_authenticated() -> bool:
    if not is_gh_available():
        return False
    try:
        result = subprocess.run(
            ["gh", "auth", "status"],
            capture_output=True,
            text=True,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


def repository_url(repository: str) -> str:
    """HTTPS clone URL for an ``owner/repo`` identifier."""
    return f"https://github.com/{repository}.git"


def require_github(config: Config, hint: bool = True) -> str:
    """Make sure a repository is configured and gh is usable.

    Returns the configured ``owner/repo``.
    """
    repository = config.github_repository
    if not repository:
        message = "no GitHub repository configured"
        if hint:
            message += ". Use 'dotctl github-repo <owner/repo>' first"
        raise ConfigurationError(message)

    if not is_gh_available():
        raise ToolUnavailableError(
            "GitHub CLI (gh) is not available. Please install it:\n"
            "  - Visit: https://cli.github.com/\n"
            "  - Or use: brew install gh"
        )

    if not is_gh_authenticated():
        raise ToolUnavailableError(
            "GitHub CLI is not authenticated. Run 'gh auth login' first"
        )

    return repository
