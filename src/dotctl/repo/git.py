"""Thin wrapper around the git command line for the dotfiles root."""

import logging
import subprocess
from pathlib import Path
from typing import List

from ..errors import GitCommandError

logger = logging.getLogger(__name__)

REMOTE = "origin"


class GitRepo:
    """Runs git commands inside the dotfiles directory.

    Every command runs with ``cwd`` set to the repository, output captured
    as text. Failures raise GitCommandError carrying the combined output.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def git_dir(self) -> Path:
        return self.path / ".git"

    def is_initialized(self) -> bool:
        return self.git_dir.exists()

    def run(
        self, *args: str, check: bool = True, timeout: int = 120
    ) -> subprocess.CompletedProcess:
        """Run a git command in the repository.

        Args:
            *args: Git command arguments (e.g., "status", "--porcelain")
            check: If True, raise GitCommandError on non-zero exit
            timeout: Command timeout in seconds

        Returns:
            CompletedProcess with stdout/stderr captured as text
        """
        cmd = ["git"] + list(args)
        logger.debug(f"Running {' '.join(cmd)} in {self.path}")
        result = subprocess.run(
            cmd,
            cwd=str(self.path),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        if check and result.returncode != 0:
            raise GitCommandError(
                cmd, result.returncode, (result.stdout or "") + (result.stderr or "")
            )
        return result

    def _quiet_diff(self, *args: str, what: str) -> bool:
        """Run a ``--quiet`` diff; exit 1 means there are differences."""
        result = self.run(*args, check=False)
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        raise GitCommandError(
            ["git"] + list(args),
            result.returncode,
            f"failed to check {what}: {result.stderr or ''}",
        )

    def init(self):
        self.run("init")

    def add_remote(self, url: str, name: str = REMOTE):
        self.run("remote", "add", name, url)

    def fetch(self, branch: str):
        self.run("fetch", REMOTE, branch)

    def has_staged_changes(self) -> bool:
        return self._quiet_diff("diff", "--cached", "--quiet", what="staged changes")

    def has_unstaged_changes(self) -> bool:
        return self._quiet_diff("diff", "--quiet", what="unstaged changes")

    def untracked_files(self) -> List[str]:
        result = self.run("ls-files", "--others", "--exclude-standard")
        return [line for line in result.stdout.splitlines() if line.strip()]

    def has_local_changes(self) -> bool:
        """Staged, unstaged or untracked changes in the work tree."""
        if self.has_staged_changes():
            return True
        if self.has_unstaged_changes():
            return True
        return bool(self.untracked_files())

    def head_commit(self) -> str:
        return self.run("rev-parse", "HEAD").stdout.strip()

    def remote_commit(self, branch: str) -> str:
        return self.run("rev-parse", f"{REMOTE}/{branch}").stdout.strip()

    def is_behind(self, branch: str) -> bool:
        """True when HEAD differs from the remote tracking branch."""
        return self.head_commit() != self.remote_commit(branch)

    def stash_push(self, message: str):
        self.run("stash", "push", "-m", message)

    def stash_pop(self):
        self.run("stash", "pop")

    def pull(self, branch: str):
        self.run("pull", REMOTE, branch, timeout=300)

    def conflicted_files(self) -> List[str]:
        result = self.run("diff", "--name-only", "--diff-filter=U", check=False)
        if result.returncode != 0:
            return []
        return [line for line in result.stdout.splitlines() if line.strip()]

    def has_merge_conflicts(self) -> bool:
        return bool(self.conflicted_files())

    def add_all(self):
        self.run("add", ".")

    def commit(self, message: str):
        self.run("commit", "-m", message)

    def push(self, branch: str):
        self.run("push", REMOTE, branch, timeout=300)

    @staticmethod
    def clone(url: str, destination: Path):
        cmd = ["git", "clone", url, str(destination)]
        logger.debug(f"Running {' '.join(cmd)}")
        result = subprocess.run(
            cmd, capture_output=True, text=True, timeout=600
        )
        if result.returncode != 0:
            raise GitCommandError(
                cmd, result.returncode, (result.stdout or "") + (result.stderr or "")
            )
