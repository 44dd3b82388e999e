"""Tests for GitRepo and GitHub helpers."""

from unittest.mock import MagicMock, patch

import pytest

from dotctl.config import Config
from dotctl.errors import (
    ConfigurationError,
    GitCommandError,
    ToolUnavailableError,
)
from dotctl.repo.git import GitRepo
from dotctl.repo.github import repository_url, require_github


def completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestRun:
    """Tests for GitRepo.run."""

    def test_runs_in_repository(self, tmp_path):
        """Commands run with cwd set to the repository."""
        repo = GitRepo(tmp_path)

        with patch("dotctl.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = completed(stdout="ok")
            result = repo.run("status", "--porcelain")

        assert result.stdout == "ok"
        args, kwargs = mock_run.call_args
        assert args[0] == ["git", "status", "--porcelain"]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["capture_output"] is True

    def test_failure_raises_with_output(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch("dotctl.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = completed(
                returncode=128, stderr="fatal: not a git repository"
            )
            with pytest.raises(GitCommandError) as exc_info:
                repo.run("status")

        assert exc_info.value.returncode == 128
        assert "not a git repository" in str(exc_info.value)

    def test_no_check_returns_failure(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch("dotctl.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = completed(returncode=1)
            result = repo.run("diff", "--quiet", check=False)

        assert result.returncode == 1


class TestIsInitialized:
    """Tests for is_initialized."""

    def test_without_git_dir(self, tmp_path):
        assert GitRepo(tmp_path).is_initialized() is False

    def test_with_git_dir(self, tmp_path):
        (tmp_path / ".git").mkdir()
        assert GitRepo(tmp_path).is_initialized() is True


class TestChangeProbes:
    """Tests for staged/unstaged/untracked detection."""

    def test_staged_exit_codes(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch.object(repo, "run") as mock_run:
            mock_run.return_value = completed(returncode=0)
            assert repo.has_staged_changes() is False

            mock_run.return_value = completed(returncode=1)
            assert repo.has_staged_changes() is True

        mock_run.assert_called_with("diff", "--cached", "--quiet", check=False)

    def test_unexpected_exit_code_raises(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch.object(repo, "run") as mock_run:
            mock_run.return_value = completed(returncode=128, stderr="boom")
            with pytest.raises(GitCommandError):
                repo.has_unstaged_changes()

    def test_untracked_files(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch.object(repo, "run") as mock_run:
            mock_run.return_value = completed(stdout="a.txt\n\nnvim/init.lua\n")
            assert repo.untracked_files() == ["a.txt", "nvim/init.lua"]

    def test_local_changes_from_untracked(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch.object(repo, "has_staged_changes", return_value=False):
            with patch.object(repo, "has_unstaged_changes", return_value=False):
                with patch.object(repo, "untracked_files", return_value=["x"]):
                    assert repo.has_local_changes() is True

    def test_no_local_changes(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch.object(repo, "has_staged_changes", return_value=False):
            with patch.object(repo, "has_unstaged_changes", return_value=False):
                with patch.object(repo, "untracked_files", return_value=[]):
                    assert repo.has_local_changes() is False


class TestRemoteComparison:
    """Tests for is_behind."""

    def test_same_commit(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch.object(repo, "run") as mock_run:
            mock_run.return_value = completed(stdout="abc123\n")
            assert repo.is_behind("main") is False

    def test_different_commit(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch.object(repo, "run") as mock_run:
            mock_run.side_effect = [
                completed(stdout="abc123\n"),
                completed(stdout="def456\n"),
            ]
            assert repo.is_behind("main") is True

        mock_run.assert_called_with("rev-parse", "origin/main")


class TestConflicts:
    """Tests for conflict detection."""

    def test_conflicted_files(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch.object(repo, "run") as mock_run:
            mock_run.return_value = completed(stdout="vim/vimrc\n")
            assert repo.conflicted_files() == ["vim/vimrc"]
            assert repo.has_merge_conflicts() is True

    def test_diff_failure_means_no_conflicts(self, tmp_path):
        repo = GitRepo(tmp_path)

        with patch.object(repo, "run") as mock_run:
            mock_run.return_value = completed(returncode=128)
            assert repo.conflicted_files() == []


class TestClone:
    """Tests for GitRepo.clone."""

    def test_clone_success(self, tmp_path):
        with patch("dotctl.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = completed()
            GitRepo.clone("https://github.com/me/dots.git", tmp_path / "d")

        args = mock_run.call_args[0][0]
        assert args[:2] == ["git", "clone"]
        assert args[-1] == str(tmp_path / "d")

    def test_clone_failure(self, tmp_path):
        with patch("dotctl.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = completed(
                returncode=128, stderr="repository not found"
            )
            with pytest.raises(GitCommandError):
                GitRepo.clone("https://github.com/me/nope.git", tmp_path / "d")


class TestGitHub:
    """Tests for GitHub helpers."""

    def test_repository_url(self):
        assert (
            repository_url("me/dots") == "https://github.com/me/dots.git"
        )

    def test_require_github_needs_repository(self):
        with pytest.raises(ConfigurationError) as exc_info:
            require_github(Config())
        assert "github-repo" in str(exc_info.value)

    def test_require_github_needs_gh(self):
        config = Config()
        config.set_github("me/dots")

        with patch("dotctl.repo.github.is_gh_available", return_value=False):
            with pytest.raises(ToolUnavailableError):
                require_github(config)

    def test_require_github_needs_auth(self):
        config = Config()
        config.set_github("me/dots")

        with patch("dotctl.repo.github.is_gh_available", return_value=True):
            with patch(
                "dotctl.repo.github.is_gh_authenticated", return_value=False
            ):
                with pytest.raises(ToolUnavailableError) as exc_info:
                    require_github(config)
        assert "gh auth login" in str(exc_info.value)

    def test_require_github_returns_repository(self):
        config = Config()
        config.set_github("me/dots")

        with patch("dotctl.repo.github.is_gh_available", return_value=True):
            with patch(
                "dotctl.repo.github.is_gh_authenticated", return_value=True
            ):
                assert require_github(config) == "me/dots"
