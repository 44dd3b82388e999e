"""Tests for CLI helpers and status classification."""

import pytest
import typer

from dotctl.cli.deploy import _finish
from dotctl.cli.helpers import resolve_dotfiles_dir
from dotctl.cli.status import classify_packages, find_orphans
from dotctl.config import Config
from dotctl.deploy import BatchResult


class TestResolveDotfilesDir:
    """Tests for resolve_dotfiles_dir."""

    def test_override_wins(self, tmp_path):
        (tmp_path / "dotctl.yaml").write_text("packages: {}\n")
        result = resolve_dotfiles_dir(
            str(tmp_path / "elsewhere"), tmp_path / "home", cwd=tmp_path
        )
        assert result == tmp_path / "elsewhere"

    def test_cwd_with_config(self, tmp_path):
        (tmp_path / "dotctl.yaml").write_text("packages: {}\n")
        assert resolve_dotfiles_dir(None, tmp_path / "home", cwd=tmp_path) == (
            tmp_path
        )

    def test_cwd_with_legacy_config(self, tmp_path):
        (tmp_path / "dotctl.json").write_text("{}")
        assert resolve_dotfiles_dir(None, tmp_path / "home", cwd=tmp_path) == (
            tmp_path
        )

    def test_defaults_to_home_dotfiles(self, tmp_path):
        home = tmp_path / "home"
        assert resolve_dotfiles_dir(None, home, cwd=tmp_path) == (
            home / ".dotfiles"
        )


class TestClassifyPackages:
    """Tests for status labels."""

    def test_labels(self):
        config = Config()
        config.add_package("vim", ["all"])
        config.add_package("iterm", ["macos"])

        labels = classify_packages(["iterm", "tmux", "vim"], config, "arch")

        assert labels == {
            "iterm": "- not for this system",
            "tmux": "? not configured",
            "vim": "✓ deployable",
        }

    def test_orphans(self):
        config = Config()
        config.add_package("vim", ["all"])
        config.add_package("gone", ["all"])

        assert find_orphans(["vim"], config) == ["gone"]


class TestFinish:
    """Tests for deploy/undeploy exit status."""

    def test_single_explicit_failure_exits(self):
        batch = BatchResult(packages=["emacs"], failures={"emacs": OSError()})
        with pytest.raises(typer.Exit):
            _finish(batch, "Deployment", explicit=True)

    def test_batch_failure_only_warns(self):
        batch = BatchResult(
            packages=["emacs", "vim"],
            succeeded=["vim"],
            failures={"emacs": OSError()},
        )
        _finish(batch, "Deployment", explicit=True)

    def test_default_set_failure_only_warns(self):
        batch = BatchResult(packages=["emacs"], failures={"emacs": OSError()})
        _finish(batch, "Deployment", explicit=False)
