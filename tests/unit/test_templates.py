"""Tests for template expansion."""

from pathlib import Path

import pytest

from dotctl.templates import (
    expand_content,
    expand_file,
    expand_tree,
    is_template,
    output_path_for,
)

ZSHRC = """\
export EDITOR=vim
{{#if macos}}
export BROWSER=open
{{/if}}
{{#if linux}}
export BROWSER=firefox
{{/if}}
alias ll='ls -l'"""


class TestExpandContent:
    """Tests for expand_content."""

    def test_keeps_matching_block(self):
        result = expand_content(ZSHRC, "macos")
        assert result == (
            "export EDITOR=vim\nexport BROWSER=open\nalias ll='ls -l'"
        )

    @pytest.mark.parametrize("system", ["arch", "ubuntu", "linux"])
    def test_linux_block_matches_distros(self, system):
        result = expand_content(ZSHRC, system)
        assert "export BROWSER=firefox" in result
        assert "export BROWSER=open" not in result

    def test_markers_never_written(self):
        result = expand_content(ZSHRC, "arch")
        assert "{{" not in result

    def test_no_markers_is_identity(self):
        content = "line one\n  indented\n\nlast\n"
        assert expand_content(content, "arch") == content

    def test_markers_may_be_indented(self):
        content = "a\n    {{#if fedora}}\n  b\n    {{/if}}\nc"
        assert expand_content(content, "arch") == "a\nc"
        assert expand_content(content, "fedora") == "a\n  b\nc"

    def test_unclosed_block_runs_to_end(self):
        content = "a\n{{#if macos}}\nb\nc"
        assert expand_content(content, "arch") == "a"


class TestTemplatePaths:
    """Tests for template path helpers."""

    def test_is_template(self):
        assert is_template(Path("zshrc.template"))
        assert not is_template(Path("zshrc"))

    def test_output_path_drops_suffix(self):
        assert output_path_for(Path("/d/git/config.template")) == Path(
            "/d/git/config"
        )


class TestExpandFiles:
    """Tests for expand_file and expand_tree."""

    def test_expand_file_writes_next_to_template(self, tmp_path):
        template = tmp_path / ".zshrc.template"
        template.write_text(ZSHRC)

        written = expand_file(template, "macos")

        assert written == tmp_path / ".zshrc"
        assert "BROWSER=open" in written.read_text()

    def test_expand_file_to_explicit_output(self, tmp_path):
        template = tmp_path / "a.template"
        template.write_text("x")
        output = tmp_path / "elsewhere"

        assert expand_file(template, "arch", output) == output
        assert output.read_text() == "x"

    def test_expand_tree_recurses(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "top.template").write_text("top")
        (tmp_path / "sub" / "inner.template").write_text("inner")
        (tmp_path / "plain.conf").write_text("plain")

        pairs = expand_tree(tmp_path, "arch")

        assert [output for _, output in pairs] == [
            tmp_path / "sub" / "inner",
            tmp_path / "top",
        ]
        assert (tmp_path / "sub" / "inner").read_text() == "inner"
        assert (tmp_path / "top").read_text() == "top"

    def test_expand_tree_dry_run_writes_nothing(self, tmp_path):
        (tmp_path / "top.template").write_text("top")

        pairs = expand_tree(tmp_path, "arch", dry_run=True)

        assert pairs == [(tmp_path / "top.template", tmp_path / "top")]
        assert not (tmp_path / "top").exists()

    def test_expand_file_keeps_undecodable_bytes(self, tmp_path):
        template = tmp_path / "latin.template"
        template.write_bytes(b"caf\xe9\n{{#if macos}}\nmac\n{{/if}}\n")

        written = expand_file(template, "arch")

        assert written.read_bytes() == b"caf\xe9\n"

    def test_bare_suffix_is_not_a_template(self, tmp_path):
        (tmp_path / ".template").write_text("x")

        assert not is_template(tmp_path / ".template")
        assert expand_tree(tmp_path, "arch") == []
