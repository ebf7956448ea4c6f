"""Tests for the treedraw CLI."""

import pytest
import yaml
from click.testing import CliRunner

from conftest import make_simple_tree
from dataknobs_treedraw import __version__
from dataknobs_treedraw.cli.main import build_sample_tree, cli

SIMPLE_EXPR = "(root child1 child2 (child3 grandchild1))"


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def tree_file(tmp_path):
    path = tmp_path / "tree.yaml"
    path.write_text(
        yaml.dump({"root": ["child1", "child2", {"child3": ["grandchild1"]}]}),
        encoding="utf-8",
    )
    return path


class TestCLIMain:
    """Test main CLI command."""

    def test_cli_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("draw", "stats", "demo"):
            assert command in result.output


class TestDrawCommand:
    """Test the draw command."""

    def test_draw_expression(self, runner):
        result = runner.invoke(cli, ["draw", "--expr", SIMPLE_EXPR])
        assert result.exit_code == 0
        assert result.output == make_simple_tree().draw()

    def test_draw_file(self, runner, tree_file):
        result = runner.invoke(cli, ["draw", str(tree_file)])
        assert result.exit_code == 0
        assert result.output == make_simple_tree().draw()

    def test_draw_stdin(self, runner):
        result = runner.invoke(cli, ["draw", "-"], input=SIMPLE_EXPR)
        assert result.exit_code == 0
        assert result.output == make_simple_tree().draw()

    def test_draw_with_flags(self, runner):
        result = runner.invoke(
            cli, ["draw", "-e", SIMPLE_EXPR, "--border", "--debug", "--padding", "-"]
        )
        assert result.exit_code == 0
        expected = make_simple_tree().draw_options(border=True, debug=True, padding="-")
        assert result.output == expected
        assert result.output.startswith("┌")

    def test_draw_align_right_and_truncate(self, runner):
        result = runner.invoke(
            cli, ["draw", "-e", SIMPLE_EXPR, "--align-right", "--max-label-width", "6"]
        )
        assert result.exit_code == 0
        assert result.output == make_simple_tree().draw_options(
            align_right=True, max_label_width=6
        )
        assert "grand…" in result.output

    def test_config_file(self, runner, tmp_path):
        config = tmp_path / "options.yaml"
        config.write_text("border: true\npadding: '-'\n", encoding="utf-8")
        result = runner.invoke(cli, ["draw", "-e", SIMPLE_EXPR, "--config", str(config)])
        assert result.exit_code == 0
        assert result.output == make_simple_tree().draw_options(border=True, padding="-")

    def test_flags_override_config_file(self, runner, tmp_path):
        config = tmp_path / "options.json"
        config.write_text('{"border": true}', encoding="utf-8")
        result = runner.invoke(
            cli, ["draw", "-e", SIMPLE_EXPR, "-c", str(config), "--no-border"]
        )
        assert result.exit_code == 0
        assert result.output == make_simple_tree().draw()

    def test_bad_config_file(self, runner, tmp_path):
        config = tmp_path / "options.yaml"
        config.write_text("colour: red\n", encoding="utf-8")
        result = runner.invoke(cli, ["draw", "-e", SIMPLE_EXPR, "-c", str(config)])
        assert result.exit_code == 1
        assert "unknown draw options: colour" in result.output

    def test_malformed_expression(self, runner):
        result = runner.invoke(cli, ["draw", "--expr", "(root (a"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["draw", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_no_source(self, runner):
        result = runner.invoke(cli, ["draw"])
        assert result.exit_code == 2


class TestStatsCommand:
    """Test the stats command."""

    def test_stats(self, runner):
        result = runner.invoke(cli, ["stats", "--expr", SIMPLE_EXPR])
        assert result.exit_code == 0
        assert "Max depth" in result.output
        assert "Canvas width" in result.output
        assert "19" in result.output

    def test_stats_error(self, runner):
        result = runner.invoke(cli, ["stats", "--expr", "()"])
        assert result.exit_code == 1


class TestDemoCommand:
    """Test the demo command."""

    def test_demo(self, runner):
        result = runner.invoke(cli, ["demo"])
        assert result.exit_code == 0
        assert [line.rstrip() for line in result.output.splitlines()] == [
            "root",
            "├── child1",
            "│   ├── grandchild1",
            "│   ├── grandchild2",
            "│   │   └── greatgrandchild1",
            "│   └── grandchild3",
            "│       └── greatgrandchild2",
            "├── child2",
            "│   └── grandchild4",
            "└── child3",
            "    └── grandchild5",
        ]

    def test_demo_border(self, runner):
        result = runner.invoke(cli, ["demo", "--border"])
        assert result.exit_code == 0
        assert result.output == build_sample_tree().draw_options(border=True)


def test_verbose_draw(runner):
    result = runner.invoke(cli, ["--verbose", "draw", "--expr", SIMPLE_EXPR])
    assert result.exit_code == 0
    assert "└── child3" in result.output
