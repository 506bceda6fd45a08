"""Tests for the top-level command group."""

from click.testing import CliRunner

from ikagent.cli.cli import cli
from ikagent.core.context import IkagentContext


def test_help_lists_commands_with_aliases() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["--help"], obj=IkagentContext.for_test())

    assert result.exit_code == 0, result.output
    for label in [
        "create (c)",
        "list (ls)",
        "attach (at)",
        "start (up)",
        "stop (st)",
        "destroy (rm)",
        "init",
    ]:
        assert label in result.output


def test_short_help_flag() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["-h"], obj=IkagentContext.for_test())

    assert result.exit_code == 0
    assert "Usage:" in result.output


def test_unknown_command() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["frobnicate"], obj=IkagentContext.for_test())

    assert result.exit_code == 2
