"""
Tests for CLI argument parser.
"""

import logging
from pathlib import Path

import pytest

from nightlykit.cli.parser import CLI


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        """Test CLI can be created."""
        cli = CLI()
        assert cli is not None
        assert cli.parser is not None

    def test_version_flag(self, capsys):
        """Test --version flag."""
        cli = CLI()

        with pytest.raises(SystemExit) as exc_info:
            cli.run(["--version"])

        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "nightlykit" in captured.out

    def test_help_lists_commands(self, capsys):
        with pytest.raises(SystemExit):
            CLI().parse_args(["--help"])

        out = capsys.readouterr().out
        for command in ("find", "install", "replace"):
            assert command in out


class TestGlobalOptions:
    """Test global option parsing."""

    def test_defaults(self):
        args = CLI().parse_args([])

        assert args.command == "find"
        assert args.verbose is False
        assert args.quiet is False
        assert args.no_colors is False
        assert args.days is None
        assert args.offset is None
        assert args.components == []
        assert args.preview is None
        assert args.skip_components is None
        assert args.toolchain is None
        assert args.keep_old is False

    def test_short_flags(self):
        args = CLI().parse_args(
            [
                "-v",
                "-n",
                "-s",
                "-d",
                "10",
                "-o",
                "2",
                "-b",
                "/opt/rustup",
                "-r",
                "/tmp/rustup-home",
                "-t",
                "nightly-x86_64-unknown-linux-gnu",
                "find",
            ]
        )

        assert args.verbose is True
        assert args.no_colors is True
        assert args.skip_components is True
        assert args.days == 10
        assert args.offset == 2
        assert args.rustup_bin == "/opt/rustup"
        assert args.rustup_dir == Path("/tmp/rustup-home")
        assert args.toolchain == "nightly-x86_64-unknown-linux-gnu"

    def test_components_repeatable_and_comma_separated(self):
        args = CLI().parse_args(["-c", "rustfmt,clippy", "-c", "miri"])
        assert args.components == ["rustfmt", "clippy", "miri"]

    def test_preview_override(self):
        args = CLI().parse_args(["-p", "miri", "--preview", "rustfmt"])
        assert args.preview == ["miri", "rustfmt"]

    def test_invalid_toolchain(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["--toolchain", "nightly"])

        assert exc_info.value.code == 2
        assert "Invalid toolchain format" in capsys.readouterr().err

    def test_negative_days(self, capsys):
        with pytest.raises(SystemExit):
            CLI().parse_args(["--days", "-3"])

        assert "must not be negative" in capsys.readouterr().err

    def test_zero_timeout_rejected(self, capsys):
        with pytest.raises(SystemExit):
            CLI().parse_args(["--timeout", "0"])

        assert "must be greater than zero" in capsys.readouterr().err

    def test_timeout(self):
        assert CLI().parse_args(["--timeout", "5"]).timeout == 5

    def test_no_skip(self):
        assert CLI().parse_args(["--no-skip"]).skip_components is False

    def test_skip_and_no_skip_are_exclusive(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["--skip", "--no-skip"])

    def test_non_numeric_days(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["--days", "many"])


class TestCommands:
    """Test subcommand parsing."""

    def test_find(self):
        assert CLI().parse_args(["find"]).command == "find"

    def test_install(self):
        assert CLI().parse_args(["install"]).command == "install"

    def test_replace(self):
        args = CLI().parse_args(["replace"])
        assert args.command == "replace"
        assert args.keep_old is False

    def test_replace_keep_previous(self):
        assert CLI().parse_args(["replace", "-k"]).keep_old is True
        assert CLI().parse_args(["replace", "--keep-previous"]).keep_old is True


class TestLogging:
    """Test logging configuration."""

    @pytest.mark.parametrize(
        "flags,level",
        [
            (["--verbose"], logging.DEBUG),
            (["--quiet"], logging.CRITICAL),
            ([], logging.WARNING),
        ],
    )
    def test_levels(self, flags, level):
        cli = CLI()
        cli._configure_logging(cli.parse_args(flags))
        assert logging.getLogger().level == level
