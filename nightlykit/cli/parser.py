"""
nightlykit CLI argument parser.

This module implements the command-line interface for nightlykit using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nightlykit.core.exceptions import NightlyKitError
from nightlykit.core.reporting import StatusReporter
from nightlykit.toolchain.rustup import parse_toolchain

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("nightlykit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


def _toolchain_arg(value: str) -> str:
    """Validate a '<channel>-<target>' toolchain name."""
    try:
        parse_toolchain(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    return value


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def _positive_int(value: str) -> int:
    number = _non_negative_int(value)
    if number == 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value}")
    return number


def _split_components(value: str) -> List[str]:
    return [c.strip() for c in value.split(",") if c.strip()]


class CLI:
    """nightlykit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="nightlykit",
            description="Find, install or swap in the latest Rust toolchain "
            "release that provides every required component",
            epilog='Use "nightlykit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"nightlykit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet", "-q", action="store_true", help="Do not print anything"
        )
        parser.add_argument(
            "--no-colors",
            "-n",
            dest="no_colors",
            action="store_true",
            help="Disable colored output",
        )
        parser.add_argument(
            "--days",
            "-d",
            type=_non_negative_int,
            metavar="N",
            help="Number of days to check starting at the given offset (default: 30)",
        )
        parser.add_argument(
            "--offset",
            "-o",
            type=_non_negative_int,
            metavar="N",
            help="Number of days before today at which to start checking (default: 0)",
        )
        parser.add_argument(
            "--rustup-bin",
            "-b",
            metavar="PATH",
            help="Path to the rustup binary (default: rustup)",
        )
        parser.add_argument(
            "--rustup-dir",
            "-r",
            type=Path,
            metavar="PATH",
            help="Path to the rustup home directory (default: $RUSTUP_HOME or ~/.rustup)",
        )
        parser.add_argument(
            "--toolchain",
            "-t",
            type=_toolchain_arg,
            metavar="NAME",
            help="Target toolchain, e.g. nightly-x86_64-unknown-linux-gnu "
            "(default: rustup's default toolchain)",
        )
        parser.add_argument(
            "--components",
            "-c",
            action="append",
            type=_split_components,
            default=[],
            metavar="NAME[,NAME...]",
            help="Components that must be available (can be used multiple times)",
        )
        parser.add_argument(
            "--preview",
            "-p",
            action="append",
            type=_split_components,
            metavar="NAME[,NAME...]",
            help="Components that may be published as '<name>-preview' "
            "(default: rustfmt, rls, clippy)",
        )
        skip_group = parser.add_mutually_exclusive_group()
        skip_group.add_argument(
            "--skip",
            "-s",
            dest="skip_components",
            action="store_const",
            const=True,
            help="Do not require the components already installed in the toolchain",
        )
        skip_group.add_argument(
            "--no-skip",
            dest="skip_components",
            action="store_const",
            const=False,
            help="Require the installed components even if the configuration "
            "file sets skip_installed",
        )
        parser.add_argument(
            "--dist-server",
            metavar="URL",
            help="Distribution server (default: https://static.rust-lang.org)",
        )
        parser.add_argument(
            "--timeout",
            type=_positive_int,
            metavar="SECONDS",
            help="Timeout for each manifest download (default: 30)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./nightlykit.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        subparsers.add_parser(
            "find",
            help="Find the latest release that matches the components (default)",
            description="Find the latest available release that provides every "
            "required component and print its toolchain name",
        )
        subparsers.add_parser(
            "install",
            help="Find and install the latest matching release",
            description="Find, download and install the latest available release "
            "that provides every required component",
        )
        replace_parser = subparsers.add_parser(
            "replace",
            help="Find, install and swap in the latest matching release",
            description="Find and install the latest matching release, then "
            "replace the current toolchain by the newly installed one",
        )
        replace_parser.add_argument(
            "--keep-previous",
            "-k",
            dest="keep_old",
            action="store_true",
            help="Keep the previous toolchain as '<name>-old'",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        parsed = self.parser.parse_args(args)

        parsed.components = [c for group in parsed.components for c in group]
        if parsed.preview is not None:
            parsed.preview = [c for group in parsed.preview for c in group]
        if parsed.command is None:
            parsed.command = "find"
        if not hasattr(parsed, "keep_old"):
            parsed.keep_old = False

        return parsed

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        reporter = StatusReporter(
            verbose=parsed_args.verbose,
            quiet=parsed_args.quiet,
            colors=not parsed_args.no_colors,
        )

        try:
            return self._dispatch_command(parsed_args, reporter)
        except NightlyKitError as e:
            reporter.error(str(e), e.details)
            return e.exit_code
        except KeyboardInterrupt:
            reporter.warning("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.CRITICAL
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.WARNING
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args, reporter: StatusReporter) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field
            reporter: Status reporter shared by the command

        Returns:
            Exit code from command handler
        """
        # Command module mapping
        command_map = {
            "find": "nightlykit.cli.commands.find",
            "install": "nightlykit.cli.commands.install",
            "replace": "nightlykit.cli.commands.replace",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        import importlib

        module = importlib.import_module(module_name)
        return module.run(args, reporter)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
