"""
Replace command implementation.

Installs the latest matching release, then moves it in place of the current
toolchain so that everything pinned to the old name picks it up.
"""

import logging

from nightlykit.cli.commands.install import install_release
from nightlykit.cli.utils import resolve_settings
from nightlykit.core.reporting import StatusReporter
from nightlykit.toolchain.replace import ToolchainReplacer

logger = logging.getLogger(__name__)


def run(args, reporter: StatusReporter) -> int:
    """
    Run the replace command.

    Args:
        args: Parsed command-line arguments with keep_old
        reporter: Status reporter

    Returns:
        Exit code (0 for success)
    """
    settings = resolve_settings(args)
    match = install_release(settings, reporter)

    if match.current == match.found:
        reporter.success(f"Toolchain {match.current} is already up to date.")
        return 0

    reporter.info(f"Replacing previous toolchain {match.current}...")

    replacer = ToolchainReplacer(settings.rustup_home)
    replacer.replace(match.current, match.found, keep_previous=args.keep_old)

    reporter.success(
        f"Replaced previous toolchain {match.current} by {match.found}."
    )
    return 0
