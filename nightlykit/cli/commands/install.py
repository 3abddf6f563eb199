"""
Install command implementation.

Finds the latest matching release and installs it with rustup.
"""

import logging

from nightlykit.cli.utils import (
    ReleaseMatch,
    RunSettings,
    locate_release,
    resolve_settings,
)
from nightlykit.core.reporting import StatusReporter
from nightlykit.toolchain.rustup import Rustup

logger = logging.getLogger(__name__)


def install_release(settings: RunSettings, reporter: StatusReporter) -> ReleaseMatch:
    """
    Find and install the latest matching release.

    Args:
        settings: Effective settings
        reporter: Status reporter

    Returns:
        The toolchain being upgraded and the installed release

    Raises:
        NightlyKitError: On rustup failures or when nothing matches
    """
    rustup = Rustup(settings.rustup_bin)
    match = locate_release(settings, rustup, reporter)

    reporter.success(f"Found valid toolchain: {match.found}.")
    reporter.info("Installing toolchain...")

    rustup.install_toolchain(match.found)

    reporter.success(f"Installed toolchain {match.found}.")
    return match


def run(args, reporter: StatusReporter) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments
        reporter: Status reporter

    Returns:
        Exit code (0 for success)
    """
    install_release(resolve_settings(args), reporter)
    return 0
