"""
Find command implementation.

Prints the name of the latest release that provides every required component.
"""

import logging

from nightlykit.cli.utils import locate_release, resolve_settings
from nightlykit.core.reporting import StatusReporter
from nightlykit.toolchain.rustup import Rustup

logger = logging.getLogger(__name__)


def run(args, reporter: StatusReporter) -> int:
    """
    Run the find command.

    Args:
        args: Parsed command-line arguments
        reporter: Status reporter

    Returns:
        Exit code (0 for success)
    """
    settings = resolve_settings(args)
    match = locate_release(settings, Rustup(settings.rustup_bin), reporter)

    print(match.found)
    return 0
