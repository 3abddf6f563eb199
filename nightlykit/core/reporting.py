"""
Console status reporting.

The reporter is passed explicitly to the search and to the CLI commands so the
matching logic never touches global output flags. Messages are tagged the way
the command line tool always printed them:

    [-] error    (red, stderr)
    [!] warning  (yellow, stderr)
    [i] info     (blue, stdout, verbose only)
    [+] success  (green, stdout)
"""

import logging
from typing import Optional

from rich.console import Console
from rich.text import Text

logger = logging.getLogger(__name__)


class StatusReporter:
    """Prints tagged status lines, honoring verbose, quiet and color flags."""

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        colors: bool = True,
        stdout: Optional[Console] = None,
        stderr: Optional[Console] = None,
    ):
        """
        Initialize reporter.

        Args:
            verbose: Print informational messages
            quiet: Suppress every message, errors included
            colors: Colorize the status tags
            stdout: Console for info/success lines (default: sys.stdout)
            stderr: Console for error/warning lines (default: sys.stderr)
        """
        self.verbose = verbose
        self.quiet = quiet
        self.colors = colors
        self._stdout = stdout or Console(
            no_color=not colors, highlight=False, soft_wrap=True
        )
        self._stderr = stderr or Console(
            stderr=True, no_color=not colors, highlight=False, soft_wrap=True
        )

    def error(self, message: str, details: Optional[str] = None):
        self._emit(self._stderr, "[-] ", "red", message, details)

    def warning(self, message: str):
        self._emit(self._stderr, "[!] ", "yellow", message)

    def info(self, message: str):
        if self.verbose:
            self._emit(self._stdout, "[i] ", "blue", message)

    def success(self, message: str):
        self._emit(self._stdout, "[+] ", "green", message)

    def _emit(
        self,
        console: Console,
        tag: str,
        style: str,
        message: str,
        details: Optional[str] = None,
    ):
        logger.debug(f"{tag.strip()} {message}")
        if self.quiet:
            return

        console.print(Text.assemble((tag, style), message))
        if details:
            console.print(Text(details.rstrip("\n")))


class SilentReporter(StatusReporter):
    """Reporter that discards everything; used when the library is driven directly."""

    def __init__(self):
        super().__init__(quiet=True, colors=False)
