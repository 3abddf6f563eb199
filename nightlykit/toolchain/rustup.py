"""
Thin wrapper around the rustup binary.

Only the handful of rustup commands nightlykit needs are exposed: listing
toolchains, listing a toolchain's installed components and installing a
toolchain. Any failure to run rustup is fatal for the whole run.
"""

import logging
import re
import subprocess
from pathlib import Path
from typing import List, Tuple, Union

from ..core.exceptions import (
    DefaultToolchainNotFoundError,
    ToolchainInstallError,
    ToolchainManagerError,
    ToolchainManagerOutputError,
)

logger = logging.getLogger(__name__)

DEFAULT_MARKER = " (default)"
INSTALLED_MARKER = " (installed)"

_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}-")


def parse_toolchain(toolchain: str) -> Tuple[str, str]:
    """
    Split a toolchain name into channel and target.

    The channel is everything before the first hyphen. A dated toolchain such
    as 'nightly-2024-03-01-x86_64-unknown-linux-gnu' keeps 'nightly' as the
    channel and drops the date from the target.

    Args:
        toolchain: Toolchain name (e.g. 'nightly-x86_64-unknown-linux-gnu')

    Returns:
        Tuple of (channel, target)

    Raises:
        ValueError: If the name has no hyphen or no target
    """
    channel, hyphen, target = toolchain.partition("-")
    if not hyphen or not channel:
        raise ValueError(f"Invalid toolchain format: {toolchain}")

    target = _DATE_PREFIX.sub("", target)
    if not target:
        raise ValueError(f"Invalid toolchain format: {toolchain}")

    return channel, target


class Rustup:
    """Runs rustup commands and decodes their output."""

    def __init__(self, rustup_bin: Union[str, Path] = "rustup"):
        self.rustup_bin = str(rustup_bin)

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        cmd = [self.rustup_bin, *args]
        logger.debug(f"Running {' '.join(cmd)}")

        try:
            return subprocess.run(cmd, capture_output=True)
        except OSError as e:
            raise ToolchainManagerError(
                f"Failed to spawn rustup process: {e}"
            ) from e

    def _output(self, *args: str) -> str:
        """Run a rustup command and return its decoded standard output."""
        result = self._run(*args)
        command = " ".join([self.rustup_bin, *args])

        if result.returncode != 0:
            raise ToolchainManagerError(
                f'Failed to execute "{command}"',
                details=result.stderr.decode("utf-8", errors="replace"),
            )

        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ToolchainManagerOutputError(
                f"Failed to convert output of rustup command: {e}."
            ) from e

    def list_toolchains(self) -> List[str]:
        """Return the raw lines of 'rustup toolchain list'."""
        return self._output("toolchain", "list").splitlines()

    def default_toolchain(self) -> str:
        """
        Return the name of the default toolchain.

        Raises:
            DefaultToolchainNotFoundError: If no toolchain is marked default
        """
        for line in self.list_toolchains():
            if line.endswith(DEFAULT_MARKER):
                return line[: -len(DEFAULT_MARKER)]
        raise DefaultToolchainNotFoundError()

    def list_installed_components(self, toolchain: str, target: str) -> List[str]:
        """
        List components installed in a toolchain.

        Annotations are stripped, as is a trailing '-<target>' so that
        'rust-docs-x86_64-unknown-linux-gnu (default)' becomes 'rust-docs'.

        Args:
            toolchain: Toolchain name
            target: Target triple of the toolchain

        Returns:
            Component names, in rustup's order
        """
        output = self._output("component", "list", "--toolchain", toolchain)
        components = []

        for line in output.splitlines():
            if line.endswith(DEFAULT_MARKER):
                name = line[: -len(DEFAULT_MARKER)]
            elif line.endswith(INSTALLED_MARKER):
                name = line[: -len(INSTALLED_MARKER)]
            else:
                continue

            if name.endswith(f"-{target}"):
                name = name[: -len(target) - 1]
            components.append(name)

        logger.debug(f"Installed components of {toolchain}: {components}")
        return components

    def install_toolchain(self, toolchain: str) -> None:
        """
        Install a toolchain.

        Raises:
            ToolchainInstallError: If rustup exits with a non-zero status
        """
        result = self._run("toolchain", "install", toolchain)

        if result.returncode != 0:
            output = (result.stdout or b"") + (result.stderr or b"")
            raise ToolchainInstallError(
                f"Could not install toolchain {toolchain}:",
                details=output.decode("utf-8", errors="replace"),
            )
