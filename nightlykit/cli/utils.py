"""
Shared utilities for CLI commands.

Every command starts the same way: merge command-line flags over the
configuration file, work out which toolchain is being upgraded, resolve the
required components and search for the latest matching release.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from nightlykit.config import load_config
from nightlykit.core.download import ManifestFetcher
from nightlykit.core.reporting import StatusReporter
from nightlykit.toolchain.components import format_requirements, resolve_requirements
from nightlykit.toolchain.replace import default_rustup_home
from nightlykit.toolchain.rustup import Rustup, parse_toolchain
from nightlykit.toolchain.search import find_latest_release, start_date

logger = logging.getLogger(__name__)


# ============================================================================
# Settings
# ============================================================================


@dataclass
class RunSettings:
    """Effective settings of one run (flags over config over defaults)."""

    toolchain: Optional[str]
    days: int
    offset: int
    components: List[str]
    preview_components: List[str]
    skip_installed: bool
    rustup_bin: str
    rustup_home: Path
    dist_server: str
    timeout: int


def resolve_settings(args) -> RunSettings:
    """
    Merge parsed arguments with the configuration file.

    Args:
        args: Parsed command-line arguments

    Returns:
        Effective settings

    Raises:
        ConfigError: If the configuration file is invalid
    """
    config = load_config(args.config)

    def pick(value, fallback):
        return fallback if value is None else value

    return RunSettings(
        toolchain=pick(args.toolchain, config.toolchain),
        days=pick(args.days, config.days),
        offset=pick(args.offset, config.offset),
        components=list(config.components) + list(args.components),
        preview_components=pick(args.preview, config.preview_components),
        skip_installed=pick(args.skip_components, config.skip_installed),
        rustup_bin=pick(args.rustup_bin, config.rustup_bin),
        rustup_home=pick(
            args.rustup_dir, config.rustup_home or default_rustup_home()
        ).expanduser(),
        dist_server=pick(args.dist_server, config.dist_server),
        timeout=pick(args.timeout, config.timeout),
    )


# ============================================================================
# Release lookup
# ============================================================================


@dataclass
class ReleaseMatch:
    """Outcome of the shared lookup: the current toolchain and its replacement."""

    current: str
    found: str


def locate_release(
    settings: RunSettings, rustup: Rustup, reporter: StatusReporter
) -> ReleaseMatch:
    """
    Find the latest release providing every required component.

    Args:
        settings: Effective settings
        rustup: rustup wrapper used to inspect the current toolchain
        reporter: Status reporter

    Returns:
        The toolchain being upgraded and the matching release

    Raises:
        NightlyKitError: On rustup failures or when nothing matches
    """
    current = settings.toolchain or rustup.default_toolchain()
    channel, target = parse_toolchain(current)

    reporter.info(f"Channel: {channel}.")
    reporter.info(f"Target: {target}.")

    installed = None
    if not settings.skip_installed:
        installed = rustup.list_installed_components(current, target)

    requirements = resolve_requirements(settings.components, installed)

    if requirements:
        reporter.info(f"Required components: {format_requirements(requirements)}.")
    else:
        reporter.info("No required components.")

    fetcher = ManifestFetcher(settings.dist_server, timeout=settings.timeout)
    found = find_latest_release(
        fetcher,
        channel=channel,
        target=target,
        requirements=requirements,
        days=settings.days,
        start=start_date(settings.offset),
        preview_components=frozenset(settings.preview_components),
        reporter=reporter,
    )

    return ReleaseMatch(current=current, found=found)
