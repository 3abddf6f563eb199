"""YAML configuration parser for nightlykit.

This module provides parsing and validation for nightlykit.yaml files. Every
key is optional; command-line flags override whatever the file sets.

Example nightlykit.yaml:

    toolchain: nightly-x86_64-unknown-linux-gnu
    days: 60
    components:
      - rustfmt
      - clippy
    preview_components: [rustfmt, clippy, rls, miri]
    rustup_home: ~/.rustup
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from ..core.download import DEFAULT_DIST_SERVER, DEFAULT_TIMEOUT
from ..core.exceptions import ConfigError
from ..toolchain.components import DEFAULT_PREVIEW_COMPONENTS
from ..toolchain.rustup import parse_toolchain

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "nightlykit.yaml"
DEFAULT_DAYS = 30


@dataclass
class NightlyKitConfig:
    """Complete nightlykit configuration."""

    toolchain: Optional[str] = None  # '<channel>-<target>', default: rustup's default
    days: int = DEFAULT_DAYS
    offset: int = 0
    components: List[str] = field(default_factory=list)
    preview_components: List[str] = field(
        default_factory=lambda: sorted(DEFAULT_PREVIEW_COMPONENTS)
    )
    skip_installed: bool = False
    rustup_bin: str = "rustup"
    rustup_home: Optional[Path] = None
    dist_server: str = DEFAULT_DIST_SERVER
    timeout: int = DEFAULT_TIMEOUT


_INT_FIELDS = ("days", "offset")
_POSITIVE_INT_FIELDS = ("timeout",)
_STR_FIELDS = ("toolchain", "rustup_bin", "rustup_home", "dist_server")
_LIST_FIELDS = ("components", "preview_components")
_BOOL_FIELDS = ("skip_installed",)


def parse_config(config_path: Path) -> NightlyKitConfig:
    """
    Parse a nightlykit.yaml configuration file.

    Args:
        config_path: Path to nightlykit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is missing or invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise ConfigError("Configuration file is empty")

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    return _parse_and_validate(data)


def load_config(
    config_path: Optional[Path] = None, search_dir: Optional[Path] = None
) -> NightlyKitConfig:
    """
    Load configuration, falling back to defaults.

    Args:
        config_path: Explicit configuration file (must exist)
        search_dir: Directory searched for nightlykit.yaml when no explicit
            file is given (default: current directory)

    Returns:
        Configuration (defaults if no file was found)
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default_config = (search_dir or Path.cwd()) / DEFAULT_CONFIG_FILE
    if default_config.exists():
        logger.debug(f"Loading configuration from {default_config}")
        return parse_config(default_config)

    logger.debug("No config file found, using defaults")
    return NightlyKitConfig()


def _parse_and_validate(data: dict) -> NightlyKitConfig:
    """Parse and validate configuration data."""
    known = set(
        _INT_FIELDS + _POSITIVE_INT_FIELDS + _STR_FIELDS + _LIST_FIELDS + _BOOL_FIELDS
    )
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    for key in _INT_FIELDS:
        value = data.get(key)
        if value is not None and (
            not isinstance(value, int) or isinstance(value, bool) or value < 0
        ):
            raise ConfigError(f"{key} must be a non-negative integer")

    for key in _POSITIVE_INT_FIELDS:
        value = data.get(key)
        if value is not None and (
            not isinstance(value, int) or isinstance(value, bool) or value <= 0
        ):
            raise ConfigError(f"{key} must be a positive integer")

    for key in _STR_FIELDS:
        if key in data and not isinstance(data[key], str):
            raise ConfigError(f"{key} must be a string")

    for key in _LIST_FIELDS:
        value = data.get(key)
        if value is not None and (
            not isinstance(value, list) or not all(isinstance(v, str) for v in value)
        ):
            raise ConfigError(f"{key} must be a list of strings")

    for key in _BOOL_FIELDS:
        if key in data and not isinstance(data[key], bool):
            raise ConfigError(f"{key} must be true or false")

    toolchain = data.get("toolchain")
    if toolchain is not None:
        try:
            parse_toolchain(toolchain)
        except ValueError as e:
            raise ConfigError(str(e)) from e

    defaults = NightlyKitConfig()
    rustup_home = data.get("rustup_home")

    return NightlyKitConfig(
        toolchain=toolchain,
        days=data.get("days", defaults.days),
        offset=data.get("offset", defaults.offset),
        components=data.get("components", defaults.components),
        preview_components=data.get(
            "preview_components", defaults.preview_components
        ),
        skip_installed=data.get("skip_installed", defaults.skip_installed),
        rustup_bin=data.get("rustup_bin", defaults.rustup_bin),
        rustup_home=Path(rustup_home).expanduser() if rustup_home else None,
        dist_server=data.get("dist_server", defaults.dist_server),
        timeout=data.get("timeout", defaults.timeout),
    )
