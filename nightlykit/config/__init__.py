"""
Configuration loading for nightlykit.
"""

from .parser import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_DAYS,
    NightlyKitConfig,
    load_config,
    parse_config,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_DAYS",
    "NightlyKitConfig",
    "load_config",
    "parse_config",
]
