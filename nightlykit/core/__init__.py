"""
Core functionality for nightlykit.

This package contains the foundational modules that other components depend on.
"""

from .download import (
    DEFAULT_DIST_SERVER,
    ManifestFetcher,
    ManifestSource,
    manifest_url,
)

from .exceptions import (
    NightlyKitError,
    ToolchainManagerError,
    ToolchainManagerOutputError,
    DefaultToolchainNotFoundError,
    ToolchainInstallError,
    ConfigError,
    ManifestError,
    ManifestFetchError,
    ManifestDecodeError,
    NoMatchingReleaseError,
    ReplaceError,
)

from .reporting import StatusReporter, SilentReporter

__all__ = [
    # Download
    "DEFAULT_DIST_SERVER",
    "ManifestFetcher",
    "ManifestSource",
    "manifest_url",
    # Exceptions
    "NightlyKitError",
    "ToolchainManagerError",
    "ToolchainManagerOutputError",
    "DefaultToolchainNotFoundError",
    "ToolchainInstallError",
    "ConfigError",
    "ManifestError",
    "ManifestFetchError",
    "ManifestDecodeError",
    "NoMatchingReleaseError",
    "ReplaceError",
    # Reporting
    "StatusReporter",
    "SilentReporter",
]
