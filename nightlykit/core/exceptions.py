"""
Centralized exception hierarchy for nightlykit.

Every fatal error carries the process exit code the CLI terminates with, so
operators can tell exactly which step of a run failed.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class NightlyKitError(Exception):
    """Base exception for all nightlykit errors."""

    exit_code = 1

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.details = details


# ============================================================================
# Toolchain Manager Exceptions
# ============================================================================


class ToolchainManagerError(NightlyKitError):
    """Raised when rustup cannot be spawned or exits with a non-zero status."""

    exit_code = 1


class ToolchainManagerOutputError(ToolchainManagerError):
    """Raised when rustup output is not valid UTF-8."""

    exit_code = 2


class DefaultToolchainNotFoundError(ToolchainManagerError):
    """Raised when no installed toolchain is marked as default."""

    exit_code = 3

    def __init__(self):
        super().__init__("Could not find default toolchain.")


class ToolchainInstallError(ToolchainManagerError):
    """Raised when rustup fails to install a toolchain."""

    exit_code = 6


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(NightlyKitError):
    """Configuration parsing or validation error."""

    exit_code = 4


# ============================================================================
# Release Search Exceptions
# ============================================================================


class ManifestError(NightlyKitError):
    """Base exception for manifest retrieval errors (never fatal)."""

    pass


class ManifestFetchError(ManifestError):
    """Raised when a manifest cannot be downloaded."""

    pass


class ManifestDecodeError(ManifestError):
    """Raised when a downloaded manifest is not valid text."""

    pass


class NoMatchingReleaseError(NightlyKitError):
    """Raised when no release in the look-back window has every component."""

    exit_code = 5

    def __init__(self, days: int):
        self.days = days
        super().__init__(f"Could not find a match in the last {days} days.")


# ============================================================================
# Replace Exceptions
# ============================================================================


class ReplaceError(NightlyKitError):
    """Base exception for toolchain directory swap failures."""

    pass


class MovePreviousToolchainError(ReplaceError):
    exit_code = 7


class RemovePreviousToolchainError(ReplaceError):
    exit_code = 8


class MoveNewToolchainError(ReplaceError):
    exit_code = 9


class MovePreviousHashesError(ReplaceError):
    exit_code = 10


class RemovePreviousHashesError(ReplaceError):
    exit_code = 11


class MoveNewHashesError(ReplaceError):
    exit_code = 12


class ReplaceLockTimeout(ReplaceError):
    """Raised when another process holds the replace lock."""

    exit_code = 1
