"""
Toolchain release matching and management.

This package resolves the components a release must provide, matches dated
channel manifests against them, searches backwards for the latest matching
release, and drives rustup to install and swap toolchains.
"""

from .components import (
    DEFAULT_PREVIEW_COMPONENTS,
    ComponentRequirement,
    RequirementSet,
    resolve_requirements,
    split_component,
)
from .manifest import MatchOutcome, match_manifest
from .replace import ToolchainReplacer, default_rustup_home
from .rustup import Rustup, parse_toolchain
from .search import find_latest_release, start_date, toolchain_identifier

__all__ = [
    # Components
    "DEFAULT_PREVIEW_COMPONENTS",
    "ComponentRequirement",
    "RequirementSet",
    "resolve_requirements",
    "split_component",
    # Manifest
    "MatchOutcome",
    "match_manifest",
    # Search
    "find_latest_release",
    "start_date",
    "toolchain_identifier",
    # rustup
    "Rustup",
    "parse_toolchain",
    # Replace
    "ToolchainReplacer",
    "default_rustup_home",
]
