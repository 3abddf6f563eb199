"""
Component requirement resolution.

Builds the set of (component, arch suffix) pairs a release must provide, from
the components requested on the command line plus, optionally, the components
already installed in the toolchain being upgraded.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

logger = logging.getLogger(__name__)

# Built-in components that are never carried over from an installed toolchain.
EXCLUDED_PREFIXES = ("rust-src", "rust-std")

DEFAULT_PREVIEW_COMPONENTS = frozenset({"rustfmt", "rls", "clippy"})

_RUST_PREFIX = "rust-"


@dataclass(frozen=True, order=True)
class ComponentRequirement:
    """A component that must be available in a release."""

    name: str
    arch_suffix: str = ""

    def preview(self) -> "ComponentRequirement":
        """Return the '-preview' variant of this requirement."""
        return ComponentRequirement(f"{self.name}-preview", self.arch_suffix)

    def __str__(self) -> str:
        if self.arch_suffix:
            return f"{self.name}-{self.arch_suffix}"
        return self.name


RequirementSet = FrozenSet[ComponentRequirement]


def split_component(component: str) -> ComponentRequirement:
    """
    Split a component string into its base name and arch suffix.

    Only components starting with 'rust-' can embed a target triple; for those
    the first hyphen after the prefix separates the name from the suffix.

    Example:
        >>> split_component("rust-std-x86_64-unknown-linux-gnu")
        ComponentRequirement(name='rust-std', arch_suffix='x86_64-unknown-linux-gnu')
        >>> split_component("rust-analysis")
        ComponentRequirement(name='rust-analysis', arch_suffix='')
        >>> split_component("rustfmt")
        ComponentRequirement(name='rustfmt', arch_suffix='')
    """
    if component.startswith(_RUST_PREFIX):
        hyphen = component.find("-", len(_RUST_PREFIX))
        if hyphen != -1:
            return ComponentRequirement(component[:hyphen], component[hyphen + 1 :])
    return ComponentRequirement(component)


def is_excluded(requirement: ComponentRequirement) -> bool:
    """Check whether a discovered component is a built-in that is never required."""
    return requirement.name.startswith(EXCLUDED_PREFIXES)


def resolve_requirements(
    requested: Iterable[str],
    installed: Optional[Iterable[str]] = None,
) -> RequirementSet:
    """
    Build the requirement set for a search.

    Args:
        requested: Component names given explicitly; always kept verbatim
        installed: Component names discovered in the current toolchain;
            built-ins (rust-src, rust-std) are dropped from these

    Returns:
        Set of requirements (possibly empty, meaning nothing to match)
    """
    requirements = {split_component(c) for c in requested if c}

    for component in installed or ():
        requirement = split_component(component)
        if is_excluded(requirement):
            logger.debug(f"Ignoring built-in component {component}")
            continue
        requirements.add(requirement)

    logger.debug(f"Resolved {len(requirements)} required component(s)")
    return frozenset(requirements)


def format_requirements(requirements: Iterable[ComponentRequirement]) -> str:
    """Format requirements as a sorted, comma separated list."""
    return ", ".join(str(r) for r in sorted(requirements))

