"""
Channel manifest matching.

A channel manifest lists every package of a release, one section per target:

    [pkg.rustfmt-preview.target.x86_64-unknown-linux-gnu]
    available = true
    ...

The matcher does not parse TOML. It walks the manifest with a line cursor,
pairing each package header with the line that follows it, and ticks off the
required components whose header is immediately followed by
``available = true``.
"""

import logging
from dataclasses import dataclass
from typing import AbstractSet, Dict, List, Tuple

from .components import ComponentRequirement, RequirementSet

logger = logging.getLogger(__name__)

AVAILABLE_LINE = "available = true"


@dataclass(frozen=True)
class MatchOutcome:
    """Result of checking one manifest against a requirement set."""

    satisfied: bool
    missing: Tuple[str, ...] = ()
    matched: int = 0

    @classmethod
    def success(cls, matched: int) -> "MatchOutcome":
        return cls(satisfied=True, matched=matched)

    @classmethod
    def failure(cls, missing: List[str], matched: int) -> "MatchOutcome":
        return cls(satisfied=False, missing=tuple(sorted(missing)), matched=matched)


@dataclass(frozen=True)
class HeaderPattern:
    """Literal prefix/suffix a package header must have to provide a component."""

    prefix: str
    suffix: str

    @classmethod
    def for_requirement(
        cls, requirement: ComponentRequirement, target: str
    ) -> "HeaderPattern":
        if requirement.arch_suffix:
            suffix = f"{requirement.arch_suffix}-{target}]"
        else:
            suffix = f"{target}]"
        return cls(prefix=f"[pkg.{requirement.name}.target", suffix=suffix)

    def matches(self, header: str) -> bool:
        return header.startswith(self.prefix) and header.endswith(self.suffix)


def is_package_header(line: str) -> bool:
    return line.startswith("[pkg.") and line.endswith("]")


def match_manifest(
    text: str,
    requirements: RequirementSet,
    target: str,
    preview_components: AbstractSet[str],
) -> MatchOutcome:
    """
    Check whether a manifest provides every required component.

    A requirement whose name is in ``preview_components`` is replaced by its
    ``-preview`` variant the first time an available header does not match
    it, whatever package that header belongs to; the variant is then tested
    against the same header and every header after it.

    Args:
        text: Raw manifest text
        requirements: Components to look for (never mutated)
        target: Target triple (e.g. 'x86_64-unknown-linux-gnu')
        preview_components: Names that fall back to '<name>-preview'

    Returns:
        MatchOutcome, with the still-missing names (sorted) when unsatisfied

    Raises:
        ValueError: If requirements is empty
    """
    if not requirements:
        raise ValueError("Cannot match a manifest against an empty requirement set")

    pending: Dict[ComponentRequirement, HeaderPattern] = {
        r: HeaderPattern.for_requirement(r, target) for r in requirements
    }
    matched = 0

    # Only "\n" ends a line; form feeds and other separators stay in the line.
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    cursor = 0

    while cursor < len(lines):
        header = lines[cursor]
        cursor += 1

        if not is_package_header(header):
            continue

        if cursor >= len(lines):
            break

        next_line = lines[cursor]
        cursor += 1

        if next_line != AVAILABLE_LINE:
            continue

        queue = sorted(pending)
        while queue:
            requirement = queue.pop(0)

            if pending[requirement].matches(header):
                del pending[requirement]
                matched += 1
                logger.debug(f"{requirement} provided by {header}")
                continue

            if requirement.name in preview_components:
                del pending[requirement]
                substitute = requirement.preview()
                if substitute not in pending:
                    pending[substitute] = HeaderPattern.for_requirement(
                        substitute, target
                    )
                    queue.append(substitute)

        if not pending:
            return MatchOutcome.success(matched)

    return MatchOutcome.failure([r.name for r in pending], matched)
