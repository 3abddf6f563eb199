"""
Backward search for the latest release providing every required component.

Starting at a given day, manifests are fetched one day at a time going back
in time until one satisfies the requirements or the look-back window is
exhausted. Days whose manifest cannot be fetched or decoded are skipped.
"""

import datetime
import logging
from typing import AbstractSet, Optional

from ..core.download import ManifestSource
from ..core.exceptions import (
    ManifestDecodeError,
    ManifestFetchError,
    NoMatchingReleaseError,
)
from ..core.reporting import SilentReporter, StatusReporter
from .components import DEFAULT_PREVIEW_COMPONENTS, RequirementSet
from .manifest import MatchOutcome, match_manifest

logger = logging.getLogger(__name__)

ONE_DAY = datetime.timedelta(days=1)


def start_date(offset: int = 0, today: Optional[datetime.date] = None) -> datetime.date:
    """
    Compute the first day to check.

    Args:
        offset: Number of days before today at which to start
        today: Reference day (default: current UTC date)
    """
    if today is None:
        today = datetime.datetime.now(datetime.timezone.utc).date()
    return today - datetime.timedelta(days=offset)


def toolchain_identifier(channel: str, date: datetime.date, target: str) -> str:
    return f"{channel}-{date.strftime('%Y-%m-%d')}-{target}"


def describe_missing(outcome: MatchOutcome, date_str: str) -> str:
    """Build the verbose message for a manifest that did not match."""
    if outcome.matched == 0:
        return f"No component matched in {date_str}; trying previous day..."
    if len(outcome.missing) == 1:
        return (
            f"Component {outcome.missing[0]} was missing in {date_str}; "
            "trying previous day..."
        )
    return (
        f"Components {', '.join(outcome.missing)} were missing in {date_str}; "
        "trying previous day..."
    )


def find_latest_release(
    source: ManifestSource,
    channel: str,
    target: str,
    requirements: RequirementSet,
    days: int,
    start: datetime.date,
    preview_components: AbstractSet[str] = DEFAULT_PREVIEW_COMPONENTS,
    reporter: Optional[StatusReporter] = None,
) -> str:
    """
    Find the most recent release whose manifest provides every requirement.

    Args:
        source: Manifest source (usually a ManifestFetcher)
        channel: Release channel (e.g. 'nightly')
        target: Target triple
        requirements: Components the release must provide
        days: Number of days to look back from ``start`` (inclusive)
        start: First day to check
        preview_components: Names accepted as '<name>-preview'
        reporter: Status reporter for progress messages

    Returns:
        Toolchain identifier '<channel>-<YYYY-MM-DD>-<target>'

    Raises:
        NoMatchingReleaseError: If no day within the window matches
    """
    reporter = reporter or SilentReporter()

    if not requirements:
        logger.debug("No required components, accepting the start date")
        return toolchain_identifier(channel, start, target)

    date = start
    while True:
        if (start - date).days > days:
            raise NoMatchingReleaseError(days)

        date_str = date.strftime("%Y-%m-%d")

        try:
            text = source.fetch(date, channel)
        except ManifestDecodeError as e:
            logger.debug(str(e))
            reporter.info(f"Cannot read manifest for {date_str}; trying previous day...")
            date -= ONE_DAY
            continue
        except ManifestFetchError as e:
            logger.debug(str(e))
            date -= ONE_DAY
            continue

        outcome = match_manifest(text, requirements, target, preview_components)

        if outcome.satisfied:
            return toolchain_identifier(channel, date, target)

        reporter.info(describe_missing(outcome, date_str))
        date -= ONE_DAY
