"""
Tests for the backward release search.
"""

import datetime
import io

import pytest
from rich.console import Console

from nightlykit.core.exceptions import (
    ManifestDecodeError,
    ManifestFetchError,
    NoMatchingReleaseError,
)
from nightlykit.core.reporting import StatusReporter
from nightlykit.toolchain.components import ComponentRequirement
from nightlykit.toolchain.manifest import MatchOutcome
from nightlykit.toolchain.search import (
    describe_missing,
    find_latest_release,
    start_date,
    toolchain_identifier,
)

TARGET = "x86_64-unknown-linux-gnu"
START = datetime.date(2024, 3, 10)


def days_back(n):
    return START - datetime.timedelta(days=n)


def requirements(*names):
    return frozenset(ComponentRequirement(name) for name in names)


def verbose_reporter():
    out = io.StringIO()
    reporter = StatusReporter(
        verbose=True,
        stdout=Console(file=out, no_color=True, soft_wrap=True),
        stderr=Console(file=io.StringIO(), no_color=True, soft_wrap=True),
    )
    return reporter, out


class TestHelpers:
    """Test search helpers."""

    def test_toolchain_identifier(self):
        assert (
            toolchain_identifier("nightly", datetime.date(2024, 1, 5), TARGET)
            == "nightly-2024-01-05-x86_64-unknown-linux-gnu"
        )

    def test_start_date_offset(self):
        today = datetime.date(2024, 3, 1)
        assert start_date(0, today=today) == today
        assert start_date(2, today=today) == datetime.date(2024, 2, 28)

    def test_start_date_defaults_to_today(self):
        assert isinstance(start_date(), datetime.date)

    def test_describe_nothing_matched(self):
        outcome = MatchOutcome(satisfied=False, missing=("cargo", "miri"), matched=0)
        assert describe_missing(outcome, "2024-03-10") == (
            "No component matched in 2024-03-10; trying previous day..."
        )

    def test_describe_one_missing(self):
        outcome = MatchOutcome(satisfied=False, missing=("miri",), matched=2)
        assert describe_missing(outcome, "2024-03-10") == (
            "Component miri was missing in 2024-03-10; trying previous day..."
        )

    def test_describe_several_missing(self):
        outcome = MatchOutcome(satisfied=False, missing=("clippy", "miri"), matched=1)
        assert describe_missing(outcome, "2024-03-10") == (
            "Components clippy, miri were missing in 2024-03-10; trying previous day..."
        )


class TestFindLatestRelease:
    """Test find_latest_release()."""

    def test_first_day_matches(self, manifest, manifest_source):
        source = manifest_source({START: manifest("cargo")})

        result = find_latest_release(
            source, "nightly", TARGET, requirements("cargo"), days=30, start=START
        )

        assert result == "nightly-2024-03-10-x86_64-unknown-linux-gnu"
        assert source.requested == [START]

    def test_rustfmt_missing_on_first_day(self, manifest, manifest_source):
        source = manifest_source(
            {
                days_back(0): manifest("cargo"),
                days_back(1): manifest("rustfmt", "cargo"),
            }
        )

        result = find_latest_release(
            source,
            "nightly",
            TARGET,
            requirements("rustfmt", "cargo"),
            days=3,
            start=START,
        )

        assert result == "nightly-2024-03-09-x86_64-unknown-linux-gnu"
        assert source.requested == [days_back(0), days_back(1)]

    def test_match_at_window_edge(self, manifest, manifest_source):
        source = manifest_source({days_back(3): manifest("cargo")})

        result = find_latest_release(
            source, "nightly", TARGET, requirements("cargo"), days=3, start=START
        )

        assert result == "nightly-2024-03-07-x86_64-unknown-linux-gnu"

    def test_match_past_window_edge(self, manifest, manifest_source):
        source = manifest_source({days_back(4): manifest("cargo")})

        with pytest.raises(NoMatchingReleaseError) as exc_info:
            find_latest_release(
                source, "nightly", TARGET, requirements("cargo"), days=3, start=START
            )

        assert exc_info.value.days == 3
        assert exc_info.value.exit_code == 5
        assert str(exc_info.value) == "Could not find a match in the last 3 days."
        assert source.requested == [days_back(n) for n in range(4)]

    def test_zero_day_window(self, manifest, manifest_source):
        source = manifest_source({days_back(1): manifest("cargo")})

        with pytest.raises(NoMatchingReleaseError):
            find_latest_release(
                source, "nightly", TARGET, requirements("cargo"), days=0, start=START
            )

        assert source.requested == [START]

    def test_fetch_and_decode_failures_skipped(self, manifest, manifest_source):
        source = manifest_source(
            {
                days_back(0): ManifestFetchError("connection refused"),
                days_back(1): ManifestDecodeError("not utf-8"),
                days_back(2): manifest("cargo"),
            }
        )

        result = find_latest_release(
            source, "nightly", TARGET, requirements("cargo"), days=5, start=START
        )

        assert result == "nightly-2024-03-08-x86_64-unknown-linux-gnu"

    def test_decode_failure_reported_when_verbose(self, manifest, manifest_source):
        source = manifest_source(
            {
                days_back(0): ManifestDecodeError("not utf-8"),
                days_back(1): manifest("cargo"),
            }
        )
        reporter, out = verbose_reporter()

        find_latest_release(
            source,
            "nightly",
            TARGET,
            requirements("cargo"),
            days=5,
            start=START,
            reporter=reporter,
        )

        assert "[i] Cannot read manifest for 2024-03-10; trying previous day..." in (
            out.getvalue()
        )

    def test_missing_components_reported_when_verbose(self, manifest, manifest_source):
        source = manifest_source(
            {
                days_back(0): manifest("rustc"),
                days_back(1): manifest("cargo"),
                days_back(2): manifest("cargo", "miri"),
            }
        )
        reporter, out = verbose_reporter()

        find_latest_release(
            source,
            "nightly",
            TARGET,
            requirements("cargo", "miri"),
            days=5,
            start=START,
            reporter=reporter,
        )

        assert out.getvalue().splitlines() == [
            "[i] No component matched in 2024-03-10; trying previous day...",
            "[i] Component miri was missing in 2024-03-09; trying previous day...",
        ]

    def test_empty_requirements_short_circuit(self, manifest_source):
        source = manifest_source({})

        result = find_latest_release(
            source, "nightly", TARGET, frozenset(), days=30, start=START
        )

        assert result == "nightly-2024-03-10-x86_64-unknown-linux-gnu"
        assert source.requested == []

    def test_custom_preview_components(self, manifest, manifest_source):
        source = manifest_source({START: manifest("cargo", "rustfmt")})

        result = find_latest_release(
            source,
            "nightly",
            TARGET,
            requirements("rustfmt"),
            days=0,
            start=START,
            preview_components=frozenset(),
        )

        assert result.startswith("nightly-2024-03-10")

    def test_other_channel(self, manifest, manifest_source):
        source = manifest_source({START: manifest("cargo")})

        result = find_latest_release(
            source, "beta", TARGET, requirements("cargo"), days=0, start=START
        )

        assert result == "beta-2024-03-10-x86_64-unknown-linux-gnu"
