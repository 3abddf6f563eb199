"""
Pytest configuration and shared fixtures for nightlykit tests.
"""

import datetime
from typing import Dict, Iterable, Tuple, Union

import pytest

from nightlykit.core.download import ManifestSource
from nightlykit.core.exceptions import ManifestFetchError

TARGET = "x86_64-unknown-linux-gnu"


def render_manifest(packages: Iterable[Tuple[str, str, bool]]) -> str:
    """
    Render a minimal channel manifest.

    Args:
        packages: (package name, target, available) triples, in manifest order
    """
    lines = ['manifest-version = "2"', 'date = "2024-03-01"', ""]
    for name, target, available in packages:
        lines.append(f"[pkg.{name}.target.{target}]")
        lines.append(f"available = {'true' if available else 'false'}")
        if available:
            lines.append(
                f'url = "https://static.rust-lang.org/dist/{name}-{target}.tar.gz"'
            )
        lines.append("")
    return "\n".join(lines)


class FakeManifestSource(ManifestSource):
    """In-memory manifest source recording every requested day."""

    def __init__(self, manifests: Dict[datetime.date, Union[str, Exception]]):
        self.manifests = manifests
        self.requested = []

    def fetch(self, date: datetime.date, channel: str) -> str:
        self.requested.append(date)
        manifest = self.manifests.get(date)
        if manifest is None:
            raise ManifestFetchError(f"404 for {date}")
        if isinstance(manifest, Exception):
            raise manifest
        return manifest


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def target() -> str:
    return TARGET


@pytest.fixture
def manifest():
    """Factory rendering manifests for the default target."""

    def _manifest(*packages, target: str = TARGET) -> str:
        entries = []
        for package in packages:
            if isinstance(package, str):
                entries.append((package, target, True))
            else:
                name, available = package
                entries.append((name, target, available))
        return render_manifest(entries)

    return _manifest


@pytest.fixture
def manifest_source():
    """Factory building a FakeManifestSource."""
    return FakeManifestSource


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))
    monkeypatch.delenv("RUSTUP_HOME", raising=False)

    return fake_home
