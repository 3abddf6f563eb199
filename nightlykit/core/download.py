"""
Channel manifest retrieval.

Manifests are published per day and per channel under

    <dist-server>/dist/<YYYY-MM-DD>/channel-rust-<channel>.toml

The fetcher only returns the decoded text; it never interprets it.
"""

import datetime
import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests
from requests.exceptions import RequestException

from .exceptions import ManifestDecodeError, ManifestFetchError

logger = logging.getLogger(__name__)

DEFAULT_DIST_SERVER = "https://static.rust-lang.org"
DEFAULT_TIMEOUT = 30


def manifest_url(
    date: datetime.date, channel: str, dist_server: str = DEFAULT_DIST_SERVER
) -> str:
    """
    Build the URL of the manifest published for a given day.

    Example:
        >>> manifest_url(datetime.date(2024, 3, 1), "nightly")
        'https://static.rust-lang.org/dist/2024-03-01/channel-rust-nightly.toml'
    """
    return (
        f"{dist_server.rstrip('/')}/dist/{date.strftime('%Y-%m-%d')}/"
        f"channel-rust-{channel}.toml"
    )


class ManifestSource(ABC):
    """Anything able to return the manifest text of a dated release."""

    @abstractmethod
    def fetch(self, date: datetime.date, channel: str) -> str:
        """
        Return the manifest text published for ``channel`` on ``date``.

        Raises:
            ManifestFetchError: If the manifest cannot be retrieved
            ManifestDecodeError: If the manifest is not valid text
        """
        pass


class ManifestFetcher(ManifestSource):
    """Downloads dated channel manifests over HTTP."""

    def __init__(
        self,
        dist_server: str = DEFAULT_DIST_SERVER,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize fetcher.

        Args:
            dist_server: Base URL of the distribution server
            timeout: Request timeout in seconds
            session: Session to reuse (a new one is created if None)

        Raises:
            ValueError: If timeout is not greater than zero
        """
        if timeout <= 0:
            raise ValueError(f"Timeout must be greater than zero: {timeout}")

        self.dist_server = dist_server
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, date: datetime.date, channel: str) -> str:
        """
        Fetch the manifest text for one day.

        Args:
            date: Release date
            channel: Release channel (e.g. 'nightly')

        Returns:
            Manifest body as text

        Raises:
            ManifestFetchError: On connection errors, timeouts and HTTP errors
            ManifestDecodeError: If the body is not valid UTF-8
        """
        url = manifest_url(date, channel, self.dist_server)
        logger.debug(f"Fetching manifest {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except RequestException as e:
            raise ManifestFetchError(f"Failed to fetch {url}: {e}") from e

        try:
            return response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestDecodeError(f"Manifest at {url} is not valid text: {e}") from e
