"""
Latest release lookup for tailwindcss.

Queries the GitHub releases API for the most recent tailwindcss tag. Any
network problem is reported as a single HttpError so the caller can decide to
fall back to the locally cached version.
"""

import logging
from typing import Optional

import requests
from requests.exceptions import RequestException

from .exceptions import HttpError, VersionResolutionError
from .retry import Deadline

logger = logging.getLogger(__name__)

LATEST_VERSION_URL = (
    "https://api.github.com/repos/tailwindlabs/tailwindcss/releases/latest"
)
DEFAULT_TIMEOUT = 30.0

LATEST = "latest"


class ReleaseResolver:
    """
    Resolve the latest tailwindcss release tag.

    Example:
        >>> resolver = ReleaseResolver()
        >>> resolver.resolve_latest()
        'v4.0.7'
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        latest_version_url: str = LATEST_VERSION_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize resolver.

        Args:
            session: HTTP session (a new one is created if None)
            latest_version_url: Endpoint returning JSON with a 'tag_name' field
            timeout: Request timeout in seconds
        """
        self.session = session or requests.Session()
        self.latest_version_url = latest_version_url
        self.timeout = timeout

    def resolve_latest(self, deadline: Optional[Deadline] = None) -> str:
        """
        Fetch the tag of the latest release.

        Args:
            deadline: Shared cancellation signal

        Returns:
            Release tag exactly as published (e.g. 'v4.0.7')

        Raises:
            HttpError: On transport failure or a non-success status
            VersionResolutionError: If the response body is not usable
            DownloadCancelledError: If the deadline already fired
        """
        deadline = deadline or Deadline.never()
        timeout = deadline.timeout(self.timeout)

        logger.debug(f"Fetching latest version from {self.latest_version_url}")
        try:
            response = self.session.get(
                self.latest_version_url,
                headers={"Accept": "application/vnd.github+json"},
                timeout=timeout,
            )
        except RequestException as e:
            logger.debug(f"Latest version request failed: {e}")
            raise HttpError() from e

        with response:
            if response.status_code != 200:
                logger.error(
                    f"Failed to fetch latest version: status_code={response.status_code}"
                )
                raise HttpError()

            try:
                release = response.json()
            except ValueError as e:
                raise VersionResolutionError(
                    f"Invalid JSON in latest release response: {e}"
                ) from e

        tag = release.get("tag_name") if isinstance(release, dict) else None
        if not isinstance(tag, str) or not tag:
            raise VersionResolutionError("Latest release response has no tag_name")

        logger.debug(f"Retrieved latest version {tag}")
        return tag


__all__ = ["LATEST", "LATEST_VERSION_URL", "ReleaseResolver"]
