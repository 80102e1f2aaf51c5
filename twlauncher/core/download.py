"""
Artifact download with retry logic and size verification.

This module fetches the platform-specific tailwindcss binary from the GitHub
release page into the cache directory:
- Streaming HTTP downloads through requests
- Fixed-delay retries (3 attempts, 2 seconds apart)
- Content-Length verification at the cache write boundary
- Removal of partial files after a failed attempt
- Shared deadline for cancellation
"""

import logging
import os
import time
from pathlib import Path
from typing import Callable, Optional, Union

import requests

from . import cache
from .exceptions import DownloadFailedError, HttpError, RetryExhaustedError
from .platform import PlatformKey, artifact_name
from .retry import Deadline, RetryPolicy, retry_with_policy

logger = logging.getLogger(__name__)

DOWNLOAD_URL = "https://github.com/tailwindlabs/tailwindcss/releases/download"
DEFAULT_TIMEOUT = 30.0
CHUNK_SIZE = 8192


def content_length(response: requests.Response) -> int:
    """
    Get the declared body size of a response.

    Returns:
        Content-Length as an integer, or 0 if absent or malformed
    """
    value = response.headers.get("content-length")
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        logger.debug(f"Ignoring malformed Content-Length: {value!r}")
        return 0


class ArtifactDownloader:
    """
    Download tailwindcss release artifacts into the cache.

    Example:
        >>> downloader = ArtifactDownloader()
        >>> downloader.download(key, "v4.0.7", cache_dir / "tailwindcss-v4.0.7", cache_dir)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        download_url: str = DOWNLOAD_URL,
        timeout: float = DEFAULT_TIMEOUT,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize downloader.

        Args:
            session: HTTP session (a new one is created if None)
            download_url: Base URL of the 'download by tag and filename' endpoint
            timeout: Per-request timeout in seconds
            policy: Retry policy (3 attempts, 2s apart by default)
            sleep: Function used to wait between attempts
        """
        self.session = session or requests.Session()
        self.download_url = download_url.rstrip("/")
        self.timeout = timeout
        self.policy = policy or RetryPolicy()
        self.sleep = sleep

    def artifact_url(self, version: str, key: PlatformKey) -> str:
        """Build the download URL of the artifact for a version and platform."""
        return f"{self.download_url}/{version}/{artifact_name(key)}"

    def download(
        self,
        key: PlatformKey,
        version: str,
        destination: Union[str, Path],
        cache_directory: Union[str, Path],
        deadline: Optional[Deadline] = None,
    ) -> Path:
        """
        Download an artifact to a cache path with retries.

        Args:
            key: Platform of the artifact
            version: Concrete release tag
            destination: Target file inside cache_directory
            cache_directory: Cache directory the target must live in
            deadline: Shared cancellation signal

        Returns:
            Path to the downloaded file

        Raises:
            DownloadFailedError: If every attempt failed (chained from the last error)
        """
        deadline = deadline or Deadline.never()
        destination = Path(destination)
        url = self.artifact_url(version, key)

        def attempt(number: int) -> Path:
            self._download_attempt(url, destination, cache_directory, deadline)
            return destination

        def cleanup(number: int, error: Exception) -> None:
            self._remove_partial(destination, cache_directory)

        try:
            return retry_with_policy(
                attempt, self.policy, sleep=self.sleep, on_failure=cleanup
            )
        except RetryExhaustedError as e:
            raise DownloadFailedError(e.attempts, e.last_error) from e.last_error

    def _download_attempt(
        self,
        url: str,
        destination: Path,
        cache_directory: Union[str, Path],
        deadline: Deadline,
    ) -> None:
        timeout = deadline.timeout(self.timeout)
        logger.debug(f"Downloading file from {url}")

        response = self.session.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        )
        with response:
            if response.status_code != 200:
                logger.error(
                    f"Failed to download file: status_code={response.status_code}"
                )
                raise HttpError(f"failed to get the resource: HTTP {response.status_code}")

            cache.write(
                deadline.guard(response.iter_content(chunk_size=CHUNK_SIZE)),
                destination,
                cache_directory,
                content_length(response),
            )

    @staticmethod
    def _remove_partial(path: Path, cache_directory: Union[str, Path]) -> None:
        if not cache.is_within_directory(path, cache_directory):
            return
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to clean up partial download {path}: {e}")


__all__ = ["DOWNLOAD_URL", "ArtifactDownloader", "content_length"]
