"""
Launch orchestration.

The launcher walks one linear sequence per invocation:

    resolve version -> check cache -> [download -> make executable -> evict]
        -> invoke tailwindcss

Any failing step ends the run. Each failure is wrapped in a LaunchError naming
the step, and run() is the single place that turns it into a message and an
exit code.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from . import cache
from .download import ArtifactDownloader
from .exceptions import (
    CacheIOError,
    HttpError,
    LauncherError,
    LaunchError,
    NotInstalledError,
    ProcessInvocationError,
    VersionResolutionError,
    VersionUnavailableError,
)
from .platform import PlatformKey, cache_entry_name
from .releases import LATEST, ReleaseResolver
from .retry import Deadline
from .runner import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE = 180.0


class Launcher:
    """
    Ensure a tailwindcss version is cached, then run it.

    Example:
        >>> launcher = Launcher(detect_platform(), ReleaseResolver(), ArtifactDownloader())
        >>> exit_code = launcher.run("latest", ["-i", "input.css", "-o", "output.css"])
    """

    def __init__(
        self,
        platform_key: PlatformKey,
        resolver: ReleaseResolver,
        downloader: ArtifactDownloader,
        runner: Optional[ProcessRunner] = None,
        cache_dir: Optional[Path] = None,
        deadline: Optional[Deadline] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        cache_root: Optional[Path] = None,
    ):
        """
        Initialize launcher.

        Args:
            platform_key: Detected platform
            resolver: Latest release resolver
            downloader: Artifact downloader
            runner: Process runner (subprocess based if None)
            cache_dir: Cache directory (per-user default if None)
            deadline: Signal shared by downloads and the process run
            stdout: Stream for relayed output and progress messages
            stderr: Stream for error messages
            cache_root: User cache root used when cache_dir is None
        """
        self.platform_key = platform_key
        self.resolver = resolver
        self.downloader = downloader
        self.runner = runner or SubprocessRunner()
        self._cache_dir = Path(cache_dir) if cache_dir is not None else None
        self.cache_root = cache_root
        self.deadline = deadline or Deadline(DEFAULT_DEADLINE)
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    @property
    def cache_dir(self) -> Path:
        """Cache directory, created on first access."""
        if self._cache_dir is None:
            self._cache_dir = cache.download_directory(self.cache_root)
        return self._cache_dir

    def _say(self, message: str) -> None:
        print(message, file=self.stdout)

    def resolve_version(self, requested: str) -> str:
        """
        Turn a requested version into a concrete release tag.

        'latest' is looked up online; when the lookup fails with an HTTP
        error the installed version is used instead.

        Args:
            requested: 'latest' or an explicit tag

        Returns:
            Concrete release tag

        Raises:
            VersionUnavailableError: If offline and nothing is installed
            LauncherError: For any other resolution failure
        """
        if requested != LATEST:
            return requested

        try:
            version = self.resolver.resolve_latest(self.deadline)
        except HttpError as http_error:
            try:
                installed = cache.current_version(self.cache_dir)
            except NotInstalledError as e:
                raise VersionUnavailableError(
                    "failed to check for latest version of tailwind "
                    f"and no version is installed: {e}"
                ) from http_error

            self._say(
                "failed to fetch latest tailwindcss version: "
                f"falling back to installed version {installed}"
            )
            return installed

        logger.debug(f"Retrieved latest version {version}")
        return version

    def entry_path(self, version: str) -> Path:
        """
        Get the cache path of a concrete version.

        Raises:
            VersionResolutionError: If version is still the 'latest' sentinel
        """
        if not version or version == LATEST:
            raise VersionResolutionError(f"unresolved version: {version!r}")
        return self.cache_dir / cache_entry_name(version, self.platform_key)

    def ensure_installed(self, requested: str) -> Path:
        """
        Make sure the requested version is present in the cache.

        Args:
            requested: 'latest' or an explicit tag

        Returns:
            Path to the cached executable

        Raises:
            LaunchError: If any step fails
        """
        try:
            cache_dir = self.cache_dir
        except CacheIOError as e:
            raise LaunchError(
                "failed to determine directory to download tailwind to", e
            ) from e

        try:
            version = self.resolve_version(requested)
            path = self.entry_path(version)
        except VersionUnavailableError:
            raise
        except (LauncherError, OSError) as e:
            raise LaunchError("failed to determine latest version", e) from e

        try:
            installed = cache.exists(path)
        except OSError as e:
            raise LaunchError("failed to check if tailwind is already installed", e) from e

        if installed:
            logger.debug(f"Using cached tailwindcss {version} at {path}")
            return path

        self._say(f"Downloading tailwindcss {version}")
        try:
            self.downloader.download(
                self.platform_key, version, path, cache_dir, self.deadline
            )
        except LauncherError as e:
            raise LaunchError("failed to download tailwind", e) from e

        try:
            cache.make_executable(path)
        except OSError as e:
            raise LaunchError("failed to make tailwind executable", e) from e

        try:
            cache.evict_except(cache_dir, version)
        except OSError as e:
            raise LaunchError("failed to delete older version", e) from e

        return path

    def invoke(self, path: Path, args: Sequence[str]) -> None:
        """
        Run the cached executable once and relay its output.

        Stdout is relayed when it is non-empty and arguments were given;
        stderr is relayed otherwise (tailwindcss prints help and build
        summaries there).

        Raises:
            LaunchError: If the process cannot run or exits non-zero
        """
        try:
            result = self.runner.run(path, list(args), self.deadline)
        except ProcessInvocationError as e:
            raise LaunchError("failed to run tailwind", e) from e

        output = result.stdout if result.stdout and args else result.stderr
        if output:
            print(output, end="" if output.endswith("\n") else "\n", file=self.stdout)

    def run(self, requested: str, args: Sequence[str]) -> int:
        """
        Resolve, install and run tailwindcss.

        Args:
            requested: 'latest' or an explicit tag
            args: Arguments passed through to tailwindcss

        Returns:
            Exit code (0 for success, 1 for any failure)
        """
        try:
            path = self.ensure_installed(requested)
            self.invoke(path, args)
        except LauncherError as e:
            logger.debug("Launch failed", exc_info=True)
            print(str(e), file=self.stderr)
            return 1
        return 0


__all__ = ["DEFAULT_DEADLINE", "Launcher"]
