"""
Launcher command-line interface.

Everything on the command line belongs to tailwindcss except ``-version``:

    twl [-version <tag>] [tailwindcss args...]

argparse is not used here because unknown options, including ``--help``, must
reach tailwindcss untouched and in their original order.
"""

import logging
import sys
from typing import List, Mapping, Optional, Sequence, TextIO, Tuple

import requests

from twlauncher.cli.log import configure_logging, get_level, get_output
from twlauncher.config import LauncherConfig, load_config
from twlauncher.core.download import ArtifactDownloader
from twlauncher.core.exceptions import (
    ArgumentParseError,
    ConfigError,
    UnsupportedPlatformError,
)
from twlauncher.core.launcher import Launcher
from twlauncher.core.platform import PlatformKey, detect_platform
from twlauncher.core.releases import ReleaseResolver
from twlauncher.core.retry import Deadline

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("tailwind-launcher")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

VERSION_FLAG = "-version"


def split_args(argv: Sequence[str]) -> Tuple[Optional[str], List[str]]:
    """
    Separate the launcher's ``-version`` flag from pass-through arguments.

    Args:
        argv: Command-line arguments without the program name

    Returns:
        (requested version or None, arguments for tailwindcss)

    Raises:
        ArgumentParseError: If ``-version`` is the last argument

    Example:
        >>> split_args(["-version", "v4.0.0", "-i", "input.css"])
        ('v4.0.0', ['-i', 'input.css'])
    """
    requested: Optional[str] = None
    passthrough: List[str] = []

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == VERSION_FLAG:
            if i + 1 >= len(argv):
                raise ArgumentParseError("version flag passed but missing argument")
            requested = argv[i + 1]
            i += 2
            continue
        passthrough.append(arg)
        i += 1

    return requested, passthrough


class CLI:
    """Tailwind launcher command-line interface."""

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize CLI.

        Args:
            stdout: Stream for relayed tool output (sys.stdout if None)
            stderr: Stream for error messages (sys.stderr if None)
            env: Environment mapping (os.environ if None)
        """
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.env = env

    def _fail(self, message: str) -> int:
        print(message, file=self.stderr)
        return 1

    def build_launcher(self, key: PlatformKey, config: LauncherConfig) -> Launcher:
        """
        Wire a Launcher from configuration.

        Args:
            key: Detected platform
            config: Effective configuration

        Returns:
            Launcher sharing one HTTP session and one deadline
        """
        session = requests.Session()
        session.headers["User-Agent"] = f"tailwind-launcher/{__version__}"

        return Launcher(
            platform_key=key,
            resolver=ReleaseResolver(
                session=session,
                latest_version_url=config.latest_version_url,
                timeout=config.timeout,
            ),
            downloader=ArtifactDownloader(
                session=session,
                download_url=config.download_url,
                timeout=config.timeout,
            ),
            deadline=Deadline(config.deadline),
            stdout=self.stdout,
            stderr=self.stderr,
            cache_root=config.cache_dir,
        )

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """
        Run the launcher with given arguments.

        Args:
            argv: Arguments without the program name (sys.argv[1:] if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        argv = sys.argv[1:] if argv is None else list(argv)

        configure_logging(get_level(self.env), get_output(self.env))

        try:
            key = detect_platform()
        except UnsupportedPlatformError as e:
            return self._fail(str(e))
        logger.debug(f"Running platform {key}")

        try:
            requested, args = split_args(argv)
        except ArgumentParseError as e:
            return self._fail(f"failed to parse arguments: {e}")

        try:
            config = load_config(env=self.env).with_version(requested)
        except ConfigError as e:
            return self._fail(f"failed to load configuration: {e}")

        launcher = self.build_launcher(key, config)
        try:
            return launcher.run(config.version, args)
        except KeyboardInterrupt:
            launcher.deadline.cancel()
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            logger.debug("Unexpected failure", exc_info=True)
            return 1


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
