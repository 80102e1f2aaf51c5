"""
Core functionality for the Tailwind launcher.

This package contains platform detection, the binary cache, release lookup,
downloading and the launch orchestration.
"""

from .platform import (
    PlatformKey,
    FileReader,
    OSFileReader,
    detect_platform,
    is_supported,
    artifact_name,
    cache_entry_name,
)

from .retry import (
    Deadline,
    RetryPolicy,
    retry_with_policy,
)

from .releases import LATEST, ReleaseResolver
from .download import ArtifactDownloader
from .runner import ProcessResult, ProcessRunner, SubprocessRunner
from .launcher import Launcher

from .exceptions import (
    LauncherError,
    LaunchError,
    UnsupportedPlatformError,
    ArgumentParseError,
    ConfigError,
    HttpError,
    VersionResolutionError,
    VersionUnavailableError,
    CacheError,
    NotInstalledError,
    CacheIOError,
    PathValidationError,
    DownloadError,
    IncompleteDownloadError,
    DownloadCancelledError,
    RetryExhaustedError,
    DownloadFailedError,
    ProcessInvocationError,
)

__all__ = [
    "PlatformKey",
    "FileReader",
    "OSFileReader",
    "detect_platform",
    "is_supported",
    "artifact_name",
    "cache_entry_name",
    "Deadline",
    "RetryPolicy",
    "retry_with_policy",
    "LATEST",
    "ReleaseResolver",
    "ArtifactDownloader",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    "Launcher",
    "LauncherError",
    "LaunchError",
    "UnsupportedPlatformError",
    "ArgumentParseError",
    "ConfigError",
    "HttpError",
    "VersionResolutionError",
    "VersionUnavailableError",
    "CacheError",
    "NotInstalledError",
    "CacheIOError",
    "PathValidationError",
    "DownloadError",
    "IncompleteDownloadError",
    "DownloadCancelledError",
    "RetryExhaustedError",
    "DownloadFailedError",
    "ProcessInvocationError",
]
