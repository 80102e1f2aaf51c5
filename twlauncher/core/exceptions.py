"""
Centralized exception hierarchy for the Tailwind launcher.

Every failure raised inside the launcher derives from LauncherError so the CLI
can turn it into a single user-facing message and exit code.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class LauncherError(Exception):
    """Base exception for all launcher errors."""

    pass


class LaunchError(LauncherError):
    """Raised by the launcher when one of its phases fails.

    The message carries the phase description; the original exception is
    chained as ``__cause__``.
    """

    def __init__(self, phase: str, cause: BaseException):
        self.phase = phase
        self.cause = cause
        super().__init__(f"{phase}: {cause}")


# ============================================================================
# Pre-flight Exceptions
# ============================================================================


class UnsupportedPlatformError(LauncherError):
    """Raised when the OS/architecture pair has no upstream artifact."""

    def __init__(self, os_name: str, arch: str):
        self.os_name = os_name
        self.arch = arch
        super().__init__(f"OS '{os_name}' and arch '{arch}' is not supported")


class ArgumentParseError(LauncherError):
    """Raised when command-line arguments cannot be split."""

    pass


class ConfigError(LauncherError):
    """Raised when the configuration file or environment is invalid."""

    pass


# ============================================================================
# Version Resolution Exceptions
# ============================================================================


class HttpError(LauncherError):
    """Raised when a remote resource could not be fetched.

    Transport failures and non-success statuses collapse into this one
    condition; the status code is logged, not stored.
    """

    def __init__(self, message: str = "failed to get the resource"):
        super().__init__(message)


class VersionResolutionError(LauncherError):
    """Raised when the latest release response cannot be interpreted."""

    pass


class VersionUnavailableError(VersionResolutionError):
    """Raised when the latest version is unreachable and nothing is cached."""

    pass


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(LauncherError):
    """Base exception for cache directory errors."""

    pass


class NotInstalledError(CacheError):
    """Raised when the cache holds no tailwindcss binary."""

    def __init__(self, message: str = "tailwindcss is not currently installed"):
        super().__init__(message)


class CacheIOError(CacheError):
    """Raised when the cache directory cannot be located or created."""

    pass


class PathValidationError(CacheError):
    """Raised when a write would land outside the cache directory."""

    def __init__(self, path: str, directory: str):
        self.path = path
        self.directory = directory
        super().__init__(
            f"invalid path: attempting to write outside cache directory "
            f"({path} is not inside {directory})"
        )


# ============================================================================
# Download Exceptions
# ============================================================================


class DownloadError(LauncherError):
    """Base exception for download errors."""

    pass


class IncompleteDownloadError(DownloadError):
    """Raised when fewer or more bytes arrived than the server announced."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"incomplete download: expected {expected} bytes, got {actual} bytes"
        )


class DownloadCancelledError(DownloadError):
    """Raised when the shared deadline fired or was cancelled."""

    pass


class RetryExhaustedError(LauncherError):
    """Raised when every attempt allowed by a retry policy failed."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"gave up after {attempts} attempts: {last_error}")


class DownloadFailedError(DownloadError):
    """Raised when all download attempts failed."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"failed to download after multiple attempts ({attempts}): {last_error}"
        )


# ============================================================================
# Process Exceptions
# ============================================================================


class ProcessInvocationError(LauncherError):
    """Raised when the tailwindcss process cannot be run or exits non-zero."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)
