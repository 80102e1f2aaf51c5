"""
Cache directory management for the Tailwind launcher.

The cache is a single flat directory holding one executable per resident
tailwindcss version:

    <user-cache-root>/go-tw/
        tailwindcss-v4.0.7        (tailwindcss-v4.0.7.exe on Windows)

This module is the only writer of that directory. It answers which version is
installed, writes downloaded artifacts after validating that the destination
stays inside the cache, marks them executable and evicts superseded versions.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .exceptions import (
    CacheIOError,
    IncompleteDownloadError,
    NotInstalledError,
    PathValidationError,
)

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "go-tw"
ENTRY_PREFIX = "tailwindcss-"
EXECUTABLE_SUFFIX = ".exe"

PathLike = Union[str, Path]


def get_user_cache_dir() -> Path:
    """
    Get the platform-specific per-user cache root.

    Returns:
        Path: The user cache root.
            - Windows: %LOCALAPPDATA%
            - macOS: ~/Library/Caches
            - Linux/other: $XDG_CACHE_HOME or ~/.cache

    Raises:
        CacheIOError: If the required environment is not available.
    """
    if os.name == "nt":  # Windows
        local_app_data = os.environ.get("LOCALAPPDATA")
        if not local_app_data:
            raise CacheIOError(
                "LOCALAPPDATA environment variable is not set. "
                "Cannot determine user cache directory."
            )
        return Path(local_app_data)

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"

    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        if not os.path.isabs(xdg_cache):
            raise CacheIOError("XDG_CACHE_HOME must be an absolute path")
        return Path(xdg_cache)

    try:
        return Path.home() / ".cache"
    except RuntimeError as e:
        raise CacheIOError(f"Cannot determine home directory: {e}") from e


def download_directory(cache_root: Optional[PathLike] = None) -> Path:
    """
    Get the launcher's cache directory, creating it if needed.

    Args:
        cache_root: Override for the per-user cache root.

    Returns:
        Path: The cache directory path.

    Raises:
        CacheIOError: If the directory cannot be determined or created.

    Example:
        >>> cache_dir = download_directory()
        >>> print(cache_dir)
        /home/user/.cache/go-tw  # on Linux
    """
    root = Path(cache_root) if cache_root is not None else get_user_cache_dir()
    directory = root / CACHE_NAMESPACE

    try:
        directory.mkdir(mode=0o750, parents=True, exist_ok=True)
    except OSError as e:
        raise CacheIOError(
            f"Failed to create cache directory at {directory}: {e}"
        ) from e

    return directory


def exists(path: PathLike) -> bool:
    """
    Check whether a path exists.

    Only a missing file is reported as False; any other stat failure
    (permissions, I/O) propagates.

    Args:
        path: Path to check

    Returns:
        True if the path exists

    Raises:
        OSError: If the path cannot be inspected
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def _strip_entry_name(name: str) -> Optional[str]:
    """Return the version part of a cache entry name, or None if not ours."""
    if not name.startswith(ENTRY_PREFIX):
        return None
    version = name[len(ENTRY_PREFIX) :]
    if version.endswith(EXECUTABLE_SUFFIX):
        version = version[: -len(EXECUTABLE_SUFFIX)]
    return version


def _iter_entries(directory: PathLike):
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_dir():
                continue
            yield entry


def current_version(directory: PathLike) -> str:
    """
    Get the version of the tailwindcss binary present in the cache.

    When several entries are present the first one in directory order wins;
    this is only used as an offline fallback.

    Args:
        directory: Cache directory

    Returns:
        Installed version string (e.g. 'v4.0.7')

    Raises:
        NotInstalledError: If no tailwindcss entry exists
        OSError: If the directory cannot be read
    """
    for entry in _iter_entries(directory):
        version = _strip_entry_name(entry.name)
        if version is not None:
            return version

    raise NotInstalledError()


def _normalize(path: PathLike) -> Path:
    return Path(os.path.normcase(os.path.abspath(os.fspath(path))))


def is_within_directory(path: PathLike, directory: PathLike) -> bool:
    """
    Check that a path lies strictly inside a directory.

    The comparison is lexical: both paths are made absolute and normalized
    (collapsing '..' and duplicate separators) but symlinks are not resolved.

    Args:
        path: Candidate path
        directory: Containing directory

    Returns:
        True if path is a descendant of directory

    Example:
        >>> is_within_directory("/cache/go-tw/../evil", "/cache/go-tw")
        False
    """
    clean_dir = _normalize(directory)
    clean_path = _normalize(path)
    return clean_path != clean_dir and clean_path.is_relative_to(clean_dir)


def write(
    source: Iterable[bytes],
    destination: PathLike,
    cache_directory: PathLike,
    expected_size: int = 0,
) -> int:
    """
    Stream bytes into a file inside the cache directory.

    The destination is validated against the cache directory regardless of
    any validation done by the caller. The size check only runs when the
    server announced a positive length.

    This is not an atomic replace: on failure a truncated file may remain at
    the destination and the caller is responsible for removing it.

    Args:
        source: Iterable of byte chunks (e.g. response.iter_content())
        destination: Target file path
        cache_directory: Directory the target must live in
        expected_size: Expected number of bytes; <= 0 disables the check

    Returns:
        Number of bytes written

    Raises:
        PathValidationError: If destination escapes the cache directory
        IncompleteDownloadError: If the byte count does not match
        OSError: If the file cannot be created or written
    """
    logger.debug(f"Writing file {destination} (expected size {expected_size})")

    if not is_within_directory(destination, cache_directory):
        raise PathValidationError(str(destination), str(cache_directory))

    clean_path = os.path.abspath(os.fspath(destination))
    written = 0
    with open(clean_path, "wb") as f:
        for chunk in source:
            if chunk:
                f.write(chunk)
                written += len(chunk)

    if expected_size > 0 and written != expected_size:
        raise IncompleteDownloadError(expected_size, written)

    logger.debug(f"File written successfully: {clean_path} ({written} bytes)")
    return written


def make_executable(path: PathLike) -> None:
    """
    Grant the owner read, write and execute permission.

    Raises:
        OSError: If the file does not exist or permissions cannot be changed
    """
    os.chmod(path, 0o700)


def evict_except(directory: PathLike, keep_version: str) -> List[Path]:
    """
    Remove every cached tailwindcss version except one.

    Files without the tailwindcss prefix and subdirectories are left alone.
    A removal failure aborts the sweep; whatever is left is retried on the
    next install.

    Args:
        directory: Cache directory
        keep_version: Version to keep (e.g. 'v4.0.7')

    Returns:
        List of removed paths

    Raises:
        OSError: If the directory cannot be read or a file cannot be removed
    """
    removed = []
    for entry in _iter_entries(directory):
        version = _strip_entry_name(entry.name)
        if version is None or version == keep_version:
            continue

        path = Path(directory) / entry.name
        logger.debug(f"Deleting old version {entry.name} from {directory}")
        os.remove(path)
        removed.append(path)

    return removed


__all__ = [
    "CACHE_NAMESPACE",
    "ENTRY_PREFIX",
    "get_user_cache_dir",
    "download_directory",
    "exists",
    "current_version",
    "is_within_directory",
    "write",
    "make_executable",
    "evict_except",
]
