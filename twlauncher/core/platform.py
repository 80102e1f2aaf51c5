"""
Platform detection for the Tailwind launcher.

This module maps the running operating system, CPU architecture and (on Linux)
C library flavor to the artifact filename published on the tailwindcss release
page.

Features:
- OS and architecture normalization (linux/darwin/windows, amd64/arm64)
- Support checking before any network or filesystem activity
- musl detection through an injectable FileReader
- Deterministic artifact and cache entry naming

Usage:
    from twlauncher.core.platform import detect_platform, artifact_name

    key = detect_platform()
    print(artifact_name(key))  # e.g. 'tailwindcss-linux-x64'
"""

import logging
import os
import platform
from dataclasses import dataclass
from typing import Optional, Protocol

from .exceptions import UnsupportedPlatformError

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "tailwindcss"

SUPPORTED_OS = ("linux", "darwin", "windows")
SUPPORTED_ARCH = ("amd64", "arm64")

PROC_SELF_MAPS = "/proc/self/maps"

# Well-known paths of the musl dynamic linker (x86-64, aarch64, armhf)
MUSL_LINKERS = (
    "/lib/ld-musl-x86_64.so.1",
    "/lib/ld-musl-aarch64.so.1",
    "/lib/ld-musl-armhf.so.1",
)

_OS_ALIASES = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
}

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


class FileReader(Protocol):
    """Capability used by musl detection to inspect the filesystem."""

    def read_file(self, path: str) -> bytes: ...

    def file_exists(self, path: str) -> bool: ...


class OSFileReader:
    """FileReader backed by the real filesystem."""

    def read_file(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def file_exists(self, path: str) -> bool:
        try:
            os.stat(path)
        except OSError:
            return False
        return True


@dataclass(frozen=True)
class PlatformKey:
    """
    Identity of the running platform as far as release artifacts care.

    Attributes:
        os: Operating system ('linux', 'darwin', 'windows')
        arch: CPU architecture ('amd64', 'arm64')
        musl: True when a musl libc was detected (Linux only)
    """

    os: str
    arch: str
    musl: bool = False

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def executable_suffix(self) -> str:
        """Extension appended to executables on this platform."""
        return ".exe" if self.is_windows else ""

    def __str__(self) -> str:
        libc = "-musl" if self.musl else ""
        return f"{self.os}-{self.arch}{libc}"


def is_supported(os_name: str, arch: str) -> bool:
    """
    Check whether an upstream artifact exists for the OS/architecture pair.

    Args:
        os_name: Normalized OS name
        arch: Normalized architecture name

    Returns:
        True for linux, darwin and windows on amd64 or arm64

    Example:
        >>> is_supported("linux", "arm64")
        True
        >>> is_supported("freebsd", "amd64")
        False
    """
    return os_name in SUPPORTED_OS and arch in SUPPORTED_ARCH


def is_musl(reader: FileReader) -> bool:
    """
    Best-effort detection of a musl C library.

    First looks for 'musl' among the shared objects mapped into the current
    process, then for the musl dynamic linker at well-known paths. The second
    probe catches statically linked interpreters running on musl hosts.

    Args:
        reader: Filesystem capability

    Returns:
        True if musl evidence was found, False otherwise (assume glibc)
    """
    try:
        maps = reader.read_file(PROC_SELF_MAPS)
    except OSError as e:
        logger.debug(f"Cannot read {PROC_SELF_MAPS}: {e}")
    else:
        if b"musl" in maps:
            return True

    return any(reader.file_exists(linker) for linker in MUSL_LINKERS)


def _normalize_os(system: str) -> str:
    name = system.lower()
    return _OS_ALIASES.get(name, name)


def _normalize_arch(machine: str) -> str:
    name = machine.lower()
    return _ARCH_ALIASES.get(name, name)


def detect_platform(
    reader: Optional[FileReader] = None,
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> PlatformKey:
    """
    Detect the platform key of the running process.

    The OS/architecture pair is validated before the libc probe so an
    unsupported platform never touches the filesystem.

    Args:
        reader: FileReader used for musl detection (real filesystem if None)
        system: Override for platform.system()
        machine: Override for platform.machine()

    Returns:
        PlatformKey for the current platform

    Raises:
        UnsupportedPlatformError: If no artifact exists for this platform
    """
    os_name = _normalize_os(system if system is not None else platform.system())
    arch = _normalize_arch(machine if machine is not None else platform.machine())

    logger.debug(f"Running platform: os={os_name} arch={arch}")
    if not is_supported(os_name, arch):
        raise UnsupportedPlatformError(os_name, arch)

    musl = False
    if os_name == "linux":
        musl = is_musl(reader if reader is not None else OSFileReader())
        logger.debug(f"musl detected: {musl}")

    return PlatformKey(os=os_name, arch=arch, musl=musl)


def artifact_name(key: PlatformKey) -> str:
    """
    Get the release artifact filename for a platform.

    Args:
        key: Platform key

    Returns:
        Filename such as 'tailwindcss-macos-arm64' or 'tailwindcss-linux-x64-musl'

    Example:
        >>> artifact_name(PlatformKey("windows", "amd64"))
        'tailwindcss-windows-x64.exe'
    """
    os_name = "macos" if key.os == "darwin" else key.os
    arch = "x64" if key.arch == "amd64" else key.arch
    musl = "-musl" if key.os == "linux" and key.musl else ""
    return f"{ARTIFACT_PREFIX}-{os_name}-{arch}{musl}{key.executable_suffix}"


def cache_entry_name(version: str, key: PlatformKey) -> str:
    """Get the cache filename of a tailwindcss version on this platform."""
    return f"{ARTIFACT_PREFIX}-{version}{key.executable_suffix}"


__all__ = [
    "ARTIFACT_PREFIX",
    "FileReader",
    "OSFileReader",
    "PlatformKey",
    "is_supported",
    "is_musl",
    "detect_platform",
    "artifact_name",
    "cache_entry_name",
]
