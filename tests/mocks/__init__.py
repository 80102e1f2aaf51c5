"""
Test doubles for launcher components.

These replace the filesystem probe, the process runner and the release
resolver so tests stay deterministic and offline.
"""

from .platform import FakeFileReader
from .process import FakeRunner
from .releases import FakeResolver

__all__ = [
    "FakeFileReader",
    "FakeRunner",
    "FakeResolver",
]
