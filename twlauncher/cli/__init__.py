"""
Launcher CLI module.

This module provides the command-line interface for the launcher.
"""

from .parser import CLI, main, split_args

__all__ = ["CLI", "main", "split_args"]
