"""
Entry point for running the launcher CLI as a module.

Usage: python -m twlauncher.cli [-version <tag>] [tailwindcss args...]
"""

from .parser import main

if __name__ == "__main__":
    main()
