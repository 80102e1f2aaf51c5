"""
Entry point for running the launcher as a module.

Usage: python -m twlauncher [-version <tag>] [tailwindcss args...]
"""

from twlauncher.cli.parser import main

if __name__ == "__main__":
    main()
