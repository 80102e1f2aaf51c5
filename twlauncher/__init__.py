"""
Tailwind launcher.

Downloads, caches and runs the standalone tailwindcss binary so builds do not
need a separate installation step.
"""

__version__ = "0.1.0"
