"""
Watchrun.

Run a shell command whenever a watched file changes.
Requires Python 3.11+.
"""

__version__ = "0.1.0"
