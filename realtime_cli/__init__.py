"""Command-line client and interactive shell for realtime messaging."""

__version__ = "0.1.0"
