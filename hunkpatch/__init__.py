"""Apply unified-diff patches to files on disk."""

__version__ = "0.1.0"
