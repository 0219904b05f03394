"""Mouse Idle Stats - pointer idle time statistics and keep-alive."""

__version__ = "0.1.0"
