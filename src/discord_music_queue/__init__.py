"""Redis-backed per-guild music queues for Discord bots."""

__version__ = "0.1.0"
