"""Bridge between YooKassa payment notifications and cluster billing events."""

__version__ = "0.1.0"
