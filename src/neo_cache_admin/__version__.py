"""Version information for neo-cache-admin."""

__version__ = "0.1.0"
