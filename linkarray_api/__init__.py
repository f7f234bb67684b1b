"""Backend service for the linkarray personal link-sharing platform."""

__version__ = "1.0.0"
