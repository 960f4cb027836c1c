"""Command-line front end for managing calendar events."""

__version__ = "0.1.0"
