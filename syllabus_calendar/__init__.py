"""Turn course syllabi into calendar events."""

__version__ = "0.1.0"
