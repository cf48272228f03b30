"""Food Journal: on-device food journal with local SQLite persistence."""

__version__ = "0.1.0"
