"""Command-line tools for Traquila."""
