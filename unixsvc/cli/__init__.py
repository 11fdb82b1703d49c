"""Command-line interface for unixsvc."""
