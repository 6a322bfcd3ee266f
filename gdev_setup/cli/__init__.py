"""Command-line interface for gdev-setup."""
