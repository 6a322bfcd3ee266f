"""gdev-setup: provision a local development environment from declarative steps."""

__version__ = "0.1.0"
