"""CLI command handlers."""

from .run import run_setup

__all__ = ['run_setup']
