"""Main CLI entry point for gdev-setup."""

import argparse
import sys
from typing import Optional

from .commands import run_setup


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the gdev-setup CLI."""
    parser = argparse.ArgumentParser(
        prog='gdev-setup',
        description='Set up local development environment'
    )
    parser.add_argument(
        '--workDir', '--work-dir',
        dest='work_dir',
        type=str,
        default='.',
        help='The application directory'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Path to setup config (default: <workDir>/.gdev/gdev.setup.yaml)'
    )
    parser.add_argument(
        '--log-dir',
        type=str,
        help='Directory for command logs (default: new temporary directory)'
    )
    parser.add_argument(
        '--step-timeout',
        type=float,
        metavar='SECONDS',
        help='Kill any step or fix command running longer than this'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate the config and list steps without running them'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error log output'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='warn',
        help='Set log level'
    )
    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    return run_setup(parsed_args)


if __name__ == '__main__':
    sys.exit(main())
