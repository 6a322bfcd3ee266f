"""Run command implementation."""

import logging
from argparse import Namespace
from pathlib import Path
from typing import Optional

from gdev_setup.exceptions import ConfigValidationError, PreparationError, StepExhaustedError
from gdev_setup.exec.command_runner import CommandRunner
from gdev_setup.loader import SetupConfigLoader
from gdev_setup.plan import SetupPlan
from gdev_setup.reporting import ConsoleReporter
from gdev_setup.runner import SetupRunner


logger = logging.getLogger(__name__)


def configure_logging(args: Namespace) -> None:
    """Set the root log level from the CLI flags."""
    log_level = getattr(logging, args.log_level.upper())
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def resolve_work_dir(work_dir: str) -> Path:
    """Resolve --workDir, where '.' means the current directory."""
    if work_dir == '.':
        path = Path.cwd()
    else:
        path = Path(work_dir).resolve()

    if not path.is_dir():
        raise FileNotFoundError(f"Work directory not found: {path}")
    return path


def describe_plan(plan: SetupPlan) -> None:
    """Print the steps a run would execute."""
    for index, step in enumerate(plan, start=1):
        fixes = ', '.join(fix.key for fix in step.fixes) or 'none'
        print(f"{index}. '{step.key}': {step.command} (fixes: {fixes})")


def run_setup(args: Namespace) -> int:
    """
    Run the setup steps for a project.

    Returns:
        0 on success, 1 on setup failure, 2 on config validation errors
    """
    configure_logging(args)

    try:
        work_dir = resolve_work_dir(args.work_dir)
        config_path: Optional[Path] = Path(args.config).resolve() if args.config else None

        if args.dry_run:
            plan = SetupConfigLoader(work_dir).load(config_path)
            describe_plan(plan)
            logger.info("[DRY RUN] Config validation successful")
            return 0

        runner = SetupRunner.for_project(
            work_dir,
            config_path=config_path,
            log_output_path=Path(args.log_dir) if args.log_dir else None,
            listener=ConsoleReporter(),
            command_runner=CommandRunner(timeout_sec=args.step_timeout),
        )
        runner.run()
        return 0

    except ConfigValidationError as e:
        for error in e.errors:
            logger.error(f"Validation error: {error.message}")
        return e.exit_code
    except StepExhaustedError as e:
        logger.error(str(e))
        return 1
    except PreparationError as e:
        logger.error(str(e))
        return 1
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except OSError as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
