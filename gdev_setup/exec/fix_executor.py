"""
Fix executor module for running remediation commands.

Fix scripts report back through their exit code:
  0      the fix was applied, the step should be retried
  1      the fix does not apply to this failure (skipped)
  other  the fix was attempted and failed
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .command_runner import CommandRunner
from .context import ExecutionContext
from ..exceptions import PreparationError
from ..plan import FixDefinition


logger = logging.getLogger(__name__)

STEP_LOG_PATH_VAR = "STEP_LOG_PATH"
SKIPPED_EXIT_CODE = 1


class FixOutcome(str, Enum):
    """Classification of a fix attempt."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"

    @classmethod
    def from_exit_code(cls, exit_code: int) -> 'FixOutcome':
        if exit_code == 0:
            return cls.SUCCESS
        if exit_code == SKIPPED_EXIT_CODE:
            return cls.SKIPPED
        return cls.FAILED


@dataclass
class FixResult:
    """Result of one fix attempt."""
    fix_key: str
    outcome: FixOutcome
    exit_code: int
    log_file_path: Path


class FixExecutor:
    """Runs fixes with the failing step's log path in their environment."""

    def __init__(self, context: ExecutionContext, runner: Optional[CommandRunner] = None):
        self.context = context
        self.runner = runner or CommandRunner()

    def execute(self, step_key: str, fix: FixDefinition, step_log_path: Path) -> FixResult:
        """
        Execute a fix for a failed step.

        Args:
            step_key: Key of the step being fixed
            fix: Fix to run
            step_log_path: Log file of the step's most recent failing attempt

        Returns:
            FixResult with the outcome classified from the exit code

        Raises:
            PreparationError: If the fix log cannot be created or the command cannot start
        """
        env = dict(os.environ)
        env[STEP_LOG_PATH_VAR] = str(Path(step_log_path).resolve())

        log_file_path = self.context.allocate_log_path(f"{step_key}.{fix.key}")
        try:
            log_file = open(log_file_path, 'wb')
        except OSError as e:
            raise PreparationError(
                fix.key, f"Fix '{fix.key}' failed to create output log file: {e}"
            ) from e

        with log_file:
            result = self.runner.run(
                fix.key,
                fix.command,
                cwd=self.context.project_path,
                env=env,
                sink=log_file,
            )

        outcome = FixOutcome.from_exit_code(result.exit_code)
        logger.debug(
            f"Fix '{fix.key}' for step '{step_key}' exited with code {result.exit_code}: {outcome.value}"
        )
        return FixResult(
            fix_key=fix.key,
            outcome=outcome,
            exit_code=result.exit_code,
            log_file_path=log_file_path,
        )
