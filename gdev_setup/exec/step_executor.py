"""
Step executor module for running step commands.
Writes each attempt to its own log file and classifies the outcome.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .command_runner import CommandRunner
from .context import ExecutionContext
from ..exceptions import PreparationError, StepRuntimeFailure
from ..plan import StepDefinition


logger = logging.getLogger(__name__)


@dataclass
class StepExecutionResult:
    """Result of one step attempt."""
    log_file_path: Path
    failure: Optional[StepRuntimeFailure] = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None


class StepExecutor:
    """
    Runs step commands in the project directory.
    Every call is a fresh attempt with a new log file.
    """

    def __init__(self, context: ExecutionContext, runner: Optional[CommandRunner] = None):
        self.context = context
        self.runner = runner or CommandRunner()

    def execute(self, step: StepDefinition) -> StepExecutionResult:
        """
        Execute one attempt of a step.

        Args:
            step: Step to run

        Returns:
            StepExecutionResult; ``failure`` is set when the command exited non-zero

        Raises:
            PreparationError: If the log file cannot be created or the command cannot start
        """
        log_file_path = self.context.allocate_log_path(step.key)

        try:
            log_file = open(log_file_path, 'wb')
        except OSError as e:
            raise PreparationError(
                step.key, f"Step '{step.key}' failed to create output log file: {e}"
            ) from e

        with log_file:
            result = self.runner.run(
                step.key,
                step.command,
                cwd=self.context.project_path,
                env=dict(os.environ),
                sink=log_file,
            )

        logger.debug(f"Step '{step.key}' output written to {log_file_path}")

        if result.succeeded:
            return StepExecutionResult(log_file_path=log_file_path)

        return StepExecutionResult(
            log_file_path=log_file_path,
            failure=StepRuntimeFailure(
                step.key,
                exit_code=result.exit_code,
                log_file_path=log_file_path,
                timed_out=result.timed_out,
            ),
        )
