"""
Setup runner.
Walks the plan's steps in order and stops at the first one that cannot be resolved.
"""

import logging
from pathlib import Path
from typing import Optional

from .events import EventListener
from .exec.command_runner import CommandRunner
from .exec.context import ExecutionContext
from .exec.fix_executor import FixExecutor
from .exec.retry import RetryOrchestrator
from .exec.step_executor import StepExecutor
from .known_issues import KnownIssueReporter
from .loader import SetupConfigLoader
from .plan import SetupPlan


logger = logging.getLogger(__name__)


class SetupRunner:
    """
    Runs a SetupPlan against a project.

    Steps run strictly one at a time. Completed steps are never rolled back
    when a later step fails.
    """

    def __init__(
        self,
        plan: SetupPlan,
        context: ExecutionContext,
        orchestrator: Optional[RetryOrchestrator] = None,
        listener: Optional[EventListener] = None,
        command_runner: Optional[CommandRunner] = None,
    ):
        """
        Initialize setup runner.

        Args:
            plan: Loaded setup plan
            context: Run-scoped execution context
            orchestrator: Pre-built orchestrator (default: built from context)
            listener: Receives progress events when the orchestrator is built here
            command_runner: Runner shared by step and fix executors
        """
        self.plan = plan
        self.context = context

        if orchestrator is None:
            runner = command_runner or CommandRunner()
            orchestrator = RetryOrchestrator(
                step_executor=StepExecutor(context, runner),
                fix_executor=FixExecutor(context, runner),
                known_issue_reporter=KnownIssueReporter(),
                listener=listener,
            )
        self.orchestrator = orchestrator

    @classmethod
    def for_project(
        cls,
        project_path: Path,
        config_path: Optional[Path] = None,
        log_output_path: Optional[Path] = None,
        listener: Optional[EventListener] = None,
        command_runner: Optional[CommandRunner] = None,
    ) -> 'SetupRunner':
        """Load the project's config and create a fresh log directory."""
        plan = SetupConfigLoader(project_path).load(config_path)
        context = ExecutionContext.create(project_path, log_output_path)
        logger.info(f"Writing command logs to {context.log_output_path}")
        return cls(plan, context, listener=listener, command_runner=command_runner)

    def run(self) -> None:
        """
        Run every step in declared order.

        Raises:
            StepExhaustedError: A step failed and none of its fixes resolved it
            PreparationError: A command could not be started
        """
        for index, step in enumerate(self.plan, start=1):
            logger.debug(f"Running step {index}/{len(self.plan)}: '{step.key}'")
            self.orchestrator.run_step(step)

        logger.info(f"All {len(self.plan)} steps completed")
