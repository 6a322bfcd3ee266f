"""
Fix-and-retry state machine for a single step.

A step runs; when it fails its fixes are visited in declared order. A fix
that succeeds sends the step back for a fresh attempt, one that is skipped
stays eligible for later failure cycles, one that fails is never tried again
for this step. When a cycle ends with no successful fix the step's known
issues are shown and the step is exhausted.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .fix_executor import FixExecutor, FixOutcome
from .step_executor import StepExecutor, StepExecutionResult
from ..events import EventListener, EventPhase, SetupEvent, STEP_FAILED, STEP_SUCCEEDED, ignore_event
from ..exceptions import StepExhaustedError
from ..plan import FixDefinition, StepDefinition
from ..known_issues import KnownIssueReporter


logger = logging.getLogger(__name__)


@dataclass
class StepAttemptState:
    """
    Fixes consumed while resolving one step.

    Only Success and Failed outcomes are recorded; the set only grows.
    """
    step_key: str
    attempted: Set[str] = field(default_factory=set)
    order: List[str] = field(default_factory=list)

    def was_attempted(self, fix: FixDefinition) -> bool:
        return fix.key in self.attempted

    def add_attempt(self, fix: FixDefinition) -> None:
        if fix.key in self.attempted:
            return
        self.attempted.add(fix.key)
        self.order.append(fix.key)


class RetryOrchestrator:
    """Drives one step to resolution through its fixes."""

    def __init__(
        self,
        step_executor: StepExecutor,
        fix_executor: FixExecutor,
        known_issue_reporter: Optional[KnownIssueReporter] = None,
        listener: Optional[EventListener] = None,
    ):
        self.step_executor = step_executor
        self.fix_executor = fix_executor
        self.known_issue_reporter = known_issue_reporter or KnownIssueReporter()
        self.listener = listener or ignore_event

    def run_step(self, step: StepDefinition) -> None:
        """
        Run a step until it succeeds or its fixes are exhausted.

        Args:
            step: Step to resolve

        Raises:
            StepExhaustedError: No remaining fix made the step succeed
            PreparationError: A step or fix command could not be started
        """
        state: Optional[StepAttemptState] = None
        attempt = 0

        while True:
            attempt += 1
            result = self.step_executor.execute(step)

            if result.succeeded:
                self._emit(step, EventPhase.STEP, STEP_SUCCEEDED, exit_code=0, log_path=result.log_file_path)
                logger.debug(f"Step '{step.key}' resolved after {attempt} attempt(s)")
                return

            failure = result.failure
            self._emit(
                step, EventPhase.STEP, STEP_FAILED,
                exit_code=failure.exit_code, log_path=result.log_file_path,
            )

            if state is None:
                state = StepAttemptState(step.key)

            if not self._run_fix_cycle(step, result, state):
                break

            self._emit(step, EventPhase.RETRY, "started")

        logger.info(
            f"Step '{step.key}' exhausted its fixes after {attempt} attempt(s); "
            f"attempted: {state.order or 'none'}"
        )
        self._emit(step, EventPhase.EXHAUSTED, "exhausted", exit_code=failure.exit_code,
                   log_path=failure.log_file_path)
        self.known_issue_reporter.report(step)
        raise StepExhaustedError(step.key, failure, state.order) from failure

    def _run_fix_cycle(self, step: StepDefinition, result: StepExecutionResult,
                       state: StepAttemptState) -> bool:
        """Visit eligible fixes in order; True once one succeeds."""
        for fix in step.fixes:
            if state.was_attempted(fix):
                continue

            fix_result = self.fix_executor.execute(step.key, fix, result.log_file_path)
            self._emit(
                step, EventPhase.FIX, fix_result.outcome.value, fix_key=fix.key,
                exit_code=fix_result.exit_code, log_path=fix_result.log_file_path,
            )

            if fix_result.outcome == FixOutcome.SUCCESS:
                state.add_attempt(fix)
                return True
            if fix_result.outcome == FixOutcome.FAILED:
                state.add_attempt(fix)
            # skipped fixes stay eligible for the next cycle

        return False

    def _emit(self, step: StepDefinition, phase: EventPhase, outcome: str, **details) -> None:
        self.listener(SetupEvent(step_key=step.key, phase=phase, outcome=outcome, **details))
