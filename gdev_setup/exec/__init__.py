"""
Execution module for gdev-setup.
Handles process execution, step and fix classification, and the fix-retry loop.
"""

from .command_runner import CommandRunner, CommandResult
from .context import ExecutionContext
from .step_executor import StepExecutor, StepExecutionResult
from .fix_executor import FixExecutor, FixOutcome, FixResult
from .retry import RetryOrchestrator, StepAttemptState

__all__ = [
    "CommandRunner",
    "CommandResult",
    "ExecutionContext",
    "StepExecutor",
    "StepExecutionResult",
    "FixExecutor",
    "FixOutcome",
    "FixResult",
    "RetryOrchestrator",
    "StepAttemptState",
]
