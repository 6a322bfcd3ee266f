"""gdev-setup exceptions."""

from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass


@dataclass
class ValidationError:
    """Single validation error."""
    message: str
    path: str = ""


class ConfigValidationError(Exception):
    """Raised when the setup config fails to load or validate.

    The loader accumulates every problem it finds before raising, so the CLI
    can report all of them at once and map to the validation exit code.
    """

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        self.exit_code = 2

        messages = []
        for error in errors:
            messages.append(f"Validation error: {error.message}")

        super().__init__("\n".join(messages))


class SetupError(Exception):
    """Base class for errors that terminate a setup run."""


class PreparationError(SetupError):
    """A command could not be attempted at all.

    Raised when the log file cannot be created or the process cannot be
    started. Always fatal: no fixes, no retries, no known issues.
    """

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(message)


class StepRuntimeFailure(SetupError):
    """A step command ran but did not exit cleanly."""

    def __init__(
        self,
        step_key: str,
        exit_code: int,
        log_file_path: Path,
        timed_out: bool = False,
    ):
        self.step_key = step_key
        self.exit_code = exit_code
        self.log_file_path = log_file_path
        self.timed_out = timed_out

        if timed_out:
            message = f"Step '{step_key}' timed out (exit code {exit_code}), see {log_file_path}"
        else:
            message = f"Step '{step_key}' exited with code {exit_code}, see {log_file_path}"
        super().__init__(message)


class StepExhaustedError(SetupError):
    """Every eligible fix was tried and the step still fails.

    ``failure`` (also chained as ``__cause__``) is the step's last runtime
    failure.
    """

    def __init__(self, step_key: str, failure: StepRuntimeFailure, attempted_fixes: Optional[List[str]] = None):
        self.step_key = step_key
        self.failure = failure
        self.attempted_fixes = list(attempted_fixes or [])
        super().__init__(f"Step '{step_key}' could not be fixed: {failure}")
