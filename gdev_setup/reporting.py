"""
Console presentation of setup progress.
"""

import sys
from typing import Optional, TextIO

from .events import EventPhase, SetupEvent, STEP_SUCCEEDED
from .exec.fix_executor import FixOutcome


class ConsoleReporter:
    """Renders SetupEvents as the line-oriented progress stream on stdout."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved late so redirected stdout is honored
        return self._stream or sys.stdout

    def __call__(self, event: SetupEvent) -> None:
        message = self.format(event)
        if message is not None:
            print(message, file=self.stream, flush=True)

    @staticmethod
    def format(event: SetupEvent) -> Optional[str]:
        """Return the console line for an event, or None if it has none."""
        if event.phase == EventPhase.STEP:
            if event.outcome == STEP_SUCCEEDED:
                return f"Step '{event.step_key}' ran successfully"
            return f"Step '{event.step_key}' failed to run, trying fixes 🛠️"

        if event.phase == EventPhase.FIX:
            if event.outcome == FixOutcome.SUCCESS:
                return f"- Fix '{event.fix_key}' ran successfully"
            if event.outcome == FixOutcome.SKIPPED:
                return f"- Fix '{event.fix_key}' was skipped"
            return f"- Fix '{event.fix_key}' failed with exit code {event.exit_code}"

        if event.phase == EventPhase.RETRY:
            return f"- Trying step '{event.step_key}' again 🤞"

        # Exhaustion is shown through the known issues, if any
        return None

