"""Known-issue guidance shown when a step cannot be fixed."""

import sys
from typing import Optional, TextIO

from .plan import StepDefinition


class KnownIssueReporter:
    """Prints a step's documented problem/solution pairs."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved late so redirected stdout is honored
        return self._stream or sys.stdout

    def report(self, step: StepDefinition) -> None:
        if not step.known_issues:
            return

        out = self.stream
        print(f"Step '{step.key}' has the following known issues:", file=out)
        for number, issue in enumerate(step.known_issues, start=1):
            print(f"Problem ({number}): {issue.problem}", file=out)
            print(f"Solution ({number}): {issue.solution}", file=out)
        out.flush()
