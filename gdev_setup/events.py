"""
Setup progress events.
The orchestrator emits these instead of printing; presentation lives in reporting.py.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional


class EventPhase(str, Enum):
    """Where in a step's lifecycle an event happened."""
    STEP = "step"
    FIX = "fix"
    RETRY = "retry"
    EXHAUSTED = "exhausted"


# Outcomes for STEP events; FIX events carry FixOutcome values
STEP_SUCCEEDED = "succeeded"
STEP_FAILED = "failed"


@dataclass(frozen=True)
class SetupEvent:
    """
    One progress event.

    Attributes:
        step_key: Step the event belongs to
        phase: Lifecycle phase
        outcome: Phase-specific outcome string
        fix_key: Fix involved, for FIX events
        exit_code: Exit code of the command, when one ran
        log_path: Log file of the command, when one ran
    """
    step_key: str
    phase: EventPhase
    outcome: str
    fix_key: Optional[str] = None
    exit_code: Optional[int] = None
    log_path: Optional[Path] = None


EventListener = Callable[[SetupEvent], None]


def ignore_event(event: SetupEvent) -> None:
    """Listener that drops every event."""
