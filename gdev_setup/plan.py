"""
Setup plan data model.
Immutable step, fix and known-issue definitions produced by the loader.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Tuple


@dataclass(frozen=True)
class FixDefinition:
    """Remediation command attached to a step."""
    key: str
    command: str


@dataclass(frozen=True)
class KnownIssue:
    """Documented problem/solution pair shown when a step cannot be fixed."""
    key: str
    problem: str
    solution: str


@dataclass(frozen=True)
class StepDefinition:
    """
    One provisioning action.

    Attributes:
        key: Unique step key within the plan
        command: Shell command to run
        fixes: Fixes in the order they are attempted
        known_issues: Known issues in display order
    """
    key: str
    command: str
    fixes: Tuple[FixDefinition, ...] = ()
    known_issues: Tuple[KnownIssue, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StepDefinition':
        """Build a step from its validated config mapping."""
        return cls(
            key=data['key'],
            command=data['command'],
            fixes=tuple(
                FixDefinition(key=fix['key'], command=fix['command'])
                for fix in data.get('fixes') or []
            ),
            known_issues=tuple(
                KnownIssue(key=ki['key'], problem=ki['problem'], solution=ki['solution'])
                for ki in data.get('known-issues') or []
            ),
        )


@dataclass(frozen=True)
class SetupPlan:
    """Ordered sequence of steps for one invocation."""
    steps: Tuple[StepDefinition, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[StepDefinition]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)
