"""
Step model — one idempotent provisioning action.

A Step is a pure description: a presence check and an install body.
It has no persisted identity; the catalog builds a fresh list of
Steps on every run and the executor evaluates each exactly once.

Steps hold callables, so they are dataclasses rather than pydantic
models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable

from devbootstrap.core.models.action import Receipt

if TYPE_CHECKING:
    from devbootstrap.core.engine.context import StepContext


class FailurePolicy(str, Enum):
    """What a failed install means for the rest of the run."""

    FATAL = "fatal"              # stop the run
    BEST_EFFORT = "best_effort"  # log and continue


class StepOutcome(str, Enum):
    ALREADY_SATISFIED = "already_satisfied"
    INSTALLED = "installed"
    FAILED = "failed"
    SKIPPED = "skipped"          # dry-run, or disabled via skip_steps


@dataclass(frozen=True)
class Step:
    """A presence check plus the procedure that satisfies it."""

    name: str
    is_installed: Callable[[StepContext], bool]
    install: Callable[[StepContext], list[Receipt]]
    description: str = ""
    policy: FailurePolicy = FailurePolicy.BEST_EFFORT

    @property
    def fatal(self) -> bool:
        return self.policy is FailurePolicy.FATAL


@dataclass
class StepResult:
    """Outcome of evaluating one step."""

    name: str
    outcome: StepOutcome
    reason: str = ""
    policy: FailurePolicy = FailurePolicy.BEST_EFFORT
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome is not StepOutcome.FAILED

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "outcome": self.outcome.value,
            "reason": self.reason,
            "policy": self.policy.value,
            "commands": [
                {
                    "id": r.action_id,
                    "status": r.status,
                    "return_code": r.return_code,
                    "error": r.error,
                }
                for r in self.receipts
            ],
        }
