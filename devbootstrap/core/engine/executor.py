"""
Engine executor — the step dispatch loop.

For every step in declaration order: evaluate the presence check; if
it holds, log and move on; otherwise run the install body through the
command runner and record the outcome.

Flow:
    steps → is_installed? → (already satisfied | install → receipts) → report

Presence checks are evaluated fresh for every step, because earlier
steps change what later checks see. Nothing is rolled back: a failed
step's partial work stays in place for the next run's check to judge.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from devbootstrap.core.engine.context import StepContext
from devbootstrap.core.models.step import FailurePolicy, Step, StepOutcome, StepResult

logger = logging.getLogger(__name__)


@dataclass
class ExecutionReport:
    """Result of running a step sequence."""

    dry_run: bool = False
    results: list[StepResult] = field(default_factory=list)
    aborted_at: str | None = None

    def _count(self, outcome: StepOutcome) -> int:
        return sum(1 for r in self.results if r.outcome is outcome)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def satisfied(self) -> int:
        return self._count(StepOutcome.ALREADY_SATISFIED)

    @property
    def installed(self) -> int:
        return self._count(StepOutcome.INSTALLED)

    @property
    def failed(self) -> int:
        return self._count(StepOutcome.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(StepOutcome.SKIPPED)

    @property
    def commands_executed(self) -> int:
        """Receipts that came back from a real adapter call."""
        return sum(1 for r in self.results for rc in r.receipts if not rc.skipped)

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.aborted_at is None:
            return "partial"
        return "failed"

    def get(self, name: str) -> StepResult | None:
        for result in self.results:
            if result.name == name:
                return result
        return None

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "dry_run": self.dry_run,
            "aborted_at": self.aborted_at,
            "total": self.total,
            "already_satisfied": self.satisfied,
            "installed": self.installed,
            "failed": self.failed,
            "skipped": self.skipped,
            "steps": [r.to_dict() for r in self.results],
        }


def evaluate_step(step: Step, ctx: StepContext) -> StepResult:
    """Check a step's postcondition and install it if unmet.

    Never raises: exceptions from the predicate or the install body
    become a ``failed`` result.
    """
    try:
        satisfied = step.is_installed(ctx)
    except Exception as e:
        logger.exception("Presence check for %s raised", step.name)
        return StepResult(
            name=step.name,
            outcome=StepOutcome.FAILED,
            reason=f"presence check error: {e}",
            policy=step.policy,
        )

    if satisfied:
        logger.info("✓ %s already installed", step.name)
        return StepResult(
            name=step.name,
            outcome=StepOutcome.ALREADY_SATISFIED,
            policy=step.policy,
        )

    logger.info("→ Installing %s", step.description or step.name)
    try:
        receipts = step.install(ctx)
    except Exception as e:
        logger.exception("Install body for %s raised", step.name)
        return StepResult(
            name=step.name,
            outcome=StepOutcome.FAILED,
            reason=f"install error: {e}",
            policy=step.policy,
        )

    failure = next((r for r in receipts if r.failed), None)
    if failure is not None:
        reason = failure.error or f"{failure.action_id} failed"
        log = logger.error if step.policy is FailurePolicy.FATAL else logger.warning
        log("✗ %s failed: %s", step.name, reason)
        return StepResult(
            name=step.name,
            outcome=StepOutcome.FAILED,
            reason=reason,
            policy=step.policy,
            receipts=receipts,
        )

    if ctx.dry_run:
        return StepResult(
            name=step.name,
            outcome=StepOutcome.SKIPPED,
            reason="dry-run",
            policy=step.policy,
            receipts=receipts,
        )

    logger.info("✓ %s installed", step.name)
    return StepResult(
        name=step.name,
        outcome=StepOutcome.INSTALLED,
        policy=step.policy,
        receipts=receipts,
    )


def run_steps(
    steps: Sequence[Step],
    ctx: StepContext,
    skip: Iterable[str] = (),
) -> ExecutionReport:
    """Evaluate steps strictly in order.

    A failed ``fatal`` step stops the sequence and sets
    ``report.aborted_at``; best-effort failures are recorded and the
    run continues with the next step.
    """
    report = ExecutionReport(dry_run=ctx.dry_run)
    skip_set = set(skip)

    for step in steps:
        if step.name in skip_set:
            logger.info("⊘ %s skipped (disabled in config)", step.name)
            report.results.append(
                StepResult(
                    name=step.name,
                    outcome=StepOutcome.SKIPPED,
                    reason="disabled in config",
                    policy=step.policy,
                )
            )
            continue

        result = evaluate_step(step, ctx)
        report.results.append(result)

        if result.outcome is StepOutcome.FAILED and step.fatal:
            report.aborted_at = step.name
            logger.error("Aborting: %s is required by the remaining steps", step.name)
            break

    return report
