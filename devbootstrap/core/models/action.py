"""
Action and Receipt models — the command contract.

Actions describe a single command a step wants to run. Receipts
describe what happened. The runner takes Actions and returns
Receipts, never exceptions: every caller decides for itself whether
a failed receipt is fatal.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """A structured description of one command.

    ``description`` is the human-readable command text. It is what
    appears after ``Running:`` or ``[dry-run]`` in the log, so it
    should read like the command a user would type.
    """

    id: str                         # unique within a step, e.g. "go:download"
    adapter: str                    # which adapter handles this
    params: dict[str, Any] = Field(default_factory=dict)
    needs_sudo: bool = False
    description: str = ""

    @property
    def display(self) -> str:
        """Text used in log lines."""
        text = self.description or f"{self.adapter}:{self.id}"
        if self.needs_sudo and not text.startswith("sudo "):
            text = f"sudo {text}"
        return text


class Receipt(BaseModel):
    """Result of running an action.

    ``skipped`` is only produced in dry-run mode, where the action
    was logged but never handed to an adapter.

    The runner stamps ``started_at``/``ended_at`` around the adapter
    call; on a bare Receipt they default to construction time.
    """

    adapter: str
    action_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=now_iso)
    ended_at: str = Field(default_factory=now_iso)
    duration_ms: int = 0

    return_code: int | None = None
    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(
        cls,
        adapter: str,
        action_id: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        kwargs.setdefault("return_code", 0)
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        action_id: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="failed",
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        adapter: str,
        action_id: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="skipped",
            output=reason,
            **kwargs,
        )
