"""
Adapter base — the protocol contract between the runner and tools.

This defines the abstract interface that every adapter must implement.
The command runner only talks to adapters through this protocol, never
directly to external tools.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from devbootstrap.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an action.

    ``env`` is the complete environment for child processes: the
    runner's process-scoped view, already including any PATH
    extensions made by earlier steps.
    """

    action: Action
    env: dict[str, str] = Field(default_factory=dict)
    timeout: int | None = None

    @property
    def params(self) -> dict:
        return self.action.params


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.

    To create a new adapter:
        1. Subclass Adapter
        2. Implement name, validate, execute
        3. Pass it to the CommandRunner
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'shell', 'git', 'filesystem')."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the action can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Execute the action and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
