"""
Mock adapter — test double for every adapter name.

Records the contexts it receives and returns success unless a
response has been configured for an action ID. One instance can
stand in for a single adapter name; ``mock_adapters()`` builds a full
set keyed the way the runner expects.
"""

from __future__ import annotations

from typing import Callable

from devbootstrap.adapters.base import Adapter, ExecutionContext
from devbootstrap.core.models.action import Receipt

ADAPTER_NAMES = ("shell", "filesystem", "git", "download")


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    By default, returns success for everything. Can be configured
    with custom responses per action ID, or with a side-effect hook
    that simulates what the real command would leave behind.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._effects: dict[str, Callable[[ExecutionContext], None]] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        """Set a custom response for a specific action ID."""
        self._responses[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        """Configure a specific action to fail."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
            return_code=1,
        )

    def on_execute(self, action_id: str, effect: Callable[[ExecutionContext], None]) -> None:
        """Run ``effect`` when the given action executes successfully."""
        self._effects[action_id] = effect

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)
        action_id = context.action.id

        # Check for custom response
        if action_id in self._responses:
            return self._responses[action_id]

        effect = self._effects.get(action_id)
        if effect is not None:
            effect(context)

        # Default: success
        return Receipt.success(
            adapter=self._name,
            action_id=action_id,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
        self._effects.clear()


def mock_adapters() -> dict[str, MockAdapter]:
    """One MockAdapter per adapter name the catalog uses."""
    return {name: MockAdapter(adapter_name=name) for name in ADAPTER_NAMES}
