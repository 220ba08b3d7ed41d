"""
Error taxonomy — the only exceptions that unwind the driver.

Adapters and the command runner never raise; they return failed
Receipts. Step bodies that blow up are converted into failed step
results by the executor. What remains are the conditions that must
stop the whole run:

    BootstrapError
    ├── RootExecutionError   running with an effective UID of 0
    ├── FatalStepError       a step declared ``fatal`` did not succeed
    └── ConfigError          the YAML config file is unreadable or invalid
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devbootstrap.core.models.step import StepResult


class BootstrapError(Exception):
    """Base class for all run-aborting errors."""

    exit_code: int = 1


class RootExecutionError(BootstrapError):
    """Raised before any step runs when the effective user is root."""

    exit_code = 1

    def __init__(self, message: str = "This script should not be run as root") -> None:
        super().__init__(message)


class FatalStepError(BootstrapError):
    """Raised when a step with a fatal failure policy fails."""

    exit_code = 3

    def __init__(self, result: StepResult) -> None:
        self.result = result
        super().__init__(f"Fatal step '{result.name}' failed: {result.reason}")


class ConfigError(BootstrapError):
    """Raised when the bootstrap configuration is invalid or unreadable."""

    exit_code = 4
