"""
Command runner — central dispatch for every command a step runs.

The runner is the single point where the run mode is honoured. It
resolves the adapter for an action, validates it, and then either
logs it as a ``[dry-run]`` line or executes it and logs
``Running: …`` plus the captured output, which reaches the console
at the default INFO level. Steps never talk to adapters directly.

The runner also owns the process-scoped environment handed to child
processes. Steps that install something onto a new PATH entry extend
it here, so later presence checks and commands see the new tool
without mutating ``os.environ``.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from collections.abc import Iterable, Mapping

from devbootstrap.adapters.base import Adapter, ExecutionContext
from devbootstrap.core.models.action import Action, Receipt, now_iso

logger = logging.getLogger(__name__)


def default_adapters() -> list[Adapter]:
    """The real adapter set."""
    from devbootstrap.adapters.net.download import DownloadAdapter
    from devbootstrap.adapters.shell.command import ShellCommandAdapter
    from devbootstrap.adapters.shell.filesystem import FilesystemAdapter
    from devbootstrap.adapters.vcs.git import GitAdapter

    return [ShellCommandAdapter(), FilesystemAdapter(), GitAdapter(), DownloadAdapter()]


class CommandRunner:
    """Executes or logs actions depending on the run mode.

    Features:
        - Dry-run: log ``[dry-run] <command>`` and never touch an adapter
        - Structured results: every call returns a Receipt, never raises
        - Process environment: PATH and exports shared by later commands
    """

    def __init__(
        self,
        *,
        dry_run: bool = False,
        env: Mapping[str, str] | None = None,
        timeout: int | None = None,
        adapters: Iterable[Adapter] | None = None,
    ):
        self._dry_run = dry_run
        self._env: dict[str, str] = dict(os.environ if env is None else env)
        self._timeout = timeout
        self._adapters: dict[str, Adapter] = {}
        for adapter in default_adapters() if adapters is None else adapters:
            self.register(adapter)

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    @property
    def env(self) -> dict[str, str]:
        """A copy of the environment child processes receive."""
        return dict(self._env)

    # ── Adapters ────────────────────────────────────────────────

    def register(self, adapter: Adapter) -> None:
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    # ── Environment ─────────────────────────────────────────────

    def which(self, program: str) -> str | None:
        """Resolve ``program`` against the runner's PATH."""
        return shutil.which(program, path=self._env.get("PATH", ""))

    def prepend_path(self, directory: str) -> None:
        """Put ``directory`` first on PATH for all later commands."""
        entries = [p for p in self._env.get("PATH", "").split(os.pathsep) if p]
        if directory in entries:
            return
        self._env["PATH"] = os.pathsep.join([directory, *entries])
        logger.debug("PATH += %s", directory)

    def export(self, name: str, value: str) -> None:
        """Set an environment variable for all later commands."""
        self._env[name] = value
        logger.debug("export %s=%s", name, value)

    # ── Execution ───────────────────────────────────────────────

    def run(self, action: Action) -> Receipt:
        """Execute (or dry-run) one action.

        1. Resolves the adapter
        2. Validates the action
        3. Logs and returns a skip receipt in dry-run mode
        4. Otherwise executes and logs the captured output

        Returns:
            Receipt with execution results (never raises).
        """
        start_time = time.monotonic()

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            logger.error("No adapter registered for '%s' (%s)", action.adapter, action.display)
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        context = ExecutionContext(
            action=action,
            env=self._env,
            timeout=self._timeout,
        )

        # Validate
        try:
            is_valid, error_msg = adapter.validate(context)
        except Exception as e:
            is_valid, error_msg = False, f"Validation error: {e}"
        if not is_valid:
            logger.error("Invalid command %s: %s", action.display, error_msg)
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {error_msg}",
            )

        # Dry run — validated but not executed
        if self._dry_run:
            logger.info("[dry-run] %s", action.display)
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] {action.display}",
                metadata={"dry_run": True},
            )

        logger.info("Running: %s", action.display)
        started_at = now_iso()
        try:
            receipt = adapter.execute(context)
        except Exception as e:
            # Adapters should never raise
            logger.error("Adapter %s raised during execution: %s", action.adapter, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.started_at = started_at
        receipt.ended_at = now_iso()

        if receipt.output:
            for line in receipt.output.splitlines():
                logger.info("  │ %s", line)
        if receipt.failed:
            logger.warning("Command failed: %s — %s", action.display, receipt.error)

        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        return receipt

    def run_all(self, actions: Iterable[Action]) -> list[Receipt]:
        """Run actions in order, stopping after the first failure."""
        receipts: list[Receipt] = []
        for action in actions:
            receipt = self.run(action)
            receipts.append(receipt)
            if receipt.failed:
                break
        return receipts
