"""
Git adapter — repository clones for themes and plugins.

Uses the git CLI, never raw API calls.
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path

from devbootstrap.adapters.base import Adapter, ExecutionContext
from devbootstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git operations.

    Action params:
        operation (str): Only 'clone' is supported.
        url (str): Repository URL.
        dest (str): Absolute destination directory.
        depth (int): Shallow clone depth (default: 1, 0 = full history).
    """

    @property
    def name(self) -> str:
        return "git"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if operation != "clone":
            return False, f"Unknown operation '{operation}'. Valid: clone"

        if not context.params.get("url"):
            return False, "Missing required param: 'url'"

        dest = context.params.get("dest", "")
        if not dest:
            return False, "Missing required param: 'dest'"
        if not Path(dest).is_absolute():
            return False, f"Destination must be absolute: {dest}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        try:
            return self._clone(context)
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Git error: {e}",
            )

    # ── Operations ──────────────────────────────────────────────

    def _clone(self, ctx: ExecutionContext) -> Receipt:
        url = ctx.params["url"]
        dest = Path(ctx.params["dest"])
        depth = int(ctx.params.get("depth", 1))

        if dest.is_dir() and any(dest.iterdir()):
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Destination exists and is not empty: {dest}",
                metadata={"dest": str(dest)},
            )

        dest.parent.mkdir(parents=True, exist_ok=True)
        args = ["clone"]
        if depth > 0:
            args.append(f"--depth={depth}")
        args += [url, str(dest)]

        start = time.monotonic()
        try:
            result = subprocess.run(
                ["git", *args],
                env=ctx.env or None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=ctx.timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"git clone timed out after {ctx.timeout}s",
                metadata={"url": url},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()
        if result.returncode != 0:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"git clone exited with code {result.returncode}",
                return_code=result.returncode,
                output=output,
                duration_ms=elapsed_ms,
                metadata={"url": url, "dest": str(dest)},
            )
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=output,
            duration_ms=elapsed_ms,
            metadata={"url": url, "dest": str(dest)},
        )
