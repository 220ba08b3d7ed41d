"""
Filesystem adapter — file writes and appends.

Provides a receipt-returning interface for the few filesystem
mutations the catalog performs directly, so the runner can log and
dry-run them like any other command.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devbootstrap.adapters.base import Adapter, ExecutionContext
from devbootstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)


class FilesystemAdapter(Adapter):
    """File writes with receipts.

    Action params:
        operation (str): One of 'write', 'append_line'.
        path (str): Absolute target path.
        content (str): Content to write (for 'write').
        line (str): Line to append (for 'append_line').

    'write' is create-only: an existing file is never overwritten.
    'append_line' is a no-op when the exact line is already present.
    """

    _OPERATIONS = {"write", "append_line"}

    @property
    def name(self) -> str:
        return "filesystem"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"

        if operation not in self._OPERATIONS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(self._OPERATIONS))}"

        path = context.params.get("path", "")
        if not path:
            return False, "Missing required param: 'path'"
        if not Path(path).is_absolute():
            return False, f"Path must be absolute: {path}"

        if operation == "write" and "content" not in context.params:
            return False, "Missing required param: 'content' for write operation"
        if operation == "append_line" and not context.params.get("line"):
            return False, "Missing required param: 'line' for append_line operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.params["operation"]
        target = Path(context.params["path"])

        try:
            if operation == "write":
                return self._write(context, target)
            return self._append_line(context, target)
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Filesystem error: {e}",
                metadata={"operation": operation, "path": str(target)},
            )

    def _write(self, ctx: ExecutionContext, target: Path) -> Receipt:
        content = ctx.params["content"]
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            # "x" mode: fail instead of clobbering a file that appeared since the check
            with target.open("x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Refusing to overwrite existing file: {target}",
                metadata={"path": str(target)},
            )
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Written {len(content)} bytes to {target}",
            metadata={"path": str(target), "size": len(content)},
        )

    def _append_line(self, ctx: ExecutionContext, target: Path) -> Receipt:
        line = ctx.params["line"].rstrip("\n")
        existing = target.read_text(encoding="utf-8") if target.is_file() else ""

        if line in existing.splitlines():
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=f"Line already present in {target}",
                metadata={"path": str(target), "appended": False},
            )

        target.parent.mkdir(parents=True, exist_ok=True)
        prefix = "\n" if existing and not existing.endswith("\n") else ""
        with target.open("a", encoding="utf-8") as f:
            f.write(f"{prefix}{line}\n")
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Appended to {target}",
            metadata={"path": str(target), "appended": True},
        )
