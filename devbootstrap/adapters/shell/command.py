"""
Shell command adapter — run a program or an opaque installer script.

This is the most fundamental adapter: it runs commands and captures
their combined output. Two forms are accepted:

    argv    a program plus argument list, executed without a shell
    script  a string evaluated by ``/bin/bash -c``; reserved for vendor
            installer one-liners (``curl … | bash``) that are treated
            as verbatim payloads
"""

from __future__ import annotations

import logging
import subprocess
import time

from devbootstrap.adapters.base import Adapter, ExecutionContext
from devbootstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)

SHELL = "/bin/bash"


class ShellCommandAdapter(Adapter):
    """Execute commands and capture output.

    Action params:
        argv (list[str]): Program and arguments (no shell).
        script (str): Shell script text (run through bash).
        env (dict[str, str]): Extra environment variables for this command.
        interactive (bool): Inherit the terminal instead of capturing
            output, for commands that may prompt (e.g. chsh).
    """

    @property
    def name(self) -> str:
        return "shell"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.params.get("argv")
        script = context.params.get("script")
        if not argv and not script:
            return False, "Missing required param: 'argv' or 'script'"
        if argv and script:
            return False, "Params 'argv' and 'script' are mutually exclusive"
        if argv is not None and not all(isinstance(a, str) for a in argv):
            return False, "Param 'argv' must be a list of strings"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        action = context.action
        cmd = self._build_argv(context)

        env = dict(context.env)
        for key, value in (context.params.get("env") or {}).items():
            env[key] = str(value)

        interactive = bool(context.params.get("interactive"))
        logger.debug("Executing: %s (interactive=%s)", cmd, interactive)
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                env=env or None,
                stdout=None if interactive else subprocess.PIPE,
                stderr=None if interactive else subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=context.timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=action.id,
                error=f"Command timed out after {context.timeout}s",
                metadata={"argv": cmd, "timeout": context.timeout},
            )
        except FileNotFoundError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=action.id,
                error=f"Command not found: {e.filename or cmd[0]}",
                return_code=127,
                metadata={"argv": cmd},
            )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=action.id,
                error=f"Command execution error: {e}",
                metadata={"argv": cmd},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=action.id,
                output=output,
                duration_ms=elapsed_ms,
                metadata={"argv": cmd},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=action.id,
            error=f"Command exited with code {result.returncode}",
            return_code=result.returncode,
            output=output,
            duration_ms=elapsed_ms,
            metadata={"argv": cmd},
        )

    @staticmethod
    def _build_argv(context: ExecutionContext) -> list[str]:
        argv = context.params.get("argv")
        if argv:
            cmd = list(argv)
        else:
            cmd = [SHELL, "-c", context.params["script"]]
        if context.action.needs_sudo:
            cmd = ["sudo", *cmd]
        return cmd
