"""
Detection — host environment facts.

Read-only probes: OS family, machine architecture, login shell and
its version, effective user. Runs once per invocation, before any
step, because predicates and command builders branch on the result.
"""

from __future__ import annotations

import logging
import os
import platform
import re
import subprocess
from collections.abc import Mapping
from pathlib import Path

from devbootstrap.core.models.environment import EnvironmentFacts, OsKind

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"(\d+\.\d+(?:\.\d+)?)")

_OS_MAP = {
    "darwin": OsKind.DARWIN,
    "linux": OsKind.LINUX,
}


def detect_os(system: str | None = None) -> OsKind:
    """Map ``platform.system()`` onto an OsKind.

    Unknown systems fall back to OTHER, which the catalog treats
    like Linux.
    """
    raw = system if system is not None else platform.system()
    kind = _OS_MAP.get(raw.lower(), OsKind.OTHER)
    if kind is OsKind.OTHER:
        logger.warning(
            "Unrecognised operating system %r — continuing with the Linux code path",
            raw,
        )
    return kind


def detect_shell_version(shell_path: str) -> str | None:
    """Run ``<shell> --version`` and extract the version number.

    Returns:
        Version string (e.g. ``"5.2.15"``) or ``None`` if the shell is
        missing or its output can't be parsed.
    """
    if not shell_path:
        return None
    try:
        r = subprocess.run(
            [shell_path, "--version"],
            capture_output=True, text=True, timeout=5,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    m = _VERSION_RE.search(r.stdout or r.stderr or "")
    return m.group(1) if m else None


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def detect_environment(environ: Mapping[str, str] | None = None) -> EnvironmentFacts:
    """Collect EnvironmentFacts for the current host.

    Args:
        environ: Environment mapping to read ``SHELL``/``USER`` from
            (default: ``os.environ``).
    """
    env = os.environ if environ is None else environ

    login_shell = env.get("SHELL", "")
    shell_name = Path(login_shell).name if login_shell else ""
    shell_version = detect_shell_version(login_shell)

    facts = EnvironmentFacts(
        os=detect_os(),
        arch=platform.machine(),
        shell_name=shell_name,
        shell_version=shell_version,
        is_root=_is_root(),
        login_shell=login_shell,
        user=env.get("USER") or env.get("LOGNAME", ""),
    )

    if facts.shell_name == "bash" and facts.shell_major is not None and facts.shell_major < 4:
        logger.warning(
            "Bash < 4 detected (%s). Some features may be limited. Recommend installing Bash 5.",
            facts.shell_version,
        )
    elif facts.shell_name == "zsh":
        logger.debug("Running under zsh %s", facts.shell_version or "(unknown version)")
    elif not facts.shell_name:
        logger.warning("SHELL is not set; the default-shell step will try to switch to zsh")

    return facts
