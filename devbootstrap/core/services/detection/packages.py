"""
Detection — system package presence.

Read-only probes for package availability. Used by predicates that
cannot rely on a binary appearing on PATH (e.g. ``build-essential``).
Only dpkg-based systems are probed; the system-packages step is the
sole caller and it installs with apt-get.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable

logger = logging.getLogger(__name__)


def is_pkg_installed(pkg: str) -> bool:
    """Check if a single system package is installed.

    Runs ``dpkg-query -W -f='${Status}' PKG``.

    Returns:
        True if installed, False if not installed or check failed.
    """
    try:
        r = subprocess.run(
            ["dpkg-query", "-W", "-f=${Status}", pkg],
            capture_output=True, text=True, timeout=10,
        )
        return "install ok installed" in r.stdout
    except FileNotFoundError:
        # dpkg-query not on PATH (e.g. Fedora)
        logger.warning("dpkg-query not found (checking %s)", pkg)
    except subprocess.TimeoutExpired:
        logger.warning("Timeout checking package %s", pkg)
    return False


def missing_packages(packages: Iterable[str]) -> list[str]:
    """Return the packages from ``packages`` that are not installed."""
    return [p for p in packages if not is_pkg_installed(p)]
