"""
Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
Subprocess calls, file reads, env var reads — all read-only.
"""

from devbootstrap.core.services.detection.environment import (  # noqa: F401
    detect_environment,
    detect_os,
    detect_shell_version,
)
from devbootstrap.core.services.detection.packages import (  # noqa: F401
    is_pkg_installed,
    missing_packages,
)
