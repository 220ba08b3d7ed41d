"""
EnvironmentFacts — what the detector learned about the machine.

Computed once per run and never mutated. Step predicates and
command builders branch on it (package manager choice, download
URL architecture suffix, and so on).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

# Machine strings → Go/Docker style architecture names
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armv6l",
}


class OsKind(str, Enum):
    """Operating system families the bootstrap knows about."""

    DARWIN = "darwin"
    LINUX = "linux"
    OTHER = "other"


class EnvironmentFacts(BaseModel):
    """Read-only facts about the host."""

    model_config = ConfigDict(frozen=True)

    os: OsKind
    arch: str                        # raw machine string (uname -m)
    shell_name: str = ""             # e.g. "bash", "zsh"
    shell_version: str | None = None # e.g. "5.2.15"
    is_root: bool = False
    login_shell: str = ""            # $SHELL as set for the user
    user: str = ""

    @property
    def is_darwin(self) -> bool:
        return self.os is OsKind.DARWIN

    @property
    def go_arch(self) -> str:
        """Architecture suffix used by go.dev download archives."""
        return _ARCH_MAP.get(self.arch.lower(), self.arch.lower())

    @property
    def package_manager(self) -> str:
        """Which system package manager install commands use."""
        return "brew" if self.is_darwin else "apt"

    @property
    def shell_major(self) -> int | None:
        if not self.shell_version:
            return None
        head = self.shell_version.split(".", 1)[0]
        return int(head) if head.isdigit() else None

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["go_arch"] = self.go_arch
        data["package_manager"] = self.package_manager
        return data
