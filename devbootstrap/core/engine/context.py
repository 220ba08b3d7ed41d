"""
Step context — what predicates and install bodies receive.

Bundles the frozen run configuration, the detected environment and
the command runner. Steps read facts from here and route every side
effect through ``runner``; nothing is looked up from globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from devbootstrap.adapters.runner import CommandRunner
from devbootstrap.core.models.action import Action, Receipt
from devbootstrap.core.models.config import RunConfig
from devbootstrap.core.models.environment import EnvironmentFacts


@dataclass
class StepContext:
    config: RunConfig
    facts: EnvironmentFacts
    runner: CommandRunner

    @property
    def home(self) -> Path:
        return self.config.home_dir

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    @property
    def oh_my_zsh_dir(self) -> Path:
        return self.home / ".oh-my-zsh"

    @property
    def zsh_custom(self) -> Path:
        """``$ZSH_CUSTOM`` or the oh-my-zsh default."""
        custom = self.runner.env.get("ZSH_CUSTOM")
        return Path(custom) if custom else self.oh_my_zsh_dir / "custom"

    def which(self, program: str) -> str | None:
        return self.runner.which(program)

    def run(self, *actions: Action) -> list[Receipt]:
        """Run actions in order; stops at the first failure."""
        return self.runner.run_all(actions)
