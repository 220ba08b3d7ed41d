"""
Step catalog — the ordered list of everything a run converges.

Order is significant: the package manager comes first because every
later install shells out to it, nvm precedes node, oh-my-zsh precedes
its theme and plugins, and the ``.zshrc`` is written only after the
framework it references exists.
"""

from __future__ import annotations

from devbootstrap.core.models.config import RunConfig
from devbootstrap.core.models.environment import EnvironmentFacts
from devbootstrap.core.models.step import Step
from devbootstrap.core.services.steps.package_manager import homebrew_step, system_packages_step
from devbootstrap.core.services.steps.runtimes import bun_step, go_step, node_step, nvm_step
from devbootstrap.core.services.steps.shell import (
    default_shell_step,
    oh_my_zsh_step,
    powerlevel10k_step,
    zsh_plugin_step,
    zshrc_step,
)
from devbootstrap.core.services.steps.tools import cli_tools_step, docker_step, fastfetch_step


def build_catalog(facts: EnvironmentFacts, config: RunConfig) -> list[Step]:
    """Return the steps for this host, in execution order."""
    steps: list[Step] = []

    if not facts.is_darwin:
        steps.append(system_packages_step())
    steps.append(homebrew_step(facts.is_darwin))

    steps.append(oh_my_zsh_step())
    steps.append(powerlevel10k_step())
    steps.extend(zsh_plugin_step(name, url) for name, url in config.zsh_plugins.items())

    steps += [
        nvm_step(),
        node_step(),
        bun_step(),
        go_step(),
        docker_step(),
        cli_tools_step(),
        fastfetch_step(),
        zshrc_step(),
        default_shell_step(),
    ]
    return steps


__all__ = ["build_catalog"]
