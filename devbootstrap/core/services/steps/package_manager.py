"""
Steps — package manager bootstrap.

Everything after these steps shells out to apt or brew, so both are
declared first. ``system-packages`` and (on macOS) ``homebrew`` are
fatal: without them nothing downstream can succeed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devbootstrap.core.data.constants import (
    APT_BASE_PACKAGES,
    BREW_PREFIXES_DARWIN,
    BREW_PREFIXES_LINUX,
    HOMEBREW_INSTALL_URL,
)
from devbootstrap.core.engine.context import StepContext
from devbootstrap.core.models.action import Action, Receipt
from devbootstrap.core.models.step import FailurePolicy, Step
from devbootstrap.core.services.commands import append_line, run_program, run_script
from devbootstrap.core.services.detection.packages import missing_packages

logger = logging.getLogger(__name__)


def package_install(ctx: StepContext, action_id: str, packages: list[str], *, cask: bool = False) -> Action:
    """Install packages with the host's package manager."""
    if ctx.facts.is_darwin:
        argv = ["brew", "install", *(["--cask"] if cask else []), *packages]
        return run_program(action_id, argv)
    return run_program(action_id, ["apt-get", "install", "-y", *packages], sudo=True)


# ── system-packages (apt) ──────────────────────────────────────


def _base_packages_present(ctx: StepContext) -> bool:
    return not missing_packages(APT_BASE_PACKAGES)


def _install_base_packages(ctx: StepContext) -> list[Receipt]:
    return ctx.run(
        run_program("system-packages:update", ["apt-get", "update", "-y"], sudo=True),
        package_install(ctx, "system-packages:install", list(APT_BASE_PACKAGES)),
    )


def system_packages_step() -> Step:
    return Step(
        name="system-packages",
        description="base system packages (apt)",
        is_installed=_base_packages_present,
        install=_install_base_packages,
        policy=FailurePolicy.FATAL,
    )


# ── homebrew ───────────────────────────────────────────────────


def _brew_prefixes(ctx: StepContext) -> tuple[str, ...]:
    return BREW_PREFIXES_DARWIN if ctx.facts.is_darwin else BREW_PREFIXES_LINUX


def find_brew(ctx: StepContext) -> str | None:
    """Locate brew on PATH or at one of its standard prefixes."""
    on_path = ctx.which("brew")
    if on_path:
        return on_path
    for prefix in _brew_prefixes(ctx):
        candidate = Path(prefix) / "bin" / "brew"
        if candidate.is_file():
            return str(candidate)
    return None


def _activate_brew(ctx: StepContext, brew: str) -> None:
    """Equivalent of ``eval "$(brew shellenv)"`` for later commands."""
    bin_dir = str(Path(brew).parent)
    ctx.runner.prepend_path(bin_dir)
    ctx.runner.export("HOMEBREW_PREFIX", str(Path(bin_dir).parent))


def _brew_present(ctx: StepContext) -> bool:
    brew = find_brew(ctx)
    if brew is None:
        return False
    _activate_brew(ctx, brew)
    return True


def _install_brew(ctx: StepContext) -> list[Receipt]:
    actions = [
        run_script(
            "homebrew:install",
            f'/bin/bash -c "$(curl -fsSL {HOMEBREW_INSTALL_URL})"',
            env={"NONINTERACTIVE": "1"},
        )
    ]
    if not ctx.facts.is_darwin:
        shellenv = f'eval "$({BREW_PREFIXES_LINUX[0]}/bin/brew shellenv)"'
        actions.append(append_line("homebrew:profile", ctx.config.profile_path, shellenv))

    receipts = ctx.run(*actions)

    if not ctx.dry_run and all(r.ok for r in receipts):
        brew = find_brew(ctx)
        if brew is not None:
            _activate_brew(ctx, brew)
        else:
            logger.warning("Homebrew installer finished but brew was not found under %s",
                           ", ".join(_brew_prefixes(ctx)))
    return receipts


def homebrew_step(is_darwin: bool) -> Step:
    return Step(
        name="homebrew",
        description="Homebrew",
        is_installed=_brew_present,
        install=_install_brew,
        policy=FailurePolicy.FATAL if is_darwin else FailurePolicy.BEST_EFFORT,
    )
