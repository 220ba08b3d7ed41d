"""
Steps — container engine and command-line utilities.

All best-effort: a failed install is logged and the run moves on.
"""

from __future__ import annotations

from devbootstrap.core.data.constants import PACKAGE_BINARIES
from devbootstrap.core.engine.context import StepContext
from devbootstrap.core.models.action import Receipt
from devbootstrap.core.models.step import Step
from devbootstrap.core.services.commands import run_program
from devbootstrap.core.services.steps.package_manager import package_install

# ── docker ─────────────────────────────────────────────────────


def _install_docker(ctx: StepContext) -> list[Receipt]:
    if ctx.facts.is_darwin:
        return ctx.run(package_install(ctx, "docker:install", ["docker"], cask=True))
    user = ctx.facts.user or ctx.runner.env.get("USER", "")
    return ctx.run(
        package_install(ctx, "docker:install", ["docker.io"]),
        run_program("docker:group", ["usermod", "-aG", "docker", user], sudo=True),
    )


def docker_step() -> Step:
    return Step(
        name="docker",
        description="Docker",
        is_installed=lambda ctx: ctx.which("docker") is not None,
        install=_install_docker,
    )


# ── CLI utilities ──────────────────────────────────────────────


def package_present(ctx: StepContext, package: str) -> bool:
    """Whether any binary the package provides resolves on PATH."""
    binaries = PACKAGE_BINARIES.get(package, (package,))
    return any(ctx.which(b) for b in binaries)


def _missing_cli_packages(ctx: StepContext) -> list[str]:
    return [p for p in ctx.config.cli_packages if not package_present(ctx, p)]


def _install_cli_tools(ctx: StepContext) -> list[Receipt]:
    missing = _missing_cli_packages(ctx)
    if not missing:
        return []
    return ctx.run(package_install(ctx, "cli-tools:install", missing))


def cli_tools_step() -> Step:
    return Step(
        name="cli-tools",
        description="extra CLI tools",
        is_installed=lambda ctx: not _missing_cli_packages(ctx),
        install=_install_cli_tools,
    )


def fastfetch_step() -> Step:
    return Step(
        name="fastfetch",
        description="fastfetch",
        is_installed=lambda ctx: ctx.which("fastfetch") is not None,
        install=lambda ctx: ctx.run(run_program("fastfetch:install", ["brew", "install", "fastfetch"])),
    )
