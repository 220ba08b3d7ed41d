"""
Steps — language runtimes and their version managers.

nvm must precede node (node is installed by sourcing nvm.sh). Go is
the one tool with a pinned version: on Linux the official tarball
for ``config.go_version`` is unpacked under ``config.go_install_dir``.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from devbootstrap.core.data.constants import BUN_INSTALL_URL, GO_DOWNLOAD_URL, NVM_INSTALL_URL
from devbootstrap.core.engine.context import StepContext
from devbootstrap.core.models.action import Receipt
from devbootstrap.core.models.step import Step
from devbootstrap.core.services.commands import append_line, download_extract, run_script
from devbootstrap.core.services.steps.package_manager import package_install

logger = logging.getLogger(__name__)


# ── nvm / node ─────────────────────────────────────────────────


def _nvm_dir(ctx: StepContext) -> Path:
    return ctx.home / ".nvm"


def nvm_step() -> Step:
    return Step(
        name="nvm",
        description="NVM",
        is_installed=lambda ctx: _nvm_dir(ctx).is_dir(),
        # The installer rejects an NVM_DIR that does not exist yet; left
        # unset it defaults to ~/.nvm.
        install=lambda ctx: ctx.run(run_script("nvm:install", f"curl -o- {NVM_INSTALL_URL} | bash")),
    )


def _node_versions(ctx: StepContext) -> list[str]:
    versions_dir = _nvm_dir(ctx) / "versions" / "node"
    if not versions_dir.is_dir():
        return []
    return sorted(d.name for d in versions_dir.iterdir() if d.name.startswith("v"))


def _install_node(ctx: StepContext) -> list[Receipt]:
    return ctx.run(
        run_script(
            "node:install",
            '. "$NVM_DIR/nvm.sh" && nvm install node && nvm alias default node',
            env={"NVM_DIR": str(_nvm_dir(ctx))},
        )
    )


def node_step() -> Step:
    return Step(
        name="node",
        description="latest Node.js with NVM",
        is_installed=lambda ctx: bool(_node_versions(ctx)),
        install=_install_node,
    )


# ── bun ────────────────────────────────────────────────────────


def _bun_bin(ctx: StepContext) -> Path:
    return ctx.home / ".bun" / "bin"


def _bun_present(ctx: StepContext) -> bool:
    if ctx.which("bun"):
        return True
    if (_bun_bin(ctx) / "bun").is_file():
        ctx.runner.prepend_path(str(_bun_bin(ctx)))
        return True
    return False


def _install_bun(ctx: StepContext) -> list[Receipt]:
    receipts = ctx.run(run_script("bun:install", f"curl -fsSL {BUN_INSTALL_URL} | bash"))
    if not ctx.dry_run and all(r.ok for r in receipts):
        ctx.runner.export("BUN_INSTALL", str(_bun_bin(ctx).parent))
        ctx.runner.prepend_path(str(_bun_bin(ctx)))
    return receipts


def bun_step() -> Step:
    return Step(
        name="bun",
        description="Bun",
        is_installed=_bun_present,
        install=_install_bun,
    )


# ── go ─────────────────────────────────────────────────────────


def _go_bin(ctx: StepContext) -> Path:
    return ctx.config.go_install_dir / "go" / "bin"


def _go_present(ctx: StepContext) -> bool:
    if ctx.which("go"):
        return True
    if not ctx.facts.is_darwin and (_go_bin(ctx) / "go").is_file():
        ctx.runner.prepend_path(str(_go_bin(ctx)))
        return True
    return False


def _needs_sudo(directory: Path) -> bool:
    """Whether writing under ``directory`` requires root."""
    probe = directory
    while not probe.exists() and probe != probe.parent:
        probe = probe.parent
    return not os.access(probe, os.W_OK)


def _install_go(ctx: StepContext) -> list[Receipt]:
    if ctx.facts.is_darwin:
        return ctx.run(package_install(ctx, "go:install", ["go"]))

    version = ctx.config.go_version
    arch = ctx.facts.go_arch
    install_dir = ctx.config.go_install_dir
    archive = Path(tempfile.gettempdir()) / f"go{version}.linux-{arch}.tar.gz"
    path_line = f"export PATH=$PATH:{_go_bin(ctx)}"

    receipts = ctx.run(
        download_extract(
            "go:download",
            GO_DOWNLOAD_URL.format(version=version, arch=arch),
            archive_path=archive,
            dest_dir=install_dir,
            replace_dir=install_dir / "go",
            sudo=_needs_sudo(install_dir),
        ),
        append_line("go:profile", ctx.config.profile_path, path_line),
    )
    if not ctx.dry_run and all(r.ok for r in receipts):
        ctx.runner.prepend_path(str(_go_bin(ctx)))
        logger.info("Added %s to PATH via %s", _go_bin(ctx), ctx.config.profile_path)
    return receipts


def go_step() -> Step:
    return Step(
        name="go",
        description="Go",
        is_installed=_go_present,
        install=_install_go,
    )
