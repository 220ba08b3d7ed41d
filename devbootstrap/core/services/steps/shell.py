"""
Steps — zsh environment: framework, theme, plugins, config, login shell.
"""

from __future__ import annotations

import os
import pwd
from functools import partial

from devbootstrap.core.data.constants import OH_MY_ZSH_INSTALL_URL, POWERLEVEL10K_REPO
from devbootstrap.core.data.zshrc import render_zshrc
from devbootstrap.core.engine.context import StepContext
from devbootstrap.core.models.action import Receipt
from devbootstrap.core.models.step import Step
from devbootstrap.core.services.commands import git_clone, run_program, run_script, write_file

# ── oh-my-zsh ──────────────────────────────────────────────────


def _install_oh_my_zsh(ctx: StepContext) -> list[Receipt]:
    return ctx.run(
        run_script(
            "oh-my-zsh:install",
            f'sh -c "$(curl -fsSL {OH_MY_ZSH_INSTALL_URL})"',
            env={
                "RUNZSH": "no",
                "CHSH": "no",
                "KEEP_ZSHRC": "yes",
                "ZSH": str(ctx.oh_my_zsh_dir),
            },
        )
    )


def oh_my_zsh_step() -> Step:
    return Step(
        name="oh-my-zsh",
        description="Oh My Zsh",
        is_installed=lambda ctx: ctx.oh_my_zsh_dir.is_dir(),
        install=_install_oh_my_zsh,
    )


# ── theme and plugins (git clones into $ZSH_CUSTOM) ─────────────


def powerlevel10k_step() -> Step:
    def target(ctx: StepContext):
        return ctx.zsh_custom / "themes" / "powerlevel10k"

    return Step(
        name="powerlevel10k",
        description="Powerlevel10k theme",
        is_installed=lambda ctx: target(ctx).is_dir(),
        install=lambda ctx: ctx.run(git_clone("powerlevel10k:clone", POWERLEVEL10K_REPO, target(ctx))),
    )


def _plugin_dir(name: str, ctx: StepContext):
    return ctx.zsh_custom / "plugins" / name


def zsh_plugin_step(name: str, url: str) -> Step:
    target = partial(_plugin_dir, name)
    return Step(
        name=f"zsh-plugin:{name}",
        description=f"plugin: {name}",
        is_installed=lambda ctx: target(ctx).is_dir(),
        install=lambda ctx: ctx.run(git_clone(f"zsh-plugin:{name}:clone", url, target(ctx))),
    )


# ── .zshrc (create-only) ───────────────────────────────────────


def _zshrc_exists(ctx: StepContext) -> bool:
    path = ctx.config.zshrc_path
    return path.exists() or path.is_symlink()


def _write_zshrc(ctx: StepContext) -> list[Receipt]:
    content = render_zshrc(ctx.config.zsh_plugins)
    return ctx.run(write_file("zshrc:create", ctx.config.zshrc_path, content))


def zshrc_step() -> Step:
    return Step(
        name="zshrc",
        description=".zshrc",
        is_installed=_zshrc_exists,
        install=_write_zshrc,
    )


# ── default shell ──────────────────────────────────────────────


def current_login_shell(ctx: StepContext) -> str:
    """The user's login shell as recorded in the passwd database.

    Read fresh on every call so a successful ``chsh`` is visible
    immediately; falls back to the ``$SHELL`` seen at detection time.
    """
    try:
        return pwd.getpwuid(os.getuid()).pw_shell
    except KeyError:
        return ctx.facts.login_shell


def _install_default_shell(ctx: StepContext) -> list[Receipt]:
    zsh = ctx.which("zsh")
    if zsh is None:
        if not ctx.dry_run:
            return [
                Receipt.failure(
                    adapter="shell",
                    action_id="default-shell:chsh",
                    error="zsh not found on PATH",
                )
            ]
        zsh = "zsh"
    return ctx.run(run_program("default-shell:chsh", ["chsh", "-s", zsh], interactive=True))


def default_shell_step() -> Step:
    return Step(
        name="default-shell",
        description="zsh as the default shell",
        is_installed=lambda ctx: current_login_shell(ctx).endswith("zsh"),
        install=_install_default_shell,
    )
