"""
Configuration models — file settings and the resolved RunConfig.

``BootstrapSettings`` mirrors the optional YAML config file. Every
field has a default, so an absent file is equivalent to ``{}``.

``RunConfig`` is what the rest of the program sees: settings resolved
against the home directory plus the CLI's ``--dry-run`` flag. It is
built once by the driver and frozen.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_LOG_FILE = "dotfiles-install.log"
DEFAULT_GO_VERSION = "1.22.3"
DEFAULT_COMMAND_TIMEOUT = 1800

DEFAULT_ZSH_PLUGINS: dict[str, str] = {
    "zsh-autosuggestions": "https://github.com/zsh-users/zsh-autosuggestions",
    "zsh-syntax-highlighting": "https://github.com/zsh-users/zsh-syntax-highlighting",
}

DEFAULT_CLI_PACKAGES: list[str] = ["tmux", "fzf", "ripgrep", "bat"]


class BootstrapSettings(BaseModel):
    """Contents of ``config.yml``. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    log_file: str | None = None          # default: ~/dotfiles-install.log
    zshrc_path: str | None = None        # default: ~/.zshrc
    go_version: str = DEFAULT_GO_VERSION
    go_install_dir: str = "/usr/local"
    command_timeout: int | None = DEFAULT_COMMAND_TIMEOUT
    zsh_plugins: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ZSH_PLUGINS))
    cli_packages: list[str] = Field(default_factory=lambda: list(DEFAULT_CLI_PACKAGES))
    skip_steps: list[str] = Field(default_factory=list)

    @field_validator("command_timeout")
    @classmethod
    def _zero_means_none(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("command_timeout must be >= 0")
        return v or None

    @field_validator("go_version")
    @classmethod
    def _strip_go_prefix(cls, v: str) -> str:
        return v[2:] if v.startswith("go") else v


class RunConfig(BaseModel):
    """Immutable per-run configuration."""

    model_config = ConfigDict(frozen=True)

    dry_run: bool = False
    home_dir: Path
    log_path: Path
    zshrc_path: Path
    profile_path: Path
    go_version: str = DEFAULT_GO_VERSION
    go_install_dir: Path = Path("/usr/local")
    command_timeout: int | None = DEFAULT_COMMAND_TIMEOUT
    zsh_plugins: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ZSH_PLUGINS))
    cli_packages: list[str] = Field(default_factory=lambda: list(DEFAULT_CLI_PACKAGES))
    skip_steps: list[str] = Field(default_factory=list)

    @classmethod
    def from_settings(
        cls,
        settings: BootstrapSettings,
        *,
        home_dir: Path,
        dry_run: bool = False,
    ) -> RunConfig:
        """Resolve file settings against a home directory."""

        def _resolve(raw: str | None, default: str) -> Path:
            if not raw:
                return home_dir / default
            p = Path(raw.replace("$HOME", str(home_dir))).expanduser()
            return p if p.is_absolute() else home_dir / p

        return cls(
            dry_run=dry_run,
            home_dir=home_dir,
            log_path=_resolve(settings.log_file, DEFAULT_LOG_FILE),
            zshrc_path=_resolve(settings.zshrc_path, ".zshrc"),
            profile_path=home_dir / ".profile",
            go_version=settings.go_version,
            go_install_dir=Path(settings.go_install_dir),
            command_timeout=settings.command_timeout,
            zsh_plugins=settings.zsh_plugins,
            cli_packages=settings.cli_packages,
            skip_steps=settings.skip_steps,
        )
