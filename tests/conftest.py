"""
Shared test fixtures and configuration.

Scenario tests run the real catalog against a fake host: a temporary
home directory, a PATH made of one temporary ``bin`` directory, and
mock adapters whose side-effect hooks leave behind what the real
installers would (directories, executables, package records).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from devbootstrap.adapters.mock import MockAdapter, mock_adapters
from devbootstrap.core.data.constants import APT_BASE_PACKAGES
from devbootstrap.core.models.config import BootstrapSettings, RunConfig
from devbootstrap.core.models.environment import EnvironmentFacts, OsKind
from devbootstrap.core.services.steps import package_manager, shell


def make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return path


@dataclass
class FakeHost:
    """Mutable host state the patched probes read from."""

    home: Path
    bin_dir: Path
    brew_prefix: Path
    go_root: Path
    apt_installed: set[str] = field(default_factory=set)
    login_shell: str = "/bin/bash"

    @property
    def environ(self) -> dict[str, str]:
        return {
            "HOME": str(self.home),
            "PATH": str(self.bin_dir),
            "SHELL": self.login_shell,
            "USER": "dev",
        }

    def config(self, dry_run: bool = False, **overrides) -> RunConfig:
        settings = BootstrapSettings(go_install_dir=str(self.go_root), **overrides)
        return RunConfig.from_settings(settings, home_dir=self.home, dry_run=dry_run)


# ── Logging isolation ────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Drop the handlers setup_logging() installs on the root logger."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.raiseExceptions = True


# ── Host ─────────────────────────────────────────────────────────────


@pytest.fixture
def host(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeHost:
    """A bare machine: nothing installed, bash login shell."""
    home = tmp_path / "home"
    home.mkdir()
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    fake = FakeHost(
        home=home,
        bin_dir=bin_dir,
        brew_prefix=tmp_path / "linuxbrew",
        go_root=tmp_path / "goroot",
    )

    prefixes = (str(fake.brew_prefix),)
    monkeypatch.setattr(package_manager, "BREW_PREFIXES_LINUX", prefixes)
    monkeypatch.setattr(package_manager, "BREW_PREFIXES_DARWIN", prefixes)
    monkeypatch.setattr(
        package_manager,
        "missing_packages",
        lambda packages: [p for p in packages if p not in fake.apt_installed],
    )
    monkeypatch.setattr(shell, "current_login_shell", lambda ctx: fake.login_shell)
    return fake


@pytest.fixture
def linux_facts() -> EnvironmentFacts:
    return EnvironmentFacts(
        os=OsKind.LINUX,
        arch="x86_64",
        shell_name="bash",
        shell_version="5.2.15",
        login_shell="/bin/bash",
        user="dev",
    )


@pytest.fixture
def darwin_facts() -> EnvironmentFacts:
    return EnvironmentFacts(
        os=OsKind.DARWIN,
        arch="arm64",
        shell_name="zsh",
        shell_version="5.9",
        login_shell="/bin/zsh",
        user="dev",
    )


@pytest.fixture
def adapters() -> dict[str, MockAdapter]:
    return mock_adapters()


@pytest.fixture
def simulated(host: FakeHost, adapters: dict[str, MockAdapter]) -> dict[str, MockAdapter]:
    """Mock adapters that leave behind what each real install would."""
    shell_mock = adapters["shell"]

    def apt_base(ctx):
        host.apt_installed.update(APT_BASE_PACKAGES)
        make_executable(host.bin_dir / "zsh")

    def mkdir_dest(ctx):
        Path(ctx.params["dest"]).mkdir(parents=True, exist_ok=True)

    def write_dest(ctx):
        path = Path(ctx.params["path"])
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(ctx.params["content"])

    def chsh(ctx):
        host.login_shell = ctx.params["argv"][-1]

    shell_mock.on_execute("system-packages:install", apt_base)
    shell_mock.on_execute(
        "homebrew:install", lambda ctx: make_executable(host.brew_prefix / "bin" / "brew")
    )
    shell_mock.on_execute(
        "oh-my-zsh:install", lambda ctx: (host.home / ".oh-my-zsh").mkdir(parents=True)
    )
    shell_mock.on_execute("nvm:install", lambda ctx: (host.home / ".nvm").mkdir())
    shell_mock.on_execute(
        "node:install",
        lambda ctx: (host.home / ".nvm" / "versions" / "node" / "v22.2.0").mkdir(parents=True),
    )
    shell_mock.on_execute(
        "bun:install", lambda ctx: make_executable(host.home / ".bun" / "bin" / "bun")
    )
    shell_mock.on_execute("go:install", lambda ctx: make_executable(host.bin_dir / "go"))
    shell_mock.on_execute("docker:install", lambda ctx: make_executable(host.bin_dir / "docker"))
    shell_mock.on_execute(
        "cli-tools:install",
        lambda ctx: [make_executable(host.bin_dir / b) for b in ("tmux", "fzf", "rg", "bat")],
    )
    shell_mock.on_execute("fastfetch:install", lambda ctx: make_executable(host.bin_dir / "fastfetch"))
    shell_mock.on_execute("default-shell:chsh", chsh)

    for clone_id in (
        "powerlevel10k:clone",
        "zsh-plugin:zsh-autosuggestions:clone",
        "zsh-plugin:zsh-syntax-highlighting:clone",
    ):
        adapters["git"].on_execute(clone_id, mkdir_dest)

    adapters["download"].on_execute(
        "go:download", lambda ctx: make_executable(host.go_root / "go" / "bin" / "go")
    )
    adapters["filesystem"].on_execute("zshrc:create", write_dest)
    return adapters


@pytest.fixture
def make_exe():
    """Create an executable stub file (for PATH lookups)."""
    return make_executable
