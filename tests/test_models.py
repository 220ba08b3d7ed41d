"""
Tests for domain models — actions, receipts, environment facts, steps,
configuration and the command factories that build actions.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from devbootstrap.core.data.zshrc import BUILTIN_PLUGINS, render_zshrc
from devbootstrap.core.models.action import Action, Receipt
from devbootstrap.core.models.config import (
    DEFAULT_CLI_PACKAGES,
    DEFAULT_GO_VERSION,
    BootstrapSettings,
    RunConfig,
)
from devbootstrap.core.models.environment import EnvironmentFacts, OsKind
from devbootstrap.core.models.step import FailurePolicy, Step, StepOutcome, StepResult
from devbootstrap.core.services import commands

# ── Action / Receipt ─────────────────────────────────────────────────


class TestAction:
    def test_display_uses_description(self):
        action = Action(id="x", adapter="shell", description="brew install go")
        assert action.display == "brew install go"

    def test_display_falls_back_to_adapter_and_id(self):
        assert Action(id="x", adapter="shell").display == "shell:x"

    def test_display_prefixes_sudo(self):
        action = Action(id="x", adapter="shell", needs_sudo=True, description="apt-get update")
        assert action.display == "sudo apt-get update"


class TestReceipt:
    def test_success(self):
        r = Receipt.success(adapter="shell", action_id="a", output="done")
        assert r.ok and not r.failed and not r.skipped
        assert r.return_code == 0

    def test_failure(self):
        r = Receipt.failure(adapter="shell", action_id="a", error="boom", return_code=2)
        assert r.failed
        assert r.error == "boom"
        assert r.return_code == 2

    def test_skip(self):
        r = Receipt.skip(adapter="shell", action_id="a", reason="[dry-run] echo")
        assert r.skipped
        assert r.output == "[dry-run] echo"


# ── EnvironmentFacts ─────────────────────────────────────────────────


class TestEnvironmentFacts:
    @pytest.mark.parametrize(
        "machine, expected",
        [("x86_64", "amd64"), ("aarch64", "arm64"), ("arm64", "arm64"), ("riscv64", "riscv64")],
    )
    def test_go_arch(self, machine: str, expected: str):
        facts = EnvironmentFacts(os=OsKind.LINUX, arch=machine)
        assert facts.go_arch == expected

    def test_package_manager(self):
        assert EnvironmentFacts(os=OsKind.DARWIN, arch="arm64").package_manager == "brew"
        assert EnvironmentFacts(os=OsKind.LINUX, arch="x86_64").package_manager == "apt"
        assert EnvironmentFacts(os=OsKind.OTHER, arch="x86_64").package_manager == "apt"

    def test_shell_major(self):
        assert EnvironmentFacts(os=OsKind.LINUX, arch="x", shell_version="3.2.57").shell_major == 3
        assert EnvironmentFacts(os=OsKind.LINUX, arch="x").shell_major is None

    def test_frozen(self):
        facts = EnvironmentFacts(os=OsKind.LINUX, arch="x86_64")
        with pytest.raises(ValidationError):
            facts.is_root = True

    def test_to_dict(self):
        data = EnvironmentFacts(os=OsKind.DARWIN, arch="arm64").to_dict()
        assert data["os"] == "darwin"
        assert data["go_arch"] == "arm64"
        assert data["package_manager"] == "brew"


# ── Step / StepResult ────────────────────────────────────────────────


class TestStep:
    def test_default_policy_is_best_effort(self):
        step = Step(name="x", is_installed=lambda ctx: True, install=lambda ctx: [])
        assert step.policy is FailurePolicy.BEST_EFFORT
        assert not step.fatal

    def test_fatal(self):
        step = Step(
            name="x",
            is_installed=lambda ctx: True,
            install=lambda ctx: [],
            policy=FailurePolicy.FATAL,
        )
        assert step.fatal

    def test_result_to_dict(self):
        result = StepResult(
            name="go",
            outcome=StepOutcome.FAILED,
            reason="Download failed",
            receipts=[Receipt.failure(adapter="download", action_id="go:download", error="404")],
        )
        data = result.to_dict()
        assert data["outcome"] == "failed"
        assert data["commands"] == [
            {"id": "go:download", "status": "failed", "return_code": None, "error": "404"}
        ]
        assert not result.ok


# ── Configuration ────────────────────────────────────────────────────


class TestBootstrapSettings:
    def test_defaults(self):
        s = BootstrapSettings()
        assert s.go_version == DEFAULT_GO_VERSION
        assert s.cli_packages == DEFAULT_CLI_PACKAGES
        assert "zsh-autosuggestions" in s.zsh_plugins

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            BootstrapSettings.model_validate({"colour": "blue"})

    def test_go_prefix_stripped(self):
        assert BootstrapSettings(go_version="go1.23.0").go_version == "1.23.0"

    def test_zero_timeout_disables(self):
        assert BootstrapSettings(command_timeout=0).command_timeout is None

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValidationError):
            BootstrapSettings(command_timeout=-5)


class TestRunConfig:
    def test_default_paths(self, tmp_path: Path):
        cfg = RunConfig.from_settings(BootstrapSettings(), home_dir=tmp_path)
        assert cfg.log_path == tmp_path / "dotfiles-install.log"
        assert cfg.zshrc_path == tmp_path / ".zshrc"
        assert cfg.profile_path == tmp_path / ".profile"
        assert not cfg.dry_run

    def test_relative_and_home_paths(self, tmp_path: Path):
        settings = BootstrapSettings(log_file="logs/install.log", zshrc_path="$HOME/.config/zshrc")
        cfg = RunConfig.from_settings(settings, home_dir=tmp_path, dry_run=True)
        assert cfg.log_path == tmp_path / "logs" / "install.log"
        assert cfg.zshrc_path == tmp_path / ".config" / "zshrc"
        assert cfg.dry_run

    def test_frozen(self, tmp_path: Path):
        cfg = RunConfig.from_settings(BootstrapSettings(), home_dir=tmp_path)
        with pytest.raises(ValidationError):
            cfg.dry_run = True


# ── Command factories ────────────────────────────────────────────────


class TestCommandFactories:
    def test_run_program(self):
        action = commands.run_program("a", ["apt-get", "install", "-y", "zsh"], sudo=True)
        assert action.adapter == "shell"
        assert action.params == {"argv": ["apt-get", "install", "-y", "zsh"]}
        assert action.display == "sudo apt-get install -y zsh"

    def test_run_program_interactive(self):
        action = commands.run_program("a", ["chsh", "-s", "/bin/zsh"], interactive=True)
        assert action.params == {"argv": ["chsh", "-s", "/bin/zsh"], "interactive": True}
        assert action.display == "chsh -s /bin/zsh"

    def test_run_script_env_in_description(self):
        action = commands.run_script("a", "curl x | bash", env={"NONINTERACTIVE": "1"})
        assert action.params["script"] == "curl x | bash"
        assert action.params["env"] == {"NONINTERACTIVE": "1"}
        assert action.display == "NONINTERACTIVE=1 curl x | bash"

    def test_git_clone(self, tmp_path: Path):
        action = commands.git_clone("a", "https://example.com/r.git", tmp_path / "r")
        assert action.adapter == "git"
        assert action.params["depth"] == 1
        assert action.display == f"git clone --depth=1 https://example.com/r.git {tmp_path / 'r'}"

    def test_download_extract(self, tmp_path: Path):
        action = commands.download_extract(
            "go:download",
            "https://go.dev/dl/go1.22.3.linux-amd64.tar.gz",
            archive_path=tmp_path / "go.tgz",
            dest_dir=Path("/usr/local"),
            replace_dir=Path("/usr/local/go"),
            sudo=True,
        )
        assert action.needs_sudo
        assert action.params["replace_dir"] == "/usr/local/go"
        assert "rm -rf /usr/local/go" in action.display
        assert action.display.startswith("sudo download")

    def test_append_line(self, tmp_path: Path):
        action = commands.append_line("a", tmp_path / ".profile", "export PATH=$PATH:/x")
        assert action.params["operation"] == "append_line"
        assert action.display == f"echo 'export PATH=$PATH:/x' >> {tmp_path / '.profile'}"

    def test_write_file(self, tmp_path: Path):
        action = commands.write_file("a", tmp_path / "f", "abc")
        assert action.params == {"operation": "write", "path": str(tmp_path / "f"), "content": "abc"}


# ── .zshrc template ──────────────────────────────────────────────────


class TestZshrcTemplate:
    def test_plugins_block(self):
        text = render_zshrc(["zsh-autosuggestions", "zsh-syntax-highlighting"])
        block = text.split("plugins=(\n", 1)[1].split(")", 1)[0]
        names = [line.strip() for line in block.splitlines()]
        assert names == [*BUILTIN_PLUGINS, "zsh-autosuggestions", "zsh-syntax-highlighting"]

    def test_no_duplicate_plugins(self):
        text = render_zshrc(["git", "extra"])
        assert text.count(" git\n") == 1

    def test_template_content(self):
        text = render_zshrc([])
        assert 'ZSH_THEME="powerlevel10k/powerlevel10k"' in text
        assert "source $ZSH/oh-my-zsh.sh" in text
        assert 'export NVM_DIR="$HOME/.nvm"' in text
        assert "alias reload='source ~/.zshrc'" in text
