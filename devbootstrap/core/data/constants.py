"""
Data — installer URLs, package lists and well-known paths.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

# ── Vendor installers (opaque one-liners) ──────────────────────

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
OH_MY_ZSH_INSTALL_URL = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
NVM_VERSION = "v0.39.7"
NVM_INSTALL_URL = f"https://raw.githubusercontent.com/nvm-sh/nvm/{NVM_VERSION}/install.sh"
BUN_INSTALL_URL = "https://bun.sh/install"

POWERLEVEL10K_REPO = "https://github.com/romkatv/powerlevel10k.git"

GO_DOWNLOAD_URL = "https://go.dev/dl/go{version}.linux-{arch}.tar.gz"

# ── Package manager ───────────────────────────────────────────

# Installed with apt before anything else on Linux
APT_BASE_PACKAGES: tuple[str, ...] = (
    "curl",
    "git",
    "zsh",
    "tmux",
    "unzip",
    "wget",
    "build-essential",
)

# Where the Homebrew installer puts brew, per OS
BREW_PREFIXES_DARWIN: tuple[str, ...] = ("/opt/homebrew", "/usr/local")
BREW_PREFIXES_LINUX: tuple[str, ...] = ("/home/linuxbrew/.linuxbrew",)

# ── CLI tools ─────────────────────────────────────────────────

# Package name → binaries any of which proves the package is present.
# Debian renames a few binaries to avoid clashes.
PACKAGE_BINARIES: dict[str, tuple[str, ...]] = {
    "ripgrep": ("rg",),
    "bat": ("bat", "batcat"),
    "fd-find": ("fd", "fdfind"),
    "fd": ("fd", "fdfind"),
    "neovim": ("nvim",),
}
