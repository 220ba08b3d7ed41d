"""
The ``.zshrc`` written on first run.

Only ever used to create a missing file; an existing ``.zshrc`` is
never touched.
"""

from __future__ import annotations

from collections.abc import Iterable

# oh-my-zsh bundled plugins, always enabled
BUILTIN_PLUGINS = ("git", "z", "docker", "history-substring-search", "alias-finder")

_HEADER = """\
# Enable Powerlevel10k instant prompt
if [[ -r "${XDG_CACHE_HOME:-$HOME/.cache}/p10k-instant-prompt-${(%):-%n}.zsh" ]]; then
  source "${XDG_CACHE_HOME:-$HOME/.cache}/p10k-instant-prompt-${(%):-%n}.zsh"
fi

export ZSH="$HOME/.oh-my-zsh"
ZSH_THEME="powerlevel10k/powerlevel10k"
"""

_BODY = """\
source $ZSH/oh-my-zsh.sh

HIST_STAMPS="yyyy-mm-dd"

source /opt/homebrew/share/powerlevel10k/powerlevel10k.zsh-theme 2>/dev/null || true

zstyle ':omz:plugins:alias-finder' autoload yes # disabled by default
zstyle ':omz:plugins:alias-finder' longer yes # disabled by default
zstyle ':omz:plugins:alias-finder' exact yes # disabled by default
zstyle ':omz:plugins:alias-finder' cheaper yes # disabled by default

alias ..='cd ..'
alias ll='ls -lah'
alias ports='lsof -i -P -n | grep LISTEN'
alias cls='clear'
alias ff='fastfetch'
alias zshconfig='nano ~/.zshrc'
alias reload='source ~/.zshrc'

# NVM
export NVM_DIR="$HOME/.nvm"
[ -s "$NVM_DIR/nvm.sh" ] && . "$NVM_DIR/nvm.sh"

# Bun
export BUN_INSTALL="$HOME/.bun"
export PATH="$BUN_INSTALL/bin:$PATH"
[ -s "$BUN_INSTALL/_bun" ] && source "$BUN_INSTALL/_bun"

[[ -f ~/.p10k.zsh ]] && source ~/.p10k.zsh
"""


def render_zshrc(custom_plugins: Iterable[str]) -> str:
    """Build the template with the built-in plus custom plugin names."""
    names = list(BUILTIN_PLUGINS)
    names += [p for p in custom_plugins if p not in names]
    plugin_block = "plugins=(\n" + "".join(f" {name}\n" for name in names) + ")\n"
    return f"{_HEADER}\n{plugin_block}\n{_BODY}"
