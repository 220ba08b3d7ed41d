"""
Command factories — the named operations steps are built from.

Each factory returns an ``Action`` with a structured payload for its
adapter and a ``description`` that reads like the equivalent shell
command. Only ``run_script`` carries an opaque shell string; it exists
for vendor installer one-liners and nothing else.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from devbootstrap.core.models.action import Action


def _env_prefix(env: dict[str, str] | None) -> str:
    if not env:
        return ""
    return " ".join(f"{k}={shlex.quote(v)}" for k, v in env.items()) + " "


def run_program(
    action_id: str,
    argv: list[str],
    *,
    sudo: bool = False,
    env: dict[str, str] | None = None,
    interactive: bool = False,
) -> Action:
    """Run a program with arguments, no shell involved.

    ``interactive`` hands the terminal to the program so it can prompt;
    its output is then not captured.
    """
    params: dict = {"argv": list(argv)}
    if env:
        params["env"] = dict(env)
    if interactive:
        params["interactive"] = True
    return Action(
        id=action_id,
        adapter="shell",
        params=params,
        needs_sudo=sudo,
        description=_env_prefix(env) + shlex.join(argv),
    )


def run_script(
    action_id: str,
    script: str,
    *,
    env: dict[str, str] | None = None,
) -> Action:
    """Evaluate an opaque installer one-liner with bash."""
    params: dict = {"script": script}
    if env:
        params["env"] = dict(env)
    return Action(
        id=action_id,
        adapter="shell",
        params=params,
        description=_env_prefix(env) + script,
    )


def git_clone(action_id: str, url: str, dest: Path, *, depth: int = 1) -> Action:
    """Shallow-clone a repository into ``dest``."""
    depth_flag = f"--depth={depth} " if depth > 0 else ""
    return Action(
        id=action_id,
        adapter="git",
        params={"operation": "clone", "url": url, "dest": str(dest), "depth": depth},
        description=f"git clone {depth_flag}{url} {dest}",
    )


def download_extract(
    action_id: str,
    url: str,
    *,
    archive_path: Path,
    dest_dir: Path,
    replace_dir: Path | None = None,
    sudo: bool = False,
) -> Action:
    """Download a ``.tar.gz`` and unpack it, replacing an old tree."""
    params: dict = {
        "operation": "download_extract",
        "url": url,
        "archive_path": str(archive_path),
        "dest_dir": str(dest_dir),
    }
    if replace_dir is not None:
        params["replace_dir"] = str(replace_dir)

    parts = [f"download {url} -> {archive_path}"]
    if replace_dir is not None:
        parts.append(f"rm -rf {replace_dir}")
    parts.append(f"tar -C {dest_dir} -xzf {archive_path}")
    return Action(
        id=action_id,
        adapter="download",
        params=params,
        needs_sudo=sudo,
        description="; ".join(parts),
    )


def append_line(action_id: str, path: Path, line: str) -> Action:
    """Append ``line`` to ``path`` unless it is already there."""
    return Action(
        id=action_id,
        adapter="filesystem",
        params={"operation": "append_line", "path": str(path), "line": line},
        description=f"echo {shlex.quote(line)} >> {path}",
    )


def write_file(action_id: str, path: Path, content: str) -> Action:
    """Create ``path`` with ``content``; never overwrites."""
    return Action(
        id=action_id,
        adapter="filesystem",
        params={"operation": "write", "path": str(path), "content": content},
        description=f"create {path} ({len(content)} bytes)",
    )
