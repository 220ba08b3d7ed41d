"""
Configuration loader — reads config.yml into BootstrapSettings.

The file is optional. Resolution order for its path: ``--config``,
then ``$DEVBOOTSTRAP_CONFIG``, then ``~/.config/devbootstrap/config.yml``
if it exists. With no file at all every setting takes its default.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from devbootstrap.core.errors import ConfigError
from devbootstrap.core.models.config import BootstrapSettings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DEVBOOTSTRAP_CONFIG"
DEFAULT_CONFIG_PATH = Path(".config") / "devbootstrap" / "config.yml"


def find_config_file(
    explicit: Path | None = None,
    *,
    home_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[Path | None, bool]:
    """Locate the config file.

    Returns:
        ``(path, required)``. ``required`` is True when the path was
        named explicitly (flag or env var) and so must exist.
    """
    env = os.environ if environ is None else environ

    if explicit is not None:
        return explicit.expanduser(), True

    from_env = env.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser(), True

    home = home_dir or Path.home()
    candidate = home / DEFAULT_CONFIG_PATH
    if candidate.is_file():
        return candidate, False

    return None, False


def load_settings(path: Path | None, *, required: bool = False) -> BootstrapSettings:
    """Load and validate the config file.

    Args:
        path: Config file path, or None for pure defaults.
        required: Raise if ``path`` does not exist.

    Raises:
        ConfigError: If the file is missing (when required), unreadable,
            not valid YAML, or fails validation.
    """
    if path is None:
        logger.debug("No config file, using defaults")
        return BootstrapSettings()

    if not path.is_file():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        return BootstrapSettings()

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file is the same as no file
    if data is None:
        return BootstrapSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return BootstrapSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
