"""
Provision use case — converge this machine onto the standard toolset.

This is the top-level orchestrator: it resolves configuration,
detects the environment once, refuses to run as root, builds the step
catalog for this host and evaluates it in order through one command
runner. The log file written along the way is the only record a run
leaves behind.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from devbootstrap.adapters.base import Adapter
from devbootstrap.adapters.runner import CommandRunner
from devbootstrap.core.config.loader import find_config_file, load_settings
from devbootstrap.core.engine.context import StepContext
from devbootstrap.core.engine.executor import ExecutionReport, run_steps
from devbootstrap.core.errors import FatalStepError, RootExecutionError
from devbootstrap.core.models.config import RunConfig
from devbootstrap.core.models.environment import EnvironmentFacts
from devbootstrap.core.services.detection import detect_environment
from devbootstrap.core.services.steps import build_catalog

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Result of one provisioning run."""

    config: RunConfig
    facts: EnvironmentFacts
    report: ExecutionReport

    def to_dict(self) -> dict:
        return {
            "dry_run": self.config.dry_run,
            "log_path": str(self.config.log_path),
            "environment": self.facts.to_dict(),
            "report": self.report.to_dict(),
        }


def resolve_home(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    home = env.get("HOME")
    return Path(home) if home else Path.home()


def resolve_config(
    dry_run: bool = False,
    config_path: Path | None = None,
    *,
    home_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> RunConfig:
    """Build the frozen RunConfig from the config file and CLI flags.

    Raises:
        ConfigError: If the config file is missing (when named
            explicitly), unreadable or invalid.
    """
    home = home_dir or resolve_home(environ)
    path, required = find_config_file(config_path, home_dir=home, environ=environ)
    settings = load_settings(path, required=required)
    return RunConfig.from_settings(settings, home_dir=home, dry_run=dry_run)


def run_provision(
    dry_run: bool = False,
    config_path: Path | None = None,
    *,
    config: RunConfig | None = None,
    environ: Mapping[str, str] | None = None,
    facts: EnvironmentFacts | None = None,
    adapters: Iterable[Adapter] | None = None,
) -> ProvisionResult:
    """Run the full step sequence.

    Args:
        dry_run: Log commands instead of executing them.
        config_path: Optional explicit config file.
        config: Pre-resolved configuration (skips file loading).
        environ: Process environment (default: ``os.environ``).
        facts: Pre-detected environment (default: probe the host).
        adapters: Adapter set for the runner (default: the real ones).

    Raises:
        ConfigError: Invalid configuration.
        RootExecutionError: Running as root.
        FatalStepError: A fatal step failed; later steps did not run.
    """
    env = dict(os.environ if environ is None else environ)
    if config is None:
        config = resolve_config(dry_run, config_path, environ=env)

    if config.dry_run:
        logger.info("Dry-run mode enabled")

    if facts is None:
        facts = detect_environment(env)
    logger.info("Detected shell: %s %s", facts.shell_name or "unknown", facts.shell_version or "")
    logger.info("Detected OS: %s", facts.os.value)
    logger.info("Architecture: %s", facts.arch)

    if facts.is_root:
        raise RootExecutionError()

    runner = CommandRunner(
        dry_run=config.dry_run,
        env=env,
        timeout=config.command_timeout,
        adapters=adapters,
    )
    ctx = StepContext(config=config, facts=facts, runner=runner)

    steps = build_catalog(facts, config)
    unknown = set(config.skip_steps) - {s.name for s in steps}
    if unknown:
        logger.warning("skip_steps names unknown steps: %s", ", ".join(sorted(unknown)))

    report = run_steps(steps, ctx, skip=config.skip_steps)

    logger.info(
        "Summary: %d already installed, %d installed, %d failed, %d skipped",
        report.satisfied, report.installed, report.failed, report.skipped,
    )

    if report.aborted_at is not None:
        failed = report.get(report.aborted_at)
        assert failed is not None  # aborted_at always names a recorded result
        raise FatalStepError(failed)

    logger.info(
        "Install complete. Review ~/.zshrc (zshconfig) and restart your shell (reload) if needed."
    )
    logger.info("Full log: %s", config.log_path)

    return ProvisionResult(config=config, facts=facts, report=report)
