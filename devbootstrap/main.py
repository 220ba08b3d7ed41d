"""
devbootstrap — CLI entrypoint.

Usage:
    devbootstrap
    devbootstrap --dry-run
    python -m devbootstrap --dry-run --json
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn

import click

from devbootstrap import __version__
from devbootstrap.core.errors import BootstrapError, FatalStepError
from devbootstrap.core.observability.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


def _console_level(verbose: bool, quiet: bool, debug: bool, as_json: bool) -> str:
    if debug or verbose:
        return "DEBUG"
    # JSON goes to stdout; keep progress lines out of it
    if quiet or as_json:
        return "ERROR"
    return os.environ.get("DEVBOOTSTRAP_LOG_LEVEL", "INFO")


def _fail(error: BootstrapError, as_json: bool) -> NoReturn:
    logger.debug("Exiting with code %d: %s", error.exit_code, error)
    if as_json:
        payload: dict = {"error": str(error), "exit_code": error.exit_code}
        if isinstance(error, FatalStepError):
            payload["step"] = error.result.to_dict()
        click.echo(json.dumps(payload, indent=2))
    else:
        click.secho(f"✗ {error}", fg="red", err=True)
    sys.exit(error.exit_code)


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.version_option(version=__version__, prog_name="devbootstrap")
@click.option("--dry-run", is_flag=True, help="Log every command instead of running it.")
@click.option("--verbose", "-v", is_flag=True, help="Show debug detail on the console.")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors on the console.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to config.yml (default: ~/.config/devbootstrap/config.yml).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the run report as JSON.")
@click.pass_context
def cli(
    ctx: click.Context,
    dry_run: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    as_json: bool,
) -> None:
    """Install and configure a standard developer toolset and zsh environment.

    Safe to re-run: anything already present is left alone.
    """
    from devbootstrap.core.use_cases.provision import resolve_config, run_provision

    level = _console_level(verbose, quiet, debug, as_json)

    # ── Configuration (before the log file is known) ────────────
    try:
        config = resolve_config(dry_run, Path(config_path) if config_path else None)
    except BootstrapError as e:
        setup_logging(level=level, quiet_third_party=not debug)
        _fail(e, as_json)

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=level,
        log_file=config.log_path,
        log_file_level=os.environ.get("DEVBOOTSTRAP_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )

    if ctx.args:
        logger.debug("Ignoring extra arguments: %s", " ".join(ctx.args))

    try:
        result = run_provision(config=config)
    except KeyboardInterrupt:
        logger.error("Interrupted; completed steps are left in place")
        sys.exit(EXIT_INTERRUPTED)
    except BootstrapError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    cli()
