"""
prince-install — CLI entrypoint.

Usage:
    prince-install install
    prince-install uninstall
    python -m princeinstall --help
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path

import click

from princeinstall import __version__
from princeinstall.core.observability.logging_config import setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="prince-install")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to prince-install.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Install or uninstall a local copy of the Prince typesetter."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("PRINCE_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("PRINCE_LOG_FILE"),
        log_file_level=os.environ.get("PRINCE_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
        show_progress=not quiet,
    )

    if ctx.invoked_subcommand is None:
        raise click.UsageError("Missing command: use 'install' or 'uninstall'.", ctx)


def _load_settings(ctx: click.Context):
    """Settings for this run; config problems end the process with status 1."""
    from princeinstall.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, as_json: bool) -> None:
    """Make a prince executable available (global or local)."""
    from princeinstall.core.services.provision import ProvisionError, install_prince
    from princeinstall.core.services.provision.domain.download_helpers import (
        DownloadProgress,
    )

    settings = _load_settings(ctx)
    quiet = ctx.obj.get("quiet", False) or as_json

    def _echo_step(message: str) -> None:
        click.echo(f"-- {message}")

    try:
        result = asyncio.run(install_prince(
            settings,
            on_progress=None if quiet else DownloadProgress(),
            on_step=None if quiet else _echo_step,
        ))
    except ProvisionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        if e.cause is not None:
            click.secho(f"   caused by: {e.cause}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.outcome == "existing":
        assert result.existing is not None
        click.secho(
            f"✅ Prince {result.existing.version} already on PATH: {result.existing.command}",
            fg="green",
        )
    else:
        assert result.installation is not None
        click.secho(
            f"✅ Prince available at {result.installation.executable_path}",
            fg="green",
        )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def uninstall(ctx: click.Context, as_json: bool) -> None:
    """Remove the locally installed Prince distribution."""
    from princeinstall.core.services.provision import uninstall_prince

    settings = _load_settings(ctx)
    result = uninstall_prince(settings)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.error:
        # Reported, but uninstall never fails the process.
        click.secho(f"❌ Cannot remove {result.install_dir}: {result.error}", fg="red", err=True)
    elif result.removed:
        click.secho(f"🗑️  Removed {result.install_dir}", fg="green")
    elif not ctx.obj.get("quiet", False):
        click.echo(f"Nothing installed at {result.install_dir}")


def main() -> None:
    """Entry point for ``python -m princeinstall``."""
    cli()


if __name__ == "__main__":
    main()
