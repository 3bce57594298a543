"""CLI module for ffmpegbox."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from ffmpegbox.cli.exit_codes import ExitCode
from ffmpegbox.config import AppConfig, get_config, get_default_config_path
from ffmpegbox.exceptions import ConfigError
from ffmpegbox.logging import configure_logging

logger = logging.getLogger(__name__)


def load_app_config(ctx: click.Context) -> AppConfig:
    """Load configuration for a subcommand and configure logging.

    Configuration errors are fatal: the message is printed and the process
    exits with ExitCode.GENERAL_ERROR.

    Args:
        ctx: Click context carrying the global options.

    Returns:
        Loaded configuration.
    """
    obj = ctx.ensure_object(dict)
    if "config" in obj:
        return obj["config"]

    config_path: Path = obj.get("config_path") or get_default_config_path()
    try:
        config = get_config(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)

    configure_logging(
        config.logging,
        level=obj.get("log_level"),
        log_format="json" if obj.get("log_json") else None,
    )
    obj["config"] = config
    return config


@click.group()
@click.version_option(package_name="ffmpegbox")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to configuration file (default: $FFMPEGBOX_CONFIG_PATH or "
    "config.yaml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Override log level from the configuration file.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_json: bool,
) -> None:
    """ffmpegbox - validate transcoding requests and build ffmpeg commands."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_level"] = log_level
    ctx.obj["log_json"] = log_json


# Defer import to avoid circular dependency
def _register_commands() -> None:
    from ffmpegbox.cli.check import check_config_command
    from ffmpegbox.cli.plan import plan_command
    from ffmpegbox.cli.version import version_command

    main.add_command(check_config_command)
    main.add_command(plan_command)
    main.add_command(version_command)


_register_commands()
