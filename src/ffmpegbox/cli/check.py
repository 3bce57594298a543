"""ffmpegbox check-config command."""

import logging

import click

from ffmpegbox.cli import load_app_config

logger = logging.getLogger(__name__)


@click.command("check-config")
@click.pass_context
def check_config_command(ctx: click.Context) -> None:
    """Load and validate the configuration file.

    Exits with status 1 if the configuration is invalid; the process would
    not be able to start.
    """
    config = load_app_config(ctx)

    logger.info(
        "Configuration loaded successfully",
        extra={
            "config_path": str(ctx.obj.get("config_path") or ""),
            "bind_address": config.server.bind_address,
            "port": config.server.port,
            "auth_enabled": config.auth.enabled,
            "client_count": len(config.auth.clients),
            "ffmpeg_binary": config.ffmpeg.binary_path,
            "temp_dir": config.storage.temp_dir,
            "database_path": config.storage.database_path,
        },
    )

    click.echo("Configuration OK")
    click.echo(f"  listen:     {config.server.bind_address}:{config.server.port}")
    auth = f"enabled ({len(config.auth.clients)} clients)"
    click.echo(f"  auth:       {auth if config.auth.enabled else 'disabled'}")
    click.echo(f"  ffmpeg:     {config.ffmpeg.binary_path}")
    click.echo(
        f"  max output: {config.ffmpeg.max_resolution} @ "
        f"{config.ffmpeg.max_framerate} fps"
    )
    click.echo(f"  temp dir:   {config.storage.temp_dir}")
    click.echo(f"  database:   {config.storage.database_path}")
