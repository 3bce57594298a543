"""ffmpegbox version command."""

import logging
import sys

import click

from ffmpegbox.cli import load_app_config
from ffmpegbox.cli.exit_codes import ExitCode
from ffmpegbox.exceptions import ExecutionError
from ffmpegbox.executor import FFmpegService

logger = logging.getLogger(__name__)


@click.command("version")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=10.0,
    show_default=True,
    help="Seconds to wait for the ffmpeg binary.",
)
@click.pass_context
def version_command(ctx: click.Context, timeout: float) -> None:
    """Print the version line reported by the configured ffmpeg binary."""
    config = load_app_config(ctx)
    service = FFmpegService(config.ffmpeg)

    try:
        version = service.get_version(timeout=timeout)
    except ExecutionError as e:
        logger.error(
            "ffmpeg version query failed: %s",
            e,
            extra={"ffmpeg_binary": service.binary_path},
        )
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)

    click.echo(version)
