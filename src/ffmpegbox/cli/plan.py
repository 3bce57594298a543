"""ffmpegbox plan command.

Runs a transcoding request through the admission gate without executing
it, and shows the output filename and the exact ffmpeg command line that a
worker would run.
"""

from __future__ import annotations

import json
import shlex
import sys
import uuid
from pathlib import Path

import click

from ffmpegbox.admission import AdmissionGate
from ffmpegbox.cli import load_app_config
from ffmpegbox.cli.exit_codes import ExitCode
from ffmpegbox.domain import Task
from ffmpegbox.exceptions import TaskValidationError
from ffmpegbox.executor import FFmpegService


@click.command("plan")
@click.option(
    "--format",
    "-f",
    "output_format",
    required=True,
    help="Output container format (e.g. mp4).",
)
@click.option("--video-codec", default=None, help="Video codec (e.g. libx264).")
@click.option("--audio-codec", default=None, help="Audio codec (e.g. aac).")
@click.option(
    "--video-bitrate", type=int, default=None, help="Video bitrate in bits/s."
)
@click.option(
    "--audio-bitrate", type=int, default=None, help="Audio bitrate in bits/s."
)
@click.option("--width", type=int, default=None, help="Output width in pixels.")
@click.option("--height", type=int, default=None, help="Output height in pixels.")
@click.option("--framerate", type=int, default=None, help="Output frames/second.")
@click.option("--preset", default=None, help="Encoder preset (e.g. fast).")
@click.option(
    "--input",
    "-i",
    "input_path",
    type=click.Path(path_type=Path),
    required=True,
    help="Input media file. It does not need to exist.",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory for the output file (default: storage.temp_dir).",
)
@click.option(
    "--task-id",
    default=None,
    help="Task identifier (default: random UUID).",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Output in JSON format.",
)
@click.pass_context
def plan_command(
    ctx: click.Context,
    output_format: str,
    video_codec: str | None,
    audio_codec: str | None,
    video_bitrate: int | None,
    audio_bitrate: int | None,
    width: int | None,
    height: int | None,
    framerate: int | None,
    preset: str | None,
    input_path: Path,
    output_dir: Path | None,
    task_id: str | None,
    json_output: bool,
) -> None:
    """Validate a transcoding request and print the ffmpeg command.

    Exits with status 2 if the request is rejected.
    """
    config = load_app_config(ctx)

    task = Task(
        id=task_id or str(uuid.uuid4()),
        output_format=output_format,
        input_filename=input_path.name,
        video_codec=video_codec,
        audio_codec=audio_codec,
        video_bitrate=video_bitrate,
        audio_bitrate=audio_bitrate,
        width=width,
        height=height,
        framerate=framerate,
        preset=preset,
    )

    gate = AdmissionGate(config.ffmpeg)
    try:
        admitted = gate.admit(task)
    except TaskValidationError as e:
        if json_output:
            click.echo(json.dumps({"error": e.to_dict()}, indent=2))
        else:
            click.echo(f"Rejected: {e}", err=True)
        sys.exit(ExitCode.VALIDATION_ERROR)

    service = FFmpegService(config.ffmpeg)
    output_filename = service.generate_output_filename(
        task.id, task.input_filename, admitted
    )
    output_path = (output_dir or Path(config.storage.temp_dir)) / output_filename
    command = service.build_command(input_path, output_path, admitted)

    if json_output:
        data = {
            "task_id": task.id,
            "output_filename": output_filename,
            "command": command,
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Task:   {task.id}")
    click.echo(f"Output: {output_filename}")
    click.echo(f"Command: {shlex.join(command)}")
