"""FFmpeg command building.

This module turns an AdmittedTask into the argument vector for ffmpeg.
Arguments always appear in the same order:

    -i <input>
    [-c:v <codec>] [-c:a <codec>] [-b:v <bps>] [-b:a <bps>]
    [-s <W>x<H>] [-r <fps>] [-preset <preset>]
    -f <format> -y <output>

Bracketed flags are omitted when the parameter was not requested. No
bounds checking happens here; the admission gate already did it.
"""

from __future__ import annotations

from pathlib import Path

from ffmpegbox.admission.gate import AdmittedTask


def build_command_args(
    input_path: Path | str,
    output_path: Path | str,
    admitted: AdmittedTask,
) -> list[str]:
    """Build ffmpeg arguments (without the binary) for an admitted task.

    The result depends only on the arguments, so identical inputs always
    produce identical argument vectors.

    Args:
        input_path: Source media file.
        output_path: Destination file. Overwritten if it exists.
        admitted: Parameters returned by the admission gate.

    Returns:
        List of command-line arguments.
    """
    args = ["-i", str(input_path)]

    if admitted.video_codec:
        args.extend(["-c:v", admitted.video_codec])

    if admitted.audio_codec:
        args.extend(["-c:a", admitted.audio_codec])

    if admitted.video_bitrate:
        args.extend(["-b:v", str(admitted.video_bitrate)])

    if admitted.audio_bitrate:
        args.extend(["-b:a", str(admitted.audio_bitrate)])

    if (admitted.width or 0) > 0 and (admitted.height or 0) > 0:
        args.extend(["-s", f"{admitted.width}x{admitted.height}"])

    if (admitted.framerate or 0) > 0:
        args.extend(["-r", str(admitted.framerate)])

    if admitted.preset:
        args.extend(["-preset", admitted.preset])

    args.extend(["-f", admitted.output_format])
    args.append("-y")
    args.append(str(output_path))

    return args
