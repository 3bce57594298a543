"""Output file naming."""

from __future__ import annotations

OUTPUT_SUFFIX = "-processed"


def strip_extension(filename: str) -> str:
    """Remove the extension of the last path element.

    The extension starts at the final dot of the last element, so a dotfile
    such as ".mp4" is all extension and yields an empty string. Unlike
    os.path.splitext, leading dots are not special.
    """
    dot = filename.rfind(".")
    if dot > filename.rfind("/"):
        return filename[:dot]
    return filename


def derive_output_filename(
    task_id: str,
    input_filename: str,
    output_format: str,
) -> str:
    """Derive the output filename for a task.

    The input's extension is replaced by ``-processed.<format>``. When the
    input has no usable base name the task id is used instead. This is
    purely syntactic: the filesystem is not consulted.

    Examples:
        >>> derive_output_filename("t1", "video.avi", "mp4")
        'video-processed.mp4'
        >>> derive_output_filename("t1", "", "mp3")
        't1-processed.mp3'
    """
    base = strip_extension(input_filename)
    if not base:
        base = task_id
    return f"{base}{OUTPUT_SUFFIX}.{output_format}"
