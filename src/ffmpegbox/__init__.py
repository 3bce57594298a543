"""ffmpegbox - admission gate and command synthesis for an external ffmpeg binary."""

__version__ = "0.1.0"
