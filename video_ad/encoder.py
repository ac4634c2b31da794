"""Frame-sequence encoders."""
from __future__ import annotations

import shlex
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from logging_utils import get_logger

from .errors import EncoderFailure
from .sequencer import FRAME_PATTERN, frame_filename
from .settings import EncoderSettings

logger = get_logger(__name__)

STDERR_TAIL_LINES = 50


class Encoder(ABC):
    """Port for the external video encoder."""

    @abstractmethod
    def encode(self, frames: Sequence[Path], fps: int, duration: float, output_path: Path) -> Path:
        """Encode an ordered, contiguous frame sequence into ``output_path``."""


def check_contiguous_frames(frames: Sequence[Path]) -> Path:
    """Return the shared frame directory, or raise if the sequence has gaps."""
    if not frames:
        raise EncoderFailure("No frames to encode")
    directory = frames[0].parent
    for idx, frame in enumerate(frames):
        if frame.parent != directory or frame.name != frame_filename(idx):
            raise EncoderFailure(f"Frame sequence is not contiguous at index {idx}: {frame}")
        if not frame.is_file():
            raise EncoderFailure(f"Frame file missing: {frame}")
    return directory


class FFmpegEncoder(Encoder):
    """Encode PNG frames to H.264 MP4 by running ffmpeg once, blocking."""

    def __init__(self, settings: EncoderSettings | None = None) -> None:
        self.settings = settings or EncoderSettings()

    def build_command(self, frame_dir: Path, fps: int, duration: float, output_path: Path) -> List[str]:
        opts = self.settings
        return [
            opts.ffmpeg_path,
            "-hide_banner",
            "-loglevel",
            "error",
            "-nostats",
            "-y",
            "-framerate",
            str(fps),
            "-i",
            str(frame_dir / FRAME_PATTERN),
            "-c:v",
            opts.codec,
            "-pix_fmt",
            opts.pix_fmt,
            "-preset",
            opts.preset,
            "-crf",
            str(opts.crf),
            "-t",
            f"{duration:.3f}",
            "-movflags",
            "+faststart",
            str(output_path),
        ]

    def encode(self, frames: Sequence[Path], fps: int, duration: float, output_path: Path) -> Path:
        frame_dir = check_contiguous_frames(frames)
        cmd = self.build_command(frame_dir, fps, duration, output_path)
        logger.info("FFmpeg (encode %d frames): %s", len(frames), shlex.join(cmd))

        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            raise EncoderFailure(f"Could not start {self.settings.ffmpeg_path}: {exc}") from exc

        if proc.returncode != 0:
            tail = (proc.stderr or "").splitlines()[-STDERR_TAIL_LINES:]
            for line in tail:
                logger.error("ffmpeg: %s", line)
            detail = tail[-1] if tail else "no output"
            raise EncoderFailure(
                f"ffmpeg failed with exit code {proc.returncode}: {detail}",
                returncode=proc.returncode,
                stderr_tail=tail,
            )

        if not output_path.is_file() or output_path.stat().st_size == 0:
            raise EncoderFailure(f"ffmpeg reported success but wrote no output: {output_path}")
        return output_path


__all__ = ["Encoder", "FFmpegEncoder", "check_contiguous_frames"]
